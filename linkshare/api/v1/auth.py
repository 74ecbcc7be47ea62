"""Register, login, logout and current-user endpoints."""

from fastapi import APIRouter, Request, Response, status

from linkshare.api.deps import (
    AppSettings,
    CurrentPrincipal,
    DbSession,
    Provider,
    RawAssertion,
)
from linkshare.api.limiter import (
    limiter,
    login_rate_key,
    login_rate_limit,
    login_rate_limit_exempt,
)
from linkshare.core.config import Settings
from linkshare.schemas.auth import (
    CredentialsRequest,
    LoginResponse,
    MessageResponse,
    Principal,
    UserResponse,
)
from linkshare.services import accounts
from linkshare.services.identity import IssuedAssertion

router = APIRouter()


def _set_session_cookie(response: Response, settings: Settings, issued: IssuedAssertion) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=issued.value,
        max_age=settings.SESSION_EXPIRE_HOURS * 3600,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: CredentialsRequest,
    response: Response,
    db: DbSession,
    settings: AppSettings,
    provider: Provider,
) -> UserResponse:
    """
    Create an account with role 'user'.

    In session mode the new user is logged in straight away (session cookie is set).
    In token mode the client must call POST /login next.
    """
    user = accounts.register(db, settings, body.username, body.password)
    if provider.mode == "session":
        _set_session_cookie(response, settings, provider.issue(db, user))
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(login_rate_limit, key_func=login_rate_key, exempt_when=login_rate_limit_exempt)
def login(
    request: Request,
    response: Response,
    body: CredentialsRequest,
    db: DbSession,
    settings: AppSettings,
    provider: Provider,
) -> LoginResponse:
    """
    Authenticate with username and password.

    Token mode: returns the bearer token as `assertion`; send it as
    `Authorization: Bearer <assertion>`. Session mode: sets an http-only cookie.
    Wrong password and unknown username produce the same 401 body.
    """
    issued = accounts.login(db, provider, body.username, body.password)
    response.headers["Cache-Control"] = "no-store"
    if provider.mode == "session":
        _set_session_cookie(response, settings, issued)
    principal = issued.principal
    return LoginResponse(
        assertion=issued.value if provider.mode == "token" else None,
        token_type=provider.token_type,
        expires_at=issued.expires_at,
        id=principal.id,
        username=principal.username,
        role=principal.role,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    principal: CurrentPrincipal,
    raw: RawAssertion,
    db: DbSession,
    settings: AppSettings,
    provider: Provider,
) -> MessageResponse:
    """End the session. Token mode has nothing to revoke; the client discards its token."""
    accounts.logout(db, provider, raw)
    if provider.mode == "session":
        response.delete_cookie(
            settings.SESSION_COOKIE_NAME,
            httponly=True,
            secure=settings.SESSION_COOKIE_SECURE,
            samesite="lax",
        )
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=Principal)
def me(principal: CurrentPrincipal) -> Principal:
    """Return the authenticated caller."""
    return principal
