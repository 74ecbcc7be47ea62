"""
Request dependencies: settings, DB session, identity provider and the principal.

get_current_principal is the only place an inbound assertion is read. Routes that
need the caller depend on it and receive a Principal; none of them parse headers
or cookies themselves.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from linkshare.core.config import Settings
from linkshare.core.database import get_db
from linkshare.core.errors import AUTHENTICATION_REQUIRED_MESSAGE, AuthenticationError
from linkshare.schemas.auth import Principal
from linkshare.services.identity import IdentityProvider

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def get_raw_assertion(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> str | None:
    """Pull the assertion from the one transport this deployment uses."""
    if provider.mode == "session":
        return request.cookies.get(settings.SESSION_COOKIE_NAME) or None
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


def get_optional_principal(
    raw: Annotated[str | None, Depends(get_raw_assertion)],
    provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
    db: Annotated[Session, Depends(get_db)],
) -> Principal | None:
    """Principal for anonymous-friendly routes: None when no assertion, 401 when a bad one is sent."""
    if raw is None:
        return None
    return provider.resolve(db, raw)


def get_current_principal(
    request: Request,
    raw: Annotated[str | None, Depends(get_raw_assertion)],
    provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
    db: Annotated[Session, Depends(get_db)],
) -> Principal:
    """Dependency: require a valid assertion and return the caller. Raises 401 otherwise."""
    if raw is None:
        logger.info(
            "Auth rejected: method=%s path=%s reason=absent",
            request.method,
            request.url.path,
        )
        raise AuthenticationError(AUTHENTICATION_REQUIRED_MESSAGE, headers=provider.auth_headers)
    return provider.resolve(db, raw)


DbSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Provider = Annotated[IdentityProvider, Depends(get_identity_provider)]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
OptionalPrincipal = Annotated[Principal | None, Depends(get_optional_principal)]
RawAssertion = Annotated[str | None, Depends(get_raw_assertion)]
