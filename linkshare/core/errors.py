"""Application exception types and their FastAPI handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from linkshare.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials."
AUTHENTICATION_REQUIRED_MESSAGE = "Authentication required."


class ApiError(Exception):
    """Structured API error that maps directly to the error envelope."""

    status_code = 500
    code = "internal_error"

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        self.details = details
        self.headers = headers
        super().__init__(message)

    @property
    def payload(self) -> ErrorResponse:
        return ErrorResponse(code=self.code, message=self.message, details=self.details)


class ValidationError(ApiError):
    status_code = 400
    code = "validation_error"


class ConflictError(ApiError):
    """Duplicate resource. Status is 400 or 409 depending on CONFLICT_STATUS_CODE."""

    code = "conflict"

    def __init__(self, message: str, status_code: int = 400, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code


class AuthenticationError(ApiError):
    status_code = 401
    code = "unauthenticated"


class InvalidCredentialsError(AuthenticationError):
    """Login failure. Same payload whether the user is unknown or the password is wrong."""

    code = "invalid_credentials"

    def __init__(self, **kwargs) -> None:
        super().__init__("Invalid username or password.", **kwargs)


class AuthorizationError(ApiError):
    status_code = 403
    code = "forbidden"


class NotFoundError(ApiError):
    status_code = 404
    code = "not_found"


class RateLimitedError(ApiError):
    status_code = 429
    code = "rate_limited"


class InternalError(ApiError):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "Internal server error.", **kwargs) -> None:
        super().__init__(message, **kwargs)


def _render(exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.payload.model_dump(),
        headers=exc.headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers so every failure leaves the app as the same error envelope."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return _render(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
        return _render(
            ValidationError(
                "Request body is missing fields or has the wrong shape.",
                details={"fields": [f for f in fields if f]},
            )
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        logger.warning(
            "rate_limited method=%s path=%s limit=%s",
            request.method,
            request.url.path,
            exc.detail,
        )
        retry_after = int(getattr(exc, "retry_after", 60) or 60)
        return _render(
            RateLimitedError(
                "Too many requests. Try again later.",
                headers={"Retry-After": str(retry_after)},
            )
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return _render(InternalError())
