"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CredentialsRequest(BaseModel):
    """Username and password for register and login. Length policy is enforced from settings."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class Principal(BaseModel):
    """Authenticated caller (id, username, role) resolved from a validated assertion."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    username: str
    role: Literal["user", "admin"]


class UserResponse(BaseModel):
    """Public user fields. Never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str


class LoginResponse(BaseModel):
    """
    Successful login. In token mode `assertion` is the bearer token; in session mode it is
    null and the session reference is carried only by the http-only cookie.
    """

    assertion: str | None = Field(default=None, description="Bearer token (token mode only)")
    token_type: Literal["bearer", "session"]
    expires_at: datetime
    id: int
    username: str
    role: str


class MessageResponse(BaseModel):
    message: str
