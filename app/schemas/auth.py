"""
Pydantic schemas for authentication endpoints.

These schemas define the request/response contracts for the auth API.
Pydantic validates incoming data automatically; if a required field is
missing or the wrong type, FastAPI returns a 422 error before our code
even runs.

ExternalProfile is not a request body: it is what the identity provider
client hands to auth_service after a successful Google callback.
"""

import uuid

from pydantic import BaseModel, EmailStr, Field

from app.models.user import UserRole
from app.schemas.user import UserResponse


class UserSignupRequest(BaseModel):
    """Request body for POST /auth/signup."""
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8)


class UserLoginRequest(BaseModel):
    """Request body for POST /auth/login."""
    email: EmailStr
    password: str


class SignupResponse(BaseModel):
    """Response body for successful signup."""
    user_id: uuid.UUID
    username: str
    email: str
    role: UserRole


class LoginResponse(BaseModel):
    """Response body for successful login: the session token plus who you are."""
    token: str
    token_type: str = "bearer"
    user: UserResponse


class SessionStatus(BaseModel):
    """Response body for GET /auth/session."""
    authenticated: bool
    user: UserResponse | None = None


class ExternalProfile(BaseModel):
    """Identity asserted by the external provider after a callback."""
    external_id: str = Field(min_length=1)
    display_name: str | None = None
    emails: list[str] = Field(default_factory=list)

    @property
    def primary_email(self) -> str | None:
        """The first email is the canonical one."""
        return self.emails[0].strip().lower() if self.emails else None
