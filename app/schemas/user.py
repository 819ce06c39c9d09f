"""
Pydantic schemas for User-related requests and responses.

These schemas control what user data is exposed through the API.
hashed_password is NEVER included in any response schema, and neither
is the Google subject id; clients only learn *how* a user signs in
(auth_provider), not the identifiers involved.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel

from app.models.user import AuthProvider, UserRole


class UserResponse(BaseModel):
    """Public representation of a User."""
    id: uuid.UUID
    username: str | None
    email: str
    name: str
    role: UserRole
    auth_provider: AuthProvider
    last_login_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class RoleUpdateRequest(BaseModel):
    """Request body for PUT /users/{user_id}/role."""
    role: UserRole
