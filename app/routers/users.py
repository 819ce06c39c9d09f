"""
Users router — account management for admins.

All endpoints require an ADMIN session.

Endpoints:
  GET    /users                 — List all users, newest first
  GET    /users/active          — Users who logged in recently
  GET    /users/{user_id}       — One user
  PUT    /users/{user_id}/role  — Promote to admin / demote to user
  DELETE /users/{user_id}       — Delete a user and end their sessions
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import require_admin
from app.models.user import User
from app.schemas.user import UserResponse, RoleUpdateRequest
from app.services import user_service

router = APIRouter()


@router.get(
    "",
    response_model=list[UserResponse],
    summary="[Admin] List all users",
)
async def list_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.list_users(db)


@router.get(
    "/active",
    response_model=list[UserResponse],
    summary="[Admin] List recently active users",
)
async def list_active_users(
    window_minutes: int | None = Query(None, ge=1, le=24 * 60),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Users whose last login falls within the window
    (ACTIVE_USER_WINDOW_MINUTES, 30 by default), most recent first.
    """
    return await user_service.list_active_users(db, window_minutes)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="[Admin] Get a user",
)
async def get_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.get_user(db, user_id)


@router.put(
    "/{user_id}/role",
    response_model=UserResponse,
    summary="[Admin] Change a user's role",
)
async def update_user_role(
    user_id: uuid.UUID,
    request: RoleUpdateRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.update_role(db, user_id, request.role, admin.id)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="[Admin] Delete a user",
)
async def delete_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Deletes the user, ends their sessions, and keeps their books unattributed."""
    await user_service.delete_user(db, user_id, admin.id)
