"""
User service — admin-only account management.

Every function here is reached through routes guarded by require_admin.

Deleting a user:
  - removes all of their sessions, so any browser they are signed in on
    is logged out on its next request
  - clears owner_admin_id on books they created; the books themselves
    stay in the catalog
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import NotFoundError
from app.models.book import Book
from app.models.user import User, UserRole
from app.services import session_service

logger = logging.getLogger(__name__)


async def list_users(db: AsyncSession) -> list[User]:
    """All users, newest first."""
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return list(result.scalars().all())


async def list_active_users(
    db: AsyncSession,
    window_minutes: int | None = None,
) -> list[User]:
    """
    Users who logged in within the last `window_minutes`
    (ACTIVE_USER_WINDOW_MINUTES by default), most recent login first.
    """
    if window_minutes is None:
        window_minutes = settings.ACTIVE_USER_WINDOW_MINUTES
    since = datetime.now(timezone.utc) - timedelta(minutes=window_minutes)

    result = await db.execute(
        select(User)
        .where(User.last_login_at.is_not(None), User.last_login_at >= since)
        .order_by(User.last_login_at.desc())
    )
    return list(result.scalars().all())


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    """
    Raises:
        NotFoundError: If the user doesn't exist.
    """
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


async def update_role(
    db: AsyncSession,
    user_id: uuid.UUID,
    role: UserRole,
    admin_id: uuid.UUID,
) -> User:
    """
    Raises:
        NotFoundError: If the user doesn't exist.
    """
    user = await get_user(db, user_id)
    user.role = role
    await db.flush()
    logger.info("Admin %s set role of user %s to %s", admin_id, user_id, role.value)
    return user


async def delete_user(
    db: AsyncSession,
    user_id: uuid.UUID,
    admin_id: uuid.UUID,
) -> None:
    """
    Raises:
        NotFoundError: If the user doesn't exist.
    """
    user = await get_user(db, user_id)

    await session_service.destroy_all_for_user(db, user_id)
    await db.execute(
        update(Book).where(Book.owner_admin_id == user_id).values(owner_admin_id=None)
    )
    await db.delete(user)
    await db.flush()
    logger.info("Admin %s deleted user %s", admin_id, user_id)
