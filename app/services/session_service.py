"""
Session service — the server-side session store.

Operations:
  create(user_id)  -> token     new session, expires SESSION_TTL_HOURS later
  resolve(token)   -> user_id   None for unknown or expired tokens
  destroy(token)              idempotent

Expiry is checked lazily when a token is resolved. resolve() never writes,
so checking a session has no side effects; expired rows are purged in
bulk whenever a new session is created.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.session import UserSession
from app.security import generate_session_token

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def create(db: AsyncSession, user_id: uuid.UUID) -> str:
    """Open a new session for a user and return its token."""
    now = datetime.now(timezone.utc)

    await db.execute(delete(UserSession).where(UserSession.expires_at <= now))

    session = UserSession(
        token=generate_session_token(),
        user_id=user_id,
        created_at=now,
        expires_at=now + timedelta(hours=settings.SESSION_TTL_HOURS),
    )
    db.add(session)
    await db.flush()
    return session.token


async def resolve(db: AsyncSession, token: str | None) -> uuid.UUID | None:
    """Return the user id bound to a token, or None if missing/unknown/expired."""
    if not token:
        return None

    result = await db.execute(select(UserSession).where(UserSession.token == token))
    session = result.scalar_one_or_none()
    if session is None:
        return None

    if _as_utc(session.expires_at) <= datetime.now(timezone.utc):
        return None

    return session.user_id


async def destroy(db: AsyncSession, token: str | None) -> None:
    """Invalidate a session. Unknown or missing tokens are ignored."""
    if not token:
        return
    await db.execute(delete(UserSession).where(UserSession.token == token))


async def destroy_all_for_user(db: AsyncSession, user_id: uuid.UUID) -> int:
    """Invalidate every session a user holds. Returns the number removed."""
    result = await db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    return result.rowcount or 0
