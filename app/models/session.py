"""
UserSession model — a server-side login session.

The browser only ever holds the opaque token; everything else lives here.
A session is valid until expires_at (fixed TTL from creation, no sliding
renewal). Expired rows are not deleted on read, they simply stop
resolving; session_service purges them when new sessions are created.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class UserSession(Base):
    __tablename__ = "sessions"

    token: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
