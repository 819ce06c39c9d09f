"""
Book model — a catalog entry.

Books are readable by anyone and writable only by admins. The admin who
created a book is recorded in owner_admin_id purely for attribution; it
does not grant that admin any special rights over the book, and it is
cleared (not cascaded) if the admin account is deleted.

Genres are a closed set. The Enum column stores the value string
("sci-fi", not "SCI_FI") so the stored data reads the same as the API.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.config import settings
from app.database import Base


class Genre(str, enum.Enum):
    COMEDY = "comedy"
    HORROR = "horror"
    ROMANCE = "romance"
    SCI_FI = "sci-fi"
    FANTASY = "fantasy"
    MYSTERY = "mystery"
    BIOGRAPHY = "biography"
    HISTORY = "history"


class Book(Base):
    __tablename__ = "books"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    genre: Mapped[Genre] = mapped_column(
        Enum(Genre, values_callable=lambda e: [g.value for g in e]),
        nullable=False,
        index=True,
    )

    publication_year: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    cover_image_url: Mapped[str] = mapped_column(
        String(1024),
        default=lambda: settings.DEFAULT_COVER_IMAGE_URL,
        nullable=False,
    )

    # Attribution only (see module docstring)
    owner_admin_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
