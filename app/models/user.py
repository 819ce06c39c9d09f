"""
User model — the authentication identity.

A User can sign in two ways, and may have both:

  - Local credential: username + Argon2id password hash
  - External credential: Google subject id + the Google display name

The credential actually held is exposed as a tagged variant (see
`User.credential`) so code that needs to know "how does this person log
in?" can match on LocalCredential / ExternalCredential / LinkedCredential
instead of poking at nullable columns.

Roles:
  - USER: Default role for every signup and every auto-provisioned Google user
  - ADMIN: Can mutate the catalog and manage user accounts

Email is stored lower-cased so uniqueness is case-insensitive.
"""

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class UserRole(str, enum.Enum):
    """
    Defines the role a user holds within the catalog.

    Inherits from str so the enum value serializes naturally to JSON.
    """
    USER = "user"
    ADMIN = "admin"


class AuthProvider(str, enum.Enum):
    LOCAL = "local"
    GOOGLE = "google"
    LINKED = "linked"


@dataclass(frozen=True)
class LocalCredential:
    username: str
    hashed_password: str

    provider = AuthProvider.LOCAL


@dataclass(frozen=True)
class ExternalCredential:
    external_id: str
    display_name: str | None

    provider = AuthProvider.GOOGLE


@dataclass(frozen=True)
class LinkedCredential:
    """A local account that has also signed in with Google."""
    local: LocalCredential
    external: ExternalCredential

    provider = AuthProvider.LINKED


Credential = LocalCredential | ExternalCredential | LinkedCredential


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # Local login name; NULL for users who only ever signed in with Google
    username: Mapped[str | None] = mapped_column(
        String(100),
        unique=True,
        nullable=True,
        index=True,
    )

    # Login identifier for local accounts and link key for Google accounts
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    hashed_password: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    # Google "sub" claim
    external_id: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        index=True,
    )

    display_name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole),
        default=UserRole.USER,
        nullable=False,
    )

    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    @property
    def credential(self) -> Credential:
        """The credential variant this user holds."""
        local = None
        if self.username and self.hashed_password:
            local = LocalCredential(self.username, self.hashed_password)
        external = None
        if self.external_id:
            external = ExternalCredential(self.external_id, self.display_name)

        if local and external:
            return LinkedCredential(local, external)
        if external:
            return external
        if local:
            return local
        raise ValueError(f"User {self.id} has no credential")

    @property
    def auth_provider(self) -> AuthProvider:
        return self.credential.provider

    @property
    def name(self) -> str:
        """Public name: the Google display name when present, else the username."""
        match self.credential:
            case LinkedCredential(local=local, external=external):
                return external.display_name or local.username
            case ExternalCredential(display_name=display_name):
                return display_name or self.email.split("@")[0]
            case LocalCredential(username=username):
                return username
