"""
Authentication service — signup, login and session checks.

This module contains the core auth logic, separated from HTTP concerns.
The router calls these functions and translates the results into HTTP
responses, so the rules can be tested without spinning up a web server.

Local signup:
  1. One existence query matching the email OR the username
  2. Hash the password with Argon2id
  3. Create the User with role "user"

Local login:
  1. Look up user by (lower-cased) email
  2. Verify the password against the stored hash
  3. Stamp last_login_at and open a session

External (Google) login, in resolution order:
  1. A user with this Google id exists -> reuse it
  2. A user with the profile's first email exists -> link: store the
     Google id and display name on that user, keep any local password
  3. Otherwise provision a new "user" with no local password
  Then stamp last_login_at and open a session.

Security notes:
  - Every local login failure raises the same InvalidCredentialsError, so
    the response does not reveal whether the email is registered
  - Signup conflicts do not say which field collided
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AuthError, ConflictError, InvalidCredentialsError
from app.models.user import User, UserRole
from app.schemas.auth import ExternalProfile
from app.security import hash_password, verify_password
from app.services import session_service

logger = logging.getLogger(__name__)


async def signup(
    db: AsyncSession,
    username: str,
    email: str,
    password: str,
) -> User:
    """
    Register a new local user.

    Args:
        db: Database session.
        username: Desired login name (must be unique).
        email: Email address (must be unique, compared case-insensitively).
        password: Plaintext password (hashed before storage).

    Returns:
        The new User instance.

    Raises:
        ConflictError: If the email or the username is already taken.
    """
    email = email.strip().lower()
    username = username.strip()

    result = await db.execute(
        select(User.id).where(or_(User.email == email, User.username == username)).limit(1)
    )
    if result.scalar_one_or_none() is not None:
        raise ConflictError()

    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
        role=UserRole.USER,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent signup took the email or username after our check
        raise ConflictError() from None

    logger.info("User signed up: %s", user.id)
    return user


async def login(
    db: AsyncSession,
    email: str,
    password: str,
) -> tuple[User, str]:
    """
    Authenticate with email and password and open a session.

    Returns:
        Tuple of (User instance, session token).

    Raises:
        InvalidCredentialsError: For an unknown email, a Google-only account
            (no local password) or a wrong password.
    """
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    user = result.scalar_one_or_none()

    if user is None or user.hashed_password is None:
        logger.info("Local login failed")
        raise InvalidCredentialsError()

    if not verify_password(password, user.hashed_password):
        logger.info("Local login failed")
        raise InvalidCredentialsError()

    return user, await _start_session(db, user)


async def login_external(
    db: AsyncSession,
    profile: ExternalProfile,
) -> tuple[User, str]:
    """
    Sign in with a profile asserted by the external identity provider.

    Returns:
        Tuple of (User instance, session token).

    Raises:
        AuthError: If the profile carries no email address.
    """
    result = await db.execute(select(User).where(User.external_id == profile.external_id))
    user = result.scalar_one_or_none()

    if user is None:
        email = profile.primary_email
        if not email:
            raise AuthError("External profile has no email address")

        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is not None:
            user.external_id = profile.external_id
            user.display_name = profile.display_name
            logger.info("Linked external identity to user %s", user.id)
        else:
            user = User(
                email=email,
                external_id=profile.external_id,
                display_name=profile.display_name,
                role=UserRole.USER,
            )
            db.add(user)
            await db.flush()
            logger.info("Provisioned user %s from external identity", user.id)

    return user, await _start_session(db, user)


async def check_session(db: AsyncSession, token: str | None) -> User | None:
    """Return the user behind a session token, or None. Never writes."""
    user_id = await session_service.resolve(db, token)
    if user_id is None:
        return None
    return await db.get(User, user_id)


async def logout(db: AsyncSession, token: str | None) -> None:
    """End a session. Logging out twice, or without a session, is fine."""
    await session_service.destroy(db, token)


async def _start_session(db: AsyncSession, user: User) -> str:
    user.last_login_at = datetime.now(timezone.utc)
    token = await session_service.create(db, user.id)
    logger.info("User %s logged in via %s", user.id, user.auth_provider.value)
    return token