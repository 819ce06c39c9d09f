"""
Security utilities: password hashing, session tokens, and OAuth state.

This module centralizes all cryptographic operations so they're easy to
audit and update. Three concerns are handled here:

1. PASSWORD HASHING (Argon2)
   - Local passwords are never stored in plaintext
   - We use passlib's CryptContext for safe, high-level Argon2 operations

2. SESSION TOKENS
   - Opaque, random, URL-safe strings from the `secrets` module
   - They carry no data; the server looks them up in the sessions table,
     which is what makes logout an actual revocation

3. OAUTH STATE (JWT)
   - The `state` parameter sent to Google is a short-lived JWT signed
     with SECRET_KEY, carrying a random nonce
   - The same nonce is stored in a browser cookie; the callback accepts
     the state only if the signature, expiry and nonce all check out
"""

import secrets
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings


# ---------------------------------------------------------------------------
# 1. Password Hashing (Argon2)
# ---------------------------------------------------------------------------

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """
    Hash a plaintext password using Argon2id.

    Returns:
        An Argon2 hash string (e.g., "$argon2id$v=19$m=65536,t=3,p=4$...").
    """
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a stored Argon2 hash."""
    return pwd_context.verify(plain_password, hashed_password)


# ---------------------------------------------------------------------------
# 2. Session Tokens
# ---------------------------------------------------------------------------


def generate_session_token() -> str:
    """Return a new opaque session token (43 URL-safe characters)."""
    return secrets.token_urlsafe(32)


# ---------------------------------------------------------------------------
# 3. OAuth State
# ---------------------------------------------------------------------------


def create_oauth_state(nonce: str, expires_delta: timedelta | None = None) -> str:
    """
    Create the signed `state` value for the Google authorization request.

    Args:
        nonce: Random value also stored in the browser's state cookie.
        expires_delta: Optional custom lifetime. Defaults to
                       OAUTH_STATE_TTL_MINUTES from settings.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.OAUTH_STATE_TTL_MINUTES)
    payload = {
        "nonce": nonce,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_oauth_state(state: str, nonce: str | None) -> bool:
    """
    Check a `state` value returned by Google against the cookie nonce.

    Returns False for a missing cookie, a bad signature, an expired state
    or a nonce mismatch.
    """
    if not nonce:
        return False
    try:
        payload = jwt.decode(state, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return False
    return secrets.compare_digest(str(payload.get("nonce", "")), nonce)
