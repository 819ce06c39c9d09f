"""
FastAPI dependencies for authentication and authorization.

Dependencies are reusable functions that FastAPI injects into route
handlers. They form a chain that enforces both authentication and
role-based access control:

  get_session_token (header/cookie -> token)
      └── get_optional_user (token -> User | None)
              └── get_current_user (-> User, else 401)
                      └── require_admin (-> admin User, else 403)

Where the token comes from:
  - "Authorization: Bearer <token>" header (API clients, tests), or
  - the session cookie set by /auth/login and the Google callback.
  The header wins when both are present.

Authorization is decided here, once per request, and nowhere else. In
particular there is no fallback that performs a catalog mutation on behalf
of "some admin" when the caller has no session: no session means 401.
"""

from fastapi import Depends
from fastapi.security import APIKeyCookie, OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.exceptions import AuthError, ForbiddenError
from app.models.user import User, UserRole
from app.services import auth_service


# auto_error=False: a missing credential is not an error at this level,
# the dependencies below decide whether anonymous access is acceptable.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)
session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)


async def get_session_token(
    bearer_token: str | None = Depends(oauth2_scheme),
    cookie_token: str | None = Depends(session_cookie),
) -> str | None:
    """Return the session token presented with the request, if any."""
    return bearer_token or cookie_token


async def get_optional_user(
    token: str | None = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Resolve the session to a User, or None for anonymous requests."""
    return await auth_service.check_session(db, token)


async def get_current_user(
    user: User | None = Depends(get_optional_user),
) -> User:
    """
    Require an authenticated user.

    Raises:
        AuthError (401): If there is no session, or it is unknown or expired.
    """
    if user is None:
        raise AuthError("Not authenticated")
    return user


async def require_admin(
    user: User = Depends(get_current_user),
) -> User:
    """
    Require the authenticated user to have the ADMIN role.

    Used on every catalog mutation and every /users endpoint.

    Raises:
        ForbiddenError (403): If the user is not an admin.
    """
    if user.role != UserRole.ADMIN:
        raise ForbiddenError("Admin access required")
    return user
