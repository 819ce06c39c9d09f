"""
Authentication router — local signup/login, Google login, sessions.

Endpoints:
  POST /auth/signup           — Register a local user
  POST /auth/login            — Email + password login, opens a session
  GET  /auth/google           — Redirect to Google's consent page
  GET  /auth/google/callback  — Google redirects back here
  GET  /auth/session          — Is this request authenticated, and as whom?
  POST /auth/logout           — End the current session (idempotent)

Sessions are returned two ways on login: as an HttpOnly cookie for the
browser and as `token` in the JSON body for API clients, which send it
back as "Authorization: Bearer <token>".

The Google callback never answers with a JSON error. The browser is in
the middle of a redirect chain, so every outcome is a redirect to the
frontend: /dashboard?google_auth=success or /login?error=google_auth_failed.

Passwords and session tokens are never logged.
"""

import logging
import secrets

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.dependencies import get_session_token
from app.exceptions import CatalogAPIError
from app.schemas.auth import (
    UserSignupRequest,
    UserLoginRequest,
    SignupResponse,
    LoginResponse,
    SessionStatus,
)
from app.schemas.user import UserResponse
from app.security import create_oauth_state, verify_oauth_state
from app.services import auth_service
from app.services.identity_provider import GoogleIdentityProvider, get_identity_provider

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_HOURS * 3600,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def signup(
    request: UserSignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new local user with role "user".

    - **username**: 3-100 characters, must not be taken
    - **email**: Must be a valid email format and not already registered
    - **password**: Minimum 8 characters

    Signup does not log the user in; call /auth/login afterwards.
    """
    user = await auth_service.signup(
        db=db,
        username=request.username,
        email=request.email,
        password=request.password,
    )
    return SignupResponse(
        user_id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in with email and password",
)
async def login(
    request: UserLoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate with email and password.

    Sets the session cookie and also returns the session token, valid
    for SESSION_TTL_HOURS (default: 24).
    """
    user, token = await auth_service.login(
        db=db,
        email=request.email,
        password=request.password,
    )
    _set_session_cookie(response, token)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get(
    "/google",
    summary="Start Google sign-in",
    response_class=RedirectResponse,
)
async def google_login(
    provider: GoogleIdentityProvider = Depends(get_identity_provider),
):
    """Redirect the browser to Google, remembering a state nonce in a cookie."""
    nonce = secrets.token_urlsafe(16)
    response = RedirectResponse(provider.authorization_url(create_oauth_state(nonce)))
    response.set_cookie(
        key=settings.OAUTH_STATE_COOKIE_NAME,
        value=nonce,
        max_age=settings.OAUTH_STATE_TTL_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.get(
    "/google/callback",
    summary="Google sign-in callback",
    response_class=RedirectResponse,
)
async def google_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    provider: GoogleIdentityProvider = Depends(get_identity_provider),
    db: AsyncSession = Depends(get_db),
):
    """
    Finish Google sign-in: verify state, fetch the profile, then reuse,
    link or provision the matching user and open a session.
    """
    failure = RedirectResponse(f"{settings.FRONTEND_URL}/login?error=google_auth_failed")
    failure.delete_cookie(settings.OAUTH_STATE_COOKIE_NAME)

    if error or not code or not state:
        logger.info("Google callback without code: %s", error or "missing parameters")
        return failure

    nonce = request.cookies.get(settings.OAUTH_STATE_COOKIE_NAME)
    if not verify_oauth_state(state, nonce):
        logger.warning("Google callback with invalid state")
        return failure

    try:
        profile = await provider.fetch_profile(code)
        _, token = await auth_service.login_external(db, profile)
    except CatalogAPIError as exc:
        logger.warning("Google sign-in failed: %s", exc.detail)
        return failure
    except SQLAlchemyError:
        logger.exception("Google sign-in failed on a store error")
        await db.rollback()
        return failure

    response = RedirectResponse(f"{settings.FRONTEND_URL}/dashboard?google_auth=success")
    response.delete_cookie(settings.OAUTH_STATE_COOKIE_NAME)
    _set_session_cookie(response, token)
    return response


@router.get(
    "/session",
    response_model=SessionStatus,
    summary="Check the current session",
)
async def check_session(
    token: str | None = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
):
    """
    Report whether the request carries a valid session.

    Always 200; anonymous requests get {"authenticated": false}.
    """
    user = await auth_service.check_session(db, token)
    if user is None:
        return SessionStatus(authenticated=False)
    return SessionStatus(authenticated=True, user=UserResponse.model_validate(user))


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Log out",
)
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    db: AsyncSession = Depends(get_db),
):
    """End the current session and clear the cookie. Safe to call repeatedly."""
    await auth_service.logout(db, token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
