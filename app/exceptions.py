"""
Custom exception classes and FastAPI exception handlers.

The service layer raises these domain errors without importing HTTP
concepts; the handlers registered here translate them into consistent
JSON responses of the form {"detail": ..., "error_type": ...}.

Exception hierarchy:
    CatalogAPIError (base)
    ├── ConflictError           — signup with an email/username already in use
    ├── AuthError               — bad credentials, or no valid session
    ├── ForbiddenError          — authenticated but not an admin
    ├── NotFoundError           — book or user id does not exist
    ├── ValidationError         — unknown genre, out-of-range year, ...
    └── IdentityProviderError   — Google token exchange / profile fetch failed

Unexpected store failures (SQLAlchemyError, connection errors) are mapped
to a generic 500 so the process keeps serving other requests.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class CatalogAPIError(Exception):
    """Base exception for all Book Catalog API domain errors."""

    status_code = 400
    error_type = "error"

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class ConflictError(CatalogAPIError):
    """
    Raised when signup collides with an existing email or username.

    The message deliberately does not say which field collided.
    """

    status_code = 409
    error_type = "conflict"

    def __init__(self, detail: str = "User already exists with this email or username"):
        super().__init__(detail)


class AuthError(CatalogAPIError):
    """Raised for invalid credentials or a missing/expired session."""

    status_code = 401
    error_type = "unauthorized"

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail)


class InvalidCredentialsError(AuthError):
    """Raised when login credentials are incorrect (same message for every cause)."""

    def __init__(self):
        super().__init__("Invalid email or password")


class ForbiddenError(CatalogAPIError):
    """Raised when an authenticated user lacks the role an operation needs."""

    status_code = 403
    error_type = "forbidden"

    def __init__(self, detail: str = "Admin access required"):
        super().__init__(detail)


class NotFoundError(CatalogAPIError):
    """Raised when a requested book or user does not exist."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, resource: str, resource_id: object):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} not found")


class ValidationError(CatalogAPIError):
    """Raised when input passes schema validation but breaks a domain rule."""

    status_code = 422
    error_type = "validation_error"


class IdentityProviderError(CatalogAPIError):
    """Raised when the external identity provider cannot complete a login."""

    status_code = 502
    error_type = "identity_provider"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Every CatalogAPIError subclass carries its own status code and
    error_type, so a single handler covers the whole hierarchy.

    This is called once during app startup in main.py.
    """

    @app.exception_handler(CatalogAPIError)
    async def catalog_error_handler(
        request: Request, exc: CatalogAPIError
    ) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "error_type": exc.error_type},
            headers=headers,
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        logger.exception("Store error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    @app.exception_handler(OSError)
    async def store_unavailable_handler(
        request: Request, exc: OSError
    ) -> JSONResponse:
        logger.exception("Store unavailable on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )
