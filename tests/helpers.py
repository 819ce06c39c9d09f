"""
Shared test data and helpers.

Kept out of conftest.py so test modules can import them directly;
pytest puts this directory on sys.path when it collects the tests.
"""

from httpx import AsyncClient
from sqlalchemy import update

from app.models.user import User, UserRole

USER_CREDENTIALS = {
    "username": "testuser",
    "email": "testuser@example.com",
    "password": "SecurePass123!",
}

ADMIN_CREDENTIALS = {
    "username": "admin",
    "email": "admin@example.com",
    "password": "AdminPass123!",
}


async def signup_and_login(ac: AsyncClient, credentials: dict) -> dict:
    """Sign up through the API, log in, and return the login response body."""
    response = await ac.post("/auth/signup", json=credentials)
    assert response.status_code == 201, f"Signup failed: {response.text}"

    response = await ac.post(
        "/auth/login",
        json={"email": credentials["email"], "password": credentials["password"]},
    )
    assert response.status_code == 200, f"Login failed: {response.text}"
    return response.json()


async def promote(session_factory, email: str) -> None:
    """Make an existing user an admin, the way demo/promote_admin.py does."""
    async with session_factory() as session:
        await session.execute(
            update(User).where(User.email == email).values(role=UserRole.ADMIN)
        )
        await session.commit()
