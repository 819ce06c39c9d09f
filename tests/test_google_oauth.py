"""
Tests for the Google sign-in redirect flow.

Google itself is replaced by a fake identity provider through FastAPI's
dependency overrides, so no request leaves the test process.

These tests verify:
  - /auth/google redirects to the provider and sets the state cookie
  - A good callback opens a session and lands on the dashboard
  - A bad state, a provider error, or a denied consent lands on the
    login page with error=google_auth_failed and opens no session
  - A Google account whose email matches a local account is linked
"""

from urllib.parse import parse_qs, urlparse

import pytest_asyncio
from sqlalchemy.exc import OperationalError

from app.config import settings
from app.exceptions import IdentityProviderError
from app.main import app
from app.schemas.auth import ExternalProfile
from app.services import auth_service
from app.services.identity_provider import GoogleIdentityProvider, get_identity_provider

SUCCESS_URL = f"{settings.FRONTEND_URL}/dashboard?google_auth=success"
FAILURE_URL = f"{settings.FRONTEND_URL}/login?error=google_auth_failed"


class FakeIdentityProvider:
    """Stands in for Google: returns a canned profile for any code."""

    def __init__(self, profile: ExternalProfile | None = None, fail: bool = False):
        self.profile = profile or ExternalProfile(
            external_id="google-sub-1",
            display_name="Grace Hopper",
            emails=["grace@example.com"],
        )
        self.fail = fail
        self.codes = []

    def authorization_url(self, state: str) -> str:
        return f"https://idp.test/authorize?state={state}"

    async def fetch_profile(self, code: str) -> ExternalProfile:
        self.codes.append(code)
        if self.fail:
            raise IdentityProviderError("Google token exchange failed")
        return self.profile


@pytest_asyncio.fixture
async def fake_provider(make_client):
    provider = FakeIdentityProvider()
    app.dependency_overrides[get_identity_provider] = lambda: provider
    return provider


async def start_login(ac) -> str:
    """Hit /auth/google and return the state the provider would echo back."""
    response = await ac.get("/auth/google")
    assert response.status_code == 307
    location = urlparse(response.headers["location"])
    return parse_qs(location.query)["state"][0]


# ---------------------------------------------------------------------------
# Redirect to the provider
# ---------------------------------------------------------------------------

class TestGoogleStart:

    async def test_redirects_to_provider(self, client, fake_provider):
        response = await client.get("/auth/google")
        assert response.status_code == 307
        assert response.headers["location"].startswith("https://idp.test/authorize?state=")
        assert settings.OAUTH_STATE_COOKIE_NAME in response.cookies

    def test_real_provider_url(self):
        provider = GoogleIdentityProvider(
            client_id="cid",
            client_secret="secret",
            redirect_uri="http://localhost:8000/auth/google/callback",
        )
        url = urlparse(provider.authorization_url("abc"))
        query = parse_qs(url.query)

        assert url.netloc == "accounts.google.com"
        assert query["client_id"] == ["cid"]
        assert query["state"] == ["abc"]
        assert query["response_type"] == ["code"]
        assert query["scope"] == ["openid profile email"]
        assert "secret" not in provider.authorization_url("abc")


# ---------------------------------------------------------------------------
# Callback
# ---------------------------------------------------------------------------

class TestGoogleCallback:

    async def test_success_opens_session(self, client, fake_provider):
        state = await start_login(client)

        response = await client.get(
            "/auth/google/callback", params={"code": "good-code", "state": state}
        )
        assert response.status_code == 307
        assert response.headers["location"] == SUCCESS_URL
        assert fake_provider.codes == ["good-code"]

        session = (await client.get("/auth/session")).json()
        assert session["authenticated"] is True
        assert session["user"]["email"] == "grace@example.com"
        assert session["user"]["name"] == "Grace Hopper"
        assert session["user"]["auth_provider"] == "google"
        assert session["user"]["role"] == "user"

    async def test_links_local_account(self, client, fake_provider):
        await client.post(
            "/auth/signup",
            json={"username": "grace", "email": "grace@example.com", "password": "Compiler1952!"},
        )
        state = await start_login(client)

        await client.get("/auth/google/callback", params={"code": "c", "state": state})

        session = (await client.get("/auth/session")).json()
        assert session["user"]["auth_provider"] == "linked"
        assert session["user"]["username"] == "grace"

        login = await client.post(
            "/auth/login",
            json={"email": "grace@example.com", "password": "Compiler1952!"},
        )
        assert login.status_code == 200

    async def test_bad_state(self, client, fake_provider):
        await start_login(client)

        response = await client.get(
            "/auth/google/callback", params={"code": "c", "state": "forged"}
        )
        assert response.headers["location"] == FAILURE_URL
        assert fake_provider.codes == []
        assert (await client.get("/auth/session")).json()["authenticated"] is False

    async def test_state_without_cookie(self, client, make_client, fake_provider):
        """A state minted for one browser is useless in another."""
        state = await start_login(client)

        other = make_client()
        response = await other.get(
            "/auth/google/callback", params={"code": "c", "state": state}
        )
        assert response.headers["location"] == FAILURE_URL

    async def test_provider_error(self, client, fake_provider):
        fake_provider.fail = True
        state = await start_login(client)

        response = await client.get(
            "/auth/google/callback", params={"code": "c", "state": state}
        )
        assert response.status_code == 307
        assert response.headers["location"] == FAILURE_URL
        assert (await client.get("/auth/session")).json()["authenticated"] is False

    async def test_consent_denied(self, client, fake_provider):
        state = await start_login(client)

        response = await client.get(
            "/auth/google/callback", params={"error": "access_denied", "state": state}
        )
        assert response.headers["location"] == FAILURE_URL
        assert fake_provider.codes == []

    async def test_profile_without_email(self, client, fake_provider):
        fake_provider.profile = ExternalProfile(external_id="google-sub-2", emails=[])
        state = await start_login(client)

        response = await client.get(
            "/auth/google/callback", params={"code": "c", "state": state}
        )
        assert response.headers["location"] == FAILURE_URL

    async def test_store_error_still_redirects(self, client, fake_provider, monkeypatch):
        async def store_down(db, profile):
            raise OperationalError("SELECT users", {}, Exception("database is locked"))

        monkeypatch.setattr(auth_service, "login_external", store_down)
        state = await start_login(client)

        response = await client.get(
            "/auth/google/callback", params={"code": "c", "state": state}
        )
        assert response.status_code == 307
        assert response.headers["location"] == FAILURE_URL
        assert "catalog_session" not in response.cookies
