"""
Google OAuth 2.0 client for the external login path.

Standard authorization-code flow:
  1. authorization_url(state) — where /auth/google redirects the browser
  2. Google redirects back to /auth/google/callback?code=...&state=...
  3. fetch_profile(code) — exchanges the code for an access token at the
     token endpoint, then reads the user's profile from the userinfo
     endpoint and returns it as an ExternalProfile

Only the profile is used. Google access/refresh tokens are discarded
once the profile has been read; the app keeps its own sessions.

The router gets the client through get_identity_provider(), so tests can
swap in a fake without touching the network.
"""

import logging
from urllib.parse import urlencode

import httpx

from app.config import settings
from app.exceptions import IdentityProviderError
from app.schemas.auth import ExternalProfile

logger = logging.getLogger(__name__)

AUTHORIZATION_ENDPOINT = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_ENDPOINT = "https://oauth2.googleapis.com/token"
USERINFO_ENDPOINT = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = ("openid", "profile", "email")


class GoogleIdentityProvider:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    def authorization_url(self, state: str) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": " ".join(SCOPES),
                "state": state,
                "prompt": "select_account",
            }
        )
        return f"{AUTHORIZATION_ENDPOINT}?{query}"

    async def fetch_profile(self, code: str) -> ExternalProfile:
        """
        Exchange an authorization code for the signed-in user's profile.

        Raises:
            IdentityProviderError: If Google rejects the code, is unreachable,
                or returns a profile without a subject id.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                token_resp = await client.post(
                    TOKEN_ENDPOINT,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.redirect_uri,
                        "grant_type": "authorization_code",
                    },
                )
                if token_resp.status_code != 200:
                    logger.warning("Google token exchange failed: %s", token_resp.status_code)
                    raise IdentityProviderError("Google token exchange failed")

                access_token = token_resp.json().get("access_token")
                if not access_token:
                    raise IdentityProviderError("Google returned no access token")

                userinfo_resp = await client.get(
                    USERINFO_ENDPOINT,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                if userinfo_resp.status_code != 200:
                    logger.warning("Google userinfo failed: %s", userinfo_resp.status_code)
                    raise IdentityProviderError("Google profile request failed")
                userinfo = userinfo_resp.json()
        except httpx.HTTPError as exc:
            logger.warning("Google request failed: %s", exc)
            raise IdentityProviderError("Google is unreachable") from exc

        subject = userinfo.get("sub")
        if not subject:
            raise IdentityProviderError("Incomplete Google profile")

        email = userinfo.get("email")
        return ExternalProfile(
            external_id=str(subject),
            display_name=userinfo.get("name"),
            emails=[email] if email else [],
        )


def get_identity_provider() -> GoogleIdentityProvider:
    """FastAPI dependency returning the configured Google client."""
    return GoogleIdentityProvider(
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        redirect_uri=settings.GOOGLE_REDIRECT_URI,
    )
