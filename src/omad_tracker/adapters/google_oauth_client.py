"""Google OAuth 2.0 client adapter."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from omad_tracker.domain.models import GoogleIdentity

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


class GoogleOAuthClient(Protocol):
    """Interface for the Google authorization code flow."""

    def authorization_url(self, state: str) -> str:
        """Return the consent screen URL for a CSRF state value."""

    async def exchange_code(self, code: str) -> GoogleIdentity:
        """Exchange an authorization code for the user's identity."""


@dataclass
class HttpxGoogleOAuthClient(GoogleOAuthClient):
    """Google OAuth client implemented with httpx."""

    client_id: str
    client_secret: str
    redirect_uri: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, client_id: str, client_secret: str, redirect_uri: str
    ) -> "HttpxGoogleOAuthClient":
        """Create an OAuth client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            http_client=httpx.AsyncClient(),
        )

    def authorization_url(self, state: str) -> str:
        """Build the Google consent URL."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
            "prompt": "select_account",
        }
        return str(httpx.URL(AUTHORIZE_URL, params=params))

    async def exchange_code(self, code: str) -> GoogleIdentity:
        """Exchange the code for tokens, then read the userinfo endpoint."""
        token_response = await self.http_client.post(
            TOKEN_URL,
            data={
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
            timeout=10,
        )
        token_response.raise_for_status()
        access_token = token_response.json().get("access_token")
        if not access_token:
            raise RuntimeError("Google token response did not include an access token")

        userinfo_response = await self.http_client.get(
            USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=10,
        )
        userinfo_response.raise_for_status()
        payload = userinfo_response.json()
        subject = payload.get("sub")
        if not subject:
            raise RuntimeError("Google userinfo response did not include a subject")
        return GoogleIdentity(subject=str(subject), email=str(payload.get("email", "")))

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
