"""Google sign-in and cookie session tokens."""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import jwt

from omad_tracker.adapters.google_oauth_client import GoogleOAuthClient
from omad_tracker.domain.models import GoogleIdentity, SessionUser
from omad_tracker.errors import SignInUnavailableError

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "HS256"


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AuthService:
    """Issues and reads the signed session token kept in the auth cookie."""

    secret_key: str
    max_age: timedelta
    oauth_client: GoogleOAuthClient | None = None
    clock: Callable[[], datetime] = field(default=_utcnow)

    @property
    def sign_in_enabled(self) -> bool:
        """Return True when Google credentials are configured."""
        return self.oauth_client is not None

    @staticmethod
    def new_state() -> str:
        """Return a random OAuth state value."""
        return secrets.token_urlsafe(32)

    def authorization_url(self, state: str) -> str:
        """Return the Google consent URL."""
        return self._require_client().authorization_url(state)

    async def complete_sign_in(self, code: str) -> tuple[SessionUser, str]:
        """Finish the OAuth flow and return the session user and its token."""
        identity = await self._require_client().exchange_code(code)
        token = self.issue_token(identity)
        user = self.read_token(token)
        if user is None:
            raise RuntimeError("Issued session token could not be read back")
        logger.info("User signed in", extra={"user_id": user.user_id})
        return user, token

    def issue_token(self, identity: GoogleIdentity) -> str:
        """Sign a session token for an identity."""
        now = self.clock()
        payload = {
            "sub": identity.subject,
            "email": identity.email,
            "iat": now,
            "exp": now + self.max_age,
        }
        return jwt.encode(payload, self.secret_key, algorithm=TOKEN_ALGORITHM)

    def refresh_token(self, user: SessionUser) -> str:
        """Sign a fresh token for an existing session."""
        return self.issue_token(GoogleIdentity(subject=user.user_id, email=user.email))

    def read_token(self, token: str | None) -> SessionUser | None:
        """Decode a session token, returning None if it is missing or invalid."""
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[TOKEN_ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.PyJWTError:
            return None
        return SessionUser(
            user_id=str(payload["sub"]),
            email=str(payload.get("email", "")),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )

    def needs_refresh(self, user: SessionUser) -> bool:
        """Return True once half of the session lifetime has elapsed."""
        return self.clock() - user.issued_at >= self.max_age / 2

    def _require_client(self) -> GoogleOAuthClient:
        if self.oauth_client is None:
            raise SignInUnavailableError("Google sign-in is not configured.")
        return self.oauth_client
