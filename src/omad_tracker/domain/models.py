"""Domain models for users and their sessions."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class UserProfile:
    """Profile captured by the setup wizard."""

    user_id: str
    email: str
    height: str
    starting_weight: float
    start_date: date


@dataclass(frozen=True)
class GoogleIdentity:
    """Identity returned by a completed Google sign-in."""

    subject: str
    email: str


@dataclass(frozen=True)
class SessionUser:
    """Signed-in user decoded from the session cookie."""

    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime
