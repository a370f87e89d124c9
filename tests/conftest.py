"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from omad_tracker.adapters.google_oauth_client import GoogleOAuthClient
from omad_tracker.api.app import create_app
from omad_tracker.api.auth import SESSION_COOKIE
from omad_tracker.config import Settings
from omad_tracker.containers import AppContainer
from omad_tracker.domain.logs import DailyLog
from omad_tracker.domain.models import GoogleIdentity, UserProfile
from omad_tracker.errors import ConcurrencyConflictError
from omad_tracker.services.analytics import AnalyticsService
from omad_tracker.services.auth import AuthService
from omad_tracker.services.daily_logs import DailyLogRepository, DailyLogService
from omad_tracker.services.profiles import ProfileRepository, ProfileService

USER_ID = "google-user-1"
USER_EMAIL = "user@example.com"


def make_log(  # noqa: PLR0913
    day: date,
    weight: float | str | None = None,
    alcohol: bool = False,
    compliant: bool = True,
    user_id: str = USER_ID,
    version: str | None = None,
) -> DailyLog:
    """Build a daily log with sensible defaults; weights become Decimals."""
    return DailyLog(
        user_id=user_id,
        day=day,
        omad_compliant=compliant,
        alcohol_consumed=alcohol,
        weight=Decimal(str(weight)) if weight is not None else None,
        recorded_at=datetime(2024, 1, 1, tzinfo=UTC),
        version=version,
    )


@dataclass
class InMemoryDailyLogRepository(DailyLogRepository):
    """In-memory daily log repository for tests."""

    logs: dict[tuple[str, date], DailyLog] = field(default_factory=dict)
    writes: int = 0

    def add(self, *logs: DailyLog) -> None:
        for log in logs:
            self.writes += 1
            self.logs[(log.user_id, log.day)] = replace(log, version=str(self.writes))

    def get_log(self, user_id: str, day: date) -> DailyLog | None:
        return self.logs.get((user_id, day))

    def list_logs(self, user_id: str) -> list[DailyLog]:
        return [log for (owner, _), log in self.logs.items() if owner == user_id]

    def list_logs_between(self, user_id: str, start: date, end: date) -> list[DailyLog]:
        return [log for log in self.list_logs(user_id) if start <= log.day <= end]

    def insert_log(self, log: DailyLog) -> DailyLog:
        if (log.user_id, log.day) in self.logs:
            raise ConcurrencyConflictError("Log already exists")
        self.add(log)
        return self.logs[(log.user_id, log.day)]

    def update_log(self, log: DailyLog, expected_version: str | None) -> DailyLog:
        current = self.logs.get((log.user_id, log.day))
        if current is None:
            raise ConcurrencyConflictError("Log was deleted")
        if expected_version is not None and current.version != expected_version:
            raise ConcurrencyConflictError("Log was modified")
        self.add(log)
        return self.logs[(log.user_id, log.day)]

    def delete_log(self, user_id: str, day: date) -> bool:
        return self.logs.pop((user_id, day), None) is not None


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[str, UserProfile] = field(default_factory=dict)

    def get_profile(self, user_id: str) -> UserProfile | None:
        return self.profiles.get(user_id)

    def create_profile(self, profile: UserProfile) -> UserProfile:
        self.profiles[profile.user_id] = profile
        return profile

    def update_profile(self, profile: UserProfile) -> UserProfile:
        self.profiles[profile.user_id] = profile
        return profile


@dataclass
class FakeGoogleOAuthClient(GoogleOAuthClient):
    """Fake OAuth client returning a fixed identity."""

    identity: GoogleIdentity = field(
        default_factory=lambda: GoogleIdentity(subject=USER_ID, email=USER_EMAIL)
    )
    codes: list[str] = field(default_factory=list)

    def authorization_url(self, state: str) -> str:
        return f"https://accounts.example.com/auth?state={state}"

    async def exchange_code(self, code: str) -> GoogleIdentity:
        self.codes.append(code)
        return self.identity


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        session_secret_key="test-session-secret-with-enough-length",
        google_client_id="client-id",
        google_client_secret="client-secret",
        rate_limit_enabled=False,
        environment="test",
    )


@pytest.fixture
def daily_log_repository() -> InMemoryDailyLogRepository:
    return InMemoryDailyLogRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def oauth_client() -> FakeGoogleOAuthClient:
    return FakeGoogleOAuthClient()


@pytest.fixture
def container(
    settings: Settings,
    daily_log_repository: InMemoryDailyLogRepository,
    profile_repository: InMemoryProfileRepository,
    oauth_client: FakeGoogleOAuthClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        daily_log_service=DailyLogService(daily_log_repository),
        analytics_service=AnalyticsService(daily_log_repository),
        profile_service=ProfileService(profile_repository),
        auth_service=AuthService(
            secret_key=settings.session_secret_key,
            max_age=timedelta(days=settings.session_max_age_days),
            oauth_client=oauth_client,
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture
def signed_in_client(container: AppContainer) -> TestClient:
    test_client = TestClient(create_app(container))
    token = container.auth_service.issue_token(
        GoogleIdentity(subject=USER_ID, email=USER_EMAIL)
    )
    test_client.cookies.set(SESSION_COOKIE, token)
    return test_client
