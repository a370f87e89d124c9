"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from omad_tracker.adapters.google_oauth_client import HttpxGoogleOAuthClient
from omad_tracker.adapters.supabase_daily_log_repository import (
    SupabaseDailyLogRepository,
)
from omad_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from omad_tracker.config import Settings
from omad_tracker.services.analytics import AnalyticsService
from omad_tracker.services.auth import AuthService
from omad_tracker.services.daily_logs import DailyLogService
from omad_tracker.services.profiles import ProfileService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    daily_log_service: DailyLogService
    analytics_service: AnalyticsService
    profile_service: ProfileService
    auth_service: AuthService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    daily_log_repository = SupabaseDailyLogRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)

    oauth_client = None
    if resolved_settings.google_sign_in_configured:
        oauth_client = HttpxGoogleOAuthClient.create(
            client_id=resolved_settings.google_client_id,
            client_secret=resolved_settings.google_client_secret,
            redirect_uri=resolved_settings.google_redirect_uri,
        )
    auth_service = AuthService(
        secret_key=resolved_settings.session_secret_key,
        max_age=timedelta(days=resolved_settings.session_max_age_days),
        oauth_client=oauth_client,
    )

    async def close_resources() -> None:
        if oauth_client is not None:
            await oauth_client.close()

    return AppContainer(
        settings=resolved_settings,
        daily_log_service=DailyLogService(
            daily_log_repository,
            weight_change_threshold=resolved_settings.weight_change_threshold_lbs,
        ),
        analytics_service=AnalyticsService(daily_log_repository),
        profile_service=ProfileService(profile_repository),
        auth_service=auth_service,
        close_resources=close_resources,
    )
