"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    session_secret_key: str
    google_client_id: str | None = None
    google_client_secret: str | None = None
    public_base_url: str = "http://localhost:8000"
    session_max_age_days: int = 30
    weight_change_threshold_lbs: float = 5.0
    trend_default_days: int = 90
    rate_limit_enabled: bool = True
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def google_sign_in_configured(self) -> bool:
        """Return True when both Google OAuth credentials are present."""
        return bool(self.google_client_id and self.google_client_secret)

    @property
    def google_redirect_uri(self) -> str:
        """Return the OAuth callback URL registered with Google."""
        return f"{self.public_base_url.rstrip('/')}/api/auth/google/callback"

    @property
    def secure_cookies(self) -> bool:
        """Return True when the app is served over HTTPS."""
        return self.public_base_url.startswith("https://")
