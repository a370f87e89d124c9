"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from omad_tracker.domain.models import UserProfile
from omad_tracker.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("user_profiles")
            .select("user_id, email, height, starting_weight, start_date")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_profile(self, profile: UserProfile) -> UserProfile:
        """Insert a profile row."""
        response = (
            self.client.table("user_profiles")
            .insert(
                {
                    "user_id": profile.user_id,
                    "email": profile.email,
                    "height": profile.height,
                    "starting_weight": profile.starting_weight,
                    "start_date": profile.start_date.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user profile")
        return _parse_row(response.data[0])

    def update_profile(self, profile: UserProfile) -> UserProfile:
        """Update height and starting weight for a profile."""
        response = (
            self.client.table("user_profiles")
            .update(
                {
                    "height": profile.height,
                    "starting_weight": profile.starting_weight,
                }
            )
            .eq("user_id", profile.user_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update user profile")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> UserProfile:
    return UserProfile(
        user_id=str(row["user_id"]),
        email=str(row.get("email", "")),
        height=str(row.get("height", "")),
        starting_weight=float(row.get("starting_weight", 0.0)),
        start_date=date.fromisoformat(str(row["start_date"])),
    )
