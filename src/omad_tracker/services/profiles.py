"""User profile service."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol

from omad_tracker.domain.models import UserProfile
from omad_tracker.errors import ProfileAlreadyExistsError, ProfileNotFoundError

logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile if one exists."""

    def create_profile(self, profile: UserProfile) -> UserProfile:
        """Store a new profile."""

    def update_profile(self, profile: UserProfile) -> UserProfile:
        """Replace an existing profile."""


@dataclass
class ProfileService:
    """Service for profile setup and edits."""

    repository: ProfileRepository

    def create_profile(  # noqa: PLR0913
        self,
        user_id: str,
        email: str,
        height: str,
        starting_weight: float,
        start_date: date | None = None,
    ) -> UserProfile:
        """Create the profile for a user who has none yet."""
        if self.repository.get_profile(user_id) is not None:
            raise ProfileAlreadyExistsError(f"Profile already exists for user {user_id}")
        profile = UserProfile(
            user_id=user_id,
            email=email,
            height=height,
            starting_weight=starting_weight,
            start_date=start_date or datetime.now(tz=UTC).date(),
        )
        created = self.repository.create_profile(profile)
        logger.info("Created profile", extra={"user_id": user_id})
        return created

    def get_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile."""
        return self.repository.get_profile(user_id)

    def has_profile(self, user_id: str) -> bool:
        """Return True once the user has completed setup."""
        return self.repository.get_profile(user_id) is not None

    def update_profile(
        self, user_id: str, height: str, starting_weight: float
    ) -> UserProfile:
        """Update height and starting weight, keeping email and start date."""
        existing = self.repository.get_profile(user_id)
        if existing is None:
            logger.warning("Profile not found for update", extra={"user_id": user_id})
            raise ProfileNotFoundError(f"Profile not found for user {user_id}")
        updated = self.repository.update_profile(
            UserProfile(
                user_id=existing.user_id,
                email=existing.email,
                height=height,
                starting_weight=starting_weight,
                start_date=existing.start_date,
            )
        )
        logger.info("Updated profile", extra={"user_id": user_id})
        return updated
