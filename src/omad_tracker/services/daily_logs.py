"""Daily log business logic."""

import calendar
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Protocol

from omad_tracker.domain.logs import DailyLog
from omad_tracker.errors import WeightChangeConfirmationRequiredError
from omad_tracker.services.analytics import compute_streak

logger = logging.getLogger(__name__)

DEFAULT_WEIGHT_CHANGE_THRESHOLD_LBS = 5.0


class DailyLogRepository(Protocol):
    """Persistence interface for daily logs, keyed by user and day."""

    def get_log(self, user_id: str, day: date) -> DailyLog | None:
        """Return the log for a day, or None when nothing was logged."""

    def list_logs(self, user_id: str) -> list[DailyLog]:
        """Return every log for a user in no particular order."""

    def list_logs_between(self, user_id: str, start: date, end: date) -> list[DailyLog]:
        """Return logs with start <= day <= end."""

    def insert_log(self, log: DailyLog) -> DailyLog:
        """Store a new log and return it with its version token."""

    def update_log(self, log: DailyLog, expected_version: str | None) -> DailyLog:
        """Replace a log if its stored version still matches."""

    def delete_log(self, user_id: str, day: date) -> bool:
        """Delete a log, returning False when none existed."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class DailyLogService:
    """Application service for logging days and reading them back."""

    repository: DailyLogRepository
    weight_change_threshold: float = DEFAULT_WEIGHT_CHANGE_THRESHOLD_LBS
    clock: Callable[[], datetime] = field(default=_utcnow)

    def log_day(  # noqa: PLR0913
        self,
        user_id: str,
        day: date,
        omad_compliant: bool,
        alcohol_consumed: bool,
        weight: Decimal | None,
        confirm_weight_change: bool = False,
    ) -> DailyLog:
        """Create or update the log for a day."""
        if weight is not None and not confirm_weight_change:
            self._check_weight_change(user_id, day, weight)

        log = DailyLog(
            user_id=user_id,
            day=day,
            omad_compliant=omad_compliant,
            alcohol_consumed=alcohol_consumed,
            weight=weight,
            recorded_at=self.clock(),
        )
        existing = self.repository.get_log(user_id, day)
        if existing is not None:
            saved = self.repository.update_log(log, expected_version=existing.version)
            logger.info(
                "Updated daily log", extra={"user_id": user_id, "day": day.isoformat()}
            )
        else:
            saved = self.repository.insert_log(log)
            logger.info(
                "Created daily log", extra={"user_id": user_id, "day": day.isoformat()}
            )
        return saved

    def get_day(self, user_id: str, day: date) -> DailyLog | None:
        """Return the log for a single day."""
        return self.repository.get_log(user_id, day)

    def get_month(self, user_id: str, year: int, month: int) -> list[DailyLog]:
        """Return a month of logs ordered by day."""
        last_day = calendar.monthrange(year, month)[1]
        logs = self.repository.list_logs_between(
            user_id, date(year, month, 1), date(year, month, last_day)
        )
        return sorted(logs, key=lambda log: log.day)

    def delete_day(self, user_id: str, day: date) -> bool:
        """Delete the log for a day."""
        deleted = self.repository.delete_log(user_id, day)
        if deleted:
            logger.info(
                "Deleted daily log", extra={"user_id": user_id, "day": day.isoformat()}
            )
        else:
            logger.warning(
                "Daily log not found for delete",
                extra={"user_id": user_id, "day": day.isoformat()},
            )
        return deleted

    def get_streak(self, user_id: str) -> int:
        """Return the current OMAD streak across all of a user's logs."""
        return compute_streak(self.repository.list_logs(user_id))

    def _check_weight_change(self, user_id: str, day: date, weight: Decimal) -> None:
        previous = self.repository.get_log(user_id, day - timedelta(days=1))
        if previous is None or previous.weight is None:
            logger.debug("No previous weight to compare", extra={"user_id": user_id})
            return
        difference = abs(weight - previous.weight)
        if difference > Decimal(str(self.weight_change_threshold)):
            raise WeightChangeConfirmationRequiredError(
                f"Weight change of {difference:.1f} lbs exceeds "
                f"{self.weight_change_threshold:g} lb threshold. "
                "Please confirm this is correct."
            )
