"""Supabase repository for daily logs."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import uuid4

from postgrest.exceptions import APIError
from supabase import Client

from omad_tracker.domain.logs import DailyLog, day_key, parse_day_key
from omad_tracker.errors import ConcurrencyConflictError
from omad_tracker.services.daily_logs import DailyLogRepository

UNIQUE_VIOLATION = "23505"

_COLUMNS = (
    "user_id, log_date, omad_compliant, alcohol_consumed, weight, recorded_at, version"
)


@dataclass
class SupabaseDailyLogRepository(DailyLogRepository):
    """Supabase implementation for daily logs.

    Rows are keyed by (user_id, log_date) where log_date is the ISO day key, so
    range filters compare keys lexicographically.
    """

    client: Client

    def get_log(self, user_id: str, day: date) -> DailyLog | None:
        """Return the log for a day."""
        response = (
            self.client.table("daily_logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .eq("log_date", day_key(day))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_logs(self, user_id: str) -> list[DailyLog]:
        """Return all logs for a user."""
        response = (
            self.client.table("daily_logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_logs_between(self, user_id: str, start: date, end: date) -> list[DailyLog]:
        """Return logs within an inclusive day range."""
        response = (
            self.client.table("daily_logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .gte("log_date", day_key(start))
            .lte("log_date", day_key(end))
            .order("log_date", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def insert_log(self, log: DailyLog) -> DailyLog:
        """Insert a new log row.

        The table's primary key is (user_id, log_date), so a second insert for
        the same day fails with a unique violation instead of adding a row.
        """
        stored = replace(log, version=uuid4().hex)
        try:
            response = (
                self.client.table("daily_logs").insert(_to_row(stored)).execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise ConcurrencyConflictError(
                    f"Log for {day_key(log.day)} was created by another request."
                ) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create daily log")
        return _parse_row(response.data[0])

    def update_log(self, log: DailyLog, expected_version: str | None) -> DailyLog:
        """Update a log row only if its version is unchanged."""
        stored = replace(log, version=uuid4().hex)
        query = (
            self.client.table("daily_logs")
            .update(_to_row(stored))
            .eq("user_id", log.user_id)
            .eq("log_date", day_key(log.day))
        )
        if expected_version is not None:
            query = query.eq("version", expected_version)
        response = query.execute()
        if not response.data:
            raise ConcurrencyConflictError(
                f"Log for {day_key(log.day)} was modified by another request."
            )
        return _parse_row(response.data[0])

    def delete_log(self, user_id: str, day: date) -> bool:
        """Delete a log row."""
        response = (
            self.client.table("daily_logs")
            .delete()
            .eq("user_id", user_id)
            .eq("log_date", day_key(day))
            .execute()
        )
        return bool(response.data)


def _to_row(log: DailyLog) -> dict[str, object]:
    return {
        "user_id": log.user_id,
        "log_date": day_key(log.day),
        "omad_compliant": log.omad_compliant,
        "alcohol_consumed": log.alcohol_consumed,
        "weight": float(log.weight) if log.weight is not None else None,
        "recorded_at": log.recorded_at.isoformat(),
        "version": log.version,
    }


def _parse_row(row: dict[str, object]) -> DailyLog:
    recorded_at_raw = row.get("recorded_at")
    recorded_at = (
        datetime.fromisoformat(recorded_at_raw)
        if isinstance(recorded_at_raw, str) and recorded_at_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    weight = row.get("weight")
    return DailyLog(
        user_id=str(row["user_id"]),
        day=parse_day_key(str(row["log_date"])),
        omad_compliant=bool(row.get("omad_compliant", False)),
        alcohol_consumed=bool(row.get("alcohol_consumed", False)),
        weight=Decimal(str(weight)) if weight is not None else None,
        recorded_at=recorded_at,
        version=row.get("version"),
    )
