"""Domain models for daily logs and the analytics built on them."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

DAY_KEY_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class DailyLog:
    """One OMAD log entry for a user on a calendar day."""

    user_id: str
    day: date
    omad_compliant: bool
    alcohol_consumed: bool
    weight: Decimal | None
    recorded_at: datetime
    version: str | None = None


@dataclass(frozen=True)
class TrendPoint:
    """Single day in a gap-filled weight series."""

    day: date
    weight: Decimal | None
    alcohol_consumed: bool
    is_carry_forward: bool


@dataclass(frozen=True)
class TrendSeries:
    """Daily weight series over a date range."""

    points: list[TrendPoint]
    total_days_logged: int
    weight_change: Decimal | None


@dataclass(frozen=True)
class CorrelationSummary:
    """Alcohol versus weight statistics over a date range."""

    correlation: float | None
    days_with_alcohol: int
    total_days: int
    average_weight_with_alcohol: Decimal | None
    average_weight_without_alcohol: Decimal | None


def day_key(day: date) -> str:
    """Return the storage key for a day.

    Keys are fixed-width and zero-padded so string order matches date order.
    """
    return day.strftime(DAY_KEY_FORMAT)


def parse_day_key(value: str) -> date:
    """Parse a storage key back into a date."""
    return datetime.strptime(value, DAY_KEY_FORMAT).date()
