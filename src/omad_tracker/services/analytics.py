"""Streak, weight trend and alcohol correlation analytics."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from omad_tracker.domain.logs import (
    CorrelationSummary,
    DailyLog,
    TrendPoint,
    TrendSeries,
)
from omad_tracker.errors import DataIntegrityError, InsufficientDataError

if TYPE_CHECKING:
    from omad_tracker.services.daily_logs import DailyLogRepository

MIN_TREND_DAYS = 3
MIN_CORRELATION_DAYS = 2
DEFAULT_RANGE_DAYS = 90


def compute_streak(logs: Iterable[DailyLog]) -> int:
    """Count consecutive compliant logs back from the most recent one.

    Unlogged days are skipped; only a day logged as non-compliant ends the streak.
    """
    ordered = sorted(logs, key=lambda log: log.day, reverse=True)
    _ensure_unique_days(ordered)
    streak = 0
    for log in ordered:
        if not log.omad_compliant:
            break
        streak += 1
    return streak


def generate_trends(logs: Iterable[DailyLog], start: date, end: date) -> TrendSeries:
    """Build a gap-filled daily weight series for ``start``..``end``.

    Raises InsufficientDataError when fewer than three logs fall in the range or
    the earliest of them has no weight.
    """
    in_range = _within(logs, start, end)
    _ensure_unique_days(in_range)
    if len(in_range) < MIN_TREND_DAYS:
        raise InsufficientDataError(
            "At least 3 days of logged data are required to generate trends."
        )
    if in_range[0].weight is None:
        raise InsufficientDataError(
            "Weight is required on the first logged day to generate trends."
        )

    by_day = {log.day: log for log in in_range}
    points: list[TrendPoint] = []
    last_known_weight: Decimal | None = None
    for day in _days(start, end):
        log = by_day.get(day)
        if log is not None:
            if log.weight is not None:
                points.append(
                    TrendPoint(
                        day=day,
                        weight=log.weight,
                        alcohol_consumed=log.alcohol_consumed,
                        is_carry_forward=False,
                    )
                )
                last_known_weight = log.weight
            else:
                points.append(
                    TrendPoint(
                        day=day,
                        weight=last_known_weight,
                        alcohol_consumed=log.alcohol_consumed,
                        is_carry_forward=last_known_weight is not None,
                    )
                )
        elif last_known_weight is not None:
            points.append(
                TrendPoint(
                    day=day,
                    weight=last_known_weight,
                    alcohol_consumed=False,
                    is_carry_forward=True,
                )
            )

    weighted = [log.weight for log in in_range if log.weight is not None]
    weight_change = weighted[-1] - weighted[0] if weighted else None
    return TrendSeries(
        points=points,
        total_days_logged=len(in_range),
        weight_change=weight_change,
    )


def compute_correlation(
    logs: Iterable[DailyLog], start: date, end: date
) -> CorrelationSummary:
    """Correlate alcohol days with weight over the weighted logs in range.

    Weight averages stay in Decimal; only the coefficient is a float.
    """
    weighted = [log for log in _within(logs, start, end) if log.weight is not None]
    if len(weighted) < MIN_CORRELATION_DAYS:
        return CorrelationSummary(
            correlation=None,
            days_with_alcohol=0,
            total_days=len(weighted),
            average_weight_with_alcohol=None,
            average_weight_without_alcohol=None,
        )

    with_alcohol = [log.weight for log in weighted if log.alcohol_consumed]
    without_alcohol = [log.weight for log in weighted if not log.alcohol_consumed]
    alcohol = [1.0 if log.alcohol_consumed else 0.0 for log in weighted]
    weights = [float(log.weight) for log in weighted]

    return CorrelationSummary(
        correlation=_pearson(alcohol, weights),
        days_with_alcohol=len(with_alcohol),
        total_days=len(weighted),
        average_weight_with_alcohol=_mean(with_alcohol),
        average_weight_without_alcohol=_mean(without_alcohol),
    )


def default_range(today: date, days: int = DEFAULT_RANGE_DAYS) -> tuple[date, date]:
    """Return the default analytics window ending today."""
    return today - timedelta(days=days), today


@dataclass
class AnalyticsService:
    """Service fetching log snapshots and running analytics over them."""

    repository: DailyLogRepository

    def get_trends(self, user_id: str, start: date, end: date) -> TrendSeries:
        """Return the weight trend for a date range."""
        logs = self.repository.list_logs_between(user_id, start, end)
        return generate_trends(logs, start, end)

    def get_correlation(
        self, user_id: str, start: date, end: date
    ) -> CorrelationSummary:
        """Return alcohol/weight correlation for a date range."""
        logs = self.repository.list_logs_between(user_id, start, end)
        return compute_correlation(logs, start, end)


def _within(logs: Iterable[DailyLog], start: date, end: date) -> list[DailyLog]:
    return sorted(
        (log for log in logs if start <= log.day <= end), key=lambda log: log.day
    )


def _ensure_unique_days(ordered: list[DailyLog]) -> None:
    for previous, current in zip(ordered, ordered[1:]):
        if previous.day == current.day:
            raise DataIntegrityError(
                f"More than one log stored for {current.day.isoformat()}"
            )


def _days(start: date, end: date) -> Iterable[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def _mean(values: list[Decimal]) -> Decimal | None:
    if not values:
        return None
    return sum(values, Decimal(0)) / len(values)


def _pearson(xs: list[float], ys: list[float]) -> float:
    # Constant series: r is 0.0, even with float residue left by the mean.
    if len(set(xs)) < 2 or len(set(ys)) < 2:
        return 0.0
    mean_x = sum(xs) / len(xs)
    mean_y = sum(ys) / len(ys)
    sum_product = 0.0
    sum_x_sq = 0.0
    sum_y_sq = 0.0
    for x, y in zip(xs, ys):
        dx = x - mean_x
        dy = y - mean_y
        sum_product += dx * dy
        sum_x_sq += dx * dx
        sum_y_sq += dy * dy
    denominator = math.sqrt(sum_x_sq * sum_y_sq)
    if denominator == 0:
        return 0.0
    return max(-1.0, min(1.0, sum_product / denominator))
