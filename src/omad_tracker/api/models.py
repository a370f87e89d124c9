"""Pydantic request and response models for the HTTP API."""

import re
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    PlainSerializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from omad_tracker.domain.logs import (
    CorrelationSummary,
    DailyLog,
    TrendPoint,
    TrendSeries,
)
from omad_tracker.domain.models import UserProfile

MIN_WEIGHT_LBS = 50
MAX_WEIGHT_LBS = 500
MIN_HEIGHT_INCHES = 48
MAX_HEIGHT_INCHES = 84
MIN_HEIGHT_CM = 122
MAX_HEIGHT_CM = 213

_IMPERIAL_HEIGHT = re.compile(r"^(\d)'(\d{1,2})\"$")
_METRIC_HEIGHT = re.compile(r"^(\d{3})cm$")

# Weights are exact decimals in code and plain JSON numbers on the wire.
Pounds = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


def _today() -> date:
    return datetime.now(tz=UTC).date()


def _check_weight(value: Decimal | float | None) -> Decimal | float | None:
    if value is not None and not MIN_WEIGHT_LBS <= value <= MAX_WEIGHT_LBS:
        raise ValueError("Weight must be between 50 and 500 lbs")
    return value


def is_valid_height(value: str) -> bool:
    """Return True for heights between 4'0" and 7'0" or 122cm and 213cm."""
    imperial = _IMPERIAL_HEIGHT.match(value)
    if imperial:
        total_inches = int(imperial.group(1)) * 12 + int(imperial.group(2))
        return MIN_HEIGHT_INCHES <= total_inches <= MAX_HEIGHT_INCHES
    metric = _METRIC_HEIGHT.match(value)
    if metric:
        return MIN_HEIGHT_CM <= int(metric.group(1)) <= MAX_HEIGHT_CM
    return False


class ApiModel(BaseModel):
    """Base model using camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DailyLogRequest(ApiModel):
    """Payload for logging a day."""

    day: date = Field(alias="date")
    omad_compliant: bool
    alcohol_consumed: bool
    weight: Pounds | None = None

    @field_validator("day")
    @classmethod
    def _not_in_future(cls, value: date) -> date:
        if value > _today():
            raise ValueError("Cannot log future dates")
        return value

    @field_validator("weight")
    @classmethod
    def _weight_in_range(cls, value: Decimal | None) -> Decimal | None:
        return _check_weight(value)


class DailyLogResponse(ApiModel):
    """A stored daily log."""

    day: date = Field(alias="date")
    omad_compliant: bool
    alcohol_consumed: bool
    weight: Pounds | None
    server_timestamp: datetime

    @classmethod
    def from_domain(cls, log: DailyLog) -> "DailyLogResponse":
        """Build the response from a domain log."""
        return cls(
            day=log.day,
            omad_compliant=log.omad_compliant,
            alcohol_consumed=log.alcohol_consumed,
            weight=log.weight,
            server_timestamp=log.recorded_at,
        )


class StreakResponse(ApiModel):
    """Current OMAD streak."""

    streak: int


class TrendPointResponse(ApiModel):
    """One day of the trend chart."""

    day: date = Field(alias="date")
    weight: Pounds | None
    alcohol_consumed: bool
    is_carry_forward: bool

    @classmethod
    def from_domain(cls, point: TrendPoint) -> "TrendPointResponse":
        """Build the response from a trend point."""
        return cls(
            day=point.day,
            weight=point.weight,
            alcohol_consumed=point.alcohol_consumed,
            is_carry_forward=point.is_carry_forward,
        )


class TrendsResponse(ApiModel):
    """Gap-filled weight and alcohol trend."""

    data_points: list[TrendPointResponse]
    total_days_logged: int
    weight_change: Pounds | None

    @classmethod
    def from_domain(cls, series: TrendSeries) -> "TrendsResponse":
        """Build the response from a trend series."""
        return cls(
            data_points=[TrendPointResponse.from_domain(p) for p in series.points],
            total_days_logged=series.total_days_logged,
            weight_change=series.weight_change,
        )


class CorrelationResponse(ApiModel):
    """Alcohol versus weight statistics."""

    correlation: float | None
    days_with_alcohol: int
    total_days: int
    average_weight_with_alcohol: Pounds | None
    average_weight_without_alcohol: Pounds | None

    @classmethod
    def from_domain(cls, summary: CorrelationSummary) -> "CorrelationResponse":
        """Build the response from a correlation summary."""
        return cls(
            correlation=summary.correlation,
            days_with_alcohol=summary.days_with_alcohol,
            total_days=summary.total_days,
            average_weight_with_alcohol=summary.average_weight_with_alcohol,
            average_weight_without_alcohol=summary.average_weight_without_alcohol,
        )


class ProfileUpdateRequest(ApiModel):
    """Editable profile fields."""

    height: str
    starting_weight: float

    @field_validator("height")
    @classmethod
    def _valid_height(cls, value: str) -> str:
        if not is_valid_height(value.strip()):
            raise ValueError("Height must be in format 4'0\"-7'0\" or 122-213cm")
        return value.strip()

    @field_validator("starting_weight")
    @classmethod
    def _weight_in_range(cls, value: float) -> float:
        return _check_weight(value)


class ProfileRequest(ProfileUpdateRequest):
    """Payload for the setup wizard."""

    email: EmailStr
    start_date: date | None = None

    @field_validator("start_date")
    @classmethod
    def _not_in_future(cls, value: date | None) -> date | None:
        if value is not None and value > _today():
            raise ValueError("Start date cannot be in the future")
        return value


class ProfileResponse(ApiModel):
    """Stored user profile."""

    google_id: str
    email: str
    height: str
    starting_weight: float
    start_date: date

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfileResponse":
        """Build the response from a domain profile."""
        return cls(
            google_id=profile.user_id,
            email=profile.email,
            height=profile.height,
            starting_weight=profile.starting_weight,
            start_date=profile.start_date,
        )


class UserInfoResponse(ApiModel):
    """Who is signed in and whether setup is complete."""

    email: str = ""
    google_id: str = ""
    is_authenticated: bool
    has_profile: bool


class ProblemDetails(BaseModel):
    """RFC 7807 problem body."""

    model_config = ConfigDict(extra="allow")

    type: str = "about:blank"
    title: str
    status: int
    detail: str | None = None
    instance: str | None = None
