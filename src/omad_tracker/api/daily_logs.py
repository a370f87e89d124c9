"""Daily log endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Path, Request, Response, status

from omad_tracker.api.auth import get_container, require_user
from omad_tracker.api.models import DailyLogRequest, DailyLogResponse, StreakResponse
from omad_tracker.api.rate_limit import API_RATE_LIMIT, limiter
from omad_tracker.domain.models import SessionUser
from omad_tracker.errors import NotFoundError

MONTH_CACHE_CONTROL = "private, max-age=300"

router = APIRouter(prefix="/api/daily-logs", tags=["daily-logs"])


@router.post("", response_model=DailyLogResponse)
@limiter.limit(API_RATE_LIMIT)
async def log_day(
    request: Request,
    payload: DailyLogRequest,
    confirm: bool = False,
    user: SessionUser = Depends(require_user),
) -> DailyLogResponse:
    """Create or update the log for a day."""
    container = get_container(request)
    log = container.daily_log_service.log_day(
        user_id=user.user_id,
        day=payload.day,
        omad_compliant=payload.omad_compliant,
        alcohol_consumed=payload.alcohol_consumed,
        weight=payload.weight,
        confirm_weight_change=confirm,
    )
    return DailyLogResponse.from_domain(log)


@router.get("/streak", response_model=StreakResponse)
@limiter.limit(API_RATE_LIMIT)
async def get_streak(
    request: Request, user: SessionUser = Depends(require_user)
) -> StreakResponse:
    """Return the current OMAD streak."""
    container = get_container(request)
    return StreakResponse(streak=container.daily_log_service.get_streak(user.user_id))


@router.get("/month/{year}/{month}", response_model=list[DailyLogResponse])
@limiter.limit(API_RATE_LIMIT)
async def get_month(
    request: Request,
    response: Response,
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    user: SessionUser = Depends(require_user),
) -> list[DailyLogResponse]:
    """Return every log in a calendar month."""
    container = get_container(request)
    response.headers["Cache-Control"] = MONTH_CACHE_CONTROL
    response.headers["Vary"] = "Cookie"
    logs = container.daily_log_service.get_month(user.user_id, year, month)
    return [DailyLogResponse.from_domain(log) for log in logs]


@router.get("/{day}", response_model=DailyLogResponse)
@limiter.limit(API_RATE_LIMIT)
async def get_day(
    request: Request, day: date, user: SessionUser = Depends(require_user)
) -> DailyLogResponse:
    """Return the log for a day."""
    container = get_container(request)
    log = container.daily_log_service.get_day(user.user_id, day)
    if log is None:
        raise NotFoundError(f"No log recorded for {day.isoformat()}.")
    return DailyLogResponse.from_domain(log)


@router.delete("/{day}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(API_RATE_LIMIT)
async def delete_day(
    request: Request, day: date, user: SessionUser = Depends(require_user)
) -> None:
    """Delete the log for a day."""
    container = get_container(request)
    if not container.daily_log_service.delete_day(user.user_id, day):
        raise NotFoundError(f"No log recorded for {day.isoformat()}.")
