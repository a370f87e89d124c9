"""Analytics endpoints."""

from datetime import UTC, date, datetime

from fastapi import APIRouter, Depends, Query, Request

from omad_tracker.api.auth import get_container, require_user
from omad_tracker.api.models import CorrelationResponse, TrendsResponse
from omad_tracker.api.rate_limit import API_RATE_LIMIT, limiter
from omad_tracker.domain.models import SessionUser
from omad_tracker.errors import BadRequestError
from omad_tracker.services.analytics import default_range

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def resolve_range(
    start: date | None, end: date | None, default_days: int, today: date | None = None
) -> tuple[date, date]:
    """Apply the default window and reject reversed ranges."""
    resolved_end = end or today or datetime.now(tz=UTC).date()
    resolved_start = start or default_range(resolved_end, default_days)[0]
    if resolved_start > resolved_end:
        raise BadRequestError("startDate must be on or before endDate.")
    return resolved_start, resolved_end


@router.get("/trends", response_model=TrendsResponse)
@limiter.limit(API_RATE_LIMIT)
async def get_trends(
    request: Request,
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    user: SessionUser = Depends(require_user),
) -> TrendsResponse:
    """Return the gap-filled weight trend."""
    container = get_container(request)
    start, end = resolve_range(
        start_date, end_date, container.settings.trend_default_days
    )
    series = container.analytics_service.get_trends(user.user_id, start, end)
    return TrendsResponse.from_domain(series)


@router.get("/correlation", response_model=CorrelationResponse)
@limiter.limit(API_RATE_LIMIT)
async def get_correlation(
    request: Request,
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    user: SessionUser = Depends(require_user),
) -> CorrelationResponse:
    """Return alcohol versus weight statistics."""
    container = get_container(request)
    start, end = resolve_range(
        start_date, end_date, container.settings.trend_default_days
    )
    summary = container.analytics_service.get_correlation(user.user_id, start, end)
    return CorrelationResponse.from_domain(summary)
