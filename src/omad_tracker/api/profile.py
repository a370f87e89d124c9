"""Profile endpoints."""

from fastapi import APIRouter, Depends, Request, status

from omad_tracker.api.auth import get_container, require_user
from omad_tracker.api.models import (
    ProfileRequest,
    ProfileResponse,
    ProfileUpdateRequest,
)
from omad_tracker.api.rate_limit import API_RATE_LIMIT, limiter
from omad_tracker.domain.models import SessionUser
from omad_tracker.errors import ProfileNotFoundError

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(API_RATE_LIMIT)
async def create_profile(
    request: Request,
    payload: ProfileRequest,
    user: SessionUser = Depends(require_user),
) -> ProfileResponse:
    """Complete profile setup for the signed-in user."""
    container = get_container(request)
    profile = container.profile_service.create_profile(
        user_id=user.user_id,
        email=str(payload.email),
        height=payload.height,
        starting_weight=payload.starting_weight,
        start_date=payload.start_date,
    )
    return ProfileResponse.from_domain(profile)


@router.get("", response_model=ProfileResponse)
@limiter.limit(API_RATE_LIMIT)
async def get_profile(
    request: Request, user: SessionUser = Depends(require_user)
) -> ProfileResponse:
    """Return the signed-in user's profile."""
    container = get_container(request)
    profile = container.profile_service.get_profile(user.user_id)
    if profile is None:
        raise ProfileNotFoundError(f"Profile not found for user {user.user_id}")
    return ProfileResponse.from_domain(profile)


@router.put("", response_model=ProfileResponse)
@limiter.limit(API_RATE_LIMIT)
async def update_profile(
    request: Request,
    payload: ProfileUpdateRequest,
    user: SessionUser = Depends(require_user),
) -> ProfileResponse:
    """Update height and starting weight."""
    container = get_container(request)
    profile = container.profile_service.update_profile(
        user_id=user.user_id,
        height=payload.height,
        starting_weight=payload.starting_weight,
    )
    return ProfileResponse.from_domain(profile)
