"""Google sign-in endpoints and the session cookie dependency."""

import logging
import secrets

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from slowapi.util import get_remote_address

from omad_tracker.api.models import UserInfoResponse
from omad_tracker.api.rate_limit import AUTH_RATE_LIMIT, limiter
from omad_tracker.config import Settings
from omad_tracker.containers import AppContainer
from omad_tracker.domain.models import SessionUser
from omad_tracker.errors import BadRequestError, UnauthorizedError

logger = logging.getLogger(__name__)

SESSION_COOKIE = "omad_session"
STATE_COOKIE = "omad_oauth_state"
STATE_MAX_AGE_SECONDS = 600

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_container(request: Request) -> AppContainer:
    """Return the dependency container attached to the app."""
    return request.app.state.container


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Attach the HTTP-only session cookie."""
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=settings.session_max_age_days * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
    )


async def require_user(request: Request, response: Response) -> SessionUser:
    """Resolve the signed-in user, sliding the session expiry when due."""
    container = get_container(request)
    auth_service = container.auth_service
    user = auth_service.read_token(request.cookies.get(SESSION_COOKIE))
    if user is None:
        raise UnauthorizedError("Authentication required.")
    if auth_service.needs_refresh(user):
        set_session_cookie(
            response, auth_service.refresh_token(user), container.settings
        )
    request.state.user_id = user.user_id
    return user


@router.get("/google")
@limiter.limit(AUTH_RATE_LIMIT, key_func=get_remote_address)
async def start_google_sign_in(request: Request) -> RedirectResponse:
    """Redirect the browser to the Google consent screen."""
    container = get_container(request)
    state = container.auth_service.new_state()
    redirect = RedirectResponse(
        container.auth_service.authorization_url(state), status_code=302
    )
    redirect.set_cookie(
        STATE_COOKIE,
        state,
        max_age=STATE_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        secure=container.settings.secure_cookies,
    )
    return redirect


@router.get("/google/callback")
@limiter.limit(AUTH_RATE_LIMIT, key_func=get_remote_address)
async def google_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """Complete the OAuth flow and start a cookie session."""
    if error:
        raise BadRequestError(f"Google sign-in failed: {error}")
    expected_state = request.cookies.get(STATE_COOKIE)
    if (
        not code
        or not state
        or not expected_state
        or not secrets.compare_digest(state, expected_state)
    ):
        raise BadRequestError("Invalid or expired sign-in state.")

    container = get_container(request)
    try:
        _, token = await container.auth_service.complete_sign_in(code)
    except (httpx.HTTPError, RuntimeError) as exc:
        logger.exception("Google code exchange failed")
        raise UnauthorizedError("Google sign-in failed.") from exc

    redirect = RedirectResponse("/", status_code=302)
    set_session_cookie(redirect, token, container.settings)
    redirect.delete_cookie(STATE_COOKIE)
    return redirect


@router.get("/me", response_model=UserInfoResponse)
@limiter.limit(AUTH_RATE_LIMIT, key_func=get_remote_address)
async def current_user(request: Request) -> UserInfoResponse:
    """Return the signed-in user and whether their profile exists."""
    container = get_container(request)
    user = container.auth_service.read_token(request.cookies.get(SESSION_COOKIE))
    if user is None:
        return UserInfoResponse(is_authenticated=False, has_profile=False)
    return UserInfoResponse(
        email=user.email,
        google_id=user.user_id,
        is_authenticated=True,
        has_profile=container.profile_service.has_profile(user.user_id),
    )


@router.post("/signout")
@limiter.limit(AUTH_RATE_LIMIT, key_func=get_remote_address)
async def sign_out(
    request: Request, user: SessionUser = Depends(require_user)
) -> RedirectResponse:
    """Clear the session cookie."""
    logger.info("User signed out", extra={"user_id": user.user_id})
    redirect = RedirectResponse("/auth", status_code=303)
    redirect.delete_cookie(SESSION_COOKIE)
    return redirect
