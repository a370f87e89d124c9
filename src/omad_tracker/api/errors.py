"""Exception handlers rendering RFC 7807 problem responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from omad_tracker.api.models import ProblemDetails
from omad_tracker.errors import OmadTrackerError

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"
DEFAULT_RETRY_AFTER_SECONDS = 60

_PROBLEM_TYPES = {
    400: "https://tools.ietf.org/html/rfc7231#section-6.5.1",
    401: "https://tools.ietf.org/html/rfc7235#section-3.1",
    404: "https://tools.ietf.org/html/rfc7231#section-6.5.4",
    409: "https://tools.ietf.org/html/rfc7231#section-6.5.8",
    429: "https://tools.ietf.org/html/rfc6585#section-4",
    500: "https://tools.ietf.org/html/rfc7231#section-6.6.1",
    503: "https://tools.ietf.org/html/rfc7231#section-6.6.4",
}


def problem_response(  # noqa: PLR0913
    request: Request,
    status_code: int,
    title: str,
    detail: str | None,
    extensions: dict[str, object] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a problem+json response."""
    problem = ProblemDetails(
        type=_PROBLEM_TYPES.get(status_code, "about:blank"),
        title=title,
        status=status_code,
        detail=detail,
        instance=request.url.path,
        **(extensions or {}),
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(mode="json", exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


async def app_error_handler(request: Request, exc: OmadTrackerError) -> JSONResponse:
    """Render application errors with their own status and title."""
    if exc.status_code >= 500:  # noqa: PLR2004
        logger.error(
            "Application error", exc_info=exc, extra={"path": request.url.path}
        )
    else:
        logger.warning(
            "Request rejected: %s", exc.message, extra={"path": request.url.path}
        )
    return problem_response(
        request, exc.status_code, exc.title, exc.message, exc.extensions
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 with per-field messages."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        field = ".".join(location[1:]) or ".".join(location) or "request"
        context_error = (error.get("ctx") or {}).get("error")
        message = str(context_error) if context_error else error.get("msg", "")
        errors.setdefault(field, []).append(message)
    return problem_response(
        request,
        400,
        "Validation Failed",
        "One or more validation errors occurred.",
        {"errors": errors},
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors, such as unknown routes, as problems."""
    return problem_response(
        request,
        exc.status_code,
        str(exc.detail),
        None,
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render rate limit rejections with a Retry-After header."""
    retry_after = DEFAULT_RETRY_AFTER_SECONDS
    limit = getattr(exc, "limit", None)
    if limit is not None and getattr(limit, "limit", None) is not None:
        retry_after = limit.limit.get_expiry()
    return problem_response(
        request,
        429,
        "Too Many Requests",
        f"Rate limit exceeded. Please retry after {retry_after} seconds.",
        headers={"Retry-After": str(retry_after)},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected failures, exposing the message only in local runs."""
    logger.exception("Unhandled exception", extra={"path": request.url.path})
    detail = "An unexpected error occurred. Please try again later."
    container = getattr(request.app.state, "container", None)
    if container is not None and container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}"
    return problem_response(
        request,
        500,
        "An error occurred while processing your request",
        detail,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all problem response handlers on the app."""
    app.add_exception_handler(OmadTrackerError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
