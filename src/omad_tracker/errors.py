"""Application error hierarchy mapped onto HTTP problem responses."""


class OmadTrackerError(Exception):
    """Base error carrying the HTTP status and title used in problem responses."""

    status_code = 500
    title = "An error occurred while processing your request"

    def __init__(self, message: str, extensions: dict[str, object] | None = None):
        super().__init__(message)
        self.message = message
        self.extensions = extensions or {}


class BadRequestError(OmadTrackerError):
    """Request rejected because of the data it carries."""

    status_code = 400
    title = "Bad Request"


class InsufficientDataError(BadRequestError):
    """Not enough logged data in range to compute the requested analytics."""


class WeightChangeConfirmationRequiredError(BadRequestError):
    """Weight jump over the threshold that the caller has not confirmed."""

    def __init__(self, message: str):
        super().__init__(message, extensions={"requiresConfirmation": True})


class UnauthorizedError(OmadTrackerError):
    """No valid session for a route that needs one."""

    status_code = 401
    title = "Unauthorized"


class NotFoundError(OmadTrackerError):
    """Requested resource does not exist."""

    status_code = 404
    title = "Resource Not Found"


class ProfileNotFoundError(NotFoundError):
    """The user has not completed profile setup."""


class ConflictError(OmadTrackerError):
    """Write rejected because of the current state of the resource."""

    status_code = 409
    title = "Conflict"


class ProfileAlreadyExistsError(ConflictError):
    """A profile already exists for the user."""


class ConcurrencyConflictError(ConflictError):
    """Stored record changed since it was read."""


class SignInUnavailableError(OmadTrackerError):
    """Google sign-in credentials are not configured."""

    status_code = 503
    title = "Service Unavailable"


class DataIntegrityError(OmadTrackerError):
    """Stored data violates an invariant, such as two logs for one day."""
