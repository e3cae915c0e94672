"""Error taxonomy shared by the gateway, services and console routes."""


class ConsoleError(Exception):
    """Base error carrying a user-presentable message."""

    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class AuthError(ConsoleError):
    """Credentials were rejected."""

    default_message = "Invalid credentials"


class SessionExpiredError(AuthError):
    """The active credential was rejected mid-session."""

    default_message = "Your session has expired. Please sign in again."


class ValidationError(ConsoleError):
    """The backend rejected submitted input."""

    default_message = "The submitted data is invalid"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        field_errors: dict[str, list[str]] | None = None,
    ):
        super().__init__(message, status_code)
        self.field_errors = field_errors or {}


class NotFoundError(ConsoleError):
    """The requested record does not exist."""

    default_message = "Not found"


class NetworkError(ConsoleError):
    """The backend could not be reached."""

    default_message = "Could not reach the server"


class ApiError(ConsoleError):
    """Any other non-successful backend response."""


class OperationInProgressError(ConsoleError):
    """An identical operation is still waiting on the backend."""

    default_message = "Please wait for the current operation to finish"


class TransitionUnavailableError(ConsoleError):
    """The requested status action is not offered from the current status."""

    default_message = "This action is not available"


class ConfirmationNotFoundError(ConsoleError):
    """No pending confirmation matches the given id."""

    default_message = "This confirmation has expired"


class NavigationInterrupted(ConsoleError):
    """A hard redirect evicted the view that was still rendering."""

    default_message = "Redirected"

    def __init__(self, location: str):
        super().__init__(f"Redirected to {location}")
        self.location = location
