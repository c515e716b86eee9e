"""Error kinds surfaced by the client. None of them is fatal to the process."""


class HotTakeError(Exception):
    """Base class for all client errors."""


class ValidationError(HotTakeError):
    """Raised for bad local input before any state mutation or network call."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NetworkError(HotTakeError):
    """Raised when a remote call fails or returns a non-success status."""

    def __init__(self, operation: str, message: str, status_code: int | None = None) -> None:
        self.operation = operation
        self.status_code = status_code
        super().__init__(f"[{operation}] {message}")


class NotFoundError(NetworkError):
    """Raised when the remote API reports a missing entity."""


class MalformedProfileError(HotTakeError):
    """Persisted profile payload could not be decoded. Never escapes the store."""


class WorkflowError(HotTakeError):
    """Raised when a session workflow action is not valid in the current phase."""
