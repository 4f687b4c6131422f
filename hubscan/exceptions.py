"""Custom exceptions for hubscan."""


class HubScanError(Exception):
    """Base exception for all hubscan errors."""


class ArtifactLoadError(HubScanError):
    """Raised when a file cannot be loaded as a managed module."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to load '{path}' as a managed module: {reason}")


class HubError(HubScanError):
    """Base exception for failures talking to the Hub."""

    def __init__(self, operation: str, reason: str, status_code: int | None = None):
        self.operation = operation
        self.reason = reason
        self.status_code = status_code
        detail = f"{reason} ({status_code})" if status_code is not None else reason
        super().__init__(f"{operation} failed: {detail}")


class AuthenticationError(HubError):
    """Raised when the Hub rejects the credential POST."""


class UploadError(HubError):
    """Raised when the Hub rejects the scan upload."""


class HubConnectionError(HubError):
    """Raised on transport failures (DNS, refused connection, timeout)."""
