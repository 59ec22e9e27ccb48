"""KbRemote-specific exceptions for error handling."""


class KbRemoteError(Exception):
    """Base exception for all KbRemote operations."""
    pass


class CallerError(KbRemoteError, ValueError):
    """Invalid arguments supplied by the caller (never retried)."""
    pass


class ServiceError(KbRemoteError):
    """Non-success HTTP status from the KbRemote API.

    Attributes:
        status_code: HTTP status code
        message: Error message from response
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, message: str, endpoint: str):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {message}")


class NotFound(ServiceError):
    """Resource does not exist (HTTP 404)."""
    pass


class Forbidden(ServiceError):
    """Credentials lack access to the resource (HTTP 403)."""
    pass


class RateLimited(ServiceError):
    """Still rate-limited (HTTP 429) after every retry was spent."""
    pass


class TransportError(KbRemoteError):
    """Connection, DNS or timeout failure before a response was received."""
    pass


class NormalizationError(KbRemoteError, ValueError):
    """Response body could not be parsed or normalized."""
    pass
