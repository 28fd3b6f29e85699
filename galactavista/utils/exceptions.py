"""
Custom exception classes for the GalactaVista client.
Every public operation either returns its typed result or raises one of these.
"""

from typing import Any, Dict, List, Optional


class ClientError(Exception):
    """Base client exception class."""

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code

    def __str__(self) -> str:
        return self.detail


class NetworkError(ClientError):
    """The request could not reach the server (offline, DNS, timeout)."""

    def __init__(self, detail: str = "Network error", cause: Optional[Exception] = None):
        super().__init__(detail, error_code="NETWORK_ERROR")
        self.cause = cause


class AuthenticationError(ClientError):
    """Server responded 401, or an operation needs an authenticated session."""

    status_code = 401

    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(detail, error_code="UNAUTHORIZED")


class HttpError(ClientError):
    """Any non-2xx response other than 401."""

    def __init__(self, status_code: int, detail: Optional[str] = None, error_code: Optional[str] = None):
        super().__init__(
            detail or f"HTTP error! status: {status_code}",
            error_code=error_code or "HTTP_ERROR"
        )
        self.status_code = status_code


class BadRequestError(HttpError):
    """Bad request exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(400, detail, error_code="BAD_REQUEST")


class ForbiddenError(HttpError):
    """Access forbidden exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(403, detail, error_code="FORBIDDEN")


class NotFoundError(HttpError):
    """Resource not found exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(404, detail, error_code="NOT_FOUND")


class ConflictError(HttpError):
    """Resource conflict exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(409, detail, error_code="CONFLICT")


class ServerError(HttpError):
    """5xx response."""

    def __init__(self, status_code: int = 500, detail: Optional[str] = None):
        super().__init__(status_code, detail, error_code="SERVER_ERROR")


class ProtocolError(ClientError):
    """A 2xx response that breaks the envelope contract (missing or malformed data)."""

    def __init__(self, detail: str = "Malformed server response", payload: Any = None):
        super().__init__(detail, error_code="PROTOCOL_ERROR")
        self.payload = payload


class ValidationError(ClientError):
    """Client-side validation failure, raised before any request is sent."""

    def __init__(
        self,
        detail: str,
        field_errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(detail, error_code="VALIDATION_ERROR")
        self.field_errors = field_errors or []


_STATUS_ERRORS = {
    400: BadRequestError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def http_error_for_status(status_code: int, detail: Optional[str] = None) -> HttpError:
    """
    Build the most specific HttpError for a status code.

    Args:
        status_code: Non-2xx, non-401 HTTP status
        detail: Server-provided message, if any

    Returns:
        HttpError instance
    """
    if status_code in _STATUS_ERRORS:
        return _STATUS_ERRORS[status_code](detail)
    if status_code >= 500:
        return ServerError(status_code, detail)
    return HttpError(status_code, detail)


class StorageError(ClientError):
    """The persisted credential store could not be read or written."""

    def __init__(self, detail: str = "Credential store error"):
        super().__init__(detail, error_code="STORAGE_ERROR")
