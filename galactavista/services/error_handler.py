"""
Error handling service for turning client exceptions into user-facing messages.
"""

from typing import Optional
import logging

from galactavista.utils.exceptions import (
    AuthenticationError,
    ClientError,
    HttpError,
    NetworkError,
    ProtocolError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ErrorHandlerService:
    """
    Maps the client exception taxonomy onto messages a UI can show as-is.
    """

    NETWORK_ERROR = "Network error. Please check your connection."
    AUTHENTICATION_FAILED = "Authentication failed. Please login again."
    INVALID_CREDENTIALS = "Invalid email or password."
    SERVER_ERROR = "Server error. Please try again later."
    VALIDATION_ERROR = "Please check your input and try again."

    @staticmethod
    def user_message(exc: BaseException, fallback: Optional[str] = None) -> str:
        """
        Build a human-readable message for an exception.

        Args:
            exc: Exception raised by a client operation
            fallback: Message used when the exception carries none

        Returns:
            Message suitable for display
        """
        if isinstance(exc, NetworkError):
            return ErrorHandlerService.NETWORK_ERROR

        if isinstance(exc, AuthenticationError):
            return ErrorHandlerService.AUTHENTICATION_FAILED

        if isinstance(exc, HttpError):
            if exc.status_code >= 500:
                return ErrorHandlerService.SERVER_ERROR
            return exc.detail

        if isinstance(exc, ValidationError):
            return exc.detail or ErrorHandlerService.VALIDATION_ERROR

        if isinstance(exc, ProtocolError):
            logger.warning(f"Protocol error: {exc.detail}")
            return fallback or ErrorHandlerService.SERVER_ERROR

        if isinstance(exc, ClientError):
            return exc.detail

        message = str(exc)
        return message or fallback or "Unexpected error"

    @staticmethod
    def login_message(exc: BaseException) -> str:
        """Message for a failed login, where a 401 means bad credentials."""
        if isinstance(exc, AuthenticationError):
            return ErrorHandlerService.INVALID_CREDENTIALS
        return ErrorHandlerService.user_message(exc, "Login failed")
