"""
Utility modules for the GalactaVista client.
"""

from .auth import (
    TokenHolder,
    TokenPayload,
    build_auth_header,
    decode_token_claims,
    is_token_expired
)

from .exceptions import (
    ClientError,
    NetworkError,
    AuthenticationError,
    HttpError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    ServerError,
    ProtocolError,
    ValidationError,
    StorageError,
    http_error_for_status
)

from .query import build_query_params, format_query_value

# file_utils pulls in Pillow and is imported directly where needed

__all__ = [
    # Auth utilities
    "TokenHolder",
    "TokenPayload",
    "build_auth_header",
    "decode_token_claims",
    "is_token_expired",

    # Exceptions
    "ClientError",
    "NetworkError",
    "AuthenticationError",
    "HttpError",
    "BadRequestError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ServerError",
    "ProtocolError",
    "ValidationError",
    "StorageError",
    "http_error_for_status",

    # Query helpers
    "build_query_params",
    "format_query_value",
]
