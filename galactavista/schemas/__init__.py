"""
Pydantic schemas for request/response validation.
"""

# Envelope and shared schemas
from .common import (
    APIEnvelope,
    PaginationInfo,
    HealthStatus
)

# User schemas
from .user import (
    UserResponse,
    UserRegisterRequest,
    UserUpdate
)

# Authentication schemas
from .auth import (
    LoginRequest,
    LoginResponse
)

# Property schemas
from .property import (
    PropertyBase,
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertySearchFilters,
    AgentPropertyFilters,
    PaginatedProperties
)

# Media schemas
from .media import MediaFile

__all__ = [
    # Shared
    "APIEnvelope",
    "PaginationInfo",
    "HealthStatus",

    # User
    "UserResponse",
    "UserRegisterRequest",
    "UserUpdate",

    # Authentication
    "LoginRequest",
    "LoginResponse",

    # Property
    "PropertyBase",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertySearchFilters",
    "AgentPropertyFilters",
    "PaginatedProperties",

    # Media
    "MediaFile"
]
