"""
Domain enumerations shared by schemas and services.

The session value type lives in ``galactavista.models.session`` and is imported
from there directly, since it depends on the schemas.
"""

from .user import UserRole
from .property import PropertyType, PropertyStatus

__all__ = [
    "UserRole",
    "PropertyType",
    "PropertyStatus",
]
