"""
Property enumerations for listing type and listing status.
"""

import enum


class PropertyType(str, enum.Enum):
    """Property type enumeration."""
    HOUSE = "house"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    APARTMENT = "apartment"
    LAND = "land"
    COMMERCIAL = "commercial"


class PropertyStatus(str, enum.Enum):
    """Listing status enumeration."""
    AVAILABLE = "available"
    SOLD = "sold"
    PENDING = "pending"
    RENTED = "rented"
