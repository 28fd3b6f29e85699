"""
Pydantic schemas for property requests and responses.
Handles property CRUD payloads, search filters and paginated lists.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from galactavista.models.property import PropertyType, PropertyStatus
from galactavista.schemas.common import PaginationInfo
from galactavista.schemas.user import UserResponse

MAX_PRICE = 999999999.99


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Property listing title",
        examples=["Lakefront cabin with dock"]
    )

    description: Optional[str] = Field(
        None,
        max_length=5000,
        description="Detailed property description"
    )

    price: float = Field(
        ...,
        gt=0,
        description="Listing price",
        examples=[350000]
    )

    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)

    property_type: PropertyType = Field(
        ...,
        description="Property type",
        examples=["house"]
    )

    bedrooms: Optional[int] = Field(None, ge=0, description="Number of bedrooms")
    bathrooms: Optional[float] = Field(None, ge=0, description="Number of bathrooms")
    square_feet: Optional[int] = Field(None, ge=0, description="Living area in square feet")
    year_built: Optional[int] = Field(None, ge=0, description="Construction year")
    lot_size: Optional[float] = Field(None, ge=0, description="Lot size")

    features: List[str] = Field(default_factory=list, description="Free-text features, in order")
    images: List[str] = Field(default_factory=list, description="Image URLs, in order")

    @field_validator("title", "address", "city", "state", "zip_code")
    @classmethod
    def validate_required_text(cls, v):
        """Validate and clean required text fields."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        """Validate price value."""
        if v > MAX_PRICE:
            raise ValueError("Price exceeds maximum allowed value")
        return v

    @field_validator("features", "images", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        """The server sends null for empty JSON arrays."""
        return [] if v is None else v


class PropertyCreate(PropertyBase):
    """Schema for creating a new property. The server assigns the id."""

    country: str = Field("US", min_length=1, max_length=100)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "title": "Lakefront cabin with dock",
            "description": "Two-bedroom cabin on a quiet lake.",
            "price": 350000,
            "address": "12 Shore Rd",
            "city": "Lake Placid",
            "state": "NY",
            "zip_code": "12946",
            "country": "US",
            "property_type": "house",
            "bedrooms": 2,
            "bathrooms": 1.5,
            "features": ["dock", "fireplace"]
        }
    })


class PropertyUpdate(BaseModel):
    """Schema for a partial property update. Only fields that are set are sent."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    price: Optional[float] = Field(None, gt=0)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    zip_code: Optional[str] = Field(None, min_length=1, max_length=20)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    property_type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=0)
    lot_size: Optional[float] = Field(None, ge=0)
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None
    vr_model_url: Optional[str] = None

    @field_validator("title", "address", "city", "state", "zip_code", "country")
    @classmethod
    def validate_text(cls, v):
        """Validate and clean text fields."""
        if v is not None:
            if not v.strip():
                raise ValueError("Field cannot be empty")
            return v.strip()
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v > MAX_PRICE:
            raise ValueError("Price exceeds maximum allowed value")
        return v


class PropertyResponse(PropertyBase):
    """Property listing as returned by the server."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Server-assigned identifier")
    country: str = Field("US")
    status: PropertyStatus = Field(PropertyStatus.AVAILABLE)
    vr_model_url: Optional[str] = Field(None, description="VR model URL")
    agent: Optional[UserResponse] = Field(None, description="Listing agent")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("description", "vr_model_url", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PropertySearchFilters(BaseModel):
    """Search filters. Only the fields that are set become query parameters."""

    page: Optional[int] = Field(None, ge=1, description="Page number (starts from 1)")
    page_size: Optional[int] = Field(None, ge=1, le=100, description="Items per page (max 100)")
    query: Optional[str] = Field(None, min_length=1, max_length=255, description="Free-text search")
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    property_type: Optional[PropertyType] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    status: Optional[PropertyStatus] = None

    @model_validator(mode="after")
    def validate_ranges(self):
        """Validate the price range."""
        if self.min_price is not None and self.max_price is not None:
            if self.min_price > self.max_price:
                raise ValueError("Minimum price cannot be greater than maximum price")
        return self


class AgentPropertyFilters(BaseModel):
    """Pagination parameters for the agent-scoped listing endpoint."""

    page: Optional[int] = Field(None, ge=1)
    page_size: Optional[int] = Field(None, ge=1, le=100)


class PaginatedProperties(BaseModel):
    """Paginated property list as returned by the list endpoints."""

    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    data: List[PropertyResponse] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v

    @property
    def pagination(self) -> PaginationInfo:
        return PaginationInfo(
            page=self.page,
            page_size=self.page_size,
            total=self.total,
            total_pages=self.total_pages
        )

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1
