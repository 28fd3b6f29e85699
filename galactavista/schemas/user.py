"""
Pydantic schemas for user requests and responses.
Handles registration, profile updates and the cached user record.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from galactavista.models.user import UserRole


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class UserResponse(BaseModel):
    """User record as returned by the server (no sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(
        ...,
        description="User's unique identifier",
        examples=[1]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address, used as login key",
        examples=["agent@example.com"]
    )

    first_name: str = Field(..., description="User's first name")
    last_name: str = Field(..., description="User's last name")

    role: UserRole = Field(
        ...,
        description="User's role",
        examples=["agent"]
    )

    phone: Optional[str] = Field(None, description="Phone number")
    avatar: Optional[str] = Field(None, description="Avatar URL")

    is_active: bool = Field(
        True,
        description="Whether the user account is active"
    )

    created_at: Optional[datetime] = Field(None, description="Account creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @field_validator("phone", "avatar", mode="before")
    @classmethod
    def empty_as_missing(cls, v):
        """The server sends empty strings for unset optional fields."""
        return _blank_to_none(v)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class UserRegisterRequest(BaseModel):
    """Schema for registering a new user."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["buyer@example.com"]
    )

    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="User's password (minimum 8 characters)"
    )

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    role: UserRole = Field(
        UserRole.BUYER,
        description="Requested role (default: buyer)"
    )

    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name parts."""
        if not v or not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("phone", mode="before")
    @classmethod
    def empty_phone(cls, v):
        return _blank_to_none(v)


class UserUpdate(BaseModel):
    """Partial profile update. Only fields that are set are sent."""

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    avatar: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        if v is not None:
            return v.lower().strip()
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v):
        if v is not None:
            if not v.strip():
                raise ValueError("Name cannot be empty")
            return v.strip()
        return v
