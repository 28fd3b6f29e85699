"""
Pydantic schemas for login requests and responses.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from galactavista.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Schema for user login request."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["agent@example.com"]
    )

    password: str = Field(
        ...,
        min_length=1,
        description="User's password"
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class LoginResponse(BaseModel):
    """Token and user issued by a successful login."""

    token: str = Field(..., min_length=1, description="Bearer token")
    user: UserResponse
