"""
Authentication Request Schemas
"""

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Registration request."""

    name: str = Field(min_length=1, max_length=100, description="Display name")
    email: EmailStr
    password: str = Field(min_length=8, max_length=128, description="Password (minimum 8 characters)")


class LoginRequest(BaseModel):
    """Login request."""

    email: EmailStr
    password: str = Field(min_length=1)


class RefreshTokenRequest(BaseModel):
    """Refresh token request."""

    refresh_token: str = Field(min_length=1)
