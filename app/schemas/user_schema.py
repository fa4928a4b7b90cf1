"""
User Request Schemas
API schemas for profile, preference, device and admin user management.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.user import Subscription, UserRole
from app.schemas.updates import PartialUpdateRequest


class UpdateProfileRequest(BaseModel):
    """Update user profile request. Only name and avatar can be changed here."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    avatar: Optional[str] = None


class NotificationPreferencesUpdate(BaseModel):
    email: Optional[bool] = None
    push: Optional[bool] = None


class ContentPreferencesUpdate(BaseModel):
    categories: Optional[List[str]] = None
    difficulty: Optional[str] = None


class UpdatePreferencesRequest(BaseModel):
    """Partial preferences update; omitted fields keep their stored value."""

    theme: Optional[str] = None
    notifications: Optional[NotificationPreferencesUpdate] = None
    content_preferences: Optional[ContentPreferencesUpdate] = None

    @field_validator("theme")
    @classmethod
    def validate_theme(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ("light", "dark", "system"):
            raise ValueError("Theme must be light, dark or system")
        return v


class DeviceTokenRequest(BaseModel):
    """Device registration. Fields are checked by the route so missing values map to 400."""

    token: Optional[str] = None
    platform: Optional[str] = None


class AdminUserUpdateRequest(PartialUpdateRequest):
    """Fields an admin may change on a user account."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    active: Optional[bool] = None
    verified: Optional[bool] = None
    subscription: Optional[Subscription] = None
