"""
User Model
Represents user accounts, their subscription, preferences and reading progress.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.subscription import SubscriptionTier
from app.utils.dates import utcnow


class UserRole(str, Enum):
    """Account role enumeration."""
    USER = "user"
    CONTENT_CREATOR = "content-creator"
    MODERATOR = "moderator"
    ADMIN = "admin"


STAFF_ROLES = (UserRole.ADMIN.value, UserRole.CONTENT_CREATOR.value, UserRole.MODERATOR.value)


class DevicePlatform(str, Enum):
    IOS = "ios"
    ANDROID = "android"
    WEB = "web"


class Subscription(BaseModel):
    """Subscription state embedded in the user document."""

    model_config = ConfigDict(use_enum_values=True)

    tier: str = Field(default="free", description="Subscription tier (free, basic, premium, enterprise)")
    status: str = Field(default="none", description="Subscription status (none, active, cancelled, expired)")
    plan_id: Optional[str] = None
    expires_at: Optional[datetime] = None

    @field_validator("tier")
    @classmethod
    def validate_tier(cls, v: str) -> str:
        """Validate subscription tier."""
        return SubscriptionTier(v.lower()).value

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in ("none", "active", "cancelled", "expired"):
            raise ValueError("Invalid subscription status")
        return v


class NotificationPreferences(BaseModel):
    email: bool = True
    push: bool = True


class ContentPreferences(BaseModel):
    categories: List[str] = Field(default_factory=list)
    difficulty: Optional[str] = None


class UserPreferences(BaseModel):
    """User preference settings."""

    theme: str = Field(default="system", description="UI theme (light, dark, system)")
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)
    content_preferences: ContentPreferences = Field(default_factory=ContentPreferences)


class UserStats(BaseModel):
    total_content_viewed: int = 0
    total_likes: int = 0
    total_dislikes: int = 0
    categories_explored: int = 0


class CategoryProgress(BaseModel):
    category: str
    content_viewed: int = 0
    last_viewed_at: Optional[datetime] = None


class UserProgress(BaseModel):
    completed_content: List[str] = Field(default_factory=list)
    saved_content: List[str] = Field(default_factory=list)
    category_progress: List[CategoryProgress] = Field(default_factory=list)


class DeviceToken(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    token: str
    platform: DevicePlatform
    last_used: datetime = Field(default_factory=utcnow)


class UserModel(BaseModel):
    """User model representing an account document."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: Optional[str] = Field(default=None, description="Document ID")
    name: str = Field(min_length=1, max_length=100, description="Display name")
    email: str = Field(description="Login email, stored lower-case")
    password: str = Field(default="", description="bcrypt password hash")
    role: UserRole = Field(default=UserRole.USER)
    active: bool = True
    verified: bool = False
    avatar: Optional[str] = None
    subscription: Subscription = Field(default_factory=Subscription)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    stats: UserStats = Field(default_factory=UserStats)
    progress: UserProgress = Field(default_factory=UserProgress)
    device_tokens: List[DeviceToken] = Field(default_factory=list)
    last_login: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def to_dict(self) -> Dict[str, Any]:
        """Convert user to dictionary for storage."""
        data = self.model_dump()
        if data.get("id") is None:
            data.pop("id")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserModel":
        """Create user from a stored dictionary."""
        return cls(**data)


def public_user(data: Dict[str, Any]) -> Dict[str, Any]:
    """Strip secrets from a stored user document before returning it."""
    return {k: v for k, v in data.items() if k != "password"}
