"""
Subscription Models
Defines subscription tiers and plans.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.utils.dates import utcnow


class SubscriptionTier(str, Enum):
    """Subscription tier enumeration."""
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


# Daily feed size per tier
DAILY_CONTENT_LIMITS = {
    SubscriptionTier.FREE.value: 5,
    SubscriptionTier.BASIC.value: 10,
    SubscriptionTier.PREMIUM.value: 20,
    SubscriptionTier.ENTERPRISE.value: 100,
}


def daily_limit_for(tier: Optional[str]) -> int:
    """Daily content limit for a tier; unknown tiers get the free limit."""
    return DAILY_CONTENT_LIMITS.get(tier or "", DAILY_CONTENT_LIMITS[SubscriptionTier.FREE.value])


class SubscriptionPlan(BaseModel):
    """Subscription plan definition managed by admins."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: Optional[str] = None
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    tier: SubscriptionTier = Field(description="Subscription tier")
    price: float = Field(default=0.0, ge=0, description="Price per interval")
    currency: str = Field(default="USD", min_length=3, max_length=3)
    interval: str = Field(default="month", pattern="^(month|year)$")
    daily_limit: Optional[int] = Field(default=None, ge=1, description="Daily content limit")
    features: List[str] = Field(default_factory=list, description="List of enabled features")
    active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert plan to dictionary."""
        data = self.model_dump()
        if data.get("daily_limit") is None:
            data["daily_limit"] = daily_limit_for(data["tier"])
        if data.get("id") is None:
            data.pop("id")
        return data
