"""
Subscription Plan Request Schemas
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.subscription import SubscriptionTier
from app.schemas.updates import PartialUpdateRequest


class PlanCreateRequest(BaseModel):
    """Create subscription plan request."""

    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    tier: SubscriptionTier
    price: float = Field(default=0.0, ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    interval: str = Field(default="month", pattern="^(month|year)$")
    daily_limit: Optional[int] = Field(default=None, ge=1)
    features: List[str] = Field(default_factory=list)
    active: bool = True


class PlanUpdateRequest(PartialUpdateRequest):
    """Partial plan update."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    tier: Optional[SubscriptionTier] = None
    price: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    interval: Optional[str] = Field(default=None, pattern="^(month|year)$")
    daily_limit: Optional[int] = Field(default=None, ge=1)
    features: Optional[List[str]] = None
    active: Optional[bool] = None
