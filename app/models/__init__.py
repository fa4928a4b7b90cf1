"""
Windspire Models
Document representations and data models.
"""

from app.models.user import UserModel, UserPreferences, UserRole, STAFF_ROLES, public_user
from app.models.content import (
    ContentModel,
    ContentType,
    ContentStatus,
    ContentPool,
    Difficulty,
    derive_pool,
)
from app.models.category import CategoryModel, slugify
from app.models.subscription import SubscriptionTier, SubscriptionPlan, daily_limit_for
from app.models.prompt_template import PromptTemplateModel

__all__ = [
    "UserModel",
    "UserPreferences",
    "UserRole",
    "STAFF_ROLES",
    "public_user",
    "ContentModel",
    "ContentType",
    "ContentStatus",
    "ContentPool",
    "Difficulty",
    "derive_pool",
    "CategoryModel",
    "slugify",
    "SubscriptionTier",
    "SubscriptionPlan",
    "daily_limit_for",
    "PromptTemplateModel",
]
