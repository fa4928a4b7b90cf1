"""
Subscription Plan CRUD Operations
"""

from typing import Any, Dict, List

from app.crud.base import BaseCRUD
from app.models.subscription import SubscriptionPlan


class SubscriptionPlanCRUD(BaseCRUD):
    """CRUD operations for subscription plan documents."""

    @property
    def collection_name(self) -> str:
        return "subscription_plans"

    def create_plan(self, plan: SubscriptionPlan) -> Dict[str, Any]:
        return self.create(plan.to_dict())

    def list_plans(self, active_only: bool = True) -> List[Dict[str, Any]]:
        filters = [("active", "==", True)] if active_only else None
        plans = self.find(filters)
        plans.sort(key=lambda p: p.get("price", 0))
        return plans
