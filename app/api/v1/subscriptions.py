"""Subscription plan endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from app.crud.subscription import SubscriptionPlanCRUD
from app.dependencies import check_rate_limit, get_db_client, require_admin
from app.models.subscription import SubscriptionPlan, daily_limit_for
from app.models.user import UserRole
from app.schemas.responses import list_response, success_response
from app.schemas.subscription_schema import PlanCreateRequest, PlanUpdateRequest
from app.utils.exceptions import NotFoundError
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _is_admin(user: Dict[str, Any]) -> bool:
    return user.get("role") == UserRole.ADMIN.value


@router.get("/plans")
async def list_plans(
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """List plans, cheapest first. Inactive plans are visible to admins only."""
    plans = SubscriptionPlanCRUD(db_client).list_plans(active_only=not _is_admin(current_user))
    return list_response(plans, "plans", "Subscription plans retrieved successfully")


@router.get("/plans/{plan_id}")
async def get_plan(
    plan_id: str,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    plan = SubscriptionPlanCRUD(db_client).get_by_id(plan_id)
    if plan is None or (not plan.get("active", True) and not _is_admin(current_user)):
        raise NotFoundError("Subscription plan not found", details={"id": plan_id})
    return success_response({"plan": plan}, "Subscription plan retrieved successfully")


@router.post("/plans", status_code=status.HTTP_201_CREATED)
async def create_plan(
    request: PlanCreateRequest,
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    plan = SubscriptionPlanCRUD(db_client).create_plan(SubscriptionPlan(**request.model_dump()))
    logger.info(f"Subscription plan created: {plan['name']} ({plan['tier']})")
    return success_response({"plan": plan}, "Subscription plan created successfully")


@router.patch("/plans/{plan_id}")
async def update_plan(
    plan_id: str,
    request: PlanUpdateRequest,
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    updates = request.changes(mode="json")
    if updates.get("tier") and "daily_limit" not in updates:
        updates["daily_limit"] = daily_limit_for(updates["tier"])

    plan = SubscriptionPlanCRUD(db_client).update(plan_id, updates)
    if plan is None:
        raise NotFoundError("Subscription plan not found", details={"id": plan_id})
    return success_response({"plan": plan}, "Subscription plan updated successfully")


@router.delete("/plans/{plan_id}")
async def delete_plan(
    plan_id: str,
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    if not SubscriptionPlanCRUD(db_client).delete(plan_id):
        raise NotFoundError("Subscription plan not found", details={"id": plan_id})
    return success_response(None, "Subscription plan deleted successfully")
