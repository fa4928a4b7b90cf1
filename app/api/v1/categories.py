"""Category endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from app.crud.category import CategoryCRUD
from app.crud.content import ContentCRUD
from app.dependencies import check_rate_limit, get_db_client, is_staff, require_staff
from app.models.category import CategoryModel, slugify
from app.models.content import ContentPool
from app.schemas.category_schema import CategoryCreateRequest, CategoryUpdateRequest
from app.schemas.responses import list_response, success_response
from app.utils.exceptions import ConflictError, NotFoundError
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _get_category_or_404(categories: CategoryCRUD, category_id: str) -> Dict[str, Any]:
    category = categories.get_by_id(category_id)
    if category is None:
        raise NotFoundError("Category not found", details={"id": category_id})
    return category


@router.get("/")
async def list_categories(
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """List categories; only active ones for non-staff users."""
    items = CategoryCRUD(db_client).list_categories(active_only=not is_staff(current_user))
    return list_response(items, "categories", "Categories retrieved successfully")


@router.get("/stats/pools")
async def get_pool_stats(
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Content counts per pool for each category."""
    content_crud = ContentCRUD(db_client)
    stats = []
    for category in CategoryCRUD(db_client).list_categories():
        counts = content_crud.count_by("pool", [("category", "==", category["id"])])
        pools = {pool.value: counts.get(pool.value, 0) for pool in ContentPool}
        stats.append({
            "category": {k: category.get(k) for k in ("id", "name", "slug")},
            "pools": pools,
            "total": sum(counts.values()),
        })
    return list_response(stats, "stats", "Pool statistics retrieved successfully")


@router.get("/{category_id}")
async def get_category(
    category_id: str,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    category = _get_category_or_404(CategoryCRUD(db_client), category_id)
    if not category.get("active", True) and not is_staff(current_user):
        raise NotFoundError("Category not found", details={"id": category_id})
    return success_response({"category": category}, "Category retrieved successfully")


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryCreateRequest,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Create a category; the slug is derived from the name when omitted."""
    categories = CategoryCRUD(db_client)
    category = CategoryModel(**request.model_dump())
    if categories.get_by_slug(category.slug):
        raise ConflictError("Category slug already exists", details={"slug": category.slug})

    created = categories.create_category(category)
    logger.info(f"Category created: {created['slug']} by {current_user['id']}")
    return success_response({"category": created}, "Category created successfully")


@router.patch("/{category_id}")
async def update_category(
    category_id: str,
    request: CategoryUpdateRequest,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    categories = CategoryCRUD(db_client)
    _get_category_or_404(categories, category_id)

    updates = request.changes(mode="json")
    if updates.get("slug"):
        updates["slug"] = slugify(updates["slug"])
        existing = categories.get_by_slug(updates["slug"])
        if existing and existing["id"] != category_id:
            raise ConflictError("Category slug already exists", details={"slug": updates["slug"]})

    updated = categories.update(category_id, updates)
    return success_response({"category": updated}, "Category updated successfully")


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Delete a category that no content references."""
    categories = CategoryCRUD(db_client)
    _get_category_or_404(categories, category_id)

    referencing = ContentCRUD(db_client).count([("category", "==", category_id)])
    if referencing:
        raise ConflictError(
            "Category is still used by content",
            details={"id": category_id, "content_count": referencing},
        )

    categories.delete(category_id)
    logger.info(f"Category {category_id} deleted by {current_user['id']}")
    return success_response(None, "Category deleted successfully")


@router.post("/activate-all")
async def activate_all_categories(
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    categories = CategoryCRUD(db_client)
    inactive = categories.find([("active", "==", False)])
    for category in inactive:
        categories.update(category["id"], {"active": True})
    return success_response({"activated_count": len(inactive)}, "All categories activated")
