"""Content browsing, rating, management and generation endpoints."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.crud.category import CategoryCRUD
from app.crud.content import ContentCRUD
from app.crud.user import UserCRUD
from app.dependencies import (
    check_rate_limit,
    get_content_generator,
    get_db_client,
    is_staff,
    require_staff,
)
from app.models.content import ContentModel, ContentPool, ContentStatus, derive_pool
from app.models.subscription import SubscriptionTier
from app.schemas.content_schema import (
    ContentCreateRequest,
    ContentUpdateRequest,
    GenerateMultipleRequest,
    GenerateRequest,
    RateContentRequest,
    RewriteRequest,
)
from app.schemas.responses import list_response, success_response
from app.services.ai.content_generator import ContentGenerator
from app.services.content.daily import select_daily_content
from app.utils.dates import utcnow
from app.utils.exceptions import (
    AuthorizationError,
    ContentGenerationError,
    NotFoundError,
    ValidationError,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

RATINGS = ("like", "dislike")


def populate_content(db_client, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Attach category and author summaries to content documents."""
    categories = CategoryCRUD(db_client).as_lookup()
    authors = UserCRUD(db_client).get_authors([item.get("author_id") for item in items])
    return ContentCRUD(db_client).populate(items, categories, authors)


def get_content_or_404(content_crud: ContentCRUD, content_id: str) -> Dict[str, Any]:
    content = content_crud.get_by_id(content_id)
    if content is None:
        raise NotFoundError("Content not found", details={"id": content_id})
    return content


def _is_free_tier(user: Dict[str, Any]) -> bool:
    tier = (user.get("subscription") or {}).get("tier") or SubscriptionTier.FREE.value
    return tier == SubscriptionTier.FREE.value


async def run_batch_generation(
    generator: ContentGenerator,
    category_ids: List[str],
    count: int,
    user: Dict[str, Any],
) -> Dict[str, Any]:
    """Shared body of the multi-category generation endpoints."""
    if not category_ids:
        raise ValidationError("At least one category ID is required")

    generated, failed = await generator.generate_for_categories(category_ids, user, count=count)

    if not generated and failed:
        raise ContentGenerationError(
            "Failed to generate content for any category: " + ", ".join(f["error"] for f in failed),
            details={"failed_categories": failed},
        )

    extra = {"failed_categories": failed} if failed else {}
    return list_response(generated, "content", "Content generated successfully", **extra)


@router.get("/")
async def list_content(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[ContentStatus] = Query(None, alias="status"),
    category: Optional[str] = None,
    content_type: Optional[str] = None,
    difficulty: Optional[str] = None,
    search: Optional[str] = None,
    pool: Optional[ContentPool] = None,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """
    List content, newest first.

    Non-staff users only ever see published content; staff may filter on status.
    """
    filters = []
    if is_staff(current_user):
        if status_filter:
            filters.append(("status", "==", status_filter.value))
    else:
        filters.append(("status", "==", ContentStatus.PUBLISHED.value))

    for field, value in (
        ("category", category),
        ("content_type", content_type),
        ("difficulty", difficulty),
        ("pool", pool.value if pool else None),
    ):
        if value:
            filters.append((field, "==", value))

    result = ContentCRUD(db_client).get_content_list(filters, search=search, page=page, page_size=limit)
    pagination = {k: result[k] for k in ("total", "page", "pages", "limit")}

    return list_response(
        populate_content(db_client, result["items"]),
        "content",
        "Content retrieved successfully",
        pagination=pagination,
    )


@router.get("/daily")
async def get_daily_content(
    category: Optional[str] = Query(None, description="Category slug"),
    content_type: Optional[str] = Query("hack"),
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Today's feed for the current user."""
    items = select_daily_content(db_client, current_user, category_slug=category, content_type=content_type)
    return list_response(populate_content(db_client, items), "content", "Daily content retrieved successfully")


@router.get("/pool")
async def get_content_by_pool(
    pool: ContentPool = ContentPool.REGULAR,
    category: Optional[str] = None,
    content_type: Optional[str] = None,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Newest content of a pool, at most 100 items."""
    filters = [("pool", "==", pool.value)]
    if category:
        filters.append(("category", "==", category))
    if content_type:
        filters.append(("content_type", "==", content_type))

    items = ContentCRUD(db_client).get_by_pool(filters, limit=100)
    return list_response(populate_content(db_client, items), "content", "Pool content retrieved successfully")


@router.get("/user/saved")
async def get_saved_content(
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """The current user's saved content, most recently updated first."""
    saved_ids = (current_user.get("progress") or {}).get("saved_content") or []
    items = ContentCRUD(db_client).get_by_ids_sorted(saved_ids)
    return list_response(populate_content(db_client, items), "content", "Saved content retrieved successfully")


@router.post("/generate-multiple", status_code=status.HTTP_201_CREATED)
async def generate_multiple_content(
    request: GenerateMultipleRequest,
    current_user: dict = Depends(require_staff),
    generator: ContentGenerator = Depends(get_content_generator),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Generate several items for one category; they are stored pending moderation."""
    if not request.category_id:
        raise ValidationError("Category ID is required")

    category = CategoryCRUD(db_client).get_by_id(request.category_id)
    if category is None:
        raise NotFoundError("Category not found", details={"id": request.category_id})

    items = await generator.generate_multiple_content(
        category,
        current_user,
        content_type=request.content_type,
        count=request.count,
        difficulty=request.difficulty,
        model=request.model,
    )
    return list_response(items, "content", "Content generated successfully")


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate_content(
    request: GenerateRequest,
    current_user: dict = Depends(require_staff),
    generator: ContentGenerator = Depends(get_content_generator),
) -> Dict[str, Any]:
    """Generate content for several categories, each with its own content type."""
    return await run_batch_generation(generator, request.category_ids, request.count, current_user)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_content(
    request: ContentCreateRequest,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Create a content item by hand."""
    if CategoryCRUD(db_client).get_by_id(request.category) is None:
        raise NotFoundError("Category not found", details={"id": request.category})

    content = ContentModel(**request.model_dump(), author_id=current_user["id"])
    if content.status == ContentStatus.PUBLISHED.value and content.publish_date is None:
        content.publish_date = utcnow()

    created = ContentCRUD(db_client).create_content(content)
    logger.info(f"Content created: {created['id']} by {current_user['id']}")
    return success_response({"content": created}, "Content created successfully")


@router.get("/{content_id}")
async def get_content(
    content_id: str,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """
    Read a content item.

    Counts a view on the content and records the read in the user's stats
    and per-category progress.
    """
    content_crud = ContentCRUD(db_client)
    content = get_content_or_404(content_crud, content_id)

    if content.get("premium") and _is_free_tier(current_user):
        raise AuthorizationError("Premium content requires subscription")

    stats = content_crud.increment_stat(content_id, "views")
    content["stats"] = stats

    now = utcnow()
    user_stats = dict(current_user.get("stats") or {})
    progress = dict(current_user.get("progress") or {})
    user_stats["total_content_viewed"] = user_stats.get("total_content_viewed", 0) + 1

    completed = list(progress.get("completed_content") or [])
    if content_id not in completed:
        completed.append(content_id)
    progress["completed_content"] = completed

    category_progress = list(progress.get("category_progress") or [])
    entry = next((cp for cp in category_progress if cp.get("category") == content.get("category")), None)
    if entry is not None:
        entry["content_viewed"] = entry.get("content_viewed", 0) + 1
        entry["last_viewed_at"] = now
    else:
        category_progress.append({
            "category": content.get("category"),
            "content_viewed": 1,
            "last_viewed_at": now,
        })
        user_stats["categories_explored"] = user_stats.get("categories_explored", 0) + 1
    progress["category_progress"] = category_progress

    UserCRUD(db_client).update(current_user["id"], {"stats": user_stats, "progress": progress})

    return success_response({"content": populate_content(db_client, [content])[0]}, "Content retrieved successfully")


@router.post("/{content_id}/rate")
async def rate_content(
    content_id: str,
    request: RateContentRequest,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Like or dislike a content item and recompute its pool."""
    if request.rating not in RATINGS:
        raise ValidationError("Rating must be like or dislike")

    content_crud = ContentCRUD(db_client)
    content = get_content_or_404(content_crud, content_id)

    stats = dict(content.get("stats") or {})
    user_stats = dict(current_user.get("stats") or {})
    if request.rating == "like":
        stats["likes"] = stats.get("likes", 0) + 1
        user_stats["total_likes"] = user_stats.get("total_likes", 0) + 1
    else:
        stats["dislikes"] = stats.get("dislikes", 0) + 1
        user_stats["total_dislikes"] = user_stats.get("total_dislikes", 0) + 1

    pool = derive_pool(stats.get("likes", 0), stats.get("dislikes", 0), content.get("pool")).value

    content_crud.update(content_id, {"stats": stats, "pool": pool})
    UserCRUD(db_client).update(current_user["id"], {"stats": user_stats})

    return success_response(
        {
            "rating": request.rating,
            "likes": stats.get("likes", 0),
            "dislikes": stats.get("dislikes", 0),
            "pool": pool,
        },
        "Rating recorded",
    )


@router.post("/{content_id}/save")
async def save_content(
    content_id: str,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Add a content item to the user's library."""
    content_crud = ContentCRUD(db_client)
    get_content_or_404(content_crud, content_id)

    progress = dict(current_user.get("progress") or {})
    saved = list(progress.get("saved_content") or [])
    if content_id in saved:
        raise ValidationError("Content already saved")

    saved.append(content_id)
    progress["saved_content"] = saved
    UserCRUD(db_client).update(current_user["id"], {"progress": progress})
    content_crud.increment_stat(content_id, "saves")

    return success_response(None, "Content saved successfully")


@router.delete("/{content_id}/save")
async def unsave_content(
    content_id: str,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Remove a content item from the user's library."""
    progress = dict(current_user.get("progress") or {})
    progress["saved_content"] = [i for i in progress.get("saved_content") or [] if i != content_id]
    UserCRUD(db_client).update(current_user["id"], {"progress": progress})
    return success_response(None, "Content removed from saved items")


@router.post("/{content_id}/share")
async def share_content(
    content_id: str,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Track a share."""
    stats = ContentCRUD(db_client).increment_stat(content_id, "shares")
    if stats is None:
        raise NotFoundError("Content not found", details={"id": content_id})
    return success_response({"shares": stats["shares"]}, "Share count updated")


@router.patch("/{content_id}")
async def update_content(
    content_id: str,
    request: ContentUpdateRequest,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Update a content item. Rating counters cannot be changed here."""
    content_crud = ContentCRUD(db_client)
    content = get_content_or_404(content_crud, content_id)

    updates = request.changes()

    if "category" in updates and CategoryCRUD(db_client).get_by_id(updates["category"]) is None:
        raise NotFoundError("Category not found", details={"id": updates["category"]})

    new_status = updates.get("status")
    if new_status == ContentStatus.PUBLISHED.value and not updates.get("publish_date") and not content.get("publish_date"):
        updates["publish_date"] = utcnow()

    updated = content_crud.update(content_id, updates)
    logger.info(f"Content {content_id} updated by {current_user['id']}: {sorted(updates)}")
    return success_response({"content": updated}, "Content updated successfully")


@router.delete("/{content_id}")
async def delete_content(
    content_id: str,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Delete a content item."""
    if not ContentCRUD(db_client).delete(content_id):
        raise NotFoundError("Content not found", details={"id": content_id})
    logger.info(f"Content {content_id} deleted by {current_user['id']}")
    return success_response(None, "Content deleted successfully")


@router.post("/{content_id}/recycle")
async def recycle_content(
    content_id: str,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Republish a content item for today."""
    content_crud = ContentCRUD(db_client)
    content = get_content_or_404(content_crud, content_id)

    updated = content_crud.update(content_id, {
        "publish_date": utcnow(),
        "status": ContentStatus.PUBLISHED.value,
        "recycle_count": content.get("recycle_count", 0) + 1,
    })
    return success_response({"content": updated}, "Content recycled for today")


@router.post("/{content_id}/rewrite")
async def rewrite_content(
    content_id: str,
    request: RewriteRequest,
    current_user: dict = Depends(require_staff),
    generator: ContentGenerator = Depends(get_content_generator),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Rewrite a content item with the AI so it reads as new."""
    content = get_content_or_404(ContentCRUD(db_client), content_id)
    updated = await generator.rewrite_content(content, request.model)
    return success_response({"content": updated}, "Content rewritten successfully")
