"""
Daily content selection.

Today's published items come first; the remainder of the user's daily
allowance is filled from the rating pools, least used content first.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from app.crud.category import CategoryCRUD
from app.crud.content import ContentCRUD
from app.models.content import DAILY_POOL_PRIORITY, ContentStatus
from app.models.subscription import SubscriptionTier, daily_limit_for
from app.utils.dates import day_bounds, utcnow
from app.utils.exceptions import NotFoundError
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _user_tier(user: Dict[str, Any]) -> str:
    return (user.get("subscription") or {}).get("tier") or SubscriptionTier.FREE.value


def select_daily_content(
    db: Any,
    user: Dict[str, Any],
    category_slug: Optional[str] = None,
    content_type: Optional[str] = "hack",
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Build the daily feed for ``user``.

    Args:
        db: Store client
        user: Current user document
        category_slug: Restrict to an active category
        content_type: Restrict to a content type
        now: Reference time, defaults to the current UTC time

    Returns:
        Content documents, today's items first

    Raises:
        NotFoundError: If ``category_slug`` does not name an active category
    """
    now = now or utcnow()
    content_crud = ContentCRUD(db)

    filters = [("status", "==", ContentStatus.PUBLISHED.value)]
    if category_slug:
        category = CategoryCRUD(db).get_by_slug(category_slug, active_only=True)
        if category is None:
            raise NotFoundError("Category not found", details={"slug": category_slug})
        filters.append(("category", "==", category["id"]))
    if content_type:
        filters.append(("content_type", "==", content_type))

    tier = _user_tier(user)
    if tier == SubscriptionTier.FREE.value:
        filters.append(("premium", "==", False))

    limit = daily_limit_for(tier)
    start, end = day_bounds(now)
    selected = content_crud.get_published_between(start, end, filters)[:limit]

    if len(selected) < limit:
        completed = (user.get("progress") or {}).get("completed_content") or []
        excluded = set(completed) | {item["id"] for item in selected}
        fresh: List[Dict[str, Any]] = []

        for pool in DAILY_POOL_PRIORITY:
            remaining = limit - len(selected) - len(fresh)
            if remaining <= 0:
                break
            pool_items = content_crud.get_least_used(
                filters + [("pool", "==", pool.value)],
                exclude_ids=excluded,
                limit=remaining,
            )
            excluded.update(item["id"] for item in pool_items)
            fresh.extend(pool_items)

        content_crud.mark_used([item["id"] for item in fresh], now)
        for item in fresh:
            item["usage_count"] = item.get("usage_count", 0) + 1
            item["last_used_date"] = now
        selected.extend(fresh)

    logger.info("Daily content selected for user=%s tier=%s count=%d limit=%d",
                user.get("id"), tier, len(selected), limit)
    return selected
