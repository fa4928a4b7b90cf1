"""
Content CRUD Operations
Database operations for content management.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from app.crud.base import BaseCRUD, paginate
from app.models.content import ContentModel
from app.utils.dates import ensure_aware

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

CATEGORY_FIELDS = ("id", "name", "slug", "icon", "color")


def _date_key(field: str):
    return lambda item: ensure_aware(item.get(field)) or _EPOCH


def matches_search(item: Dict[str, Any], search: str) -> bool:
    """Case-insensitive match on title, summary, body and tags."""
    needle = search.lower()
    for field in ("title", "summary", "body"):
        if needle in (item.get(field) or "").lower():
            return True
    return any(needle in tag.lower() for tag in item.get("tags") or [])


class ContentCRUD(BaseCRUD):
    """CRUD operations for content documents."""

    @property
    def collection_name(self) -> str:
        return "content"

    def create_content(self, content: ContentModel) -> Dict[str, Any]:
        return self.create(content.to_dict())

    def query(
        self,
        filters: Optional[List[tuple]] = None,
        search: Optional[str] = None,
        exclude_ids: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Equality filters run in the store; text search and exclusions in Python.
        """
        items = self.find(filters)
        if search:
            items = [item for item in items if matches_search(item, search)]
        if exclude_ids:
            excluded = set(exclude_ids)
            items = [item for item in items if item["id"] not in excluded]
        return items

    def get_content_list(
        self,
        filters: Optional[List[tuple]] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Dict[str, Any]:
        """Paginated content list, newest first."""
        items = self.query(filters, search=search)
        items.sort(key=_date_key("created_at"), reverse=True)
        return paginate(items, page, page_size)

    def get_published_between(
        self,
        start: datetime,
        end: datetime,
        filters: Optional[List[tuple]] = None,
    ) -> List[Dict[str, Any]]:
        """Content whose ``publish_date`` falls in [start, end), newest first."""
        items = []
        for item in self.query(filters):
            published = ensure_aware(item.get("publish_date"))
            if published is not None and start <= published < end:
                items.append(item)
        items.sort(key=_date_key("publish_date"), reverse=True)
        return items

    def get_least_used(
        self,
        filters: List[tuple],
        exclude_ids: Iterable[str],
        limit: int,
    ) -> List[Dict[str, Any]]:
        """Least used content first; never-used items precede used ones on ties."""
        items = self.query(filters, exclude_ids=exclude_ids)
        items.sort(key=lambda item: (
            item.get("usage_count", 0),
            ensure_aware(item.get("last_used_date")) or _EPOCH,
        ))
        return items[:limit]

    def get_by_pool(self, filters: List[tuple], limit: int = 100) -> List[Dict[str, Any]]:
        items = self.query(filters)
        items.sort(key=_date_key("created_at"), reverse=True)
        return items[:limit]

    def get_by_ids_sorted(self, doc_ids: List[str], sort_field: str = "updated_at") -> List[Dict[str, Any]]:
        items = self.get_many(doc_ids)
        items.sort(key=_date_key(sort_field), reverse=True)
        return items

    def mark_used(self, content_ids: List[str], when: datetime) -> None:
        """Bump usage tracking for content served as fresh daily content."""
        for content_id in content_ids:
            item = self.get_by_id(content_id)
            if item is None:
                continue
            self.get_collection().document(content_id).update({
                "usage_count": item.get("usage_count", 0) + 1,
                "last_used_date": when,
            })

    def increment_stat(self, content_id: str, stat: str, amount: int = 1) -> Optional[Dict[str, Any]]:
        """
        Increment one of the ``stats`` counters.

        Returns:
            The updated stats dictionary, or None if the content is missing
        """
        item = self.get_by_id(content_id)
        if item is None:
            return None
        stats = dict(item.get("stats") or {})
        stats[stat] = max(0, stats.get(stat, 0) + amount)
        self.get_collection().document(content_id).update({"stats": stats})
        return stats

    def count_by(self, field: str, filters: Optional[List[tuple]] = None) -> Dict[str, int]:
        """Histogram of ``field`` values."""
        counts: Dict[str, int] = {}
        for item in self.find(filters):
            key = item.get(field) or "unknown"
            counts[key] = counts.get(key, 0) + 1
        return counts

    def top_by_stat(self, stat: str, limit: int = 10) -> List[Dict[str, Any]]:
        items = self.find()
        items.sort(key=lambda item: (item.get("stats") or {}).get(stat, 0), reverse=True)
        return items[:limit]

    def populate(
        self,
        items: List[Dict[str, Any]],
        categories: Dict[str, Dict[str, Any]],
        authors: Dict[str, Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        """
        Replace ``category`` and ``author_id`` references with small summaries.

        Args:
            items: Content documents
            categories: Category documents keyed by ID
            authors: User documents keyed by ID
        """
        populated = []
        for item in items:
            item = dict(item)
            category = categories.get(item.get("category"))
            if category is not None:
                item["category"] = {k: category.get(k) for k in CATEGORY_FIELDS}
            author = authors.get(item.get("author_id"))
            if author is not None:
                item["author_id"] = {"id": author["id"], "name": author.get("name")}
            populated.append(item)
        return populated
