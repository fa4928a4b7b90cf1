"""
Category CRUD Operations
"""

from typing import Any, Dict, List, Optional

from app.crud.base import BaseCRUD
from app.models.category import CategoryModel


class CategoryCRUD(BaseCRUD):
    """CRUD operations for category documents."""

    @property
    def collection_name(self) -> str:
        return "categories"

    def create_category(self, category: CategoryModel) -> Dict[str, Any]:
        return self.create(category.to_dict())

    def get_by_slug(self, slug: str, active_only: bool = False) -> Optional[Dict[str, Any]]:
        filters = [("slug", "==", slug)]
        if active_only:
            filters.append(("active", "==", True))
        return self.find_one(filters)

    def list_categories(self, active_only: bool = False) -> List[Dict[str, Any]]:
        filters = [("active", "==", True)] if active_only else None
        items = self.find(filters)
        items.sort(key=lambda c: (c.get("order", 0), c.get("name", "").lower()))
        return items

    def as_lookup(self) -> Dict[str, Dict[str, Any]]:
        return {category["id"]: category for category in self.find()}
