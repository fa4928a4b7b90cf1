"""
Prompt Template CRUD Operations
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.crud.base import BaseCRUD
from app.models.prompt_template import PromptTemplateModel
from app.utils.dates import ensure_aware

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class PromptTemplateCRUD(BaseCRUD):
    """CRUD operations for prompt template documents."""

    @property
    def collection_name(self) -> str:
        return "prompt_templates"

    def create_template(self, template: PromptTemplateModel) -> Dict[str, Any]:
        return self.create(template.to_dict())

    def list_templates(
        self,
        category: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        filters = []
        if category:
            filters.append(("category", "==", category))
        if content_type:
            filters.append(("content_type", "==", content_type))
        items = self.find(filters)
        items.sort(key=lambda t: t.get("name", "").lower())
        return items

    def get_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return self.find_one([("name", "==", name)])

    def resolve_for(self, category_id: str, content_type: str) -> Optional[Dict[str, Any]]:
        """
        Pick the template used for generation: an active template bound to the
        category wins over an active default template for the content type.
        """
        bound = self.find([
            ("category", "==", category_id),
            ("active", "==", True),
        ])
        if bound:
            bound.sort(key=lambda t: ensure_aware(t.get("updated_at")) or _EPOCH, reverse=True)
            return bound[0]
        defaults = self.find([
            ("is_default", "==", True),
            ("content_type", "==", content_type),
            ("active", "==", True),
        ])
        return defaults[0] if defaults else None
