"""
Category Model
Groups content and carries the generation settings used by the AI pipeline.
"""

import re
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.content import ContentType
from app.utils.dates import utcnow


def slugify(value: str) -> str:
    """Lower-case, hyphen separated slug of ``value``."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "category"


class CategoryModel(BaseModel):
    """Content category document."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: Optional[str] = None
    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: str = ""
    icon: Optional[str] = None
    color: Optional[str] = Field(default=None, description="Hex color used by clients")
    active: bool = True
    content_type: ContentType = Field(default=ContentType.HACK)
    prompt_type: str = Field(default="multiple", pattern="^(single|multiple)$")
    default_num_to_generate: int = Field(default=5, ge=1, le=50)
    prompt: Optional[str] = Field(default=None, description="Extra generation instructions")
    order: int = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def fill_slug(self) -> "CategoryModel":
        self.slug = slugify(self.slug or self.name)
        return self

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        if data.get("id") is None:
            data.pop("id")
        return data
