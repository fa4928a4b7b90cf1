"""
Prompt Template Model
Admin-editable prompts used when asking the AI for new content.
"""

import string
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.content import ContentType
from app.utils.dates import utcnow

TEMPLATE_PLACEHOLDERS = {"category", "count", "difficulty", "content_type"}

# Stand-in values used to check that a template renders
SAMPLE_VALUES = {"category": "Productivity", "count": 5, "difficulty": "beginner", "content_type": "hack"}


class PromptTemplateModel(BaseModel):
    """Stored prompt template."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: Optional[str] = None
    name: str = Field(min_length=1, max_length=120)
    description: str = ""
    category: Optional[str] = Field(default=None, description="Category ID this template is bound to")
    content_type: ContentType = Field(default=ContentType.HACK)
    template: str = Field(min_length=1, description="Prompt text with {placeholders}")
    system_prompt: Optional[str] = None
    is_default: bool = False
    active: bool = True
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("template")
    @classmethod
    def validate_placeholders(cls, v: str) -> str:
        """Only the documented named placeholders may appear, and the text must render."""
        try:
            fields = [name for _, name, _, _ in string.Formatter().parse(v) if name is not None]
        except ValueError as e:
            raise ValueError(f"Malformed template: {e}") from e

        if any(not name for name in fields):
            raise ValueError("Placeholders must be named, e.g. {category}")
        unknown = set(fields) - TEMPLATE_PLACEHOLDERS
        if unknown:
            raise ValueError(f"Unknown placeholders: {', '.join(sorted(unknown))}")

        try:
            v.format(**SAMPLE_VALUES)
        except (KeyError, IndexError, AttributeError, ValueError) as e:
            raise ValueError(f"Template does not render: {e}") from e
        return v

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        if data.get("id") is None:
            data.pop("id")
        return data
