"""
Prompt Template Request Schemas
"""

from typing import Optional

from pydantic import BaseModel, Field

from app.models.content import ContentType
from app.schemas.updates import PartialUpdateRequest


class PromptCreateRequest(BaseModel):
    """Create prompt template request."""

    name: str = Field(min_length=1, max_length=120)
    description: str = ""
    category: Optional[str] = None
    content_type: ContentType = ContentType.HACK
    template: str = Field(min_length=1)
    system_prompt: Optional[str] = None
    is_default: bool = False
    active: bool = True


class PromptUpdateRequest(PartialUpdateRequest):
    """Partial prompt template update."""

    nullable_fields = frozenset({"category", "system_prompt"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = None
    category: Optional[str] = None
    content_type: Optional[ContentType] = None
    template: Optional[str] = Field(default=None, min_length=1)
    system_prompt: Optional[str] = None
    is_default: Optional[bool] = None
    active: Optional[bool] = None
