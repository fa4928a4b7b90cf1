"""
Category Request Schemas
"""

from typing import Optional

from pydantic import BaseModel, Field

from app.models.content import ContentType
from app.schemas.updates import PartialUpdateRequest


class CategoryCreateRequest(BaseModel):
    """Create category request."""

    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: str = ""
    icon: Optional[str] = None
    color: Optional[str] = None
    active: bool = True
    content_type: ContentType = ContentType.HACK
    prompt_type: str = Field(default="multiple", pattern="^(single|multiple)$")
    default_num_to_generate: int = Field(default=5, ge=1, le=50)
    prompt: Optional[str] = None
    order: int = 0


class CategoryUpdateRequest(PartialUpdateRequest):
    """Partial category update."""

    nullable_fields = frozenset({"icon", "color", "prompt"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    active: Optional[bool] = None
    content_type: Optional[ContentType] = None
    prompt_type: Optional[str] = Field(default=None, pattern="^(single|multiple)$")
    default_num_to_generate: Optional[int] = Field(default=None, ge=1, le=50)
    prompt: Optional[str] = None
    order: Optional[int] = None
