"""
Content Request Schemas
API schemas for content management, rating, generation and moderation.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.content import ContentPool, ContentStatus, ContentType, Difficulty
from app.schemas.updates import PartialUpdateRequest


class ContentCreateRequest(BaseModel):
    """Create content request (staff)."""

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(min_length=1, max_length=300)
    body: str = Field(min_length=1)
    summary: str = Field(default="", max_length=500)
    category: str = Field(min_length=1, description="Category ID")
    content_type: ContentType = ContentType.HACK
    difficulty: Difficulty = Difficulty.BEGINNER
    tags: List[str] = Field(default_factory=list)
    status: ContentStatus = ContentStatus.DRAFT
    premium: bool = False
    pool: ContentPool = ContentPool.REGULAR
    publish_date: Optional[datetime] = None


class ContentUpdateRequest(PartialUpdateRequest):
    """Partial content update. Rating counters are not updatable."""

    model_config = ConfigDict(use_enum_values=True)
    nullable_fields = frozenset({"publish_date"})

    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    body: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = Field(default=None, max_length=500)
    category: Optional[str] = None
    content_type: Optional[ContentType] = None
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None
    status: Optional[ContentStatus] = None
    premium: Optional[bool] = None
    pool: Optional[ContentPool] = None
    publish_date: Optional[datetime] = None


class RateContentRequest(BaseModel):
    """Rating request; the value is checked by the route."""

    rating: Optional[str] = None


class RewriteRequest(BaseModel):
    model: Optional[str] = None


class GenerateMultipleRequest(BaseModel):
    """Generate content for one category."""

    model_config = ConfigDict(use_enum_values=True)

    category_id: Optional[str] = None
    content_type: Optional[ContentType] = None
    count: Optional[int] = Field(default=None, ge=1, le=50)
    difficulty: Optional[Difficulty] = None
    model: Optional[str] = None


class GenerateRequest(BaseModel):
    """Generate content for several categories."""

    category_ids: List[str] = Field(default_factory=list)
    count: int = Field(default=10, ge=1, le=50)


class ModerateRequest(BaseModel):
    """Moderation decision; ``action`` is checked by the route."""

    action: Optional[str] = None
    moderation_notes: Optional[str] = None


class BulkContentRequest(BaseModel):
    content_ids: List[str] = Field(default_factory=list)


class BulkRewriteRequest(BulkContentRequest):
    model: Optional[str] = None
