"""
Content Models
Represents hack/tip content items stored in the document store.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.dates import utcnow


class ContentType(str, Enum):
    """Content type enumeration."""
    HACK = "hack"
    TIP = "tip"
    FACT = "fact"
    QUOTE = "quote"
    CHALLENGE = "challenge"


class Difficulty(str, Enum):
    """Difficulty enumeration."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ContentStatus(str, Enum):
    """Moderation status enumeration."""
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"
    ARCHIVED = "archived"


class ContentPool(str, Enum):
    """Selection pool derived from ratings."""
    REGULAR = "regular"
    ACCEPTED = "accepted"
    HIGHLY_LIKED = "highly_liked"
    DISLIKED = "disliked"
    PREMIUM = "premium"


# Order in which pools back-fill the daily feed
DAILY_POOL_PRIORITY = [ContentPool.HIGHLY_LIKED, ContentPool.ACCEPTED, ContentPool.REGULAR]

MIN_VOTES_FOR_POOL = 5
HIGHLY_LIKED_MIN_LIKES = 10
HIGHLY_LIKED_RATIO = 0.8
ACCEPTED_RATIO = 0.6
DISLIKED_RATIO = 0.4


def derive_pool(likes: int, dislikes: int, current: Optional[str] = None) -> ContentPool:
    """
    Compute the pool a content item belongs to from its ratings.

    Premium is assigned by staff and never overridden by votes.
    """
    if current == ContentPool.PREMIUM.value:
        return ContentPool.PREMIUM

    total = likes + dislikes
    if total < MIN_VOTES_FOR_POOL:
        return ContentPool.REGULAR

    ratio = likes / total
    if ratio >= HIGHLY_LIKED_RATIO and likes >= HIGHLY_LIKED_MIN_LIKES:
        return ContentPool.HIGHLY_LIKED
    if ratio >= ACCEPTED_RATIO:
        return ContentPool.ACCEPTED
    if ratio <= DISLIKED_RATIO:
        return ContentPool.DISLIKED
    return ContentPool.REGULAR


class ContentStats(BaseModel):
    """Engagement counters."""

    views: int = Field(default=0, ge=0)
    likes: int = Field(default=0, ge=0)
    dislikes: int = Field(default=0, ge=0)
    saves: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)


class ContentModel(BaseModel):
    """A single hack/tip shown to end users."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: Optional[str] = Field(default=None, description="Document ID")
    title: str = Field(min_length=1, max_length=300, description="Content title")
    body: str = Field(min_length=1, description="Main content text")
    summary: str = Field(default="", max_length=500, description="Short summary")
    category: str = Field(description="Category document ID")
    content_type: ContentType = Field(default=ContentType.HACK)
    difficulty: Difficulty = Field(default=Difficulty.BEGINNER)
    tags: List[str] = Field(default_factory=list)
    status: ContentStatus = Field(default=ContentStatus.DRAFT)
    premium: bool = Field(default=False)
    pool: ContentPool = Field(default=ContentPool.REGULAR)
    stats: ContentStats = Field(default_factory=ContentStats)
    usage_count: int = Field(default=0, ge=0, description="Times served as fresh daily content")
    last_used_date: Optional[datetime] = None
    publish_date: Optional[datetime] = None
    recycle_count: int = Field(default=0, ge=0)
    author_id: Optional[str] = None
    ai_generated: bool = False
    ai_model: Optional[str] = None
    moderation_notes: Optional[str] = None
    moderated_by: Optional[str] = None
    moderated_at: Optional[datetime] = None
    last_rewrite_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: List[str]) -> List[str]:
        """Strip blanks and duplicates while keeping order."""
        seen = []
        for tag in v:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

    def update_pool(self) -> str:
        """Recompute ``pool`` from the like/dislike counters."""
        self.pool = derive_pool(self.stats.likes, self.stats.dislikes, self.pool).value
        return self.pool

    def to_dict(self) -> Dict[str, Any]:
        """Convert content to a dictionary for storage."""
        data = self.model_dump()
        if data.get("id") is None:
            data.pop("id")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentModel":
        """Create content from a stored dictionary."""
        return cls(**data)
