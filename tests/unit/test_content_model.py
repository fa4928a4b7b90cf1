"""
Unit tests for content pool derivation and model normalization.
"""

import pytest

from app.models.category import CategoryModel, slugify
from app.models.content import ContentModel, ContentPool, derive_pool
from app.models.subscription import SubscriptionPlan, daily_limit_for


class TestDerivePool:
    """Pool assignment from like/dislike counters."""

    def test_few_votes_stay_regular(self):
        assert derive_pool(4, 0) == ContentPool.REGULAR

    def test_highly_liked_needs_ratio_and_likes(self):
        assert derive_pool(10, 2) == ContentPool.HIGHLY_LIKED
        # Ratio is high but not enough likes
        assert derive_pool(8, 1) == ContentPool.ACCEPTED

    def test_accepted(self):
        assert derive_pool(6, 4) == ContentPool.ACCEPTED

    def test_disliked(self):
        assert derive_pool(2, 3) == ContentPool.DISLIKED
        assert derive_pool(4, 6) == ContentPool.DISLIKED

    def test_middle_ratio_is_regular(self):
        assert derive_pool(5, 5) == ContentPool.REGULAR

    def test_premium_is_never_overridden(self):
        assert derive_pool(0, 50, current="premium") == ContentPool.PREMIUM

    def test_update_pool_on_model(self):
        content = ContentModel(title="t", body="b", category="c")
        content.stats.likes = 12
        content.stats.dislikes = 1
        assert content.update_pool() == "highly_liked"


class TestContentModel:

    def test_enum_values_are_stored_as_strings(self):
        data = ContentModel(title="t", body="b", category="c").to_dict()
        assert data["status"] == "draft"
        assert data["pool"] == "regular"
        assert data["content_type"] == "hack"
        assert "id" not in data

    def test_tags_are_trimmed_and_deduplicated(self):
        content = ContentModel(title="t", body="b", category="c", tags=[" a ", "b", "a", ""])
        assert content.tags == ["a", "b"]

    def test_rejects_unknown_status(self):
        with pytest.raises(ValueError):
            ContentModel(title="t", body="b", category="c", status="lost")


class TestCategoryAndPlans:

    def test_slug_derived_from_name(self):
        assert CategoryModel(name="Home & Garden").slug == "home-garden"

    def test_explicit_slug_is_normalized(self):
        assert CategoryModel(name="X", slug="My Slug!").slug == "my-slug"

    def test_slugify_never_empty(self):
        assert slugify("!!!") == "category"

    def test_daily_limits(self):
        assert daily_limit_for("free") == 5
        assert daily_limit_for("premium") == 20
        assert daily_limit_for(None) == 5
        assert daily_limit_for("unknown") == 5

    def test_plan_daily_limit_defaults_from_tier(self):
        plan = SubscriptionPlan(name="Basic", tier="basic", price=2.99)
        assert plan.to_dict()["daily_limit"] == 10
