"""
Unit tests for daily content selection against the in-memory store.
"""

from datetime import timedelta

import pytest

from app.crud.category import CategoryCRUD
from app.crud.content import ContentCRUD
from app.models.category import CategoryModel
from app.services.content.daily import select_daily_content
from app.utils.exceptions import NotFoundError


def user_doc(tier="free", completed=None):
    return {
        "id": "reader",
        "subscription": {"tier": tier},
        "progress": {"completed_content": completed or []},
    }


class TestSelectDailyContent:

    def test_todays_items_come_first(self, store, make_content, utc_noon):
        today = make_content(title="Today", publish_date=utc_noon - timedelta(hours=2))
        make_content(title="Yesterday", publish_date=utc_noon - timedelta(days=1))

        result = select_daily_content(store, user_doc(), now=utc_noon)

        assert result[0]["id"] == today["id"]
        assert len(result) == 2

    def test_free_tier_limit_and_premium_filter(self, store, make_content, utc_noon):
        for i in range(7):
            make_content(title=f"Item {i}")
        premium = make_content(title="Premium", premium=True)

        result = select_daily_content(store, user_doc("free"), now=utc_noon)

        assert len(result) == 5
        assert premium["id"] not in {item["id"] for item in result}

    def test_premium_tier_sees_premium_content(self, store, make_content, utc_noon):
        premium = make_content(title="Premium", premium=True)
        result = select_daily_content(store, user_doc("premium"), now=utc_noon)
        assert [item["id"] for item in result] == [premium["id"]]

    def test_pool_priority_and_completed_exclusion(self, store, make_content, utc_noon):
        regular = make_content(title="Regular", pool="regular")
        liked = make_content(title="Liked", pool="highly_liked")
        accepted = make_content(title="Accepted", pool="accepted")
        done = make_content(title="Done", pool="highly_liked")
        make_content(title="Disliked", pool="disliked")

        result = select_daily_content(store, user_doc(completed=[done["id"]]), now=utc_noon)

        assert [item["id"] for item in result] == [liked["id"], accepted["id"], regular["id"]]

    def test_least_used_first_and_usage_recorded(self, store, make_content, utc_noon):
        worn = make_content(title="Worn", usage_count=3)
        fresh = make_content(title="Fresh")

        result = select_daily_content(store, user_doc(), now=utc_noon)

        assert [item["id"] for item in result] == [fresh["id"], worn["id"]]
        stored = ContentCRUD(store).get_by_id(fresh["id"])
        assert stored["usage_count"] == 1
        assert stored["last_used_date"] == utc_noon
        assert result[0]["usage_count"] == 1

    def test_unpublished_content_is_skipped(self, store, make_content, utc_noon):
        make_content(title="Pending", status="pending")
        assert select_daily_content(store, user_doc(), now=utc_noon) == []

    def test_category_slug_filter(self, store, make_content, category, utc_noon):
        other = CategoryCRUD(store).create_category(CategoryModel(name="Cooking"))
        make_content(title="Other", category_id=other["id"])
        mine = make_content(title="Mine")

        result = select_daily_content(store, user_doc(), category_slug=category["slug"], now=utc_noon)

        assert [item["id"] for item in result] == [mine["id"]]

    def test_unknown_or_inactive_category(self, store, utc_noon):
        CategoryCRUD(store).create_category(CategoryModel(name="Hidden", active=False))
        with pytest.raises(NotFoundError):
            select_daily_content(store, user_doc(), category_slug="hidden", now=utc_noon)
        with pytest.raises(NotFoundError):
            select_daily_content(store, user_doc(), category_slug="missing", now=utc_noon)

    def test_content_type_filter(self, store, make_content, utc_noon):
        make_content(title="A tip", content_type="tip")
        hack = make_content(title="A hack")
        result = select_daily_content(store, user_doc(), now=utc_noon)
        assert [item["id"] for item in result] == [hack["id"]]
