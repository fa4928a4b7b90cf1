"""
Unit tests for parsing AI responses into content items.
"""

import pytest

from app.services.ai.content_generator import parse_ai_items
from app.utils.exceptions import ContentGenerationError


class TestParseAIItems:

    def test_plain_json_array(self):
        items = parse_ai_items('[{"title": "A", "body": "Body A", "summary": "S", "tags": ["x"]}]')
        assert items == [{"title": "A", "body": "Body A", "summary": "S", "tags": ["x"]}]

    def test_fenced_json_with_prose(self):
        raw = 'Sure!\n```json\n[{"title": "A", "body": "Body A"}, {"title": "B", "body": "Body B"}]\n```\nEnjoy.'
        items = parse_ai_items(raw)
        assert [i["title"] for i in items] == ["A", "B"]

    def test_single_object(self):
        items = parse_ai_items('{"title": "Solo", "body": "Only one", "tags": "a, b"}')
        assert items[0]["title"] == "Solo"
        assert items[0]["tags"] == ["a", "b"]

    def test_object_wrapping_a_list(self):
        items = parse_ai_items('{"items": [{"title": "A", "content": "Body A"}]}')
        assert items[0]["body"] == "Body A"

    def test_missing_summary_uses_body_start(self):
        body = "z" * 200
        items = parse_ai_items(f'[{{"title": "A", "body": "{body}"}}]')
        assert items[0]["summary"] == "z" * 120

    def test_entries_without_body_are_dropped(self):
        items = parse_ai_items('[{"title": "A"}, {"title": "B", "body": "Body B"}]')
        assert [i["title"] for i in items] == ["B"]

    def test_brackets_in_surrounding_prose(self):
        raw = 'Here are [2] tips:\n[{"title": "A tip", "body": "Body A"}, {"title": "B tip", "body": "Body B"}]\nDone {ok}.'
        items = parse_ai_items(raw)
        assert [i["title"] for i in items] == ["A tip", "B tip"]

    def test_first_usable_json_value_wins(self):
        raw = '{"note": "no items here"} then [{"title": "A", "body": "Body A"}]'
        assert [i["title"] for i in parse_ai_items(raw)] == ["A"]

    def test_plain_text_fallback(self):
        items = parse_ai_items("Title: Morning routine\nDrink water before coffee.")
        assert items == [{
            "title": "Morning routine",
            "body": "Drink water before coffee.",
            "summary": "Drink water before coffee.",
            "tags": [],
        }]

    def test_plain_text_without_title(self):
        items = parse_ai_items("Just some text")
        assert items[0]["title"] == "Untitled"
        assert items[0]["body"] == "Just some text"

    def test_empty_response_raises(self):
        with pytest.raises(ContentGenerationError):
            parse_ai_items("   ")
