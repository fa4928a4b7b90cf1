"""
Unit tests for the content generation pipeline with a fake AI service.
"""

import json

import pytest

from app.crud.content import ContentCRUD
from app.crud.prompt import PromptTemplateCRUD
from app.models.prompt_template import PromptTemplateModel
from app.services.ai.content_generator import ContentGenerator
from app.utils.exceptions import ContentGenerationError, ValidationError

pytestmark = pytest.mark.asyncio

AUTHOR = {"id": "author-1", "role": "admin"}


@pytest.fixture
def generator(fake_ai, store):
    return ContentGenerator(fake_ai, store)


class TestGenerateMultipleContent:

    async def test_stores_pending_ai_items(self, generator, fake_ai, store, category):
        created = await generator.generate_multiple_content(category, AUTHOR)

        assert [c["title"] for c in created] == ["Batch your errands", "Two minute rule"]
        for item in created:
            assert item["status"] == "pending"
            assert item["pool"] == "regular"
            assert item["ai_generated"] is True
            assert item["ai_model"] == "fake-model"
            assert item["author_id"] == "author-1"
            assert item["category"] == category["id"]
        assert ContentCRUD(store).count() == 2

    async def test_prompt_uses_category_defaults(self, generator, fake_ai, category):
        await generator.generate_multiple_content(category, AUTHOR)

        prompt = fake_ai.calls[0]["prompt"]
        assert "Generate 3 unique beginner level hack items about Productivity." in prompt
        assert "Keep every item under 80 words." in prompt

    async def test_bound_template_wins(self, generator, fake_ai, store, category):
        PromptTemplateCRUD(store).create_template(PromptTemplateModel(
            name="Bound",
            category=category["id"],
            template="Bound prompt for {category} x{count}",
            system_prompt="custom system",
        ))

        await generator.generate_multiple_content(category, AUTHOR, count=2)

        call = fake_ai.calls[0]
        assert call["prompt"].startswith("Bound prompt for Productivity x2")
        assert call["system_prompt"] == "custom system"

    async def test_bullet_bodies_are_split(self, generator, fake_ai, category):
        fake_ai.responses.append(json.dumps([{
            "title": "Desk: setup",
            "body": "- raise your monitor to eye level\n- keep a water bottle within reach",
        }]))

        created = await generator.generate_multiple_content(category, AUTHOR)

        assert [c["body"] for c in created] == [
            "raise your monitor to eye level",
            "keep a water bottle within reach",
        ]

    async def test_invalid_model(self, generator, category):
        with pytest.raises(ValidationError):
            await generator.generate_multiple_content(category, AUTHOR, model="nope")

    async def test_ai_failure(self, generator, fake_ai, category):
        fake_ai.error = RuntimeError("provider down")
        with pytest.raises(ContentGenerationError):
            await generator.generate_multiple_content(category, AUTHOR)

    async def test_broken_stored_template(self, generator, fake_ai, store, category):
        # Saved before template validation existed
        PromptTemplateCRUD(store).create({
            "name": "Legacy",
            "category": category["id"],
            "content_type": "hack",
            "template": "Generate {count} items about {category}. Format: {}",
            "active": True,
        })

        with pytest.raises(ContentGenerationError, match="Invalid prompt template"):
            await generator.generate_multiple_content(category, AUTHOR)
        assert fake_ai.calls == []


class TestGenerateForCategories:

    async def test_collects_failures(self, generator, category):
        generated, failed = await generator.generate_for_categories([category["id"], "missing"], AUTHOR, count=2)

        assert len(generated) == 2
        assert failed == [{"id": "missing", "error": "Category not found"}]

    async def test_template_error_lands_in_failed(self, generator, store, category):
        PromptTemplateCRUD(store).create({
            "name": "Legacy",
            "category": category["id"],
            "content_type": "hack",
            "template": "Generate {count} items. Format: {}",
            "active": True,
        })

        generated, failed = await generator.generate_for_categories([category["id"]], AUTHOR)

        assert generated == []
        assert failed[0]["id"] == category["id"]
        assert "Invalid prompt template" in failed[0]["error"]

    async def test_unexpected_error_lands_in_failed(self, generator, fake_ai, category):
        fake_ai.error = KeyError("choices")

        generated, failed = await generator.generate_for_categories([category["id"]], AUTHOR)

        assert generated == []
        assert failed == [{"id": category["id"], "error": "'choices'"}]


class TestRewrite:

    async def test_rewrite_replaces_text_and_keeps_tags(self, generator, fake_ai, make_content):
        content = make_content(title="Old", body="Old body", tags=["keep"])
        fake_ai.responses.append('{"title": "New", "body": "New body", "summary": "New summary"}')

        updated = await generator.rewrite_content(content)

        assert updated["title"] == "New"
        assert updated["body"] == "New body"
        assert updated["summary"] == "New summary"
        assert updated["tags"] == ["keep"]
        assert updated["last_rewrite_date"] is not None
        assert updated["category"] == content["category"]

    async def test_rewrite_many_reports_missing(self, generator, fake_ai, make_content):
        content = make_content()
        fake_ai.responses.append('{"title": "New", "body": "New body", "tags": ["fresh"]}')

        rewritten, failed = await generator.rewrite_many([content["id"], "missing"])

        assert rewritten[0]["tags"] == ["fresh"]
        assert failed == [{"id": "missing", "error": "Content not found"}]
