"""
Unit tests for prompt building.
"""

import pytest

from app.models.prompt_template import PromptTemplateModel
from app.services.ai.prompts import (
    DEFAULT_TEMPLATES,
    FORMAT_INSTRUCTIONS,
    build_generation_prompt,
    build_rewrite_prompt,
    render_template,
)


class TestRenderTemplate:

    def test_fills_placeholders(self):
        text = render_template("{count} {difficulty} {content_type} about {category}", "Cooking", 3, "advanced", "tip")
        assert text == "3 advanced tip about Cooking"

    def test_positional_placeholder_raises(self):
        with pytest.raises(ValueError, match="Invalid prompt template"):
            render_template("About {category}: {}", "Cooking", 3, "beginner", "hack")

    def test_unknown_placeholder_raises(self):
        with pytest.raises(ValueError):
            render_template("About {topic}", "Cooking", 3, "beginner", "hack")


class TestBuildGenerationPrompt:

    def test_default_prompt_sections(self):
        prompt = build_generation_prompt("Finance", 4, "beginner", "hack")

        assert "Generate 4 unique beginner level hack items about Finance." in prompt
        assert "clever shortcut" in prompt
        assert "Avoid jargon" in prompt
        assert prompt.endswith(FORMAT_INSTRUCTIONS)

    def test_extra_instructions_appended(self):
        prompt = build_generation_prompt("Finance", 4, "beginner", "hack", extra_instructions="  Mention budgets.  ")
        assert "ADDITIONAL INSTRUCTIONS:\nMention budgets." in prompt

    def test_blank_extra_instructions_ignored(self):
        prompt = build_generation_prompt("Finance", 4, "beginner", "hack", extra_instructions="   ")
        assert "ADDITIONAL INSTRUCTIONS" not in prompt

    def test_stored_template_replaces_builtin_text(self):
        prompt = build_generation_prompt("Tech", 2, "advanced", "fact", template="List {count} facts on {category}")

        assert prompt.startswith("List 2 facts on Tech")
        assert "surprising but verifiable" not in prompt
        assert "Technical depth" in prompt


class TestRewritePrompt:

    def test_includes_original(self):
        prompt = build_rewrite_prompt("Old title", "Old body", "Home", "intermediate")
        assert "Title: Old title" in prompt
        assert "Body: Old body" in prompt
        assert "Category: Home" in prompt
        assert "Difficulty: intermediate" in prompt


class TestDefaultTemplates:

    def test_one_per_content_type_and_valid(self):
        types = [t["content_type"] for t in DEFAULT_TEMPLATES]
        assert sorted(types) == ["challenge", "fact", "hack", "quote", "tip"]
        for template in DEFAULT_TEMPLATES:
            assert PromptTemplateModel(**template).is_default

    def test_model_rejects_unknown_placeholder(self):
        with pytest.raises(ValueError):
            PromptTemplateModel(name="bad", template="Write about {topic}")

    @pytest.mark.parametrize("template", [
        "Generate {count} items. Format: {}",
        "Generate {0} items about {category}",
        "Generate {count:q} items",
        "Generate {count items",
    ])
    def test_model_rejects_templates_that_do_not_render(self, template):
        with pytest.raises(ValueError):
            PromptTemplateModel(name="bad", template=template)

    def test_model_accepts_escaped_braces(self):
        template = PromptTemplateModel(name="json", template='Return {count} items as {{"title": "..."}}')
        assert template.template.startswith("Return")
