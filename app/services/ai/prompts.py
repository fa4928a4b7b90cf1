"""Prompt templates and instructions for content generation."""

from typing import Any, Dict, List, Optional

from app.utils.logger import get_logger

logger = get_logger(__name__)

# System prompt shared by every generation request
CONTENT_SYSTEM_PROMPT = """You are an expert content writer for a daily tips application.
You write short, practical, accurate pieces that a reader can act on the same day.
Every piece is self-contained, free of filler, and written in plain, friendly language.
Never invent statistics, never promote products, and never give medical, legal or
financial advice beyond widely accepted common sense."""

REWRITE_SYSTEM_PROMPT = """You are a content rewriting assistant.
You rewrite existing pieces so they read as completely new while keeping their meaning."""

# Format instructions for structured output
FORMAT_INSTRUCTIONS = """
Return ONLY a JSON array, with no commentary before or after it. Each element must be an object:
[
    {
        "title": "Short, specific title",
        "body": "The full text of the item",
        "summary": "One sentence summary (max 120 characters)",
        "tags": ["tag1", "tag2"]
    }
]
"""

CONTENT_TYPE_INSTRUCTIONS = {
    "hack": "Each item is a clever shortcut or trick that saves time, money or effort.",
    "tip": "Each item is a piece of practical advice the reader can apply immediately.",
    "fact": "Each item is a surprising but verifiable fact, explained in two or three sentences.",
    "quote": "Each item is a well-known quote with its author and a short reflection on it.",
    "challenge": "Each item is a small challenge the reader can complete today, with clear steps.",
}

DIFFICULTY_INSTRUCTIONS = {
    "beginner": "Assume no prior knowledge. Avoid jargon.",
    "intermediate": "Assume the reader knows the basics and wants something less obvious.",
    "advanced": "Target experienced readers. Technical depth is welcome.",
}

DEFAULT_PROMPT_TEMPLATE = (
    "Generate {count} unique {difficulty} level {content_type} items about {category}.\n"
    "Make every item distinct from the others in topic and wording."
)

REWRITE_PROMPT = """
Take the following content and rewrite it completely to make it unique while preserving
the core information and value. Use different wording, structure, and examples, but
maintain the same overall message and advice.

Category: {category}
Difficulty: {difficulty}

Original Content:
Title: {title}
Body: {body}

Rewrite this content to be completely unique. Return your response as valid JSON with
title, body, summary and tags fields.
"""

# Built-in templates created by ``POST /prompts/import-defaults``
DEFAULT_TEMPLATES: List[Dict[str, Any]] = [
    {
        "name": f"Default {content_type}",
        "description": f"Built-in prompt for {content_type} content",
        "content_type": content_type,
        "template": DEFAULT_PROMPT_TEMPLATE + "\n" + instruction,
        "system_prompt": CONTENT_SYSTEM_PROMPT,
        "is_default": True,
    }
    for content_type, instruction in CONTENT_TYPE_INSTRUCTIONS.items()
]


def render_template(
    template: str,
    category: str,
    count: int,
    difficulty: str,
    content_type: str,
) -> str:
    """
    Fill the placeholders of a prompt template.

    Args:
        template: Text using ``{category}``, ``{count}``, ``{difficulty}`` and ``{content_type}``
        category: Category name
        count: Number of items requested
        difficulty: Difficulty level
        content_type: Content type

    Returns:
        Rendered prompt

    Raises:
        ValueError: If the template does not render with the known placeholders
    """
    try:
        return template.format(
            category=category,
            count=count,
            difficulty=difficulty,
            content_type=content_type,
        )
    except (KeyError, IndexError, AttributeError, ValueError) as e:
        raise ValueError(f"Invalid prompt template: {e}") from e


def build_generation_prompt(
    category_name: str,
    count: int,
    difficulty: str,
    content_type: str,
    template: Optional[str] = None,
    extra_instructions: Optional[str] = None,
) -> str:
    """
    Build the complete prompt for a generation request.

    Args:
        category_name: Category the items belong to
        count: Number of items requested
        difficulty: Difficulty level
        content_type: Content type
        template: Stored template text; the built-in prompt is used when omitted
        extra_instructions: Category specific instructions appended to the prompt

    Returns:
        Complete prompt string
    """
    base = render_template(
        template or DEFAULT_PROMPT_TEMPLATE,
        category=category_name,
        count=count,
        difficulty=difficulty,
        content_type=content_type,
    )

    sections = [base]
    if not template:
        sections.append(CONTENT_TYPE_INSTRUCTIONS.get(content_type, CONTENT_TYPE_INSTRUCTIONS["hack"]))
    sections.append(DIFFICULTY_INSTRUCTIONS.get(difficulty, DIFFICULTY_INSTRUCTIONS["beginner"]))
    if extra_instructions and extra_instructions.strip():
        sections.append(f"ADDITIONAL INSTRUCTIONS:\n{extra_instructions.strip()}")
    sections.append(FORMAT_INSTRUCTIONS)

    prompt = "\n\n".join(sections)
    logger.debug("Built generation prompt for category=%s, count=%d, length=%d",
                 category_name, count, len(prompt))
    return prompt


def build_rewrite_prompt(title: str, body: str, category_name: str, difficulty: str) -> str:
    """Prompt asking for a unique rewrite of an existing item."""
    return REWRITE_PROMPT.format(
        title=title,
        body=body,
        category=category_name,
        difficulty=difficulty,
    )
