"""Content generation pipeline for hacks, tips and related content."""

import asyncio
import json
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from app.crud.category import CategoryCRUD
from app.crud.content import ContentCRUD
from app.crud.prompt import PromptTemplateCRUD
from app.models.content import ContentModel, ContentPool, ContentStatus, ContentType, Difficulty
from app.services.ai.prompts import (
    CONTENT_SYSTEM_PROMPT,
    REWRITE_SYSTEM_PROMPT,
    build_generation_prompt,
    build_rewrite_prompt,
)
from app.services.content.bullets import split_all
from app.utils.dates import utcnow
from app.utils.exceptions import ContentGenerationError, NotFoundError, ValidationError, WindspireException
from app.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_COUNT = 5
MAX_TITLE_LENGTH = 300
MAX_SUMMARY_LENGTH = 500

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.S | re.I)
_JSON_START = re.compile(r"[\[{]")
_LIST_KEYS = ("items", "content", "contents", "results", "hacks", "tips")


def _coerce_item(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Normalize one parsed AI object; returns None when title or body is missing."""
    title = str(data.get("title") or "").strip()
    body = data.get("body") or data.get("content") or data.get("text") or ""
    body = str(body).strip()
    if not title or not body:
        return None

    summary = str(data.get("summary") or "").strip() or body[:120]
    tags = data.get("tags") or []
    if isinstance(tags, str):
        tags = [t.strip() for t in tags.split(",")]
    tags = [str(t).strip() for t in tags if str(t).strip()]

    return {
        "title": title[:MAX_TITLE_LENGTH],
        "body": body,
        "summary": summary[:MAX_SUMMARY_LENGTH],
        "tags": tags,
    }


def _fallback_item(raw_content: str) -> Dict[str, Any]:
    """Extract title and body from plain text output."""
    lines = raw_content.strip().split("\n")

    title = "Untitled"
    content_start = 0

    for i, line in enumerate(lines[:5]):
        stripped = line.strip()
        if stripped.lower().startswith("title:") or stripped.startswith("**"):
            title = re.sub(r"^title:", "", stripped, flags=re.I).replace("**", "").strip() or title
            content_start = i + 1
            break

    body = "\n".join(lines[content_start:]).strip() or raw_content.strip()
    return {
        "title": title[:MAX_TITLE_LENGTH],
        "body": body,
        "summary": body[:120],
        "tags": [],
    }


def _items_from_json(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        wrapped = next((data[k] for k in _LIST_KEYS if isinstance(data.get(k), list)), None)
        data = wrapped if wrapped is not None else [data]
    if not isinstance(data, list):
        return []
    items = [_coerce_item(entry) for entry in data if isinstance(entry, dict)]
    return [item for item in items if item]


def parse_ai_items(raw_content: str) -> List[Dict[str, Any]]:
    """
    Parse the items returned by the AI.

    Accepts a JSON array, a single JSON object, or an object wrapping a list,
    optionally inside code fences or surrounded by prose. The first JSON value
    in the text that yields usable items wins. Anything else is treated as one
    plain-text item.

    Raises:
        ContentGenerationError: If the response is empty
    """
    if not raw_content or not raw_content.strip():
        raise ContentGenerationError("AI returned an empty response")

    text = raw_content.strip()
    fence = _FENCE_PATTERN.search(text)
    if fence:
        text = fence.group(1).strip()

    decoder = json.JSONDecoder()
    for match in _JSON_START.finditer(text):
        try:
            data, _ = decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        items = _items_from_json(data)
        if items:
            return items

    logger.warning("AI response was not valid JSON, falling back to plain text parsing")
    return [_fallback_item(raw_content)]


class ContentGenerator:
    """Pipeline that asks the AI for content and stores the results for moderation."""

    def __init__(self, ai_service: Any, db: Any, rewrite_model: Optional[str] = None):
        """
        Initialize content generator.

        Args:
            ai_service: GroqService (or compatible) used for text generation
            db: Store client
            rewrite_model: Model used for rewrites when none is requested
        """
        self.ai = ai_service
        self.db = db
        self.rewrite_model = rewrite_model
        self.content_crud = ContentCRUD(db)
        self.category_crud = CategoryCRUD(db)
        self.prompt_crud = PromptTemplateCRUD(db)

    def _resolve_model(self, model: Optional[str]) -> str:
        try:
            return self.ai.resolve_model(model)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    async def _complete(self, prompt: str, system_prompt: str, model: str) -> str:
        try:
            return await asyncio.to_thread(
                self.ai.generate_text,
                prompt,
                system_prompt=system_prompt,
                model=model,
            )
        except (RuntimeError, ValueError) as e:
            logger.error("AI request failed: %s", str(e))
            raise ContentGenerationError(f"Generation service error: {e}") from e

    async def generate_multiple_content(
        self,
        category: Dict[str, Any],
        user: Dict[str, Any],
        content_type: Optional[str] = None,
        count: Optional[int] = None,
        difficulty: Optional[str] = None,
        model: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Generate and store content items for a category.

        Args:
            category: Category document
            user: Requesting user document, recorded as author
            content_type: Falls back to the category's content type, then ``hack``
            count: Falls back to the category's ``default_num_to_generate``, then 5
            difficulty: Defaults to ``beginner``
            model: AI model, defaults to the service default

        Returns:
            Stored content documents (status ``pending``)

        Raises:
            ValidationError: If the model is not allowed
            ContentGenerationError: If the AI call fails or yields nothing usable
        """
        content_type = content_type or category.get("content_type") or ContentType.HACK.value
        count = count or category.get("default_num_to_generate") or DEFAULT_COUNT
        difficulty = difficulty or Difficulty.BEGINNER.value
        model = self._resolve_model(model)

        template = self.prompt_crud.resolve_for(category["id"], content_type)
        try:
            prompt = build_generation_prompt(
                category_name=category.get("name", ""),
                count=count,
                difficulty=difficulty,
                content_type=content_type,
                template=template["template"] if template else None,
                extra_instructions=category.get("prompt"),
            )
        except ValueError as e:
            raise ContentGenerationError(str(e), details={"template_id": (template or {}).get("id")}) from e
        system_prompt = (template or {}).get("system_prompt") or CONTENT_SYSTEM_PROMPT

        logger.info("Generating %d %s items for category=%s with model=%s",
                    count, content_type, category.get("name"), model)

        raw_content = await self._complete(prompt, system_prompt, model)
        parsed = split_all(parse_ai_items(raw_content))

        created = []
        for item in parsed:
            try:
                content = ContentModel(
                    title=item["title"],
                    body=item["body"],
                    summary=item.get("summary", "")[:MAX_SUMMARY_LENGTH],
                    tags=item.get("tags", []),
                    category=category["id"],
                    content_type=content_type,
                    difficulty=difficulty,
                    status=ContentStatus.PENDING,
                    pool=ContentPool.REGULAR,
                    author_id=user.get("id"),
                    ai_generated=True,
                    ai_model=model,
                )
            except PydanticValidationError as e:
                logger.warning("Skipping generated item '%s': %s", item.get("title"), str(e))
                continue
            created.append(self.content_crud.create_content(content))

        if not created:
            raise ContentGenerationError("AI response did not contain any usable content")

        logger.info("Stored %d generated items for category=%s", len(created), category.get("name"))
        return created

    async def generate_for_categories(
        self,
        category_ids: List[str],
        user: Dict[str, Any],
        count: Optional[int] = None,
    ) -> Tuple[List[Dict[str, Any]], List[Dict[str, str]]]:
        """
        Generate content for several categories one after another.

        Each category uses its own content type. Failures are collected
        instead of aborting the batch.

        Returns:
            Tuple of (generated items, failed categories as ``{"id", "error"}``)
        """
        generated: List[Dict[str, Any]] = []
        failed: List[Dict[str, str]] = []

        for category_id in category_ids:
            category = self.category_crud.get_by_id(category_id)
            if category is None:
                failed.append({"id": category_id, "error": "Category not found"})
                continue
            try:
                items = await self.generate_multiple_content(category, user, count=count)
            except WindspireException as e:
                logger.error("Error generating content for category %s: %s", category_id, e.message)
                failed.append({"id": category_id, "error": e.message})
                continue
            except Exception as e:
                logger.error("Unexpected error generating content for category %s", category_id, exc_info=True)
                failed.append({"id": category_id, "error": str(e) or type(e).__name__})
                continue
            generated.extend(items)

        return generated, failed

    async def rewrite_content(self, content: Dict[str, Any], model: Optional[str] = None) -> Dict[str, Any]:
        """
        Rewrite a stored item so it reads as new content.

        Category and difficulty are kept. Title, body and summary are
        replaced; tags only when the AI returns some.

        Returns:
            The updated content document

        Raises:
            NotFoundError: If the content disappeared meanwhile
            ContentGenerationError: If the AI call fails
        """
        model = self._resolve_model(model or self.rewrite_model)
        category = self.category_crud.get_by_id(content.get("category")) or {}

        prompt = build_rewrite_prompt(
            title=content.get("title", ""),
            body=content.get("body", ""),
            category_name=category.get("name", ""),
            difficulty=content.get("difficulty", Difficulty.BEGINNER.value),
        )
        raw_content = await self._complete(prompt, REWRITE_SYSTEM_PROMPT, model)
        rewritten = parse_ai_items(raw_content)[0]

        updates: Dict[str, Any] = {
            "title": rewritten["title"],
            "body": rewritten["body"],
            "summary": rewritten["summary"],
            "last_rewrite_date": utcnow(),
        }
        if rewritten["tags"]:
            updates["tags"] = rewritten["tags"]

        updated = self.content_crud.update(content["id"], updates)
        if updated is None:
            raise NotFoundError("Content not found", details={"id": content["id"]})

        logger.info("Content %s rewritten with model=%s", content["id"], model)
        return updated

    async def rewrite_many(
        self,
        content_ids: List[str],
        model: Optional[str] = None,
    ) -> Tuple[List[Dict[str, Any]], List[Dict[str, str]]]:
        """
        Rewrite several items sequentially, collecting per-item failures.

        Returns:
            Tuple of (rewritten items, failures as ``{"id", "error"}``)
        """
        rewritten: List[Dict[str, Any]] = []
        failed: List[Dict[str, str]] = []

        for content_id in content_ids:
            content = self.content_crud.get_by_id(content_id)
            if content is None:
                failed.append({"id": content_id, "error": "Content not found"})
                continue
            try:
                rewritten.append(await self.rewrite_content(content, model))
            except (ContentGenerationError, NotFoundError, ValidationError) as e:
                failed.append({"id": content_id, "error": e.message})

        return rewritten, failed
