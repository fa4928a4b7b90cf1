"""Prompt template endpoints (staff only)."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError as PydanticValidationError

from app.crud.category import CategoryCRUD
from app.crud.prompt import PromptTemplateCRUD
from app.dependencies import get_db_client, require_staff
from app.models.prompt_template import PromptTemplateModel
from app.schemas.prompt_schema import PromptCreateRequest, PromptUpdateRequest
from app.schemas.responses import list_response, success_response
from app.services.ai.prompts import DEFAULT_TEMPLATES
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _get_template_or_404(templates: PromptTemplateCRUD, prompt_id: str) -> Dict[str, Any]:
    template = templates.get_by_id(prompt_id)
    if template is None:
        raise NotFoundError("Prompt template not found", details={"id": prompt_id})
    return template


def _check_category(db_client, category_id: Optional[str]) -> None:
    if category_id and CategoryCRUD(db_client).get_by_id(category_id) is None:
        raise NotFoundError("Category not found", details={"id": category_id})


@router.get("/")
async def list_prompts(
    category: Optional[str] = None,
    content_type: Optional[str] = None,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    templates = PromptTemplateCRUD(db_client).list_templates(category=category, content_type=content_type)
    return list_response(templates, "prompts", "Prompt templates retrieved successfully")


@router.post("/import-defaults", status_code=status.HTTP_201_CREATED)
async def import_default_prompts(
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Create the built-in templates that are not stored yet (matched by name)."""
    templates = PromptTemplateCRUD(db_client)
    prompt_ids = []
    for default in DEFAULT_TEMPLATES:
        if templates.get_by_name(default["name"]):
            continue
        created = templates.create_template(PromptTemplateModel(**default, created_by=current_user["id"]))
        prompt_ids.append(created["id"])

    logger.info(f"Imported {len(prompt_ids)} default prompt templates")
    return success_response(
        {"count": len(prompt_ids), "prompt_ids": prompt_ids},
        f"Imported {len(prompt_ids)} default prompts",
    )


@router.get("/{prompt_id}")
async def get_prompt(
    prompt_id: str,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    template = _get_template_or_404(PromptTemplateCRUD(db_client), prompt_id)
    return success_response({"prompt": template}, "Prompt template retrieved successfully")


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_prompt(
    request: PromptCreateRequest,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    _check_category(db_client, request.category)
    try:
        template = PromptTemplateModel(**request.model_dump(), created_by=current_user["id"])
    except PydanticValidationError as e:
        raise ValidationError("Invalid prompt template", details={"errors": [err["msg"] for err in e.errors()]}) from e

    created = PromptTemplateCRUD(db_client).create_template(template)
    return success_response({"prompt": created}, "Prompt template created successfully")


@router.patch("/{prompt_id}")
async def update_prompt(
    prompt_id: str,
    request: PromptUpdateRequest,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    templates = PromptTemplateCRUD(db_client)
    existing = _get_template_or_404(templates, prompt_id)

    updates = request.changes(mode="json")
    _check_category(db_client, updates.get("category"))

    try:
        PromptTemplateModel(**{**existing, **updates})
    except PydanticValidationError as e:
        raise ValidationError("Invalid prompt template", details={"errors": [err["msg"] for err in e.errors()]}) from e

    updated = templates.update(prompt_id, updates)
    return success_response({"prompt": updated}, "Prompt template updated successfully")


@router.delete("/{prompt_id}")
async def delete_prompt(
    prompt_id: str,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    if not PromptTemplateCRUD(db_client).delete(prompt_id):
        raise NotFoundError("Prompt template not found", details={"id": prompt_id})
    return success_response(None, "Prompt template deleted successfully")
