"""Admin endpoints: user management, moderation, duplicates, analytics and prompt seeding."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError as PydanticValidationError

from app.api.v1.content import get_content_or_404, populate_content, run_batch_generation
from app.config import Settings, get_settings
from app.crud.category import CategoryCRUD
from app.crud.content import ContentCRUD
from app.crud.prompt import PromptTemplateCRUD
from app.crud.user import UserCRUD
from app.dependencies import get_content_generator, get_db_client, require_admin, require_staff
from app.models.content import ContentStatus
from app.models.prompt_template import PromptTemplateModel
from app.models.user import UserRole, public_user
from app.schemas.content_schema import BulkContentRequest, BulkRewriteRequest, GenerateRequest, ModerateRequest
from app.schemas.responses import list_response, success_response
from app.schemas.user_schema import AdminUserUpdateRequest
from app.services.ai.content_generator import ContentGenerator
from app.services.ai.prompts import CONTENT_SYSTEM_PROMPT, DEFAULT_PROMPT_TEMPLATE
from app.services.content.duplicates import find_duplicate_groups
from app.utils.dates import utcnow
from app.utils.exceptions import NotFoundError, ValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

MODERATION_ACTIONS = {
    "approve": ContentStatus.PUBLISHED.value,
    "reject": ContentStatus.REJECTED.value,
}


# Users

@router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    role: Optional[UserRole] = None,
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    filters = [("role", "==", role.value)] if role else None
    result = UserCRUD(db_client).list(filters, page=page, page_size=limit, order_by="created_at", direction="DESCENDING")
    pagination = {k: result[k] for k in ("total", "page", "pages", "limit")}
    users = [public_user(u) for u in result["items"]]
    return list_response(users, "users", "Users retrieved successfully", pagination=pagination)


@router.get("/users/{user_id}")
async def get_user(
    user_id: str,
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    user = UserCRUD(db_client).get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found", details={"id": user_id})
    return success_response({"user": public_user(user)}, "User retrieved successfully")


@router.patch("/users/{user_id}")
async def update_user(
    user_id: str,
    request: AdminUserUpdateRequest,
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Change a user's name, role, flags or subscription."""
    updates = request.changes()
    if "role" in updates:
        updates["role"] = UserRole(updates["role"]).value

    user = UserCRUD(db_client).update(user_id, updates)
    if user is None:
        raise NotFoundError("User not found", details={"id": user_id})

    logger.info(f"Admin {current_user['id']} updated user {user_id}: {sorted(updates)}")
    return success_response({"user": public_user(user)}, "User updated successfully")


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    if not UserCRUD(db_client).delete(user_id):
        raise NotFoundError("User not found", details={"id": user_id})
    logger.info(f"Admin {current_user['id']} deleted user {user_id}")
    return success_response(None, "User deleted successfully")


# Moderation and generation

@router.get("/content/pending")
async def list_pending_content(
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Content waiting for moderation, newest first."""
    result = ContentCRUD(db_client).get_content_list(
        [("status", "==", ContentStatus.PENDING.value)], page=1, page_size=1000
    )
    return list_response(populate_content(db_client, result["items"]), "content", "Pending content retrieved")


@router.patch("/content/{content_id}/moderate")
async def moderate_content(
    content_id: str,
    request: ModerateRequest,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Approve (publish) or reject a content item."""
    if request.action not in MODERATION_ACTIONS:
        raise ValidationError("Action must be approve or reject")

    content_crud = ContentCRUD(db_client)
    content = get_content_or_404(content_crud, content_id)

    now = utcnow()
    updates: Dict[str, Any] = {
        "status": MODERATION_ACTIONS[request.action],
        "moderation_notes": request.moderation_notes,
        "moderated_by": current_user["id"],
        "moderated_at": now,
    }
    if request.action == "approve" and not content.get("publish_date"):
        updates["publish_date"] = now

    updated = content_crud.update(content_id, updates)
    logger.info(f"Content {content_id} moderated ({request.action}) by {current_user['id']}")
    return success_response({"content": updated}, f"Content {request.action}d successfully")


@router.post("/content/generate", status_code=status.HTTP_201_CREATED)
async def generate_content(
    request: GenerateRequest,
    current_user: dict = Depends(require_staff),
    generator: ContentGenerator = Depends(get_content_generator),
) -> Dict[str, Any]:
    return await run_batch_generation(generator, request.category_ids, request.count, current_user)


# Duplicates

@router.get("/content/duplicates")
async def list_duplicates(
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Groups of content sharing the same normalized title."""
    groups = find_duplicate_groups(ContentCRUD(db_client).find(order_by="created_at"))
    return list_response(groups, "duplicates", "Duplicate groups retrieved successfully")


@router.post("/content/duplicates/rewrite")
async def rewrite_duplicates(
    request: BulkRewriteRequest,
    current_user: dict = Depends(require_staff),
    generator: ContentGenerator = Depends(get_content_generator),
) -> Dict[str, Any]:
    """Rewrite each selected item in turn; failures are reported, not fatal."""
    if not request.content_ids:
        raise ValidationError("At least one content ID is required")

    rewritten, failed = await generator.rewrite_many(request.content_ids, request.model)
    return success_response(
        {"rewritten_count": len(rewritten), "content": rewritten, "failed": failed},
        f"Rewrote {len(rewritten)} duplicate items",
    )


@router.post("/content/duplicates/delete")
async def delete_duplicates(
    request: BulkContentRequest,
    current_user: dict = Depends(require_staff),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Delete each selected item in turn; failures are reported, not fatal."""
    if not request.content_ids:
        raise ValidationError("At least one content ID is required")

    content_crud = ContentCRUD(db_client)
    deleted, failed = [], []
    for content_id in request.content_ids:
        if content_crud.delete(content_id):
            deleted.append(content_id)
        else:
            failed.append({"id": content_id, "error": "Content not found"})

    logger.info(f"Duplicate cleanup by {current_user['id']}: deleted={len(deleted)} failed={len(failed)}")
    return success_response(
        {"deleted_count": len(deleted), "deleted_ids": deleted, "failed": failed},
        f"Deleted {len(deleted)} duplicate items",
    )


# Analytics

@router.get("/analytics/content")
async def content_analytics(
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    content_crud = ContentCRUD(db_client)
    top_liked = [
        {"id": item["id"], "title": item.get("title"), "likes": (item.get("stats") or {}).get("likes", 0)}
        for item in content_crud.top_by_stat("likes", limit=10)
    ]
    return success_response(
        {
            "total": content_crud.count(),
            "by_status": content_crud.count_by("status"),
            "by_pool": content_crud.count_by("pool"),
            "by_content_type": content_crud.count_by("content_type"),
            "ai_generated": content_crud.count([("ai_generated", "==", True)]),
            "top_liked": top_liked,
        },
        "Content analytics retrieved successfully",
    )


@router.get("/analytics/users")
async def user_analytics(
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    users = UserCRUD(db_client).find()
    by_role: Dict[str, int] = {}
    by_tier: Dict[str, int] = {}
    for user in users:
        role = user.get("role") or "unknown"
        tier = (user.get("subscription") or {}).get("tier") or "free"
        by_role[role] = by_role.get(role, 0) + 1
        by_tier[tier] = by_tier.get(tier, 0) + 1

    return success_response(
        {
            "total": len(users),
            "active": sum(1 for u in users if u.get("active", True)),
            "by_role": by_role,
            "by_tier": by_tier,
        },
        "User analytics retrieved successfully",
    )


# Prompts

@router.post("/prompts/seed-from-file")
async def seed_prompts_from_file(
    current_user: dict = Depends(require_admin),
    db_client=Depends(get_db_client),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Apply the default prompts file (``{category_slug: prompt}``) to categories.

    Each matching category gets its ``prompt`` replaced; categories without a
    bound template also get one.
    """
    path = Path(settings.default_prompts_path)
    if not path.exists():
        raise NotFoundError("Default prompts file not found", details={"path": str(path)})

    try:
        prompts = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError("Default prompts file is not valid JSON", details={"error": str(e)}) from e
    if not isinstance(prompts, dict):
        raise ValidationError("Default prompts file must map category slugs to prompts")

    categories = CategoryCRUD(db_client)
    templates = PromptTemplateCRUD(db_client)
    updated_categories, new_prompts, errors = 0, 0, []

    for slug, prompt in prompts.items():
        category = categories.get_by_slug(slug)
        if category is None:
            errors.append(f"Category '{slug}' not found")
            continue
        if not isinstance(prompt, str) or not prompt.strip():
            errors.append(f"Prompt for '{slug}' is empty")
            continue

        categories.update(category["id"], {"prompt": prompt.strip()})
        updated_categories += 1

        if templates.find_one([("category", "==", category["id"])]) is None:
            try:
                template = PromptTemplateModel(
                    name=f"{category['name']} prompt",
                    description="Seeded from the default prompts file",
                    category=category["id"],
                    content_type=category.get("content_type", "hack"),
                    template=DEFAULT_PROMPT_TEMPLATE,
                    system_prompt=CONTENT_SYSTEM_PROMPT,
                    created_by=current_user["id"],
                )
            except PydanticValidationError as e:
                errors.append(f"Template for '{slug}' is invalid: {e.errors()[0]['msg']}")
                continue
            templates.create_template(template)
            new_prompts += 1

    logger.info(f"Prompts seeded: updated_categories={updated_categories} new_prompts={new_prompts} errors={len(errors)}")
    return success_response(
        {"updated_categories": updated_categories, "new_prompts": new_prompts, "errors": errors},
        "Prompts seeded from default file",
    )
