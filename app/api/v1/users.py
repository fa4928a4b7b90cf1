"""User profile, preferences, progress and device endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status

from app.crud.content import ContentCRUD
from app.crud.user import UserCRUD
from app.dependencies import check_rate_limit, get_db_client
from app.models.user import DevicePlatform, UserPreferences, public_user
from app.schemas.responses import success_response
from app.schemas.user_schema import DeviceTokenRequest, UpdatePreferencesRequest, UpdateProfileRequest
from app.utils.dates import utcnow
from app.utils.exceptions import ValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _content_titles(db_client, content_ids) -> list:
    items = ContentCRUD(db_client).get_many(list(content_ids or []))
    return [{"id": item["id"], "title": item.get("title")} for item in items]


@router.get("/profile")
async def get_profile(current_user: dict = Depends(check_rate_limit)) -> Dict[str, Any]:
    """Get current user's profile."""
    return success_response({"user": public_user(current_user)}, "User profile retrieved successfully")


@router.patch("/profile")
async def update_profile(
    request: UpdateProfileRequest,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """
    Update name and avatar. Any other field in the body is ignored.
    """
    updates = request.model_dump(exclude_none=True)
    user = current_user
    if updates:
        user = UserCRUD(db_client).update(current_user["id"], updates)
        logger.info(f"Profile updated for user {current_user['id']}: {sorted(updates)}")
    return success_response({"user": public_user(user)}, "Profile updated successfully")


@router.patch("/preferences")
async def update_preferences(
    request: UpdatePreferencesRequest,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Merge the provided preference fields into the stored preferences."""
    preferences = UserPreferences(**(current_user.get("preferences") or {})).model_dump()

    if request.theme is not None:
        preferences["theme"] = request.theme
    if request.notifications is not None:
        preferences["notifications"].update(request.notifications.model_dump(exclude_none=True))
    if request.content_preferences is not None:
        preferences["content_preferences"].update(request.content_preferences.model_dump(exclude_none=True))

    UserCRUD(db_client).update(current_user["id"], {"preferences": preferences})
    return success_response({"preferences": preferences}, "Preferences updated successfully")


@router.get("/progress")
async def get_progress(
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Stats and reading progress, with titles for completed and saved content."""
    progress = current_user.get("progress") or {}
    return success_response(
        {
            "stats": current_user.get("stats") or {},
            "progress": {
                "completed_content": _content_titles(db_client, progress.get("completed_content")),
                "saved_content": _content_titles(db_client, progress.get("saved_content")),
                "category_progress": progress.get("category_progress") or [],
            },
        },
        "Progress retrieved successfully",
    )


@router.post("/devices")
async def register_device(
    request: DeviceTokenRequest,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """
    Register a push notification token.

    Registering a known token only refreshes its ``last_used`` timestamp.
    """
    if not request.token or not request.platform:
        raise ValidationError("Token and platform are required")

    platforms = [p.value for p in DevicePlatform]
    if request.platform not in platforms:
        raise ValidationError(f"Platform must be one of {platforms}")

    now = utcnow()
    tokens = list(current_user.get("device_tokens") or [])
    existing = next((t for t in tokens if t.get("token") == request.token), None)
    if existing is not None:
        existing["last_used"] = now
        existing["platform"] = request.platform
    else:
        tokens.append({"token": request.token, "platform": request.platform, "last_used": now})

    UserCRUD(db_client).update(current_user["id"], {"device_tokens": tokens})
    return success_response({"device_tokens": tokens}, "Device registered successfully")


@router.delete("/devices")
async def remove_device(
    request: DeviceTokenRequest,
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Dict[str, Any]:
    """Remove a push notification token."""
    if not request.token:
        raise ValidationError("Token is required")

    tokens = [t for t in current_user.get("device_tokens") or [] if t.get("token") != request.token]
    UserCRUD(db_client).update(current_user["id"], {"device_tokens": tokens})
    return success_response({"device_tokens": tokens}, "Device removed successfully")


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_account(
    current_user: dict = Depends(check_rate_limit),
    db_client=Depends(get_db_client),
) -> Response:
    """Deactivate the current account."""
    UserCRUD(db_client).update(current_user["id"], {"active": False})
    logger.info(f"User {current_user['id']} deactivated their account")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
