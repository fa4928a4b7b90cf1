"""
Windspire Schemas
Pydantic request/response schemas for API validation and documentation.
"""

from app.schemas.auth_schema import RegisterRequest, LoginRequest, RefreshTokenRequest
from app.schemas.user_schema import (
    UpdateProfileRequest,
    UpdatePreferencesRequest,
    DeviceTokenRequest,
    AdminUserUpdateRequest,
)
from app.schemas.content_schema import (
    ContentCreateRequest,
    ContentUpdateRequest,
    RateContentRequest,
    RewriteRequest,
    GenerateMultipleRequest,
    GenerateRequest,
    ModerateRequest,
    BulkContentRequest,
    BulkRewriteRequest,
)
from app.schemas.category_schema import CategoryCreateRequest, CategoryUpdateRequest
from app.schemas.subscription_schema import PlanCreateRequest, PlanUpdateRequest
from app.schemas.prompt_schema import PromptCreateRequest, PromptUpdateRequest
from app.schemas.responses import (
    ApiResponse,
    Pagination,
    ErrorResponse,
    success_response,
    list_response,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "UpdateProfileRequest",
    "UpdatePreferencesRequest",
    "DeviceTokenRequest",
    "AdminUserUpdateRequest",
    "ContentCreateRequest",
    "ContentUpdateRequest",
    "RateContentRequest",
    "RewriteRequest",
    "GenerateMultipleRequest",
    "GenerateRequest",
    "ModerateRequest",
    "BulkContentRequest",
    "BulkRewriteRequest",
    "CategoryCreateRequest",
    "CategoryUpdateRequest",
    "PlanCreateRequest",
    "PlanUpdateRequest",
    "PromptCreateRequest",
    "PromptUpdateRequest",
    "ApiResponse",
    "Pagination",
    "ErrorResponse",
    "success_response",
    "list_response",
]
