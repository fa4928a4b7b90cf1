"""Main v1 API router that aggregates all sub-routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .users import router as users_router
from .content import router as content_router
from .categories import router as categories_router
from .admin import router as admin_router
from .subscriptions import router as subscriptions_router
from .prompts import router as prompts_router

# Main v1 router
router = APIRouter(prefix="/api/v1")

# Include all sub-routers with appropriate prefixes
router.include_router(auth_router, prefix="/auth", tags=["Auth"])
router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(content_router, prefix="/content", tags=["Content"])
router.include_router(categories_router, prefix="/categories", tags=["Categories"])
router.include_router(admin_router, prefix="/admin", tags=["Admin"])
router.include_router(subscriptions_router, prefix="/subscription", tags=["Subscriptions"])
router.include_router(prompts_router, prefix="/prompts", tags=["Prompts"])

__all__ = ["router"]
