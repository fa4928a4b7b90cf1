"""
Shared application dependencies.
Supports both Firebase mode and local development mode.
"""

import os
import time
from typing import Any, Callable, Dict, Optional

import firebase_admin
from fastapi import Depends, Header
from firebase_admin import credentials, firestore

from app.config import Settings, get_settings
from app.core.security import decode_token
from app.crud.user import UserCRUD
from app.models.user import STAFF_ROLES, UserRole
from app.services.ai.content_generator import ContentGenerator
from app.services.ai.groq_service import GroqService
from app.utils.exceptions import (
    AIServiceUnavailableError,
    AuthenticationError,
    AuthorizationError,
    RateLimitExceededError,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Global Instances
_db_client = None
_ai_service = None
_is_local_mode = None


def _check_local_mode(settings: Settings) -> bool:
    """Determine if we should use local mode (no Firebase)."""
    global _is_local_mode
    if _is_local_mode is not None:
        return _is_local_mode

    cred_path = settings.firebase_credentials_path

    if not cred_path or not os.path.exists(cred_path):
        logger.info("Firebase credentials not found - running in LOCAL DEV mode")
        _is_local_mode = True
    else:
        _is_local_mode = False

    return _is_local_mode


def get_db_client(settings: Settings = Depends(get_settings)):
    """Get database client - Firestore in prod, LocalStore in dev."""
    global _db_client
    if _db_client is not None:
        return _db_client

    if _check_local_mode(settings):
        from app.services.local_store import get_local_store
        _db_client = get_local_store()
        logger.info("Using LocalStore database (persistent=%s)", _db_client.persistent)
    else:
        if not firebase_admin._apps:
            firebase_admin.initialize_app(credentials.Certificate(settings.firebase_credentials_path))
        _db_client = firestore.client()
        logger.info("Using Firestore database")

    return _db_client


def get_ai_service(settings: Settings = Depends(get_settings)) -> Optional[GroqService]:
    """Get the Groq text generation service, or None when no API key is configured."""
    global _ai_service
    if _ai_service is not None:
        return _ai_service

    if not settings.groq_api_key:
        logger.warning("No Groq API key - AI generation is unavailable")
        return None

    _ai_service = GroqService(
        api_key=settings.groq_api_key,
        allowed_models=settings.ai_allowed_models,
        default_model=settings.ai_default_model,
        timeout=settings.ai_timeout_seconds,
        max_retries=settings.ai_max_retries,
        requests_per_minute=settings.ai_requests_per_minute,
    )
    logger.info("Groq service initialized")
    return _ai_service


def get_content_generator(
    ai_service: Optional[GroqService] = Depends(get_ai_service),
    db: Any = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
) -> ContentGenerator:
    """Content generation pipeline; 503 when no AI provider is configured."""
    if ai_service is None:
        raise AIServiceUnavailableError()
    return ContentGenerator(ai_service, db, rewrite_model=settings.ai_rewrite_model)


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Any = Depends(get_db_client),
) -> Dict[str, Any]:
    """Resolve the bearer access token to the stored user document."""
    if not authorization:
        raise AuthenticationError("Authorization header missing")

    if not authorization.startswith("Bearer "):
        raise AuthenticationError("Invalid authorization header format")

    token = authorization.replace("Bearer ", "", 1).strip()

    try:
        payload = decode_token(token)
    except ValueError as e:
        raise AuthenticationError("Invalid or expired token") from e

    user = UserCRUD(db).get_by_id(payload.get("sub"))
    if user is None:
        raise AuthenticationError("The user belonging to this token no longer exists")
    if not user.get("active", True):
        raise AuthenticationError("User account is deactivated")

    return user


def require_roles(*roles: str) -> Callable:
    """Dependency factory restricting a route to the given roles."""

    async def checker(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if user.get("role") not in roles:
            raise AuthorizationError("You do not have permission to perform this action")
        return user

    return checker


require_staff = require_roles(*STAFF_ROLES)
require_admin = require_roles(UserRole.ADMIN.value)


def is_staff(user: Dict[str, Any]) -> bool:
    return user.get("role") in STAFF_ROLES


class RateLimiter:
    """Sliding window request counter keyed by user."""

    def __init__(self, max_requests: int = 100, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.requests: Dict[str, list] = {}

    def is_allowed(self, key: str) -> bool:
        now = time.time()
        cutoff = now - self.window_seconds
        if key not in self.requests:
            self.requests[key] = []
        self.requests[key] = [t for t in self.requests[key] if t > cutoff]
        if len(self.requests[key]) < self.max_requests:
            self.requests[key].append(now)
            return True
        return False

    def reset(self) -> None:
        self.requests.clear()


_rate_limiter = RateLimiter(max_requests=get_settings().rate_limit_per_minute)


def get_rate_limiter() -> RateLimiter:
    return _rate_limiter


def check_rate_limit(
    user: Dict[str, Any] = Depends(get_current_user),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> Dict[str, Any]:
    """Authenticated user, counted against the per-minute request limit."""
    if not limiter.is_allowed(user.get("id", "anonymous")):
        raise RateLimitExceededError(details={"limit_per_minute": limiter.max_requests})
    return user
