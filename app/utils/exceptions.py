"""Application exceptions rendered into the ``success: false`` error envelope."""

from typing import Any, Dict, Optional


class WindspireException(Exception):
    """
    Base exception for the Windspire application.

    Subclasses set ``status_code``, ``error_code`` and ``default_message`` at
    class level and are raised as ``SomeError("message", details={...})``.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Body of the ``error`` member of the response envelope."""
        return {"code": self.error_code, "message": self.message, "details": self.details}


class ContentGenerationError(WindspireException):
    """Raised when AI content generation or rewriting fails."""

    error_code = "CONTENT_GENERATION_ERROR"
    default_message = "Failed to generate content"


class AIServiceUnavailableError(WindspireException):
    """Raised when no AI provider is configured."""

    status_code = 503
    error_code = "AI_SERVICE_UNAVAILABLE"
    default_message = "AI generation service is not configured"


class AuthenticationError(WindspireException):
    status_code = 401
    error_code = "AUTHENTICATION_ERROR"
    default_message = "Authentication failed"


class AuthorizationError(WindspireException):
    status_code = 403
    error_code = "AUTHORIZATION_ERROR"
    default_message = "Insufficient permissions"


class NotFoundError(WindspireException):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class ValidationError(WindspireException):
    """Raised when request data fails a rule checked in the route."""

    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class ConflictError(WindspireException):
    status_code = 409
    error_code = "CONFLICT"
    default_message = "Resource already exists"


class RateLimitExceededError(WindspireException):
    status_code = 429
    error_code = "RATE_LIMIT_EXCEEDED"
    default_message = "Rate limit exceeded"
