"""
Configuration module for the Windspire backend.
Loads settings from .env file and environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _split_csv(raw: str) -> List[str]:
    return [s.strip() for s in raw.split(",") if s.strip()]


class Settings:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        self.app_name: str = os.getenv("APP_NAME", "Windspire")
        self.api_version: str = os.getenv("API_VERSION", "v1")
        self.debug: bool = os.getenv("DEBUG", "true").lower() in ("true", "1", "yes")
        self.environment: str = os.getenv("ENVIRONMENT", "development")
        self.log_format: str = os.getenv("LOG_FORMAT", "json").lower()

        # AI provider
        self.groq_api_key: str = os.getenv("GROQ_API_KEY", "")
        self.ai_default_model: str = os.getenv("AI_DEFAULT_MODEL", "llama-3.3-70b-versatile")
        self.ai_rewrite_model: str = os.getenv("AI_REWRITE_MODEL", "llama-3.3-70b-versatile")
        self.ai_allowed_models: List[str] = _split_csv(
            os.getenv(
                "AI_ALLOWED_MODELS",
                "llama-3.3-70b-versatile,llama-3.1-8b-instant,openai/gpt-oss-120b",
            )
        )
        self.ai_timeout_seconds: int = int(os.getenv("AI_TIMEOUT_SECONDS", "60"))
        self.ai_max_retries: int = int(os.getenv("AI_MAX_RETRIES", "3"))
        self.ai_requests_per_minute: int = int(os.getenv("AI_REQUESTS_PER_MINUTE", "30"))

        # Storage
        self.firebase_credentials_path: str = os.getenv("FIREBASE_CREDENTIALS_PATH", "")
        data_dir = os.getenv("LOCAL_DATA_DIR", "./data")
        self.local_data_dir: Optional[str] = data_dir or None
        self.default_prompts_path: str = os.getenv(
            "DEFAULT_PROMPTS_PATH", str(Path(__file__).parent.parent / "seed" / "default_prompts.json")
        )

        # CORS
        self.cors_origins: List[str] = _split_csv(os.getenv("CORS_ORIGINS", "*"))

        # Security
        self.secret_key: str = os.getenv("SECRET_KEY", "windspire-dev-secret")
        self.algorithm: str = os.getenv("ALGORITHM", "HS256")
        self.access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
        self.refresh_token_expire_days: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

        # Rate limiting
        self.rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "100"))


_settings = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
