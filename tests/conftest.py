"""
Pytest configuration and shared fixtures for backend tests.
"""

import os

# Settings are read once; pin a memory-only store and no AI key before the app is imported
os.environ["LOCAL_DATA_DIR"] = ""
os.environ["GROQ_API_KEY"] = ""
os.environ["FIREBASE_CREDENTIALS_PATH"] = ""
os.environ["AI_REWRITE_MODEL"] = ""
os.environ["DEBUG"] = "false"

from datetime import datetime, timezone  # noqa: E402
from typing import AsyncGenerator, Optional  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.core.security import create_token_pair, password_hasher  # noqa: E402
from app.crud.category import CategoryCRUD  # noqa: E402
from app.crud.content import ContentCRUD  # noqa: E402
from app.crud.user import UserCRUD  # noqa: E402
from app.dependencies import RateLimiter, get_ai_service, get_db_client, get_rate_limiter  # noqa: E402
from app.models.category import CategoryModel  # noqa: E402
from app.models.content import ContentModel  # noqa: E402
from app.models.user import Subscription, UserModel  # noqa: E402
from app.services.local_store import LocalStore  # noqa: E402

TEST_PASSWORD = "testpassword123"
# Hashing once keeps fixtures fast
TEST_PASSWORD_HASH = password_hasher.hash(TEST_PASSWORD)

GENERATED_JSON = """Here are your items:
```json
[
  {"title": "Batch your errands", "body": "Group errands by location so one trip covers several tasks.", "summary": "Fewer trips", "tags": ["errands", "time"]},
  {"title": "Two minute rule", "body": "If a task takes less than two minutes, do it immediately instead of listing it.", "summary": "Do it now", "tags": ["habits"]}
]
```"""


class FakeAIService:
    """Stands in for GroqService; records calls and replays canned responses."""

    default_model = "fake-model"

    def __init__(self):
        self.allowed_models = ["fake-model", "other-model"]
        self.responses = []
        self.default_response = GENERATED_JSON
        self.error: Optional[Exception] = None
        self.calls = []

    def resolve_model(self, model: Optional[str]) -> str:
        if not model:
            return self.default_model
        if model not in self.allowed_models:
            raise ValueError(f"Invalid model '{model}'. Must be one of {self.allowed_models}")
        return model

    def generate_text(self, prompt, system_prompt=None, model=None, max_tokens=4096, temperature=0.8):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "model": model})
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return self.default_response


@pytest.fixture
def store() -> LocalStore:
    """Memory-only document store."""
    return LocalStore()


@pytest.fixture
def fake_ai() -> FakeAIService:
    return FakeAIService()


@pytest.fixture
async def async_client(store: LocalStore, fake_ai: FakeAIService) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    # Import app here so the environment above is in place first
    from app.main import app

    limiter = RateLimiter(max_requests=1000)
    app.dependency_overrides[get_db_client] = lambda: store
    app.dependency_overrides[get_ai_service] = lambda: fake_ai
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(store: LocalStore):
    """Factory creating stored users."""

    def _make_user(
        email: str = "user@example.com",
        role: str = "user",
        tier: str = "free",
        name: str = "Test User",
        active: bool = True,
    ) -> dict:
        return UserCRUD(store).create_user(UserModel(
            name=name,
            email=email,
            password=TEST_PASSWORD_HASH,
            role=role,
            active=active,
            subscription=Subscription(tier=tier, status="active" if tier != "free" else "none"),
        ))

    return _make_user


def headers_for(user: dict) -> dict:
    """Bearer headers for a stored user."""
    token = create_token_pair(user["id"], user["role"])["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def token_headers():
    return headers_for


@pytest.fixture
def user_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def test_user(make_user) -> dict:
    return make_user()


@pytest.fixture
def auth_headers(test_user: dict) -> dict:
    return headers_for(test_user)


@pytest.fixture
def admin_user(make_user) -> dict:
    return make_user(email="admin@example.com", role="admin", tier="premium", name="Admin User")


@pytest.fixture
def admin_headers(admin_user: dict) -> dict:
    return headers_for(admin_user)


@pytest.fixture
def creator_headers(make_user) -> dict:
    return headers_for(make_user(email="creator@example.com", role="content-creator", name="Creator"))


@pytest.fixture
def category(store: LocalStore) -> dict:
    return CategoryCRUD(store).create_category(CategoryModel(
        name="Productivity",
        description="Work smarter",
        default_num_to_generate=3,
        prompt="Keep every item under 80 words.",
    ))


@pytest.fixture
def make_content(store: LocalStore, category: dict):
    """Factory creating stored content items."""

    def _make_content(
        title: str = "Sample hack",
        body: str = "A useful sample body.",
        status: str = "published",
        category_id: Optional[str] = None,
        publish_date: Optional[datetime] = None,
        **fields,
    ) -> dict:
        content = ContentModel(
            title=title,
            body=body,
            category=category_id or category["id"],
            status=status,
            publish_date=publish_date,
            **fields,
        )
        return ContentCRUD(store).create_content(content)

    return _make_content


@pytest.fixture
def utc_noon() -> datetime:
    return datetime(2024, 5, 17, 12, 0, tzinfo=timezone.utc)
