import os
import uuid
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator

# Configure database for tests via settings module rather than hardcoding directly.
# Allow overriding with TEST_DATABASE_URL; fall back to a local sqlite file.
test_db_url = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///./tests/test.db")
os.environ.setdefault("DATABASE_URL", test_db_url)
os.environ.setdefault("AUTH_ENABLED", "false")

from ideaboard.core import config as _config  # noqa: E402
_config.get_settings.cache_clear()  # ensure new env vars are picked up # type: ignore[attr-defined]
_settings = _config.get_settings()

from ideaboard.api import deps  # noqa: E402
from ideaboard.api.main import app  # noqa: E402
from ideaboard.core.cache import TTLResponseCache  # noqa: E402
from ideaboard.core.errors import GenerationUnavailable  # noqa: E402
from ideaboard.db.session import AsyncSessionLocal, engine, Base  # noqa: E402
from ideaboard.models.user import User  # noqa: E402
from ideaboard.models.idea import Idea  # noqa: E402
from sqlalchemy import delete  # noqa: E402

CANNED_IDEAS = """[
  {"title": "Ten Fintech Myths", "description": "Debunk common myths.", "keywords": ["fintech", "myths"],
   "targetAudience": "Founders", "estimatedEngagement": "high"},
  {"title": "Open Banking 101", "description": "Explain open banking.", "keywords": ["banking"],
   "targetAudience": "Consumers", "estimatedEngagement": "medium"},
  {"title": "Fraud Signals", "description": "Spot fraud early.", "keywords": ["fraud", "risk"],
   "targetAudience": "Risk teams", "estimatedEngagement": "low"}
]"""


class FakeGenerator:
    """Records every prompt and answers with canned text (or raises)."""

    def __init__(self, response: str = CANNED_IDEAS, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    async def generate(self, prompt: str, max_tokens: int, temperature: float) -> str:
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.response


@pytest_asyncio.fixture(autouse=True, scope="session")
async def prepare_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest.fixture(scope="session")
def settings():
    """Expose application settings to tests if needed."""
    return _settings

@pytest_asyncio.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:  # type: ignore
        yield session

@pytest.fixture()
def fake_generator() -> FakeGenerator:
    return FakeGenerator()

@pytest.fixture()
def failing_generator() -> FakeGenerator:
    return FakeGenerator(error=GenerationUnavailable("provider timed out"))

@pytest.fixture()
def response_cache() -> TTLResponseCache:
    return TTLResponseCache(max_entries=16)

@pytest_asyncio.fixture()
async def client(fake_generator, response_cache):
    app.dependency_overrides[deps.get_text_generator] = lambda: fake_generator
    app.dependency_overrides[deps.get_response_cache] = lambda: response_cache
    # httpx >=0.28 removed the 'app=' shortcut; use ASGITransport explicitly
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()

@pytest_asyncio.fixture()
async def make_user(client):
    """Create a user through the API; returns (user_id, headers acting as that user)."""
    async def _make(email: str | None = None) -> tuple[str, dict]:
        email = email or f"{uuid.uuid4().hex[:10]}@example.com"
        resp = await client.post("/api/v1/users/", json={"email": email, "role": "user"})
        assert resp.status_code == 201, resp.text
        user_id = resp.json()["id"]
        return user_id, {"X-User-Id": user_id}
    return _make

@pytest_asyncio.fixture(autouse=True)
async def _clear_tables():
    """Ensure isolated tests by clearing core tables before each test.
    Order matters due to FK constraints: Idea -> User.
    """
    async with AsyncSessionLocal() as session:  # type: ignore
        await session.execute(delete(Idea))
        await session.execute(delete(User))
        await session.commit()
    yield
