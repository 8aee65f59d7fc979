"""
HotTakes API: Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the test suite.
How:   Environment variables are set before anything imports hottakes,
       so the settings singleton, the engine and the image directory all
       point at throwaway locations.

Fixtures:
    ├── mock_db_session:    AsyncMock session for service-level tests
    ├── temp_storage:       temporary image directory
    ├── sample_image_bytes: tiny PNG for upload tests
    ├── db_engine:          in-memory SQLite with the schema created
    ├── session_factory:    sessions bound to db_engine
    ├── test_client:        httpx AsyncClient on the app, DB overridden
    ├── user_id / other_user_id / auth_headers / other_auth_headers
    └── create_sauce:       inserts a sauce row directly
"""

import os
import tempfile

# Override settings BEFORE any hottakes import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="hottakes_test_")
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from hottakes.database import Base, generate_object_id, get_db_session  # noqa: E402
from hottakes.models.sauce import Sauce  # noqa: E402
from hottakes.models.user import User  # noqa: E402, F401
from hottakes.services.auth_service import create_access_token  # noqa: E402

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c63000100000500010d0a2db40000000049454e44ae426082"
)


# ══════════════════════════════════════════════════════════════════════════
# Unit Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "images"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    return PNG_BYTES


@pytest.fixture
def user_id():
    return generate_object_id()


@pytest.fixture
def other_user_id():
    return generate_object_id()


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def other_auth_headers(other_user_id):
    return {"Authorization": f"Bearer {create_access_token(other_user_id)}"}


# ══════════════════════════════════════════════════════════════════════════
# Database and API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite shared by every session of one test.

    StaticPool keeps a single connection, so the schema created here is
    the one the request sessions see.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_client(session_factory):
    """httpx client routed straight into the app; get_db_session uses db_engine."""
    from hottakes.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def create_sauce(session_factory, user_id):
    """Inserts a sauce owned by user_id unless another owner is given."""

    async def _create(**overrides: Any) -> Sauce:
        values: Dict[str, Any] = {
            "user_id": user_id,
            "name": "Sriracha",
            "manufacturer": "Huy Fong Foods",
            "description": "Chili, sugar, garlic, salt and vinegar",
            "main_pepper": "Red jalapeño",
            "image_url": "http://test/images/sriracha.png",
            "heat": 4,
            "likes": 0,
            "dislikes": 0,
            "users_liked": [],
            "users_disliked": [],
        }
        values.update(overrides)
        async with session_factory() as session:
            sauce = Sauce(**values)
            session.add(sauce)
            await session.commit()
            return sauce

    return _create
