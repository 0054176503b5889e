"""
Shared fixtures: in-memory SQLite database, services' session, HTTP client and users.
"""
import os
from functools import lru_cache
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Test environment, set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["AUTO_SEED"] = "false"

from pipetrack.api.main import app  # noqa: E402
from pipetrack.core.security import create_access_token, get_password_hash  # noqa: E402
from pipetrack.db.base import Base  # noqa: E402
from pipetrack.db.models.security import User  # noqa: E402
from pipetrack.db.session import get_async_session  # noqa: E402
from pipetrack.schemas.orders import OrderCreate, SubOrderCreate  # noqa: E402
from pipetrack.services.cache import order_cache  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "secret123"


@lru_cache(maxsize=1)
def _password_hash() -> str:
    # bcrypt is slow; hash once per run.
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def file_session_factory(tmp_path):
    """Sessions over an on-disk database, so separate sessions use separate connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'pipetrack.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def clean_order_cache():
    order_cache.invalidate("test setup")
    yield
    order_cache.invalidate("test teardown")


@pytest.fixture
async def users(session_factory):
    """One active user per role, keyed by role."""
    created = {}
    async with session_factory() as session:
        for username, role in (
            ("admin", "admin"),
            ("entry", "order_entry"),
            ("prod", "production"),
            ("operator", "operator"),
        ):
            user = User(username=username, name=username.title(), role=role, hashed_password=_password_hash())
            session.add(user)
            created[role] = user
        await session.commit()
    return created


def auth_headers(user) -> dict:
    token = create_access_token(subject=str(user.id), username=user.username, role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers(users):
    """Bearer headers per role: headers['admin'], headers['order_entry'], ..."""
    return {role: auth_headers(user) for role, user in users.items()}


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, one database session per request."""

    async def override_get_async_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def make_order(order_no: str = "ORD-1", *items: SubOrderCreate, **header) -> OrderCreate:
    """Order payload; defaults to one DN100 K9 line of 10 pipes."""
    if not items:
        items = (make_item(),)
    return OrderCreate(order_no=order_no, items=list(items), **header)


def make_item(**overrides) -> SubOrderCreate:
    data = {
        "spec": "DN100",
        "level": "K9",
        "interface_type": "T型",
        "lining": "水泥砂浆",
        "length": "6米",
        "coating": "沥青漆",
        "planned_quantity": 10,
    }
    data.update(overrides)
    return SubOrderCreate(**data)


def order_payload(order_no: str = "ORD-1", planned: int = 10, **header) -> dict:
    """JSON body for POST /orders with a single line."""
    body = {
        "order_no": order_no,
        "customer_name": "Test Customer",
        "workshop": "一车间",
        "warehouse": "成品库A",
        "items": [
            {
                "spec": "DN100",
                "level": "K9",
                "interface_type": "T型",
                "lining": "水泥砂浆",
                "length": "6米",
                "coating": "沥青漆",
                "planned_quantity": planned,
            }
        ],
    }
    body.update(header)
    return body
