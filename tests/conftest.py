"""
Test fixtures for Decision Hub.

Provides:
- Async DB engine/session (SQLite in-memory, one per test)
- Fake chat-completions and Stripe upstreams on httpx.MockTransport
- A service container wired to those fakes
- Seed helpers for profiles, roles, cases and memberships
- Authenticated FastAPI test client
"""

import uuid
from typing import AsyncGenerator, Callable, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from decisionhub.config import Settings
from decisionhub.db.engine import Base
from decisionhub.db.models import (  # noqa: F401 - register all models
    Analysis,
    CaseAccessLog,
    DecisionCase,
    Notification,
    Profile,
    Revision,
    Simulation,
    StripeProduct,
    Subscription,
    TeamInvitation,
    TeamMember,
    UserRole,
)
from decisionhub.services.container import ServiceContainer, build_services
from tests.fakes import (
    GATEWAY_URL,
    GROQ_URL,
    STRIPE_URL,
    WEBHOOK_SECRET,
    FakeLLM,
    FakeStripe,
    auth_headers,
    stripe_http_client,
)

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ── Settings & services ─────────────────────────────────────────────────


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        GROQ_API_KEY="gsk_test",
        GROQ_API_URL=GROQ_URL,
        AI_GATEWAY_API_KEY="gw_test",
        AI_GATEWAY_URL=GATEWAY_URL,
        STRIPE_SECRET_KEY="sk_test_123",
        STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET,
        STRIPE_API_URL=STRIPE_URL,
        STRIPE_MAX_NETWORK_RETRIES=0,
        FRONTEND_URL="https://hub.test",
    )


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def fake_stripe() -> FakeStripe:
    return FakeStripe()


@pytest_asyncio.fixture
async def services(test_settings, fake_llm, fake_stripe) -> AsyncGenerator[ServiceContainer, None]:
    container = build_services(
        test_settings,
        llm_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_llm.handler)),
        stripe_http_client=stripe_http_client(fake_stripe.handler),
    )
    yield container
    await container.aclose()


# ── Database ────────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database with all tables."""
    eng = create_async_engine(
        TEST_DB_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


# ── Seed helpers ────────────────────────────────────────────────────────


@pytest.fixture
def owner_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def seed(session_factory) -> Callable:
    """Persist ORM objects in their own committed session."""

    async def _seed(*objects):
        async with session_factory() as session:
            session.add_all(objects)
            await session.commit()
            for obj in objects:
                await session.refresh(obj)
        return objects[0] if len(objects) == 1 else objects

    return _seed


@pytest.fixture
def make_case(seed, owner_id) -> Callable:
    async def _make_case(user_id: Optional[uuid.UUID] = None, **fields) -> DecisionCase:
        values = {
            "title": "Launch EU Site",
            "description": "Open a localized storefront for EU customers",
            "status": "active",
        }
        values.update(fields)
        return await seed(DecisionCase(user_id=user_id or owner_id, **values))

    return _make_case


@pytest.fixture
def make_user(seed) -> Callable:
    """Create a profile (and optionally a role) for a fresh user id."""

    async def _make_user(email: Optional[str] = None, role: Optional[str] = None) -> uuid.UUID:
        user_id = uuid.uuid4()
        await seed(Profile(user_id=user_id, email=email or f"user-{user_id.hex[:8]}@example.com"))
        if role:
            await seed(UserRole(user_id=user_id, role=role))
        return user_id

    return _make_user


@pytest.fixture
def set_role(seed) -> Callable:
    async def _set_role(user_id: uuid.UUID, role: str) -> None:
        await seed(UserRole(user_id=user_id, role=role))

    return _set_role


@pytest.fixture
def add_member(seed) -> Callable:
    async def _add_member(case: DecisionCase, member_id: uuid.UUID, role: str) -> TeamMember:
        return await seed(
            TeamMember(case_id=case.id, user_id=case.user_id, invited_user_id=member_id, role=role)
        )

    return _add_member


# ── API client ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def app(services, session_factory):
    """Application wired to the fake upstreams and the test database."""
    from decisionhub.api.deps import get_db
    from decisionhub.main import create_app

    application = create_app(services=services)

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app, owner_id):
    """Async test client authenticated as ``owner_id``."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=auth_headers(owner_id),
    ) as c:
        yield c


@pytest_asyncio.fixture
async def anon_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
