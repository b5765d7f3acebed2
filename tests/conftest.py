"""Pytest configuration and shared fixtures."""

import os
from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, Mock

# Set required environment variables for testing BEFORE importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENABLE_EXPIRY_SWEEP", "false")
os.environ.setdefault("GENERATE_POLICY_PDF", "false")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from insurance_api.core.database import Base
from insurance_api.database.models import Agent, Customer, InsuranceType, Offer, User
from insurance_api.main import app
from insurance_api.schemas.auth import Actor
from insurance_api.schemas.enums import OfferStatus, UserRole
from insurance_api.utils.time import utc_now


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def mock_httpx_client() -> Mock:
    """Create mock httpx client."""
    client = Mock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    return client


# --------------------------------------------------------------------------- #
# Database fixtures (in-memory SQLite)
# --------------------------------------------------------------------------- #

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seed(session_factory) -> SimpleNamespace:
    """Users, customers, agents and insurance types shared by service tests."""
    async with session_factory() as session:
        admin = User(email="admin@example.com", full_name="Admin", role=UserRole.ADMIN)
        home_agent_user = User(email="konut@example.com", full_name="Home Agent", role=UserRole.AGENT)
        travel_agent_user = User(email="seyahat@example.com", full_name="Travel Agent", role=UserRole.AGENT)
        life_agent_user = User(email="hayat@example.com", full_name="Life Agent", role=UserRole.AGENT)
        customer_user = User(email="ayse@example.com", full_name="Ayşe Yılmaz", role=UserRole.CUSTOMER)
        other_customer_user = User(email="mehmet@example.com", full_name="Mehmet Demir", role=UserRole.CUSTOMER)
        session.add_all([
            admin, home_agent_user, travel_agent_user, life_agent_user,
            customer_user, other_customer_user,
        ])
        await session.flush()

        customer = Customer(user_id=customer_user.id, id_no="12345678901", address="Kadıköy, İstanbul")
        other_customer = Customer(user_id=other_customer_user.id, id_no="10987654321")
        home_agent = Agent(user_id=home_agent_user.id, agent_code="AG-KNT", department="Konut")
        travel_agent = Agent(user_id=travel_agent_user.id, agent_code="AG-SYH", department="Seyahat")
        life_agent = Agent(user_id=life_agent_user.id, agent_code="AG-HYT", department="Hayat")

        home = InsuranceType(name="Konut Sigortası", category="Konut", base_price=Decimal("1500"))
        travel = InsuranceType(name="Seyahat Sigortası", category="Seyahat", base_price=Decimal("300"))
        life = InsuranceType(name="Hayat Sigortası", category="Hayat", base_price=Decimal("2500"))
        auto = InsuranceType(name="Trafik Sigortası", category="Trafik", base_price=Decimal("900"))
        unknown = InsuranceType(name="Evcil Hayvan", category="Diğer", base_price=Decimal("100"))

        session.add_all([
            customer, other_customer, home_agent, travel_agent, life_agent,
            home, travel, life, auto, unknown,
        ])
        await session.commit()

        return SimpleNamespace(
            admin=Actor(actor_id=admin.id, role=UserRole.ADMIN),
            home_agent=Actor(actor_id=home_agent_user.id, role=UserRole.AGENT),
            travel_agent=Actor(actor_id=travel_agent_user.id, role=UserRole.AGENT),
            life_agent=Actor(actor_id=life_agent_user.id, role=UserRole.AGENT),
            customer=Actor(actor_id=customer_user.id, role=UserRole.CUSTOMER),
            other_customer=Actor(actor_id=other_customer_user.id, role=UserRole.CUSTOMER),
            customer_id=customer.id,
            other_customer_id=other_customer.id,
            home_agent_id=home_agent.id,
            home_type_id=home.id,
            travel_type_id=travel.id,
            life_type_id=life.id,
            auto_type_id=auto.id,
            unknown_type_id=unknown.id,
        )


@pytest_asyncio.fixture
async def insert_offer(session_factory, seed):
    """Insert an offer row directly, bypassing creation rules."""

    async def _insert(**overrides) -> int:
        values = dict(
            customer_id=seed.customer_id,
            insurance_type_id=seed.home_type_id,
            department="Konut",
            base_price=Decimal("1500"),
            discount_rate=Decimal("0"),
            final_price=Decimal("1500"),
            status=OfferStatus.PENDING,
            valid_until=utc_now() + timedelta(days=365),
            customer_additional_info={"address": "Kadıköy, İstanbul"},
            created_at=utc_now(),
        )
        values.update(overrides)
        async with session_factory() as session:
            offer = Offer(**values)
            session.add(offer)
            await session.commit()
            return offer.id

    return _insert
