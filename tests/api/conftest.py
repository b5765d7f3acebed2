"""Fixtures for API tests: signed tokens and stubbed services."""

import time
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import jwt
import pytest

from insurance_api.core.config import settings
from insurance_api.database.models import Offer, Payment, Policy
from insurance_api.schemas.enums import (
    OfferStatus,
    PaymentMethod,
    PaymentStatus,
    PolicyStatus,
)
from insurance_api.utils.time import utc_now


def _encode_token(user_id: int, role: str, expires_in: int = 3600, secret: str = None) -> str:
    now = int(time.time())
    payload = {"sub": str(user_id), "role": role, "iat": now, "exp": now + expires_in}
    return jwt.encode(
        payload, secret or settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm
    )


@pytest.fixture
def make_token():
    return _encode_token


@pytest.fixture
def auth_headers():
    def _headers(user_id: int = 5, role: str = "customer") -> dict:
        return {"Authorization": f"Bearer {_encode_token(user_id, role)}"}

    return _headers


@pytest.fixture
def sample_offer() -> Offer:
    now = utc_now()
    return Offer(
        id=42,
        customer_id=7,
        agent_id=None,
        insurance_type_id=3,
        department="Konut",
        base_price=Decimal("1500.00"),
        discount_rate=Decimal("0"),
        final_price=Decimal("1500.00"),
        status=OfferStatus.PENDING,
        valid_until=now + timedelta(days=30),
        customer_additional_info={"address": "Kadıköy, İstanbul"},
        is_customer_approved=False,
        created_at=now,
    )


@pytest.fixture
def sample_policy() -> Policy:
    return Policy(
        id=11,
        offer_id=42,
        policy_number="POL-20250101-KNT-0042",
        start_date=date(2025, 1, 1),
        end_date=date(2026, 1, 1),
        total_premium=Decimal("1500.00"),
        status=PolicyStatus.ACTIVE,
        user_id=5,
        insurance_type_id=3,
        created_at=utc_now(),
    )


@pytest.fixture
def sample_payment() -> Payment:
    return Payment(
        id=21,
        policy_id=11,
        amount=Decimal("1500.00"),
        method=PaymentMethod.CREDIT_CARD,
        status=PaymentStatus.COMPLETED,
        transaction_id="TXN_20250101120000_1234",
        paid_at=utc_now(),
        user_id=5,
    )


@pytest.fixture
def mock_offer_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_policy_service() -> AsyncMock:
    return AsyncMock()
