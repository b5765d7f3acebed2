from decimal import Decimal

import pytest

from insurance_api.core.exceptions import ConsistencyError
from insurance_api.schemas.enums import OfferStatus
from insurance_api.services.offers.pricing import calculate_final_price
from insurance_api.services.offers.state_machine import (
    OfferTrigger,
    can_transition,
    is_terminal,
    transition,
)


@pytest.mark.parametrize(
    "current, target, trigger",
    [
        (OfferStatus.PENDING, OfferStatus.REVIEWED, OfferTrigger.REVIEW),
        (OfferStatus.PENDING, OfferStatus.APPROVED, OfferTrigger.REVIEW),
        (OfferStatus.REVIEWED, OfferStatus.REJECTED, OfferTrigger.REVIEW),
        (OfferStatus.APPROVED, OfferStatus.APPROVED, OfferTrigger.REVIEW),
        (OfferStatus.REVIEWED, OfferStatus.CUSTOMER_APPROVED, OfferTrigger.CUSTOMER_DECISION),
        (OfferStatus.APPROVED, OfferStatus.REJECTED, OfferTrigger.CUSTOMER_DECISION),
        (OfferStatus.CUSTOMER_APPROVED, OfferStatus.PAID, OfferTrigger.PAYMENT),
        (OfferStatus.APPROVED, OfferStatus.PAID, OfferTrigger.PAYMENT),
        (OfferStatus.PENDING, OfferStatus.EXPIRED, OfferTrigger.EXPIRY),
    ],
)
def test_allowed_transitions(current, target, trigger):
    assert transition(current, target, trigger) == target


@pytest.mark.parametrize(
    "current, target, trigger",
    [
        (OfferStatus.PENDING, OfferStatus.CUSTOMER_APPROVED, OfferTrigger.CUSTOMER_DECISION),
        (OfferStatus.PENDING, OfferStatus.PAID, OfferTrigger.PAYMENT),
        (OfferStatus.REVIEWED, OfferStatus.PAID, OfferTrigger.PAYMENT),
        (OfferStatus.CUSTOMER_APPROVED, OfferStatus.REVIEWED, OfferTrigger.REVIEW),
        (OfferStatus.CUSTOMER_APPROVED, OfferStatus.EXPIRED, OfferTrigger.EXPIRY),
        (OfferStatus.PAID, OfferStatus.PAID, OfferTrigger.PAYMENT),
        (OfferStatus.REJECTED, OfferStatus.REVIEWED, OfferTrigger.REVIEW),
        (OfferStatus.EXPIRED, OfferStatus.APPROVED, OfferTrigger.REVIEW),
        (OfferStatus.PENDING, OfferStatus.PAID, OfferTrigger.REVIEW),
    ],
)
def test_rejected_transitions(current, target, trigger):
    assert not can_transition(current, target, trigger)
    with pytest.raises(ConsistencyError):
        transition(current, target, trigger)


def test_terminal_statuses():
    assert is_terminal(OfferStatus.PAID)
    assert is_terminal(OfferStatus.REJECTED)
    assert is_terminal(OfferStatus.EXPIRED)
    assert not is_terminal(OfferStatus.CUSTOMER_APPROVED)


def test_transition_accepts_raw_values():
    assert transition("pending", "reviewed", OfferTrigger.REVIEW) == OfferStatus.REVIEWED


@pytest.mark.parametrize(
    "base, rate, expected",
    [
        (Decimal("1000"), Decimal("10"), Decimal("900.00")),
        (Decimal("1234.56"), Decimal("0"), Decimal("1234.56")),
        (Decimal("1000"), Decimal("100"), Decimal("0.00")),
        (Decimal("1000"), Decimal("150"), Decimal("0.00")),
        (Decimal("1000"), Decimal("-20"), Decimal("1000.00")),
        (Decimal("-50"), Decimal("10"), Decimal("0.00")),
        (Decimal("999.99"), Decimal("12.5"), Decimal("874.99")),
    ],
)
def test_calculate_final_price(base, rate, expected):
    assert calculate_final_price(base, rate) == expected
