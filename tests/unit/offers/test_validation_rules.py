from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from insurance_api.core.exceptions import NotFoundError, ValidationError
from insurance_api.schemas.enums import InsuranceCategory, UserRole
from insurance_api.schemas.offer import OfferCreate
from insurance_api.services.offers.validation_rules import validate_offer

TODAY = date(2025, 6, 15)


def _payload(**overrides) -> OfferCreate:
    values = dict(
        customer_id=1,
        insurance_type_id=1,
        base_price=Decimal("1500"),
        final_price=Decimal("1500"),
        discount_rate=Decimal("0"),
    )
    values.update(overrides)
    return OfferCreate(**values)


def _at(day: date, hour: int = 9) -> datetime:
    return datetime(day.year, day.month, day.day, hour, 0, tzinfo=timezone.utc)


def test_unrecognized_category_is_not_found():
    with pytest.raises(NotFoundError, match="insurance category not found"):
        validate_offer(_payload(), None, UserRole.AGENT, TODAY)


def test_home_requires_address():
    with pytest.raises(ValidationError, match="Address"):
        validate_offer(_payload(customer_additional_info={}), InsuranceCategory.HOME, UserRole.AGENT, TODAY)

    with pytest.raises(ValidationError):
        validate_offer(
            _payload(customer_additional_info={"address": "   "}),
            InsuranceCategory.HOME,
            UserRole.CUSTOMER,
            TODAY,
        )


def test_home_with_address_passes():
    payload = _payload(customer_additional_info={"address": "Moda Cad. 12, İstanbul"})
    assert validate_offer(payload, InsuranceCategory.HOME, UserRole.AGENT, TODAY) == InsuranceCategory.HOME


def test_travel_start_today_is_rejected():
    # Later in the day is still today
    payload = _payload(requested_start_date=_at(TODAY, hour=23))
    with pytest.raises(ValidationError, match="must choose a future date"):
        validate_offer(payload, InsuranceCategory.TRAVEL, UserRole.CUSTOMER, TODAY)


def test_travel_start_in_the_past_is_rejected():
    payload = _payload(requested_start_date=_at(TODAY - timedelta(days=3)))
    with pytest.raises(ValidationError, match="must choose a future date"):
        validate_offer(payload, InsuranceCategory.TRAVEL, UserRole.AGENT, TODAY)


def test_travel_requires_start_date():
    with pytest.raises(ValidationError, match="start date is required"):
        validate_offer(_payload(), InsuranceCategory.TRAVEL, UserRole.CUSTOMER, TODAY)


def test_travel_start_tomorrow_passes():
    payload = _payload(requested_start_date=_at(TODAY + timedelta(days=1), hour=0))
    validate_offer(payload, InsuranceCategory.TRAVEL, UserRole.CUSTOMER, TODAY)


def test_life_minimum_applies_to_agents():
    payload = _payload(base_price=Decimal("500"), final_price=Decimal("500"))
    with pytest.raises(ValidationError, match="at least 1000"):
        validate_offer(payload, InsuranceCategory.LIFE, UserRole.AGENT, TODAY)


def test_life_minimum_checks_final_price_too():
    payload = _payload(base_price=Decimal("1500"), final_price=Decimal("900"))
    with pytest.raises(ValidationError, match="Final price"):
        validate_offer(payload, InsuranceCategory.LIFE, UserRole.ADMIN, TODAY)


def test_life_minimum_is_skipped_for_customers():
    payload = _payload(base_price=Decimal("500"), final_price=Decimal("500"))
    assert validate_offer(payload, InsuranceCategory.LIFE, UserRole.CUSTOMER, TODAY) == InsuranceCategory.LIFE


def test_negative_prices_rejected_for_staff_but_not_customers():
    payload = _payload(base_price=Decimal("-1"), final_price=Decimal("-1"))
    with pytest.raises(ValidationError, match="negative"):
        validate_offer(payload, InsuranceCategory.AUTO, UserRole.AGENT, TODAY)

    validate_offer(payload, InsuranceCategory.AUTO, UserRole.CUSTOMER, TODAY)


@pytest.mark.parametrize("rate", [Decimal("-0.01"), Decimal("100.01")])
@pytest.mark.parametrize("role", [UserRole.CUSTOMER, UserRole.AGENT, UserRole.ADMIN])
def test_discount_rate_out_of_range_is_rejected(rate, role):
    with pytest.raises(ValidationError, match="Discount rate"):
        validate_offer(_payload(discount_rate=rate), InsuranceCategory.HEALTH, role, TODAY)


@pytest.mark.parametrize(
    "category", [InsuranceCategory.AUTO, InsuranceCategory.WORKPLACE, InsuranceCategory.HEALTH]
)
def test_categories_without_rules_pass(category):
    assert validate_offer(_payload(), category, UserRole.AGENT, TODAY) == category
