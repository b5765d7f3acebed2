"""Category-specific rules applied when an offer is created."""

from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Optional

from insurance_api.core.exceptions import NotFoundError, ValidationError
from insurance_api.schemas.enums import InsuranceCategory, UserRole
from insurance_api.schemas.offer import OfferCreate
from insurance_api.utils.time import ensure_utc

LIFE_MINIMUM_PRICE = Decimal("1000")

Rule = Callable[[OfferCreate, UserRole, date], None]


def _require_address(payload: OfferCreate, role: UserRole, today: date) -> None:
    info = payload.customer_additional_info or {}
    address = info.get("address")
    if not isinstance(address, str) or not address.strip():
        raise ValidationError("Address is required for home insurance")


def _require_future_start(payload: OfferCreate, role: UserRole, today: date) -> None:
    if payload.requested_start_date is None:
        raise ValidationError("Requested start date is required for travel insurance")
    # Date-only comparison: any time today is still "today"
    start = ensure_utc(payload.requested_start_date).date()
    if start <= today:
        raise ValidationError("You must choose a future date for travel insurance")


def _require_life_minimum(payload: OfferCreate, role: UserRole, today: date) -> None:
    if role == UserRole.CUSTOMER:
        return
    if payload.base_price < LIFE_MINIMUM_PRICE:
        raise ValidationError(f"Base price for life insurance must be at least {LIFE_MINIMUM_PRICE}")
    if payload.final_price < LIFE_MINIMUM_PRICE:
        raise ValidationError(f"Final price for life insurance must be at least {LIFE_MINIMUM_PRICE}")


def _no_rule(payload: OfferCreate, role: UserRole, today: date) -> None:
    return None


CATEGORY_RULES: Dict[InsuranceCategory, Rule] = {
    InsuranceCategory.HOME: _require_address,
    InsuranceCategory.TRAVEL: _require_future_start,
    InsuranceCategory.LIFE: _require_life_minimum,
    InsuranceCategory.AUTO: _no_rule,
    InsuranceCategory.WORKPLACE: _no_rule,
    InsuranceCategory.HEALTH: _no_rule,
}


def validate_common(payload: OfferCreate, role: UserRole) -> None:
    """Checks that apply to every category."""
    if payload.discount_rate < 0 or payload.discount_rate > 100:
        raise ValidationError("Discount rate must be between 0 and 100")

    # Customer-submitted prices are placeholders that review overwrites
    if role != UserRole.CUSTOMER:
        if payload.base_price < 0:
            raise ValidationError("Base price cannot be negative")
        if payload.final_price < 0:
            raise ValidationError("Final price cannot be negative")

    if payload.coverage_amount is not None and payload.coverage_amount < 0:
        raise ValidationError("Coverage amount cannot be negative")


def validate_offer(
    payload: OfferCreate,
    category: Optional[InsuranceCategory],
    role: UserRole,
    today: date,
) -> InsuranceCategory:
    """Run the common and category rules for a new offer.

    Returns:
        The resolved category

    Raises:
        NotFoundError: If the insurance category could not be recognized
        ValidationError: If a rule rejects the payload
    """
    if category is None:
        raise NotFoundError("insurance category not found")

    validate_common(payload, role)
    CATEGORY_RULES[category](payload, role, today)
    return category
