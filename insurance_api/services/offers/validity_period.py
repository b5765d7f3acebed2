"""How long an offer stays actionable, by insurance category."""

from datetime import datetime, timedelta
from typing import Optional

from insurance_api.schemas.enums import InsuranceCategory
from insurance_api.services.offers.category import resolve_category

DEFAULT_VALIDITY_DAYS = 30

VALIDITY_DAYS = {
    InsuranceCategory.TRAVEL: 30,
    InsuranceCategory.HOME: 365,
    InsuranceCategory.WORKPLACE: 365,
    InsuranceCategory.AUTO: 365,
    InsuranceCategory.HEALTH: 365,
    InsuranceCategory.LIFE: 365,
}


def validity_days(*names: Optional[str]) -> int:
    """Days an offer remains valid for the first recognizable name."""
    category = resolve_category(*names)
    if category is None:
        return DEFAULT_VALIDITY_DAYS
    return VALIDITY_DAYS[category]


def calculate_valid_until(now: datetime, *names: Optional[str]) -> datetime:
    return now + timedelta(days=validity_days(*names))
