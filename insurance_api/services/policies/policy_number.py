"""Policy numbering and term calculation."""

from datetime import date, timedelta
from typing import Optional

from insurance_api.schemas.enums import InsuranceCategory

DEFAULT_CATEGORY_CODE = "GEN"

CATEGORY_CODES = {
    InsuranceCategory.AUTO: "ARC",
    InsuranceCategory.TRAVEL: "SYH",
    InsuranceCategory.HOME: "KNT",
    InsuranceCategory.HEALTH: "SGL",
    InsuranceCategory.LIFE: "HYT",
}

TRAVEL_TERM_DAYS = 30
LIFE_TERM_YEARS = 10
DEFAULT_TERM_YEARS = 1


def category_code(category: Optional[InsuranceCategory]) -> str:
    if category is None:
        return DEFAULT_CATEGORY_CODE
    return CATEGORY_CODES.get(category, DEFAULT_CATEGORY_CODE)


def build_policy_number(issued_on: date, category: Optional[InsuranceCategory], offer_id: int) -> str:
    """``POL-{YYYYMMDD}-{CODE}-{offer id, 4 digits}``.

    >>> build_policy_number(date(2024, 3, 1), InsuranceCategory.HOME, 42)
    'POL-20240301-KNT-0042'
    """
    return f"POL-{issued_on:%Y%m%d}-{category_code(category)}-{offer_id:04d}"


def add_years(start: date, years: int) -> date:
    """Same calendar day ``years`` later; Feb 29 falls back to Feb 28."""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


def policy_end_date(start: date, category: Optional[InsuranceCategory]) -> date:
    if category == InsuranceCategory.TRAVEL:
        return start + timedelta(days=TRAVEL_TERM_DAYS)
    if category == InsuranceCategory.LIFE:
        return add_years(start, LIFE_TERM_YEARS)
    return add_years(start, DEFAULT_TERM_YEARS)
