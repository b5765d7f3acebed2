import re
from datetime import date, datetime, timezone

import pytest

from insurance_api.schemas.enums import InsuranceCategory
from insurance_api.services.policies.payment_recorder import generate_transaction_id
from insurance_api.services.policies.policy_number import (
    add_years,
    build_policy_number,
    category_code,
    policy_end_date,
)


@pytest.mark.parametrize(
    "category, code",
    [
        (InsuranceCategory.AUTO, "ARC"),
        (InsuranceCategory.TRAVEL, "SYH"),
        (InsuranceCategory.HOME, "KNT"),
        (InsuranceCategory.HEALTH, "SGL"),
        (InsuranceCategory.LIFE, "HYT"),
        (InsuranceCategory.WORKPLACE, "GEN"),
        (None, "GEN"),
    ],
)
def test_category_code(category, code):
    assert category_code(category) == code


def test_policy_number_format():
    assert build_policy_number(date(2024, 3, 1), InsuranceCategory.HOME, 42) == "POL-20240301-KNT-0042"
    assert build_policy_number(date(2024, 12, 31), None, 12345) == "POL-20241231-GEN-12345"


def test_policy_number_is_deterministic():
    args = (date(2025, 7, 4), InsuranceCategory.LIFE, 7)
    assert build_policy_number(*args) == build_policy_number(*args)


def test_policy_terms():
    start = date(2025, 1, 10)
    assert policy_end_date(start, InsuranceCategory.TRAVEL) == date(2025, 2, 9)
    assert policy_end_date(start, InsuranceCategory.LIFE) == date(2035, 1, 10)
    assert policy_end_date(start, InsuranceCategory.HOME) == date(2026, 1, 10)
    assert policy_end_date(start, InsuranceCategory.WORKPLACE) == date(2026, 1, 10)
    assert policy_end_date(start, None) == date(2026, 1, 10)


def test_add_years_on_leap_day():
    assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


def test_generate_transaction_id():
    now = datetime(2025, 5, 6, 7, 8, 9, tzinfo=timezone.utc)
    transaction_id = generate_transaction_id(now)
    assert re.fullmatch(r"TXN_20250506070809_\d{4}", transaction_id)
