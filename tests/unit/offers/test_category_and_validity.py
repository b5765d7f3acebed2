from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from insurance_api.schemas.enums import InsuranceCategory
from insurance_api.services.offers.category import (
    fold_name,
    resolve_category,
    resolve_type_category,
    same_department,
)
from insurance_api.services.offers.validity_period import calculate_valid_until, validity_days


@pytest.mark.parametrize(
    "name, expected",
    [
        ("İş Yeri Sigortası", "is yeri"),
        ("SAĞLIK", "saglik"),
        ("Seyahat Sigortası", "seyahat"),
        ("Travel Insurance", "travel"),
        ("  Konut   ", "konut"),
        ("", ""),
        (None, ""),
    ],
)
def test_fold_name(name, expected):
    assert fold_name(name) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Trafik", InsuranceCategory.AUTO),
        ("Kasko", InsuranceCategory.AUTO),
        ("Araç Sigortası", InsuranceCategory.AUTO),
        ("Seyahat", InsuranceCategory.TRAVEL),
        ("travel", InsuranceCategory.TRAVEL),
        ("Konut", InsuranceCategory.HOME),
        ("İş Yeri", InsuranceCategory.WORKPLACE),
        ("İşyeri Sigortası", InsuranceCategory.WORKPLACE),
        ("Sağlık", InsuranceCategory.HEALTH),
        ("Hayat", InsuranceCategory.LIFE),
        ("Life Insurance", InsuranceCategory.LIFE),
        ("Evcil Hayvan", None),
    ],
)
def test_resolve_category(name, expected):
    assert resolve_category(name) == expected


def test_type_name_wins_over_category_label():
    insurance_type = SimpleNamespace(name="Seyahat Sigortası", category="Genel")
    assert resolve_type_category(insurance_type) == InsuranceCategory.TRAVEL


def test_category_label_used_when_name_is_unrecognized():
    insurance_type = SimpleNamespace(name="Premium Paket", category="Sağlık")
    assert resolve_type_category(insurance_type) == InsuranceCategory.HEALTH


def test_same_department_across_languages():
    assert same_department("Konut", "home")
    assert same_department("SEYAHAT", "Seyahat Sigortası")
    assert not same_department("Konut", "Seyahat")


def test_same_department_falls_back_to_text_comparison():
    assert same_department("Tarım", "tarim")
    assert not same_department("Tarım", "Hayvancılık")
    assert not same_department("", "")


@pytest.mark.parametrize("name", ["Seyahat", "travel", "Seyahat Sigortası"])
def test_travel_offers_are_valid_for_30_days(name):
    assert validity_days(name) == 30


@pytest.mark.parametrize("name", ["Trafik", "Konut", "İş Yeri", "Sağlık", "Hayat", "Kasko"])
def test_other_recognized_categories_are_valid_for_a_year(name):
    assert validity_days(name) == 365


def test_unrecognized_category_defaults_to_30_days():
    assert validity_days("Evcil Hayvan") == 30
    assert validity_days(None) == 30


def test_calculate_valid_until_adds_days():
    now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert calculate_valid_until(now, "Konut") == now + timedelta(days=365)
    assert calculate_valid_until(now, "Bilinmeyen", "Seyahat") == now + timedelta(days=30)
