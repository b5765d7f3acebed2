from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest

from insurance_api.core.exceptions import AppError
from insurance_api.services.pdf_service import PolicyPDFService, PolicySnapshot


@pytest.fixture
def snapshot():
    return PolicySnapshot(
        policy_number="POL-20250101-KNT-0042",
        insurance_type="Konut Sigortası",
        customer_name="Ayşe Yılmaz",
        customer_id_no="12345678901",
        start_date=date(2025, 1, 1),
        end_date=date(2026, 1, 1),
        total_premium=Decimal("1350.00"),
        status="active",
        issued_at=datetime(2025, 1, 1, 9, 30, tzinfo=timezone.utc),
    )


def test_render_policy_document(snapshot):
    content = PolicyPDFService().render_policy_document(snapshot)

    assert isinstance(content, bytes)
    assert content.startswith(b"%PDF")


def test_render_failure_is_wrapped(snapshot):
    with patch("insurance_api.services.pdf_service.FPDF", side_effect=RuntimeError("no fonts")):
        with pytest.raises(AppError, match="Policy PDF generation failed"):
            PolicyPDFService().render_policy_document(snapshot)
