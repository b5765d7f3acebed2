"""Render issued policies as PDF documents using fpdf2."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from fpdf import FPDF

from insurance_api.core.exceptions import AppError
from insurance_api.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Core PDF fonts are Latin-1 only
_LATIN1_FOLD = str.maketrans({"ş": "s", "Ş": "S", "ğ": "g", "Ğ": "G", "ı": "i", "İ": "I"})


def _latin1(value: object) -> str:
    text = str(value).translate(_LATIN1_FOLD)
    return text.encode("latin-1", "replace").decode("latin-1")


@dataclass(frozen=True)
class PolicySnapshot:
    """Everything printed on a policy document."""

    policy_number: str
    insurance_type: str
    customer_name: str
    start_date: date
    end_date: date
    total_premium: Decimal
    status: str
    issued_at: datetime
    customer_id_no: Optional[str] = None


class PolicyPDFService:
    """Service to generate a one-page policy certificate."""

    def render_policy_document(self, snapshot: PolicySnapshot) -> bytes:
        """Generate the policy PDF and return its bytes.

        Raises:
            AppError: If rendering fails
        """
        try:
            pdf = FPDF(orientation="portrait", unit="mm", format="A4")
            pdf.set_auto_page_break(auto=True, margin=15)
            pdf.add_page()

            pdf.set_font("helvetica", "B", 22)
            pdf.set_text_color(0, 51, 102)
            pdf.cell(0, 15, "INSURANCE POLICY", new_x="LMARGIN", new_y="NEXT", align="C")
            pdf.set_font("helvetica", "", 12)
            pdf.set_text_color(85, 85, 85)
            pdf.cell(0, 8, _latin1(snapshot.insurance_type), new_x="LMARGIN", new_y="NEXT", align="C")
            pdf.line(15, pdf.get_y() + 2, 195, pdf.get_y() + 2)
            pdf.ln(10)

            rows = [
                ("Policy Number", snapshot.policy_number),
                ("Insured", snapshot.customer_name),
                ("Identity No", snapshot.customer_id_no or "-"),
                ("Start Date", snapshot.start_date.strftime("%d.%m.%Y")),
                ("End Date", snapshot.end_date.strftime("%d.%m.%Y")),
                ("Status", snapshot.status),
                ("Total Premium", f"{snapshot.total_premium:,.2f} TL"),
            ]

            pdf.set_text_color(51, 51, 51)
            for label, value in rows:
                pdf.set_font("helvetica", "B", 11)
                pdf.cell(60, 10, label, border=1)
                pdf.set_font("helvetica", "", 11)
                pdf.cell(0, 10, _latin1(value), border=1, new_x="LMARGIN", new_y="NEXT")

            pdf.ln(15)
            pdf.set_font("helvetica", "", 9)
            pdf.set_text_color(100, 116, 139)
            pdf.multi_cell(
                0,
                6,
                "This policy was issued electronically upon receipt of payment. "
                "Coverage is subject to the terms and conditions of the insurance product.",
            )
            pdf.cell(
                0, 8, f"Issued: {snapshot.issued_at:%d.%m.%Y %H:%M} UTC",
                new_x="LMARGIN", new_y="NEXT",
            )

            content = bytes(pdf.output())
            LOGGER.info(
                "Generated policy PDF",
                extra={"policy_number": snapshot.policy_number, "size": len(content)},
            )
            return content

        except Exception as e:
            LOGGER.error(f"Error generating policy PDF: {str(e)}", exc_info=True)
            raise AppError(f"Policy PDF generation failed: {str(e)}", original_error=e)
