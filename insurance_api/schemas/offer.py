"""Request and response schemas for offers."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from insurance_api.schemas.enums import OfferStatus


class OfferCreate(BaseModel):
    """Payload for creating an offer.

    Price lower bounds are checked by the validation rules rather than here,
    because customer submissions skip them.
    """

    customer_id: int = Field(..., description="Customer the offer is for")
    insurance_type_id: int = Field(..., description="Insurance product")
    base_price: Decimal = Field(default=Decimal("0"))
    final_price: Decimal = Field(default=Decimal("0"))
    discount_rate: Decimal = Field(default=Decimal("0"), description="Percentage in [0, 100]")
    status: Optional[OfferStatus] = Field(None, description="Initial status (staff only)")
    requested_start_date: Optional[datetime] = None
    coverage_amount: Optional[Decimal] = None
    customer_additional_info: Optional[Dict[str, Any]] = Field(
        None, description="Category-specific answers and uploaded file references"
    )


class OfferReview(BaseModel):
    """Fields an agent or admin may change while reviewing an offer."""

    final_price: Optional[Decimal] = Field(None, ge=0)
    discount_rate: Optional[Decimal] = None
    status: Optional[OfferStatus] = None
    valid_until: Optional[datetime] = None
    admin_notes: Optional[str] = Field(None, max_length=1000)
    rejection_reason: Optional[str] = Field(None, max_length=1000)


class OfferApproval(BaseModel):
    approved: bool = Field(..., description="Accept (true) or decline (false) the offer")


class OfferResponse(BaseModel):
    """Offer as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    agent_id: Optional[int] = None
    insurance_type_id: int
    department: str
    base_price: Decimal
    discount_rate: Decimal
    final_price: Decimal
    coverage_amount: Optional[Decimal] = None
    status: OfferStatus
    valid_until: datetime
    requested_start_date: Optional[datetime] = None
    customer_additional_info: Optional[Dict[str, Any]] = None
    is_customer_approved: bool
    customer_approved_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    policy_pdf_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class OfferListResponse(BaseModel):
    total: int
    items: List[OfferResponse]
