"""Schemas for payments and the policies they issue."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from insurance_api.schemas.enums import PaymentMethod, PaymentStatus, PolicyStatus


class PaymentCreate(BaseModel):
    """Payment event that triggers policy issuance for an offer."""

    offer_id: int
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod = PaymentMethod.CREDIT_CARD
    transaction_id: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)


class PolicyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    offer_id: Optional[int] = None
    policy_number: str
    start_date: date
    end_date: date
    total_premium: Decimal
    status: PolicyStatus
    notes: Optional[str] = None
    user_id: Optional[int] = None
    insurance_type_id: Optional[int] = None
    agent_id: Optional[int] = None
    approved_by: Optional[int] = None
    created_at: datetime


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    policy_id: int
    amount: Decimal
    method: PaymentMethod
    status: PaymentStatus
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    user_id: Optional[int] = None


class IssuanceResponse(BaseModel):
    """Result of a payment: the issued (or previously issued) policy."""

    created: bool = Field(..., description="False when the policy already existed")
    policy: PolicyResponse
    payment: Optional[PaymentResponse] = None


class PaymentListResponse(BaseModel):
    total: int
    items: List[PaymentResponse]
