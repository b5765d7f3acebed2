"""Closed enumerations shared by models, services and API schemas."""

from enum import Enum


class UserRole(str, Enum):
    """Role of the authenticated actor."""

    ADMIN = "admin"
    AGENT = "agent"
    CUSTOMER = "customer"


class OfferStatus(str, Enum):
    """Offer (quote) lifecycle states."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    APPROVED = "approved"
    REJECTED = "rejected"
    CUSTOMER_APPROVED = "customer_approved"
    PAID = "paid"
    EXPIRED = "expired"


class InsuranceCategory(str, Enum):
    """Canonical insurance category resolved from Turkish or English names."""

    AUTO = "auto"
    TRAVEL = "travel"
    HOME = "home"
    WORKPLACE = "workplace"
    HEALTH = "health"
    LIFE = "life"


class PolicyStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    SUSPENDED = "suspended"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    PROMISSORY_NOTE = "promissory_note"


class DocumentCategory(str, Enum):
    """Human-readable document categories."""

    RECEIPT = "Receipt"
    POLICY = "Policy Document"
    DEED = "Deed Document"
    HEALTH_REPORT = "Health Report"
    ANNUAL_REVENUE_REPORT = "Annual Revenue Report"
    RISK_REPORT = "Risk Report"
    MEDICAL_HISTORY_REPORT = "Medical History Report"
    FAMILY_HISTORY_REPORT = "Family History Report"
    ID_FRONT_PHOTO = "ID Front Photo"
    ID_BACK_PHOTO = "ID Back Photo"
    OFFER_DOCUMENT = "Offer Document"


class DocumentStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"
