"""Database module for SQLAlchemy models."""

from insurance_api.database.models import (
    Agent,
    Customer,
    Document,
    InsuranceType,
    Offer,
    Payment,
    Policy,
    User,
)

__all__ = [
    "User",
    "Customer",
    "Agent",
    "InsuranceType",
    "Offer",
    "Policy",
    "Payment",
    "Document",
]
