"""Data access layer. Repositories flush; services commit."""

from insurance_api.repositories.base_repository import BaseRepository
from insurance_api.repositories.directory_repository import (
    AgentRepository,
    CustomerRepository,
    InsuranceTypeRepository,
)
from insurance_api.repositories.document_repository import DocumentRepository
from insurance_api.repositories.offer_repository import OfferRepository
from insurance_api.repositories.policy_repository import PaymentRepository, PolicyRepository

__all__ = [
    "BaseRepository",
    "AgentRepository",
    "CustomerRepository",
    "InsuranceTypeRepository",
    "DocumentRepository",
    "OfferRepository",
    "PaymentRepository",
    "PolicyRepository",
]
