"""Create document records as a side effect of offers and payments.

Individual entries that fail to parse are logged and skipped; they never
abort the offer creation or policy issuance that triggered them. Rows are
staged on the caller's session and committed with the caller's unit of work.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from insurance_api.database.models import Document, Offer, Payment, Policy
from insurance_api.repositories.document_repository import DocumentRepository
from insurance_api.schemas.enums import DocumentCategory, DocumentStatus
from insurance_api.services.documents.additional_info import (
    classify_file_type,
    file_reference_for,
)
from insurance_api.utils.logging import get_logger

LOGGER = get_logger(__name__)

KEY_CATEGORIES: Dict[str, DocumentCategory] = {
    "deedDocument": DocumentCategory.DEED,
    "healthReport": DocumentCategory.HEALTH_REPORT,
    "annualRevenueReport": DocumentCategory.ANNUAL_REVENUE_REPORT,
    "riskReport": DocumentCategory.RISK_REPORT,
    "medicalHistoryReport": DocumentCategory.MEDICAL_HISTORY_REPORT,
    "familyHistoryReport": DocumentCategory.FAMILY_HISTORY_REPORT,
    "idFrontPhoto": DocumentCategory.ID_FRONT_PHOTO,
    "idBackPhoto": DocumentCategory.ID_BACK_PHOTO,
}

RECEIPT_URL_PREFIX = "/uploads/receipts/"

# Column limits of documents.file_name and documents.file_url
FILE_NAME_MAX_LENGTH = Document.__table__.c.file_name.type.length
FILE_URL_MAX_LENGTH = Document.__table__.c.file_url.type.length


def category_for_key(key: str) -> DocumentCategory:
    return KEY_CATEGORIES.get(key, DocumentCategory.OFFER_DOCUMENT)


class DocumentProcessor:
    """Turns additional-info file references and receipts into Document rows."""

    def __init__(self, db_session: AsyncSession, logger: Optional[logging.Logger] = None):
        self.session = db_session
        self.logger = logger or LOGGER
        self.document_repo = DocumentRepository(db_session)

    def _build_documents(
        self,
        offer: Offer,
        info: Optional[Dict[str, Any]],
        uploaded_by_user_id: Optional[int],
        policy_id: Optional[int] = None,
        skip_urls: frozenset = frozenset(),
    ) -> List[Document]:
        documents: List[Document] = []
        for key, value in (info or {}).items():
            try:
                reference = file_reference_for(value)
                if reference is None or reference.url in skip_urls:
                    continue
                if len(reference.url) > FILE_URL_MAX_LENGTH:
                    raise ValueError(f"file URL is longer than {FILE_URL_MAX_LENGTH} characters")

                documents.append(
                    Document(
                        category=category_for_key(key).value,
                        file_name=reference.label[:FILE_NAME_MAX_LENGTH],
                        file_url=reference.url,
                        file_type=classify_file_type(reference.url),
                        file_size=0,
                        description=f"Submitted with offer #{offer.id} ({key})",
                        status=DocumentStatus.ACTIVE,
                        customer_id=offer.customer_id,
                        offer_id=offer.id,
                        policy_id=policy_id,
                        uploaded_by_user_id=uploaded_by_user_id,
                    )
                )
            except Exception as e:
                self.logger.warning(
                    "Skipping unreadable additional info entry",
                    extra={"offer_id": offer.id, "key": key, "error": str(e)},
                )
        return documents

    async def create_offer_documents(
        self, offer: Offer, uploaded_by_user_id: Optional[int]
    ) -> List[Document]:
        """Create documents for files referenced in a new offer's additional info."""
        documents = self._build_documents(
            offer, offer.customer_additional_info, uploaded_by_user_id
        )
        if documents:
            self.session.add_all(documents)
            await self.session.flush()
            self.logger.info(
                "Offer documents created",
                extra={"offer_id": offer.id, "count": len(documents)},
            )
        return documents

    async def attach_to_policy(
        self, offer: Offer, policy: Policy, uploaded_by_user_id: Optional[int]
    ) -> List[Document]:
        """Link the offer's documents to its new policy.

        Documents already created with the offer are updated in place; any
        referenced file without a row yet is created, keyed by file URL.
        """
        existing = await self.document_repo.list_by_offer(offer.id)
        for document in existing:
            if document.policy_id is None:
                document.policy_id = policy.id

        known_urls = frozenset(document.file_url for document in existing)
        created = self._build_documents(
            offer,
            offer.customer_additional_info,
            uploaded_by_user_id,
            policy_id=policy.id,
            skip_urls=known_urls,
        )
        if created:
            self.session.add_all(created)
        await self.session.flush()

        return existing + created

    async def create_receipt(
        self,
        offer: Offer,
        policy: Policy,
        payment: Payment,
        uploaded_by_user_id: Optional[int],
    ) -> Optional[Document]:
        """Create the receipt document for a completed payment."""
        try:
            transaction_id = payment.transaction_id or f"payment_{payment.id}"
            file_name = f"receipt_{transaction_id}.pdf"
            receipt = Document(
                category=DocumentCategory.RECEIPT.value,
                file_name=file_name,
                file_url=f"{RECEIPT_URL_PREFIX}{file_name}",
                file_type="document",
                file_size=0,
                description=f"Payment receipt for policy {policy.policy_number}",
                status=DocumentStatus.ACTIVE,
                customer_id=offer.customer_id,
                offer_id=offer.id,
                policy_id=policy.id,
                uploaded_by_user_id=uploaded_by_user_id,
            )
        except Exception as e:
            self.logger.warning(
                "Skipping receipt document",
                extra={"offer_id": offer.id, "error": str(e)},
            )
            return None

        self.session.add(receipt)
        await self.session.flush()
        return receipt
