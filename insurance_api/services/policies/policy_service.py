"""Payment-triggered policy issuance and policy lookups."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, NamedTuple, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from insurance_api.core.config import settings
from insurance_api.core.exceptions import (
    AuthorizationError,
    ConsistencyError,
    NotFoundError,
    ValidationError,
)
from insurance_api.database.models import Document, Offer, Payment, Policy
from insurance_api.repositories.directory_repository import (
    AgentRepository,
    InsuranceTypeRepository,
)
from insurance_api.repositories.offer_repository import OfferRepository
from insurance_api.repositories.policy_repository import PaymentRepository, PolicyRepository
from insurance_api.schemas.auth import Actor
from insurance_api.schemas.enums import (
    DocumentCategory,
    DocumentStatus,
    OfferStatus,
    PaymentMethod,
    PolicyStatus,
)
from insurance_api.services.base_service import BaseService
from insurance_api.services.documents.document_processor import DocumentProcessor
from insurance_api.services.offers.category import resolve_type_category, same_department
from insurance_api.services.offers.expiry import expire_if_stale
from insurance_api.services.offers.state_machine import OfferTrigger, transition
from insurance_api.services.pdf_service import PolicyPDFService, PolicySnapshot
from insurance_api.services.policies.payment_recorder import PaymentRecorder
from insurance_api.services.policies.policy_number import build_policy_number, policy_end_date
from insurance_api.services.storage_service import StorageService
from insurance_api.utils.time import ensure_utc, utc_now


class IssuanceResult(NamedTuple):
    policy: Policy
    payment: Optional[Payment]
    created: bool


class PolicyService(BaseService):
    """Issues policies from payments.

    Policy, payment, document links and the offer's ``paid`` status are
    written in one unit of work. Issuance is idempotent per offer: the
    pre-check returns an existing policy, and the unique ``offer_id``
    constraint catches concurrent attempts that pass the pre-check together.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        logger: Optional[logging.Logger] = None,
        storage: Optional[StorageService] = None,
        pdf_service: Optional[PolicyPDFService] = None,
        publish_documents: Optional[bool] = None,
    ):
        super().__init__(db_session, logger)
        self.offer_repo = OfferRepository(db_session)
        self.policy_repo = PolicyRepository(db_session)
        self.payment_repo = PaymentRepository(db_session)
        self.agent_repo = AgentRepository(db_session)
        self.insurance_type_repo = InsuranceTypeRepository(db_session)
        self.payment_recorder = PaymentRecorder(db_session, self.logger)
        self.documents = DocumentProcessor(db_session, self.logger)
        self.storage = storage
        self.pdf_service = pdf_service
        self.publish_documents = (
            settings.offers.generate_policy_pdf if publish_documents is None else publish_documents
        )

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    async def create_policy_from_payment(
        self,
        offer_id: int,
        amount: Decimal,
        actor: Actor,
        method: PaymentMethod = PaymentMethod.CREDIT_CARD,
        transaction_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> IssuanceResult:
        """Issue the policy for a paid offer, or return the one already issued.

        Raises:
            ValidationError: Non-positive amount
            NotFoundError: Offer does not exist
            AuthorizationError: Offer belongs to another customer
            ConsistencyError: Offer is not payable (wrong status or expired)
        """
        if amount is None or Decimal(amount) <= 0:
            raise ValidationError("Payment amount must be greater than zero")

        now = utc_now()
        expired = False
        result: Optional[IssuanceResult] = None

        try:
            async with self.transaction(passthrough=(IntegrityError,)):
                offer = await self.offer_repo.get_for_update(offer_id)
                if offer is None:
                    raise NotFoundError(f"Offer {offer_id} not found")
                if offer.customer is None or offer.customer.user_id != actor.actor_id:
                    raise AuthorizationError("This offer belongs to another customer")

                existing = await self.policy_repo.get_by_offer_id(offer.id)
                if existing is not None:
                    self.logger.warning(
                        "Policy already issued for offer; returning existing policy",
                        extra={"offer_id": offer.id, "policy_number": existing.policy_number},
                    )
                    payment = await self.payment_repo.get_by_policy_id(existing.id)
                    result = IssuanceResult(existing, payment, False)
                elif expire_if_stale(offer, now):
                    expired = True
                else:
                    policy, payment = await self._issue(
                        offer, Decimal(amount), method, transaction_id, notes, actor, now
                    )
                    result = IssuanceResult(policy, payment, True)

        except IntegrityError as e:
            return await self._recover_from_conflict(offer_id, e)

        if expired:
            raise ConsistencyError(f"Offer {offer_id} has expired")

        if result.created:
            self.logger.info(
                "Policy issued",
                extra={
                    "offer_id": offer_id,
                    "policy_id": result.policy.id,
                    "policy_number": result.policy.policy_number,
                    "premium": str(result.policy.total_premium),
                },
            )
            if self.publish_documents:
                await self._publish_policy_document(offer, result.policy, actor)

        return result

    async def _issue(
        self,
        offer: Offer,
        amount: Decimal,
        method: PaymentMethod,
        transaction_id: Optional[str],
        notes: Optional[str],
        actor: Actor,
        now: datetime,
    ):
        # Validate the state first so nothing is staged for a non-payable offer
        paid_status = transition(offer.status, OfferStatus.PAID, OfferTrigger.PAYMENT)

        category = resolve_type_category(offer.insurance_type)
        requested_start = ensure_utc(offer.requested_start_date)
        start_date = requested_start.date() if requested_start else now.date()

        policy = Policy(
            offer_id=offer.id,
            policy_number=build_policy_number(now.date(), category, offer.id),
            start_date=start_date,
            end_date=policy_end_date(start_date, category),
            total_premium=amount,
            status=PolicyStatus.ACTIVE,
            user_id=offer.customer.user_id,
            insurance_type_id=offer.insurance_type_id,
            agent_id=offer.agent_id,
            approved_by=offer.reviewed_by,
            created_at=now,
        )
        await self.policy_repo.add(policy)

        payment = await self.payment_recorder.record(
            policy,
            amount,
            method,
            user_id=actor.actor_id,
            transaction_id=transaction_id,
            notes=notes,
        )

        offer.status = paid_status
        await self.session.flush()

        await self.documents.attach_to_policy(offer, policy, actor.actor_id)
        await self.documents.create_receipt(offer, policy, payment, actor.actor_id)

        return policy, payment

    async def _recover_from_conflict(self, offer_id: int, error: IntegrityError) -> IssuanceResult:
        """Resolve a uniqueness violation by returning the winner's policy."""
        self.logger.warning(
            "Policy issuance conflict; re-reading existing policy",
            extra={"offer_id": offer_id, "error": str(error.orig)},
        )
        async with self.transaction():
            existing = await self.policy_repo.get_by_offer_id(offer_id)
            payment = (
                await self.payment_repo.get_by_policy_id(existing.id) if existing is not None else None
            )

        if existing is None:
            raise ConsistencyError(
                "Payment could not be recorded because it conflicts with an existing record",
                original_error=error,
            )
        return IssuanceResult(existing, payment, False)

    async def _publish_policy_document(self, offer: Offer, policy: Policy, actor: Actor) -> None:
        """Render, store and link the policy PDF. Failures are logged only."""
        try:
            pdf_service = self.pdf_service or PolicyPDFService()
            storage = self.storage or StorageService()

            customer = offer.customer
            snapshot = PolicySnapshot(
                policy_number=policy.policy_number,
                insurance_type=offer.insurance_type.name,
                customer_name=(customer.user.full_name if customer.user else None)
                or f"Customer #{customer.id}",
                customer_id_no=customer.id_no,
                start_date=policy.start_date,
                end_date=policy.end_date,
                total_premium=policy.total_premium,
                status=policy.status.value,
                issued_at=ensure_utc(policy.created_at),
            )
            content = pdf_service.render_policy_document(snapshot)
            file_name = f"{policy.policy_number}.pdf"
            file_url = await storage.save_document(content, f"policies/{file_name}")

            async with self.transaction():
                locked = await self.offer_repo.get_for_update(offer.id)
                self.session.add(
                    Document(
                        category=DocumentCategory.POLICY.value,
                        file_name=file_name,
                        file_url=file_url,
                        file_type="document",
                        file_size=len(content),
                        description=f"Policy document for {policy.policy_number}",
                        status=DocumentStatus.ACTIVE,
                        customer_id=offer.customer_id,
                        offer_id=offer.id if locked is not None else None,
                        policy_id=policy.id,
                        uploaded_by_user_id=actor.actor_id,
                    )
                )
                if locked is not None:
                    locked.policy_pdf_url = file_url

            self.logger.info(
                "Policy document published",
                extra={"policy_number": policy.policy_number, "file_url": file_url},
            )
        except Exception as e:
            self.logger.error(
                "Policy document publication failed",
                exc_info=True,
                extra={"policy_number": policy.policy_number, "error": str(e)},
            )

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    async def get_policy_by_offer(self, offer_id: int, actor: Actor) -> Policy:
        async with self.transaction():
            policy = await self.policy_repo.get_by_offer_id(offer_id)
            if policy is None:
                raise NotFoundError(f"No policy has been issued for offer {offer_id}")
            await self._authorize_read(policy, actor)
        return policy

    async def get_policy_by_number(self, policy_number: str, actor: Actor) -> Policy:
        async with self.transaction():
            policy = await self.policy_repo.get_by_number(policy_number)
            if policy is None:
                raise NotFoundError(f"Policy {policy_number} not found")
            await self._authorize_read(policy, actor)
        return policy

    async def list_payments_for_policy(self, policy_id: int, actor: Actor) -> List[Payment]:
        async with self.transaction():
            policy = await self.policy_repo.get_by_id(policy_id)
            if policy is None:
                raise NotFoundError(f"Policy {policy_id} not found")
            await self._authorize_read(policy, actor)
            payments = await self.payment_repo.list_by_policy_id(policy.id)
        return payments

    async def _authorize_read(self, policy: Policy, actor: Actor) -> None:
        """Customers see their own policies, agents their department's."""
        if actor.is_customer:
            if policy.user_id != actor.actor_id:
                raise AuthorizationError("This policy belongs to another customer")
        elif actor.is_agent:
            agent = await self.agent_repo.get_by_user_id(actor.actor_id)
            if agent is None:
                raise AuthorizationError("No agent profile is linked to this user")
            insurance_type = (
                await self.insurance_type_repo.get_by_id(policy.insurance_type_id)
                if policy.insurance_type_id is not None
                else None
            )
            department = insurance_type.category if insurance_type is not None else None
            if policy.agent_id != agent.id and not same_department(agent.department, department):
                raise AuthorizationError("Agents can only view policies in their own department")
