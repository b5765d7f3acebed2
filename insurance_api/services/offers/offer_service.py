"""Offer lifecycle: creation, review, customer approval, deletion and expiry."""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from insurance_api.core.exceptions import (
    AuthorizationError,
    ConsistencyError,
    NotFoundError,
    ValidationError,
)
from insurance_api.database.models import Agent, Offer
from insurance_api.repositories.directory_repository import (
    AgentRepository,
    CustomerRepository,
    InsuranceTypeRepository,
)
from insurance_api.repositories.offer_repository import OfferRepository
from insurance_api.schemas.auth import Actor
from insurance_api.schemas.enums import OfferStatus
from insurance_api.schemas.offer import OfferCreate, OfferReview
from insurance_api.services.base_service import BaseService
from insurance_api.services.documents.document_processor import DocumentProcessor
from insurance_api.services.offers.category import resolve_type_category, same_department
from insurance_api.services.offers.expiry import expire_if_stale
from insurance_api.services.offers.pricing import calculate_final_price
from insurance_api.services.offers.state_machine import (
    INITIAL_STATUSES,
    OfferTrigger,
    is_terminal,
    transition,
)
from insurance_api.services.offers.validation_rules import validate_offer
from insurance_api.services.offers.validity_period import calculate_valid_until
from insurance_api.utils.time import ensure_utc, utc_now


class OfferService(BaseService):
    """Creates offers and moves them through review and approval.

    Every mutation runs in one unit of work. Transition loads lock the offer
    row, and the ``version`` column rejects lost updates that slip through.
    """

    def __init__(self, db_session: AsyncSession, logger: Optional[logging.Logger] = None):
        super().__init__(db_session, logger)
        self.offer_repo = OfferRepository(db_session)
        self.customer_repo = CustomerRepository(db_session)
        self.agent_repo = AgentRepository(db_session)
        self.insurance_type_repo = InsuranceTypeRepository(db_session)
        self.documents = DocumentProcessor(db_session, self.logger)

    # ------------------------------------------------------------------ #
    # Creation
    # ------------------------------------------------------------------ #

    async def create_offer(self, payload: OfferCreate, actor: Actor) -> Offer:
        """Validate and persist a new offer.

        Raises:
            NotFoundError: Customer, insurance type or category is unknown
            AuthorizationError: Customer creating an offer for someone else,
                or an agent outside the product's department
            ValidationError: A category rule rejected the payload
        """
        now = utc_now()

        async with self.transaction():
            customer = await self.customer_repo.get_by_id(payload.customer_id)
            if customer is None:
                raise NotFoundError(f"Customer {payload.customer_id} not found")
            if actor.is_customer and customer.user_id != actor.actor_id:
                raise AuthorizationError("Customers can only request offers for themselves")

            insurance_type = await self.insurance_type_repo.get_by_id(payload.insurance_type_id)
            if insurance_type is None:
                raise NotFoundError(f"Insurance type {payload.insurance_type_id} not found")

            category = resolve_type_category(insurance_type)
            validate_offer(payload, category, actor.role, now.date())

            agent_id = None
            if actor.is_agent:
                agent = await self._require_agent(actor)
                if not same_department(agent.department, insurance_type.category):
                    raise AuthorizationError(
                        "Agents can only create offers in their own department"
                    )
                agent_id = agent.id

            offer = Offer(
                customer=customer,
                insurance_type=insurance_type,
                agent_id=agent_id,
                department=insurance_type.category,
                base_price=payload.base_price,
                discount_rate=payload.discount_rate,
                final_price=payload.final_price,
                coverage_amount=payload.coverage_amount,
                status=self._initial_status(payload.status, actor),
                valid_until=calculate_valid_until(now, insurance_type.name, insurance_type.category),
                requested_start_date=payload.requested_start_date,
                customer_additional_info=payload.customer_additional_info,
                created_by=actor.actor_id,
                created_at=now,
            )
            await self.offer_repo.add(offer)
            await self.documents.create_offer_documents(offer, actor.actor_id)

        self.logger.info(
            "Offer created",
            extra={
                "offer_id": offer.id,
                "category": category.value,
                "status": offer.status.value,
                "actor_id": actor.actor_id,
                "role": actor.role.value,
            },
        )
        return offer

    @staticmethod
    def _initial_status(requested: Optional[OfferStatus], actor: Actor) -> OfferStatus:
        if actor.is_customer or requested is None:
            return OfferStatus.PENDING
        if requested not in INITIAL_STATUSES:
            raise ValidationError(f"An offer cannot be created with status '{requested.value}'")
        return requested

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    async def agent_review_offer(self, offer_id: int, review: OfferReview, actor: Actor) -> Offer:
        """Apply an agent or admin review to an offer.

        Raises:
            NotFoundError: Offer does not exist
            ConsistencyError: Offer is customer-approved, expired or terminal
            AuthorizationError: Customer caller, or agent outside the department
            ValidationError: Invalid discount or validity date
        """
        if actor.is_customer:
            raise AuthorizationError("Customers cannot review offers")

        now = utc_now()
        expired = False

        async with self.transaction():
            offer = await self._get_locked(offer_id)

            # Customer-approved offers are frozen until payment
            if offer.is_customer_approved:
                raise ConsistencyError(
                    "Offer has been approved by the customer and can no longer be changed"
                )

            agent = None
            if actor.is_agent:
                agent = await self._require_agent_in_department(actor, offer)

            if is_terminal(offer.status):
                raise ConsistencyError(
                    f"Offer {offer_id} is {offer.status.value} and can no longer be reviewed"
                )

            if self._expire_if_stale(offer, now):
                expired = True
            else:
                self._apply_review(offer, review, actor, agent, now)

        if expired:
            raise ConsistencyError(f"Offer {offer_id} has expired")

        self.logger.info(
            "Offer reviewed",
            extra={"offer_id": offer.id, "status": offer.status.value, "actor_id": actor.actor_id},
        )
        return offer

    def _apply_review(
        self,
        offer: Offer,
        review: OfferReview,
        actor: Actor,
        agent: Optional[Agent],
        now: datetime,
    ) -> None:
        if review.discount_rate is not None and not 0 <= review.discount_rate <= 100:
            raise ValidationError("Discount rate must be between 0 and 100")
        valid_until = ensure_utc(review.valid_until)
        if valid_until is not None and valid_until <= now:
            raise ValidationError("Valid until must be in the future")

        current = offer.status
        target = review.status or (
            OfferStatus.REVIEWED if current == OfferStatus.PENDING else current
        )
        new_status = transition(current, target, OfferTrigger.REVIEW)

        if review.discount_rate is not None:
            offer.discount_rate = review.discount_rate
        if review.final_price is not None:
            offer.final_price = review.final_price
        elif review.discount_rate is not None:
            offer.final_price = calculate_final_price(offer.base_price, review.discount_rate)
        if valid_until is not None:
            offer.valid_until = valid_until
        if review.admin_notes is not None:
            offer.admin_notes = review.admin_notes
        if review.rejection_reason is not None:
            offer.rejection_reason = review.rejection_reason

        offer.status = new_status
        offer.reviewed_at = now
        offer.reviewed_by = actor.actor_id
        if agent is not None:
            offer.agent_id = agent.id

    async def customer_approval(self, offer_id: int, approved: bool, actor: Actor) -> Offer:
        """Record the customer's acceptance or rejection of a reviewed offer.

        Raises:
            NotFoundError: Offer does not exist
            AuthorizationError: Offer belongs to another customer
            ConsistencyError: Offer is not awaiting a customer decision
        """
        now = utc_now()
        expired = False

        async with self.transaction():
            offer = await self._get_locked(offer_id)
            self._require_owner(offer, actor)

            if offer.is_customer_approved:
                raise ConsistencyError("Offer has already been approved by the customer")

            if self._expire_if_stale(offer, now):
                expired = True
            else:
                target = OfferStatus.CUSTOMER_APPROVED if approved else OfferStatus.REJECTED
                offer.status = transition(offer.status, target, OfferTrigger.CUSTOMER_DECISION)
                offer.is_customer_approved = approved
                if approved:
                    offer.customer_approved_at = now

        if expired:
            raise ConsistencyError(f"Offer {offer_id} has expired")

        self.logger.info(
            "Customer decision recorded",
            extra={"offer_id": offer.id, "approved": approved, "actor_id": actor.actor_id},
        )
        return offer

    async def delete_offer(self, offer_id: int, actor: Actor) -> None:
        """Delete an offer.

        Customers may delete their own unpaid offers, agents offers in their
        department, admins any offer.
        """
        async with self.transaction():
            offer = await self._get_locked(offer_id)

            if actor.is_customer:
                self._require_owner(offer, actor)
                if offer.status == OfferStatus.PAID:
                    raise ConsistencyError("Paid offers cannot be deleted")
            elif actor.is_agent:
                await self._require_agent_in_department(actor, offer)

            await self.offer_repo.delete(offer)

        self.logger.info(
            "Offer deleted",
            extra={"offer_id": offer_id, "actor_id": actor.actor_id, "role": actor.role.value},
        )

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    async def get_offer(self, offer_id: int, actor: Actor) -> Offer:
        """Get one offer the actor may see, expiring it first if stale."""
        async with self.transaction():
            offer = await self.offer_repo.get_with_relations(offer_id)
            if offer is None:
                raise NotFoundError(f"Offer {offer_id} not found")

            if actor.is_customer:
                self._require_owner(offer, actor)
            elif actor.is_agent:
                await self._require_agent_in_department(actor, offer)

            self._expire_if_stale(offer, utc_now())

        return offer

    async def list_offers(self, actor: Actor, status: Optional[OfferStatus] = None) -> List[Offer]:
        """List the offers visible to the actor, newest first."""
        now = utc_now()

        async with self.transaction():
            if actor.is_customer:
                offers = await self.offer_repo.list_by_customer_user(actor.actor_id, status)
            elif actor.is_agent:
                agent = await self._require_agent(actor)
                departments = [
                    department
                    for department in await self.offer_repo.list_departments()
                    if same_department(agent.department, department)
                ]
                offers = await self.offer_repo.list_by_departments(departments, status)
            else:
                offers = await self.offer_repo.list_all(status)

            for offer in offers:
                self._expire_if_stale(offer, now)

        if status is not None:
            offers = [offer for offer in offers if offer.status == status]
        return offers

    # ------------------------------------------------------------------ #
    # Expiry
    # ------------------------------------------------------------------ #

    async def expire_stale_offers(self, now: Optional[datetime] = None) -> int:
        """Mark every stale, not customer-approved offer as expired.

        Returns:
            Number of offers expired
        """
        now = now or utc_now()

        async with self.transaction():
            stale = await self.offer_repo.list_stale(now)
            for offer in stale:
                offer.status = transition(offer.status, OfferStatus.EXPIRED, OfferTrigger.EXPIRY)

        if stale:
            self.logger.info(
                "Expired stale offers",
                extra={"count": len(stale), "offer_ids": [offer.id for offer in stale]},
            )
        return len(stale)

    def _expire_if_stale(self, offer: Offer, now: datetime) -> bool:
        if not expire_if_stale(offer, now):
            return False
        self.logger.info("Offer expired", extra={"offer_id": offer.id})
        return True

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    async def _get_locked(self, offer_id: int) -> Offer:
        offer = await self.offer_repo.get_for_update(offer_id)
        if offer is None:
            raise NotFoundError(f"Offer {offer_id} not found")
        return offer

    async def _require_agent(self, actor: Actor) -> Agent:
        agent = await self.agent_repo.get_by_user_id(actor.actor_id)
        if agent is None:
            raise AuthorizationError("No agent profile is linked to this user")
        return agent

    async def _require_agent_in_department(self, actor: Actor, offer: Offer) -> Agent:
        agent = await self._require_agent(actor)
        if not same_department(agent.department, offer.department):
            self.logger.warning(
                "Department mismatch",
                extra={
                    "offer_id": offer.id,
                    "agent_id": agent.id,
                    "agent_department": agent.department,
                    "offer_department": offer.department,
                },
            )
            raise AuthorizationError("Agents can only manage offers in their own department")
        return agent

    @staticmethod
    def _require_owner(offer: Offer, actor: Actor) -> None:
        if offer.customer is None or offer.customer.user_id != actor.actor_id:
            raise AuthorizationError("This offer belongs to another customer")
