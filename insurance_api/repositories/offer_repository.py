"""Repository for Offer data access."""

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from insurance_api.database.models import Customer, Offer
from insurance_api.repositories.base_repository import BaseRepository
from insurance_api.schemas.enums import OfferStatus

# Statuses an offer can expire from; customer-approved offers are frozen.
EXPIRABLE_STATUSES = (OfferStatus.PENDING, OfferStatus.REVIEWED, OfferStatus.APPROVED)


class OfferRepository(BaseRepository[Offer]):
    """Repository for managing Offer records.

    Every query eager-loads the customer and insurance type so that services
    never trigger a lazy load on an async session.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, Offer)

    def _base_query(self):
        return select(Offer).options(
            selectinload(Offer.customer).selectinload(Customer.user),
            selectinload(Offer.insurance_type),
        )

    async def get_with_relations(self, offer_id: int) -> Optional[Offer]:
        """Load an offer with its customer and insurance type."""
        stmt = self._base_query().where(Offer.id == offer_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_for_update(self, offer_id: int) -> Optional[Offer]:
        """Load an offer with a row-level lock for the current transaction.

        ``populate_existing`` refreshes an instance already present in the
        identity map so the caller sees the locked row's current values.
        """
        stmt = (
            self._base_query()
            .where(Offer.id == offer_id)
            .with_for_update(of=Offer)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_by_customer_user(
        self, user_id: int, status: Optional[OfferStatus] = None
    ) -> List[Offer]:
        """List offers whose customer belongs to the given user."""
        stmt = self._base_query().join(Offer.customer).where(Customer.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Offer.status == status)
        result = await self.session.execute(stmt.order_by(Offer.created_at.desc(), Offer.id.desc()))
        return list(result.scalars().all())

    async def list_by_departments(
        self, departments: Sequence[str], status: Optional[OfferStatus] = None
    ) -> List[Offer]:
        """List offers filed under any of the given department labels."""
        if not departments:
            return []
        stmt = self._base_query().where(Offer.department.in_(list(departments)))
        if status is not None:
            stmt = stmt.where(Offer.status == status)
        result = await self.session.execute(stmt.order_by(Offer.created_at.desc(), Offer.id.desc()))
        return list(result.scalars().all())

    async def list_all(self, status: Optional[OfferStatus] = None) -> List[Offer]:
        stmt = self._base_query()
        if status is not None:
            stmt = stmt.where(Offer.status == status)
        result = await self.session.execute(stmt.order_by(Offer.created_at.desc(), Offer.id.desc()))
        return list(result.scalars().all())

    async def list_departments(self) -> List[str]:
        """Distinct department labels currently used by offers."""
        result = await self.session.execute(select(Offer.department).distinct())
        return [row for row in result.scalars().all() if row is not None]

    async def list_stale(self, now: datetime) -> List[Offer]:
        """Offers past ``valid_until`` that are still eligible to expire."""
        stmt = (
            self._base_query()
            .where(Offer.status.in_(EXPIRABLE_STATUSES))
            .where(Offer.is_customer_approved.is_(False))
            .where(Offer.valid_until < now)
            .order_by(Offer.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
