"""Repositories for Policy and Payment records."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from insurance_api.database.models import Payment, Policy
from insurance_api.repositories.base_repository import BaseRepository


class PolicyRepository(BaseRepository[Policy]):
    """Repository for managing issued policies."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Policy)

    async def get_by_offer_id(self, offer_id: int) -> Optional[Policy]:
        """Get the policy issued for an offer, if any."""
        stmt = select(Policy).where(Policy.offer_id == offer_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_number(self, policy_number: str) -> Optional[Policy]:
        stmt = select(Policy).where(Policy.policy_number == policy_number)
        result = await self.session.execute(stmt)
        return result.scalars().first()


class PaymentRepository(BaseRepository[Payment]):
    """Repository for payment transactions."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Payment)

    async def get_by_policy_id(self, policy_id: int) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.policy_id == policy_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_by_policy_id(self, policy_id: int) -> List[Payment]:
        stmt = select(Payment).where(Payment.policy_id == policy_id).order_by(Payment.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
