"""Repositories for the customer, agent and insurance type directory.

These entities are maintained elsewhere; the offer lifecycle only looks
them up by ID or by owning user.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from insurance_api.database.models import Agent, Customer, InsuranceType
from insurance_api.repositories.base_repository import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Repository for Customer lookups."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Customer)

    async def get_by_user_id(self, user_id: int) -> Optional[Customer]:
        stmt = select(Customer).where(Customer.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()


class AgentRepository(BaseRepository[Agent]):
    """Repository for Agent lookups."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Agent)

    async def get_by_user_id(self, user_id: int) -> Optional[Agent]:
        stmt = select(Agent).where(Agent.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()


class InsuranceTypeRepository(BaseRepository[InsuranceType]):
    """Repository for InsuranceType lookups."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, InsuranceType)
