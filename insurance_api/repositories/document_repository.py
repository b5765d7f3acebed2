"""Repository for Document metadata."""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from insurance_api.database.models import Document
from insurance_api.repositories.base_repository import BaseRepository


class DocumentRepository(BaseRepository[Document]):
    """Repository for managing Document records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Document)

    async def list_by_offer(self, offer_id: int) -> List[Document]:
        """Get all documents attached to an offer."""
        stmt = select(Document).where(Document.offer_id == offer_id).order_by(Document.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_policy(self, policy_id: int) -> List[Document]:
        stmt = select(Document).where(Document.policy_id == policy_id).order_by(Document.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
