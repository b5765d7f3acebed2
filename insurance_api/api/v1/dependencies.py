"""Service factories injected into route handlers."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from insurance_api.core.database import get_async_session as get_session
from insurance_api.services.offers.offer_service import OfferService
from insurance_api.services.policies.policy_service import PolicyService


async def get_offer_service(
    db_session: Annotated[AsyncSession, Depends(get_session)]
) -> OfferService:
    return OfferService(db_session)


async def get_policy_service(
    db_session: Annotated[AsyncSession, Depends(get_session)]
) -> PolicyService:
    return PolicyService(db_session)
