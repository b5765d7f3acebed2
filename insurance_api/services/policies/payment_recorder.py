"""Record the payment paired with a newly issued policy."""

import logging
import secrets
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from insurance_api.database.models import Payment, Policy
from insurance_api.repositories.policy_repository import PaymentRepository
from insurance_api.schemas.enums import PaymentMethod, PaymentStatus
from insurance_api.utils.logging import get_logger
from insurance_api.utils.time import utc_now

LOGGER = get_logger(__name__)


def generate_transaction_id(now: Optional[datetime] = None) -> str:
    """``TXN_{YYYYMMDDHHMMSS}_{4 random digits}``."""
    now = now or utc_now()
    return f"TXN_{now:%Y%m%d%H%M%S}_{secrets.randbelow(9000) + 1000}"


class PaymentRecorder:
    """Stages a completed Payment on the issuing unit of work.

    Never commits: the payment must land in the same transaction as its policy.
    """

    def __init__(self, db_session: AsyncSession, logger: Optional[logging.Logger] = None):
        self.logger = logger or LOGGER
        self.payment_repo = PaymentRepository(db_session)

    async def record(
        self,
        policy: Policy,
        amount: Decimal,
        method: PaymentMethod,
        user_id: Optional[int],
        transaction_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Payment:
        now = utc_now()
        payment = Payment(
            policy_id=policy.id,
            amount=amount,
            method=method,
            status=PaymentStatus.COMPLETED,
            transaction_id=transaction_id or generate_transaction_id(now),
            notes=notes,
            paid_at=now,
            user_id=user_id,
            created_at=now,
        )
        await self.payment_repo.add(payment)

        self.logger.info(
            "Payment recorded",
            extra={
                "policy_id": policy.id,
                "payment_id": payment.id,
                "transaction_id": payment.transaction_id,
                "method": method.value,
            },
        )
        return payment
