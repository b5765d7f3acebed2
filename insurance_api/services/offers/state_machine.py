"""Offer status transitions.

Every status change goes through :func:`transition`, which accepts a move
only if it is listed for the trigger that caused it.
"""

from enum import Enum
from typing import Dict, FrozenSet, Tuple

from insurance_api.core.exceptions import ConsistencyError
from insurance_api.schemas.enums import OfferStatus


class OfferTrigger(str, Enum):
    """What caused a status change."""

    REVIEW = "review"
    CUSTOMER_DECISION = "customer_decision"
    PAYMENT = "payment"
    EXPIRY = "expiry"


TERMINAL_STATUSES: FrozenSet[OfferStatus] = frozenset(
    {OfferStatus.PAID, OfferStatus.REJECTED, OfferStatus.EXPIRED}
)

# trigger -> (allowed sources, allowed targets)
_TRANSITIONS: Dict[OfferTrigger, Tuple[FrozenSet[OfferStatus], FrozenSet[OfferStatus]]] = {
    OfferTrigger.REVIEW: (
        frozenset({OfferStatus.PENDING, OfferStatus.REVIEWED, OfferStatus.APPROVED}),
        frozenset({OfferStatus.REVIEWED, OfferStatus.APPROVED, OfferStatus.REJECTED}),
    ),
    OfferTrigger.CUSTOMER_DECISION: (
        frozenset({OfferStatus.REVIEWED, OfferStatus.APPROVED}),
        frozenset({OfferStatus.CUSTOMER_APPROVED, OfferStatus.REJECTED}),
    ),
    OfferTrigger.PAYMENT: (
        frozenset({OfferStatus.CUSTOMER_APPROVED, OfferStatus.APPROVED}),
        frozenset({OfferStatus.PAID}),
    ),
    OfferTrigger.EXPIRY: (
        frozenset({OfferStatus.PENDING, OfferStatus.REVIEWED, OfferStatus.APPROVED}),
        frozenset({OfferStatus.EXPIRED}),
    ),
}

INITIAL_STATUSES: FrozenSet[OfferStatus] = frozenset(
    {OfferStatus.PENDING, OfferStatus.REVIEWED, OfferStatus.APPROVED}
)


def can_transition(current: OfferStatus, target: OfferStatus, trigger: OfferTrigger) -> bool:
    sources, targets = _TRANSITIONS[trigger]
    return current in sources and target in targets


def transition(current: OfferStatus, target: OfferStatus, trigger: OfferTrigger) -> OfferStatus:
    """Validate a status change and return the new status.

    Raises:
        ConsistencyError: If ``trigger`` does not allow ``current -> target``
    """
    current = OfferStatus(current)
    target = OfferStatus(target)
    if not can_transition(current, target, trigger):
        raise ConsistencyError(
            f"Cannot move offer from '{current.value}' to '{target.value}' on {trigger.value}"
        )
    return target


def is_terminal(status: OfferStatus) -> bool:
    return OfferStatus(status) in TERMINAL_STATUSES
