"""Time-based offer expiry."""

from datetime import datetime

from insurance_api.database.models import Offer
from insurance_api.repositories.offer_repository import EXPIRABLE_STATUSES
from insurance_api.schemas.enums import OfferStatus
from insurance_api.services.offers.state_machine import OfferTrigger, transition
from insurance_api.utils.time import ensure_utc


def is_stale(offer: Offer, now: datetime) -> bool:
    """Past ``valid_until`` and still allowed to expire.

    Customer-approved offers are frozen and never expire.
    """
    if offer.is_customer_approved or offer.status not in EXPIRABLE_STATUSES:
        return False
    return ensure_utc(offer.valid_until) < now


def expire_if_stale(offer: Offer, now: datetime) -> bool:
    """Move a stale offer to ``expired``; returns whether it changed."""
    if not is_stale(offer, now):
        return False
    offer.status = transition(offer.status, OfferStatus.EXPIRED, OfferTrigger.EXPIRY)
    return True
