from insurance_api.services.offers.offer_service import OfferService

__all__ = ["OfferService"]
