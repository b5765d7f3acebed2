from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from insurance_api.api.v1.dependencies import get_offer_service
from insurance_api.core.auth import get_current_actor, require_roles
from insurance_api.schemas.auth import Actor
from insurance_api.schemas.common import ApiResponse
from insurance_api.schemas.enums import OfferStatus, UserRole
from insurance_api.schemas.offer import (
    OfferApproval,
    OfferCreate,
    OfferListResponse,
    OfferResponse,
    OfferReview,
)
from insurance_api.services.offers.offer_service import OfferService
from insurance_api.utils.logging import get_logger
from insurance_api.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an offer",
    operation_id="create_offer",
)
async def create_offer(
    request: Request,
    payload: OfferCreate,
    actor: Annotated[Actor, Depends(get_current_actor)],
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
) -> ApiResponse:
    """Create an offer for a customer and insurance product."""
    offer = await offer_service.create_offer(payload, actor)
    return create_api_response(
        data=OfferResponse.model_validate(offer),
        message="Offer created successfully",
        request=request,
    )


@router.get(
    "",
    response_model=ApiResponse,
    summary="List offers",
    operation_id="list_offers",
)
async def list_offers(
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
    status_filter: Optional[OfferStatus] = Query(None, alias="status"),
) -> ApiResponse:
    """List the offers visible to the caller."""
    offers = await offer_service.list_offers(actor, status_filter)
    items = [OfferResponse.model_validate(offer) for offer in offers]
    return create_api_response(
        data=OfferListResponse(total=len(items), items=items),
        message="Offers retrieved successfully",
        request=request,
    )


@router.get(
    "/{offer_id}",
    response_model=ApiResponse,
    summary="Get offer details",
    operation_id="get_offer",
)
async def get_offer(
    request: Request,
    offer_id: int,
    actor: Annotated[Actor, Depends(get_current_actor)],
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
) -> ApiResponse:
    offer = await offer_service.get_offer(offer_id, actor)
    return create_api_response(
        data=OfferResponse.model_validate(offer),
        message="Offer details retrieved successfully",
        request=request,
    )


@router.patch(
    "/{offer_id}/review",
    response_model=ApiResponse,
    summary="Review an offer",
    operation_id="review_offer",
)
async def review_offer(
    request: Request,
    offer_id: int,
    review: OfferReview,
    actor: Annotated[Actor, Depends(require_roles(UserRole.AGENT, UserRole.ADMIN))],
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
) -> ApiResponse:
    """Update pricing, status or validity of an offer as an agent or admin."""
    offer = await offer_service.agent_review_offer(offer_id, review, actor)
    return create_api_response(
        data=OfferResponse.model_validate(offer),
        message="Offer reviewed successfully",
        request=request,
    )


@router.post(
    "/{offer_id}/approval",
    response_model=ApiResponse,
    summary="Accept or decline an offer",
    operation_id="approve_offer",
)
async def approve_offer(
    request: Request,
    offer_id: int,
    decision: OfferApproval,
    actor: Annotated[Actor, Depends(get_current_actor)],
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
) -> ApiResponse:
    """Record the customer's decision on a reviewed offer."""
    offer = await offer_service.customer_approval(offer_id, decision.approved, actor)
    return create_api_response(
        data=OfferResponse.model_validate(offer),
        message="Offer approved" if decision.approved else "Offer rejected",
        request=request,
    )


@router.delete(
    "/{offer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an offer",
    operation_id="delete_offer",
)
async def delete_offer(
    offer_id: int,
    actor: Annotated[Actor, Depends(get_current_actor)],
    offer_service: Annotated[OfferService, Depends(get_offer_service)],
) -> Response:
    await offer_service.delete_offer(offer_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
