from typing import Annotated

from fastapi import APIRouter, Depends, Request

from insurance_api.api.v1.dependencies import get_policy_service
from insurance_api.core.auth import get_current_actor
from insurance_api.schemas.auth import Actor
from insurance_api.schemas.common import ApiResponse
from insurance_api.schemas.policy import PaymentListResponse, PaymentResponse, PolicyResponse
from insurance_api.services.policies.policy_service import PolicyService
from insurance_api.utils.responses import create_api_response

router = APIRouter()


@router.get(
    "/offer/{offer_id}",
    response_model=ApiResponse,
    summary="Get the policy issued for an offer",
    operation_id="get_policy_by_offer",
)
async def get_policy_by_offer(
    request: Request,
    offer_id: int,
    actor: Annotated[Actor, Depends(get_current_actor)],
    policy_service: Annotated[PolicyService, Depends(get_policy_service)],
) -> ApiResponse:
    policy = await policy_service.get_policy_by_offer(offer_id, actor)
    return create_api_response(
        data=PolicyResponse.model_validate(policy),
        message="Policy retrieved successfully",
        request=request,
    )


@router.get(
    "/number/{policy_number}",
    response_model=ApiResponse,
    summary="Get a policy by its number",
    operation_id="get_policy_by_number",
)
async def get_policy_by_number(
    request: Request,
    policy_number: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    policy_service: Annotated[PolicyService, Depends(get_policy_service)],
) -> ApiResponse:
    policy = await policy_service.get_policy_by_number(policy_number, actor)
    return create_api_response(
        data=PolicyResponse.model_validate(policy),
        message="Policy retrieved successfully",
        request=request,
    )


@router.get(
    "/{policy_id}/payments",
    response_model=ApiResponse,
    summary="List payments recorded for a policy",
    operation_id="list_policy_payments",
)
async def list_policy_payments(
    request: Request,
    policy_id: int,
    actor: Annotated[Actor, Depends(get_current_actor)],
    policy_service: Annotated[PolicyService, Depends(get_policy_service)],
) -> ApiResponse:
    payments = await policy_service.list_payments_for_policy(policy_id, actor)
    items = [PaymentResponse.model_validate(payment) for payment in payments]
    return create_api_response(
        data=PaymentListResponse(total=len(items), items=items),
        message="Payments retrieved successfully",
        request=request,
    )
