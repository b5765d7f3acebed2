from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from insurance_api.api.v1.dependencies import get_policy_service
from insurance_api.core.auth import get_current_actor
from insurance_api.schemas.auth import Actor
from insurance_api.schemas.common import ApiResponse
from insurance_api.schemas.policy import (
    IssuanceResponse,
    PaymentCreate,
    PaymentResponse,
    PolicyResponse,
)
from insurance_api.services.policies.policy_service import PolicyService
from insurance_api.utils.responses import create_api_response

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Pay for an offer and issue its policy",
    operation_id="create_payment",
)
async def create_payment(
    request: Request,
    response: Response,
    payload: PaymentCreate,
    actor: Annotated[Actor, Depends(get_current_actor)],
    policy_service: Annotated[PolicyService, Depends(get_policy_service)],
) -> ApiResponse:
    """Record a payment and issue the policy.

    Retrying a payment for an already-issued offer returns the existing
    policy with status 200 instead of 201.
    """
    result = await policy_service.create_policy_from_payment(
        payload.offer_id,
        payload.amount,
        actor,
        method=payload.method,
        transaction_id=payload.transaction_id,
        notes=payload.notes,
    )
    if not result.created:
        response.status_code = status.HTTP_200_OK

    return create_api_response(
        data=IssuanceResponse(
            created=result.created,
            policy=PolicyResponse.model_validate(result.policy),
            payment=PaymentResponse.model_validate(result.payment) if result.payment else None,
        ),
        message="Policy issued successfully" if result.created else "Policy already issued",
        request=request,
    )
