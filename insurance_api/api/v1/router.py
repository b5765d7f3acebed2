from fastapi import APIRouter

from insurance_api.api.v1.endpoints import health, offers, payments, policies

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(offers.router, prefix="/offers", tags=["Offers"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(policies.router, prefix="/policies", tags=["Policies"])

__all__ = ["api_router"]
