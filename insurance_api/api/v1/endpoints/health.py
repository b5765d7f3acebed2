"""Health check API endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from insurance_api.core.config import settings
from insurance_api.core.database import db_client

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str
    service: str
    database: dict


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    description="Check if the service is running and its database is reachable",
    operation_id="get_service_health_status",
)
async def health_check() -> HealthCheckResponse:
    db_health = await db_client.health_check()

    return HealthCheckResponse(
        status="healthy" if db_health["status"] == "healthy" else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        database=db_health,
    )
