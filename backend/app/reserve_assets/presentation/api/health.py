"""Health check endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.reserve_assets.application.assets.registry import AssetRegistry
from app.reserve_assets.presentation.api.dependencies import get_asset_registry

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    version: str
    assets: int


@router.get("/health", response_model=HealthResponse)
def health_check(registry: AssetRegistry = Depends(get_asset_registry)) -> HealthResponse:
    """Check application health status.

    Returns:
        Health status with timestamp, version and registered asset count.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        assets=len(registry),
    )
