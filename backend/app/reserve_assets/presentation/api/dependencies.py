"""FastAPI dependencies resolving objects built during the app lifespan."""

from fastapi import HTTPException, Request, status

from app.core.config import Settings, get_settings
from app.reserve_assets.application.assets.registry import AssetRegistry
from app.reserve_assets.application.use_cases.claim_rewards import ClaimRewardsUseCase


def get_asset_registry(request: Request) -> AssetRegistry:
    """Return the registry stored on the application state."""
    return request.app.state.registry


def get_claim_rewards_use_case(request: Request) -> ClaimRewardsUseCase:
    """Return the shared claim use case.

    A single instance serves every request so its non-reentrant lock
    covers concurrent claims.

    Raises:
        HTTPException: 503 if no call executor is configured.
    """
    use_case = getattr(request.app.state, "claim_rewards", None)
    if use_case is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reward claiming is not configured",
        )
    return use_case


def get_app_settings() -> Settings:
    return get_settings()
