"""Reward claiming API endpoints.

Implements POST /api/rewards/claim using ClaimRewardsUseCase.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.config import Settings
from app.reserve_assets.application.dto.asset_dto import (
    ClaimRewardsRequest,
    ClaimRewardsResponse,
    RewardsClaimedDTO,
)
from app.reserve_assets.application.exceptions import (
    ClaimDelegationFailure,
    ClaimInProgressError,
)
from app.reserve_assets.application.use_cases.claim_rewards import ClaimRewardsUseCase
from app.reserve_assets.presentation.api.dependencies import (
    get_app_settings,
    get_claim_rewards_use_case,
)

router = APIRouter()


@router.post("/rewards/claim", response_model=ClaimRewardsResponse)
def claim_rewards(
    request: ClaimRewardsRequest,
    use_case: ClaimRewardsUseCase = Depends(get_claim_rewards_use_case),
    settings: Settings = Depends(get_app_settings),
) -> ClaimRewardsResponse:
    """Claim every reward program for a holder.

    Args:
        request: Holder to claim for; the configured holder if omitted.
        use_case: Shared claim use case (injected).
        settings: Application settings (injected).

    Returns:
        One entry per reward token with a positive claimed amount.

    Raises:
        HTTPException: 400 if no holder is given or configured.
        HTTPException: 409 if a claim is already in progress.
        HTTPException: 502 if a claim call failed.
    """
    holder = request.holder or settings.claim_holder_address
    if not holder:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No holder given and no claim_holder_address configured",
        )

    try:
        claimed = use_case.execute(holder)
    except ClaimInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except ClaimDelegationFailure as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except ValueError as e:
        raise HTTPException(
            status_code=422, detail=str(e)
        ) from e

    return ClaimRewardsResponse(
        claimed=[
            RewardsClaimedDTO(erc20=event.erc20, amount=str(event.amount), holder=event.holder)
            for event in claimed
        ]
    )
