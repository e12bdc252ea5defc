"""Application use cases for orchestrating the asset layer."""

from app.reserve_assets.application.use_cases.claim_rewards import (
    ClaimRewardsUseCase,
    GetClaimCalldataUseCase,
)
from app.reserve_assets.application.use_cases.get_asset_price import (
    GetAssetPriceUseCase,
    GetBalanceUseCase,
)
from app.reserve_assets.application.use_cases.get_asset_state import (
    GetAssetStateUseCase,
    ListAssetsUseCase,
)
from app.reserve_assets.application.use_cases.refresh_assets import RefreshAssetsUseCase

__all__ = [
    "ClaimRewardsUseCase",
    "GetAssetPriceUseCase",
    "GetAssetStateUseCase",
    "GetBalanceUseCase",
    "GetClaimCalldataUseCase",
    "ListAssetsUseCase",
    "RefreshAssetsUseCase",
]
