"""Data Transfer Objects for the asset API layer."""

from app.reserve_assets.application.dto.asset_dto import (
    AssetStateDTO,
    BalanceDTO,
    ClaimCalldataDTO,
    ClaimRewardsRequest,
    ClaimRewardsResponse,
    PriceDTO,
    RefreshResultDTO,
    RewardsClaimedDTO,
    fix_to_str,
)

__all__ = [
    "AssetStateDTO",
    "BalanceDTO",
    "ClaimCalldataDTO",
    "ClaimRewardsRequest",
    "ClaimRewardsResponse",
    "PriceDTO",
    "RefreshResultDTO",
    "RewardsClaimedDTO",
    "fix_to_str",
]
