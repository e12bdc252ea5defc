"""Data Transfer Objects for asset-related API responses.

These DTOs represent the external contract for asset data exposed
through the API layer. Fixed-point values are serialized as decimal
strings so no precision is lost in JSON.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.value_objects.fix import Fix


def fix_to_str(value: Optional[Fix]) -> Optional[str]:
    """Render a Fix for JSON, or None."""
    return str(value) if value is not None else None


class AssetStateDTO(BaseModel):
    """Read surface of one registered asset.

    Collateral-only fields are None for plain assets.
    """

    symbol: str = Field(description="Token symbol (e.g., 'cUSDC')")
    erc20: str = Field(description="Token address")
    erc20_decimals: int = Field(description="Token decimals")
    is_collateral: bool = Field(description="Whether the asset can back the basket")
    max_trade_volume: str = Field(description="Maximum trade size in UoA")
    reward_erc20: str = Field(description="Reward token address, or the zero address")
    target_name: Optional[str] = Field(default=None, description="Target unit (e.g., 'USD')")
    status: Optional[CollateralStatus] = Field(default=None, description="Default status (0 SOUND, 1 IFFY, 2 DISABLED)")
    status_name: Optional[str] = Field(default=None, description="Default status name")
    when_default: Optional[datetime] = Field(default=None, description="When the collateral defaults, if IFFY/DISABLED")
    ref_per_tok: Optional[str] = Field(default=None, description="Reference units per token")
    target_per_ref: Optional[str] = Field(default=None, description="Target units per reference unit")
    price_per_target: Optional[str] = Field(default=None, description="UoA per target unit")


class PriceDTO(BaseModel):
    """A {UoA/tok} price and the path that produced it."""

    symbol: str = Field(description="Token symbol")
    value: str = Field(description="Price in UoA per whole token")
    is_fallback: bool = Field(description="True if a fallback estimate supplied the price")


class BalanceDTO(BaseModel):
    """Token balance of one account."""

    symbol: str = Field(description="Token symbol")
    account: str = Field(description="Account address")
    balance: str = Field(description="Balance in whole tokens")


class ClaimCalldataDTO(BaseModel):
    """Reward-claim call description."""

    symbol: str = Field(description="Token symbol")
    target: str = Field(description="Call target, zero address if no rewards")
    payload: str = Field(description="Hex-encoded call data, '0x' if no rewards")
    reward_erc20: str = Field(description="Reward token address, or the zero address")


class RefreshResultDTO(BaseModel):
    """Statuses of all collateral after a refresh."""

    statuses: dict[str, str] = Field(default_factory=dict, description="Symbol -> status name")
    refreshed_at: datetime = Field(description="When the refresh ran (UTC)")


class ClaimRewardsRequest(BaseModel):
    """Request to claim rewards accrued to a holder."""

    holder: Optional[str] = Field(
        default=None,
        description="Account the rewards accrue to; defaults to the configured holder",
        min_length=42,
        max_length=42,
    )


class RewardsClaimedDTO(BaseModel):
    """One RewardsClaimed event."""

    erc20: str = Field(description="Reward token address")
    amount: str = Field(description="Amount claimed in whole tokens")
    holder: str = Field(description="Account the rewards were claimed for")


class ClaimRewardsResponse(BaseModel):
    """Events emitted by a claim sequence."""

    claimed: list[RewardsClaimedDTO] = Field(default_factory=list)
