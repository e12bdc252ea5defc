"""Asset and collateral facades combining oracle, rates, status and rewards."""

from app.reserve_assets.application.assets.appreciating_collateral import AppreciatingCollateral
from app.reserve_assets.application.assets.asset import Asset
from app.reserve_assets.application.assets.collateral import Collateral
from app.reserve_assets.application.assets.fiat_collateral import FiatCollateral
from app.reserve_assets.application.assets.price_oracle import (
    LastKnownGood,
    PriceOracleAdapter,
    PriceOutcome,
)
from app.reserve_assets.application.assets.registry import (
    AssetKind,
    AssetRegistry,
    RegisteredAsset,
)
from app.reserve_assets.application.assets.rewards import (
    COMPTROLLER_CLAIM_SIGNATURE,
    RewardClaimDescriptor,
)
from app.reserve_assets.application.assets.self_referential_collateral import (
    SelfReferentialCollateral,
)

__all__ = [
    "AppreciatingCollateral",
    "Asset",
    "AssetKind",
    "AssetRegistry",
    "COMPTROLLER_CLAIM_SIGNATURE",
    "Collateral",
    "FiatCollateral",
    "LastKnownGood",
    "PriceOracleAdapter",
    "PriceOutcome",
    "RegisteredAsset",
    "RewardClaimDescriptor",
    "SelfReferentialCollateral",
]
