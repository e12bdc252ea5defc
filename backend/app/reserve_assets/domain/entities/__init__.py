"""Domain entities for the reserve asset layer."""

from app.reserve_assets.domain.entities.collateral_status import CollateralStatus

__all__ = [
    "CollateralStatus",
]
