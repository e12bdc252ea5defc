# Domain layer - pure business rules, no framework dependencies

from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.events import (
    CollateralStatusChanged,
    EventLog,
    RewardsClaimed,
)
from app.reserve_assets.domain.value_objects.fix import FIX_ONE, FIX_ZERO, Fix

__all__ = [
    # Status
    "CollateralStatus",
    # Events
    "CollateralStatusChanged",
    "EventLog",
    "RewardsClaimed",
    # Fixed point
    "FIX_ONE",
    "FIX_ZERO",
    "Fix",
]
