"""Domain services implementing core business rules.

These are pure domain services with no infrastructure dependencies:
- StatusStateMachine: SOUND -> IFFY -> DISABLED default detection
- ExchangeRateTracker: refPerTok / targetPerRef / pricePerTarget chain
- PegPolicy: Tolerance band check for peg-tracking collateral
"""

from app.reserve_assets.domain.services.exchange_rates import (
    ExchangeRateTracker,
    RateObservation,
    RateSnapshot,
    constant_rate,
)
from app.reserve_assets.domain.services.peg_policy import PegPolicy
from app.reserve_assets.domain.services.status_machine import (
    StatusStateMachine,
    StatusTransition,
    utc_now,
)

__all__ = [
    "ExchangeRateTracker",
    "PegPolicy",
    "RateObservation",
    "RateSnapshot",
    "StatusStateMachine",
    "StatusTransition",
    "constant_rate",
    "utc_now",
]
