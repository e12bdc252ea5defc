"""Domain value objects for the reserve asset layer.

This module exports immutable value objects used throughout the domain layer:
- Fix: 18-decimal fixed-point numbers for prices and ratios
- Price: A {UoA/tok} price tagged with the path that produced it
- ClaimCalldata: Target and payload of a reward-claim call
"""

from app.reserve_assets.domain.value_objects.claim_calldata import ZERO_ADDRESS, ClaimCalldata
from app.reserve_assets.domain.value_objects.fix import (
    FIX_ONE,
    FIX_ZERO,
    Fix,
    RoundingMode,
)
from app.reserve_assets.domain.value_objects.price import Price

__all__ = [
    "ClaimCalldata",
    "FIX_ONE",
    "FIX_ZERO",
    "Fix",
    "Price",
    "RoundingMode",
    "ZERO_ADDRESS",
]
