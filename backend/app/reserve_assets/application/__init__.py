"""Application layer - asset facades, use cases and orchestration.

This layer contains:
- Interfaces: Ports to price feeds, tokens, rate sources and executors
- Assets: Asset / Collateral facades, oracle adapter, reward descriptor, registry
- DTOs: Data Transfer Objects for API output
- Use Cases: Application services that orchestrate the assets
- Exceptions: Application-level error types
"""

from app.reserve_assets.application.exceptions import (
    ApplicationError,
    AssetNotFoundError,
    ClaimDelegationFailure,
    ClaimInProgressError,
    InvalidAssetConfigError,
    NoFallbackAvailableError,
    NotCollateralError,
    PriceOutsideRangeError,
    PriceUnavailableError,
    RefreshInvariantViolation,
    StalePriceError,
)
from app.reserve_assets.application.use_cases import (
    ClaimRewardsUseCase,
    GetAssetPriceUseCase,
    GetAssetStateUseCase,
    GetBalanceUseCase,
    GetClaimCalldataUseCase,
    ListAssetsUseCase,
    RefreshAssetsUseCase,
)

__all__ = [
    # Use Cases
    "ClaimRewardsUseCase",
    "GetAssetPriceUseCase",
    "GetAssetStateUseCase",
    "GetBalanceUseCase",
    "GetClaimCalldataUseCase",
    "ListAssetsUseCase",
    "RefreshAssetsUseCase",
    # Exceptions
    "ApplicationError",
    "AssetNotFoundError",
    "ClaimDelegationFailure",
    "ClaimInProgressError",
    "InvalidAssetConfigError",
    "NoFallbackAvailableError",
    "NotCollateralError",
    "PriceOutsideRangeError",
    "PriceUnavailableError",
    "RefreshInvariantViolation",
    "StalePriceError",
]
