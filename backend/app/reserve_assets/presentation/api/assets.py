"""Asset API endpoints.

Implements the read surface of registered assets and collateral:
- GET /api/assets - State of every asset
- GET /api/assets/{symbol} - State of one asset
- GET /api/assets/{symbol}/price - Price, optionally with fallback
- GET /api/assets/{symbol}/strict-price - Strict price only
- GET /api/assets/{symbol}/balance/{account} - Token balance
- GET /api/assets/{symbol}/claim-calldata - Reward claim description
- POST /api/assets/refresh - Refresh every asset now

Routes are plain ``def`` functions: feed and contract reads block, so
FastAPI runs them in its threadpool.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from app.reserve_assets.application.assets.registry import AssetRegistry
from app.reserve_assets.application.dto.asset_dto import (
    AssetStateDTO,
    BalanceDTO,
    ClaimCalldataDTO,
    PriceDTO,
    RefreshResultDTO,
)
from app.reserve_assets.application.exceptions import (
    AssetNotFoundError,
    NoFallbackAvailableError,
    PriceUnavailableError,
)
from app.reserve_assets.application.use_cases.claim_rewards import GetClaimCalldataUseCase
from app.reserve_assets.application.use_cases.get_asset_price import (
    GetAssetPriceUseCase,
    GetBalanceUseCase,
)
from app.reserve_assets.application.use_cases.get_asset_state import (
    GetAssetStateUseCase,
    ListAssetsUseCase,
)
from app.reserve_assets.application.use_cases.refresh_assets import RefreshAssetsUseCase
from app.reserve_assets.presentation.api.dependencies import get_asset_registry

router = APIRouter()

SymbolPath = Annotated[str, Path(description="Token symbol or address (e.g., cUSDC)")]


def _not_found(e: AssetNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get("/assets", response_model=list[AssetStateDTO])
def list_assets(registry: AssetRegistry = Depends(get_asset_registry)) -> list[AssetStateDTO]:
    """List every registered asset, collateral first.

    Status and ratios reflect the last refresh.
    """
    return ListAssetsUseCase(registry).execute()


@router.post("/assets/refresh", response_model=RefreshResultDTO)
def refresh_assets(registry: AssetRegistry = Depends(get_asset_registry)) -> RefreshResultDTO:
    """Refresh every asset now instead of waiting for the background loop."""
    return RefreshAssetsUseCase(registry).execute()


@router.get("/assets/{symbol}", response_model=AssetStateDTO)
def get_asset(
    symbol: SymbolPath,
    registry: AssetRegistry = Depends(get_asset_registry),
) -> AssetStateDTO:
    """Get the state of one asset.

    Raises:
        HTTPException: 404 if the asset is not registered.
    """
    try:
        return GetAssetStateUseCase(registry).execute(symbol)
    except AssetNotFoundError as e:
        raise _not_found(e) from e


@router.get("/assets/{symbol}/price", response_model=PriceDTO)
def get_price(
    symbol: SymbolPath,
    allow_fallback: Annotated[
        bool, Query(description="Degrade to a fallback estimate if the strict price fails")
    ] = True,
    registry: AssetRegistry = Depends(get_asset_registry),
) -> PriceDTO:
    """Get the {UoA/tok} price of an asset.

    Raises:
        HTTPException: 404 if the asset is not registered.
        HTTPException: 503 if no price (strict or fallback) is available.
    """
    try:
        return GetAssetPriceUseCase(registry).execute(symbol, allow_fallback=allow_fallback)
    except AssetNotFoundError as e:
        raise _not_found(e) from e
    except (PriceUnavailableError, NoFallbackAvailableError) as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": e.code, "message": e.message},
        ) from e


@router.get("/assets/{symbol}/strict-price", response_model=PriceDTO)
def get_strict_price(
    symbol: SymbolPath,
    registry: AssetRegistry = Depends(get_asset_registry),
) -> PriceDTO:
    """Get the strict price of an asset; never a fallback.

    Raises:
        HTTPException: 404 if the asset is not registered.
        HTTPException: 503 if the strict price is unavailable.
    """
    try:
        return GetAssetPriceUseCase(registry).strict(symbol)
    except AssetNotFoundError as e:
        raise _not_found(e) from e
    except PriceUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": e.code, "message": e.message},
        ) from e


@router.get("/assets/{symbol}/balance/{account}", response_model=BalanceDTO)
def get_balance(
    symbol: SymbolPath,
    account: Annotated[str, Path(description="Account address")],
    registry: AssetRegistry = Depends(get_asset_registry),
) -> BalanceDTO:
    """Get the balance of an account in whole tokens.

    Raises:
        HTTPException: 404 if the asset is not registered.
        HTTPException: 502 if the token contract cannot be read.
    """
    try:
        return GetBalanceUseCase(registry).execute(symbol, account)
    except AssetNotFoundError as e:
        raise _not_found(e) from e
    except ValueError as e:
        raise HTTPException(
            status_code=422, detail=str(e)
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Token read failed: {e}",
        ) from e


@router.get("/assets/{symbol}/claim-calldata", response_model=ClaimCalldataDTO)
def get_claim_calldata(
    symbol: SymbolPath,
    holder: Annotated[str, Query(description="Account whose rewards would be claimed")],
    registry: AssetRegistry = Depends(get_asset_registry),
) -> ClaimCalldataDTO:
    """Describe the reward claim of an asset for a holder.

    Assets without rewards return the zero address and an empty payload.

    Raises:
        HTTPException: 404 if the asset is not registered.
        HTTPException: 422 if the holder is not a valid address.
    """
    try:
        return GetClaimCalldataUseCase(registry).execute(symbol, holder)
    except AssetNotFoundError as e:
        raise _not_found(e) from e
    except ValueError as e:
        raise HTTPException(
            status_code=422, detail=str(e)
        ) from e
