"""Use cases for prices and balances of registered assets."""

import logging

from app.reserve_assets.application.assets.registry import AssetRegistry
from app.reserve_assets.application.dto.asset_dto import BalanceDTO, PriceDTO

logger = logging.getLogger(__name__)


class GetAssetPriceUseCase:
    """Application service for strict and fallback prices.

    Strict failures are a normal outcome, not an exceptional one: they
    propagate as PriceUnavailableError for the caller to handle.
    """

    def __init__(self, registry: AssetRegistry) -> None:
        self._registry = registry

    def execute(self, identifier: str, allow_fallback: bool = True) -> PriceDTO:
        """Return the price of an asset.

        Args:
            identifier: Symbol or token address.
            allow_fallback: Whether a fallback estimate may be returned.

        Returns:
            PriceDTO with the value and the path that produced it.

        Raises:
            AssetNotFoundError: If the asset is not registered.
            PriceUnavailableError: If the strict path failed and
                fallback was not allowed.
            NoFallbackAvailableError: If both paths failed.
        """
        asset = self._registry.get(identifier).asset
        with self._registry.unit_of_work():
            price = asset.price(allow_fallback)
        if price.is_fallback:
            logger.info(f"{asset.symbol}: serving fallback price {price.value}")
        return PriceDTO(symbol=asset.symbol, value=str(price.value), is_fallback=price.is_fallback)

    def strict(self, identifier: str) -> PriceDTO:
        """Return the strict price; raises PriceUnavailableError on failure."""
        asset = self._registry.get(identifier).asset
        with self._registry.unit_of_work():
            value = asset.strict_price()
        return PriceDTO(symbol=asset.symbol, value=str(value), is_fallback=False)


class GetBalanceUseCase:
    """Application service for token balances in whole tokens."""

    def __init__(self, registry: AssetRegistry) -> None:
        self._registry = registry

    def execute(self, identifier: str, account: str) -> BalanceDTO:
        asset = self._registry.get(identifier).asset
        return BalanceDTO(symbol=asset.symbol, account=account, balance=str(asset.bal(account)))
