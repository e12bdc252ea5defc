"""Asset registry holding every admitted asset.

Capabilities are resolved once, at admission: each entry is tagged as
a plain asset or a collateral so callers never downcast per call.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from app.reserve_assets.application.assets.asset import Asset
from app.reserve_assets.application.assets.collateral import Collateral
from app.reserve_assets.application.exceptions import (
    AssetNotFoundError,
    InvalidAssetConfigError,
    NotCollateralError,
)
from app.reserve_assets.domain.entities.collateral_status import CollateralStatus

logger = logging.getLogger(__name__)


class AssetKind(Enum):
    """Capability set of a registered asset."""

    ASSET = "asset"
    COLLATERAL = "collateral"


@dataclass(frozen=True)
class RegisteredAsset:
    """Registry entry tagging an asset with its capability set.

    Attributes:
        kind: ASSET or COLLATERAL.
        asset: The asset facade.
        collateral: The same object typed as Collateral, or None.
    """

    kind: AssetKind
    asset: Asset
    collateral: Optional[Collateral] = None

    @classmethod
    def admit(cls, asset: Asset) -> "RegisteredAsset":
        if isinstance(asset, Collateral):
            return cls(kind=AssetKind.COLLATERAL, asset=asset, collateral=asset)
        return cls(kind=AssetKind.ASSET, asset=asset)

    @property
    def is_collateral(self) -> bool:
        return self.kind is AssetKind.COLLATERAL


class AssetRegistry:
    """Registry of admitted assets, addressable by symbol or token address.

    refresh_all() runs as one unit of work under the registry lock, and
    register/unregister take the same lock;
    readers that need a consistent view across calls take the same lock
    through unit_of_work().

    Attributes:
        _entries: Registered entries keyed by lower-cased token address.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._entries: dict[str, RegisteredAsset] = {}
        self._lock = threading.RLock()

    @contextmanager
    def unit_of_work(self) -> Iterator[None]:
        """Hold the registry lock so no refresh interleaves with the caller."""
        with self._lock:
            yield

    def register(self, asset: Asset) -> RegisteredAsset:
        """Admit an asset.

        Args:
            asset: Asset or Collateral to admit.

        Returns:
            The tagged registry entry.

        Raises:
            InvalidAssetConfigError: If the token or symbol is already registered.
        """
        key = asset.erc20.lower()
        with self._lock:
            if key in self._entries or self._find_by_symbol(asset.symbol) is not None:
                raise InvalidAssetConfigError(asset.symbol, "asset is already registered")
            entry = RegisteredAsset.admit(asset)
            self._entries[key] = entry
        logger.info(f"Registered {entry.kind.value}: {asset.symbol} ({asset.erc20})")
        return entry

    def unregister(self, identifier: str) -> bool:
        """Remove an asset and dispose of it.

        Args:
            identifier: Symbol or token address.

        Returns:
            True if an asset was removed, False otherwise.
        """
        with self._lock:
            entry = self._lookup(identifier)
            if entry is None:
                return False
            del self._entries[entry.asset.erc20.lower()]
            entry.asset.dispose()
        logger.info(f"Unregistered asset: {entry.asset.symbol}")
        return True

    def get(self, identifier: str) -> RegisteredAsset:
        """Return the entry for a symbol or token address.

        Raises:
            AssetNotFoundError: If nothing matches.
        """
        entry = self._lookup(identifier)
        if entry is None:
            raise AssetNotFoundError(identifier)
        return entry

    def get_collateral(self, identifier: str) -> Collateral:
        """Return the collateral for a symbol or token address.

        Raises:
            AssetNotFoundError: If nothing matches.
            NotCollateralError: If the asset is not collateral.
        """
        entry = self.get(identifier)
        if entry.collateral is None:
            raise NotCollateralError(identifier)
        return entry.collateral

    @property
    def entries(self) -> list[RegisteredAsset]:
        with self._lock:
            return list(self._entries.values())

    @property
    def collateral(self) -> list[Collateral]:
        return [e.collateral for e in self.entries if e.collateral is not None]

    @property
    def registered_symbols(self) -> list[str]:
        return [e.asset.symbol for e in self.entries]

    def refresh_all(self) -> dict[str, CollateralStatus]:
        """Refresh every registered asset.

        Collateral refresh never raises; plain assets only update their
        price reading.

        Returns:
            Mapping of collateral symbol to its status after refresh.
        """
        statuses: dict[str, CollateralStatus] = {}
        with self._lock:
            for entry in self._entries.values():
                if entry.collateral is not None:
                    statuses[entry.asset.symbol] = entry.collateral.refresh()
                else:
                    entry.asset.refresh()
        logger.debug(f"Refreshed {len(self._entries)} assets: {statuses}")
        return statuses

    def close_all(self) -> None:
        """Dispose of every asset and empty the registry."""
        with self._lock:
            for entry in self._entries.values():
                try:
                    entry.asset.dispose()
                except Exception as e:
                    logger.error(f"Error disposing asset {entry.asset.symbol}: {e}")
            self._entries.clear()

    def __iter__(self) -> Iterator[RegisteredAsset]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __enter__(self) -> "AssetRegistry":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close_all()

    def _lookup(self, identifier: str) -> Optional[RegisteredAsset]:
        with self._lock:
            entry = self._entries.get(identifier.lower())
            if entry is not None:
                return entry
            return self._find_by_symbol(identifier)

    def _find_by_symbol(self, symbol: str) -> Optional[RegisteredAsset]:
        for entry in self._entries.values():
            if entry.asset.symbol.upper() == symbol.upper():
                return entry
        return None
