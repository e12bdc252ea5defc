"""Use cases for reading the state of registered assets."""

from app.reserve_assets.application.assets.registry import AssetRegistry, RegisteredAsset
from app.reserve_assets.application.dto.asset_dto import AssetStateDTO, fix_to_str


class GetAssetStateUseCase:
    """Application service returning the read surface of one asset.

    State reflects the last refresh(); this use case never refreshes.
    """

    def __init__(self, registry: AssetRegistry) -> None:
        """Initialize the use case.

        Args:
            registry: Registry of admitted assets.
        """
        self._registry = registry

    def execute(self, identifier: str) -> AssetStateDTO:
        """Return the state of an asset.

        Args:
            identifier: Symbol or token address.

        Returns:
            AssetStateDTO for the asset.

        Raises:
            AssetNotFoundError: If the asset is not registered.
        """
        entry = self._registry.get(identifier)
        with self._registry.unit_of_work():
            return build_asset_state(entry)


class ListAssetsUseCase:
    """Application service returning the state of every registered asset."""

    def __init__(self, registry: AssetRegistry) -> None:
        self._registry = registry

    def execute(self) -> list[AssetStateDTO]:
        with self._registry.unit_of_work():
            states = [build_asset_state(entry) for entry in self._registry]
        states.sort(key=lambda s: (not s.is_collateral, s.symbol))
        return states


def build_asset_state(entry: RegisteredAsset) -> AssetStateDTO:
    """Map a registry entry to its DTO."""
    asset = entry.asset
    state = AssetStateDTO(
        symbol=asset.symbol,
        erc20=asset.erc20,
        erc20_decimals=asset.erc20_decimals,
        is_collateral=entry.is_collateral,
        max_trade_volume=str(asset.max_trade_volume),
        reward_erc20=asset.reward_erc20,
    )
    collateral = entry.collateral
    if collateral is None:
        return state

    return state.model_copy(
        update={
            "target_name": collateral.target_name,
            "status": collateral.status,
            "status_name": collateral.status.name,
            "when_default": collateral.when_default,
            "ref_per_tok": fix_to_str(collateral.ref_per_tok),
            "target_per_ref": fix_to_str(collateral.target_per_ref),
            "price_per_target": fix_to_str(collateral.price_per_target),
        }
    )
