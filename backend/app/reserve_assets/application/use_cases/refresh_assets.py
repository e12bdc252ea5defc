"""Use case for refreshing every registered asset."""

from datetime import datetime, timezone

from app.reserve_assets.application.assets.registry import AssetRegistry
from app.reserve_assets.application.dto.asset_dto import RefreshResultDTO


class RefreshAssetsUseCase:
    """Application service running refresh() across the registry.

    Never raises for asset faults: they are reflected in the returned
    statuses instead.
    """

    def __init__(self, registry: AssetRegistry) -> None:
        self._registry = registry

    def execute(self) -> RefreshResultDTO:
        statuses = self._registry.refresh_all()
        return RefreshResultDTO(
            statuses={symbol: status.name for symbol, status in statuses.items()},
            refreshed_at=datetime.now(timezone.utc),
        )
