"""Background refresh of every registered asset."""

import asyncio
import logging
from typing import Optional

from app.reserve_assets.application.assets.registry import AssetRegistry
from app.reserve_assets.application.dto.asset_dto import RefreshResultDTO
from app.reserve_assets.application.use_cases.refresh_assets import RefreshAssetsUseCase

logger = logging.getLogger(__name__)


async def refresh_assets_async(registry: AssetRegistry) -> RefreshResultDTO:
    """Run one refresh of the registry off the event loop.

    Feed and contract reads are blocking, so the unit of work runs in a
    worker thread while the registry lock keeps it atomic for readers.

    Returns:
        Statuses of all collateral after the refresh.
    """
    return await asyncio.to_thread(RefreshAssetsUseCase(registry).execute)


async def asset_refresh_loop(
    registry: AssetRegistry,
    interval_seconds: float,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """Refresh the registry every ``interval_seconds`` until stopped.

    Args:
        registry: Registry to refresh.
        interval_seconds: Delay between refreshes.
        stop_event: Ends the loop when set; otherwise runs until cancelled.
    """
    while stop_event is None or not stop_event.is_set():
        try:
            logger.debug("Refreshing all assets...")
            result = await refresh_assets_async(registry)
            degraded = {s: name for s, name in result.statuses.items() if name != "SOUND"}
            if degraded:
                logger.warning(f"Refresh complete, degraded collateral: {degraded}")
            else:
                logger.info(f"Refresh complete: {len(result.statuses)} collateral SOUND")
        except Exception as e:
            logger.error(f"Asset refresh error: {e}")

        if stop_event is None:
            await asyncio.sleep(interval_seconds)
            continue
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
        except asyncio.TimeoutError:
            pass
