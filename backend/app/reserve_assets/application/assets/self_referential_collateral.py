"""Self-referential collateral, where token, reference and target coincide.

Example: WETH with target ETH. pricePerTarget is the token's own strict
price, so there is no peg to lose; only an unusable feed is a fault.
"""

from datetime import timedelta
from typing import Optional

from app.reserve_assets.application.assets.collateral import Collateral
from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter
from app.reserve_assets.application.assets.rewards import RewardClaimDescriptor
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.events import EventLog
from app.reserve_assets.domain.services.status_machine import Clock, utc_now
from app.reserve_assets.domain.value_objects.fix import Fix


class SelfReferentialCollateral(Collateral):
    """Collateral priced purely by its own feed."""

    def __init__(
        self,
        symbol: str,
        token: TokenContract,
        oracle: PriceOracleAdapter,
        decimals: int,
        max_trade_volume: Fix,
        target_name: str,
        delay_until_default: timedelta,
        reward_descriptor: Optional[RewardClaimDescriptor] = None,
        events: Optional[EventLog] = None,
        clock: Clock = utc_now,
    ) -> None:
        super().__init__(
            symbol=symbol,
            token=token,
            oracle=oracle,
            decimals=decimals,
            max_trade_volume=max_trade_volume,
            target_name=target_name,
            delay_until_default=delay_until_default,
            price_per_target=oracle.strict_price,
            reward_descriptor=reward_descriptor,
            events=events,
            clock=clock,
        )
