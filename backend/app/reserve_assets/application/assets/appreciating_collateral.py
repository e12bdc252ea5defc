"""Appreciating collateral: interest-bearing wrappers such as cTokens.

refPerTok comes from the wrapper's exchange rate and may only grow.
Any decrease is direct evidence of lost funds and defaults the
collateral immediately; the reference unit is peg-checked like fiat
collateral.
"""

from datetime import timedelta
from typing import Optional

from app.reserve_assets.application.assets.fiat_collateral import FiatCollateral
from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter, PriceOutcome
from app.reserve_assets.application.assets.rewards import RewardClaimDescriptor
from app.reserve_assets.application.exceptions import RefreshInvariantViolation
from app.reserve_assets.application.interfaces.rate_source import ExchangeRateSource
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.events import EventLog
from app.reserve_assets.domain.services.exchange_rates import RateObservation, RateReader
from app.reserve_assets.domain.services.status_machine import Clock, utc_now
from app.reserve_assets.domain.value_objects.fix import Fix


class AppreciatingCollateral(FiatCollateral):
    """Collateral whose refPerTok is read from an exchange-rate source."""

    def __init__(
        self,
        symbol: str,
        token: TokenContract,
        oracle: PriceOracleAdapter,
        decimals: int,
        max_trade_volume: Fix,
        target_name: str,
        delay_until_default: timedelta,
        default_threshold: Fix,
        rate_source: ExchangeRateSource,
        target_per_ref: Optional[RateReader] = None,
        price_per_target: Optional[RateReader] = None,
        target_oracle: Optional[PriceOracleAdapter] = None,
        reward_descriptor: Optional[RewardClaimDescriptor] = None,
        events: Optional[EventLog] = None,
        clock: Clock = utc_now,
    ) -> None:
        self._rate_source = rate_source
        super().__init__(
            symbol=symbol,
            token=token,
            oracle=oracle,
            decimals=decimals,
            max_trade_volume=max_trade_volume,
            target_name=target_name,
            delay_until_default=delay_until_default,
            default_threshold=default_threshold,
            ref_per_tok=rate_source.ref_per_tok,
            target_per_ref=target_per_ref,
            price_per_target=price_per_target,
            target_oracle=target_oracle,
            reward_descriptor=reward_descriptor,
            events=events,
            clock=clock,
        )

    def _assess(self, observation: RateObservation, outcome: PriceOutcome) -> CollateralStatus:
        if observation.ref_per_tok_decreased:
            raise RefreshInvariantViolation(
                self.erc20,
                f"refPerTok fell from {observation.previous.ref_per_tok} "
                f"to {observation.current.ref_per_tok}",
            )
        return super()._assess(observation, outcome)

    def dispose(self) -> None:
        if not self._disposed:
            self._rate_source.close()
        super().dispose()
