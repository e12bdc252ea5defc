"""Peg-tracking collateral.

The reference unit is expected to trade at pricePerTarget * targetPerRef.
Leaving the tolerance band, or losing the price feed, is a soft fault.
For fiat-pegged tokens every link is 1; a non-fiat target (e.g. BTC)
supplies pricePerTarget from its own feed.
"""

import logging
from datetime import timedelta
from typing import Optional

from app.reserve_assets.application.assets.collateral import Collateral
from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter, PriceOutcome
from app.reserve_assets.application.assets.rewards import RewardClaimDescriptor
from app.reserve_assets.application.exceptions import RefreshInvariantViolation
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.events import EventLog
from app.reserve_assets.domain.services.exchange_rates import RateObservation, RateReader
from app.reserve_assets.domain.services.peg_policy import PegPolicy
from app.reserve_assets.domain.services.status_machine import Clock, utc_now
from app.reserve_assets.domain.value_objects.fix import FIX_ZERO, Fix

logger = logging.getLogger(__name__)


class FiatCollateral(Collateral):
    """Collateral whose reference unit should hold a peg to its target."""

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
        ref_per_tok: Optional[RateReader] = None,
        target_per_ref: Optional[RateReader] = None,
        price_per_target: Optional[RateReader] = None,
        target_oracle: Optional[PriceOracleAdapter] = None,
        reward_descriptor: Optional[RewardClaimDescriptor] = None,
        events: Optional[EventLog] = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the collateral.

        Args:
            default_threshold: Allowed deviation of the reference price
                from its peg, as a fraction (e.g. 0.05).

        See Collateral for the remaining arguments.
        """
        super().__init__(
            symbol=symbol,
            token=token,
            oracle=oracle,
            decimals=decimals,
            max_trade_volume=max_trade_volume,
            target_name=target_name,
            delay_until_default=delay_until_default,
            ref_per_tok=ref_per_tok,
            target_per_ref=target_per_ref,
            price_per_target=price_per_target,
            target_oracle=target_oracle,
            reward_descriptor=reward_descriptor,
            events=events,
            clock=clock,
        )
        self._peg_policy = PegPolicy(default_threshold)

    @property
    def default_threshold(self) -> Fix:
        return self._peg_policy.default_threshold

    def _assess(self, observation: RateObservation, outcome: PriceOutcome) -> CollateralStatus:
        status = super()._assess(observation, outcome)
        if status is not CollateralStatus.SOUND:
            return status

        ref_per_tok = observation.current.ref_per_tok
        if ref_per_tok == FIX_ZERO:
            raise RefreshInvariantViolation(self.erc20, "refPerTok is zero")

        reference_price = outcome.value.div(ref_per_tok)
        peg = observation.current.peg_price
        if not self._peg_policy.is_within_peg(reference_price, peg):
            deviation = self._peg_policy.deviation(reference_price, peg)
            logger.warning(
                f"{self.symbol}: reference price {reference_price} is off peg {peg} "
                f"by {deviation} (threshold {self.default_threshold})"
            )
            return CollateralStatus.IFFY
        return CollateralStatus.SOUND
