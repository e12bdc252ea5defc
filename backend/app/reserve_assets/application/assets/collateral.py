"""Collateral facade: an asset with exchange rates and a default status."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from app.reserve_assets.application.assets.asset import Asset
from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter, PriceOutcome
from app.reserve_assets.application.assets.rewards import RewardClaimDescriptor
from app.reserve_assets.application.exceptions import RefreshInvariantViolation
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.events import CollateralStatusChanged, EventLog
from app.reserve_assets.domain.services.exchange_rates import (
    ExchangeRateTracker,
    RateObservation,
    RateReader,
    constant_rate,
)
from app.reserve_assets.domain.services.status_machine import (
    Clock,
    StatusStateMachine,
    StatusTransition,
    utc_now,
)
from app.reserve_assets.domain.value_objects.fix import Fix

logger = logging.getLogger(__name__)


class Collateral(Asset):
    """Asset that can back the basket.

    Adds the ratio chain token -> ref -> target -> UoA and a default
    status. refresh() is the only mutator; it never raises, and every
    fault it meets becomes a status observation instead.

    Subclasses decide what counts as a fault by overriding _assess().
    """

    def __init__(
        self,
        symbol: str,
        token: TokenContract,
        oracle: PriceOracleAdapter,
        decimals: int,
        max_trade_volume: Fix,
        target_name: str,
        delay_until_default: timedelta,
        ref_per_tok: Optional[RateReader] = None,
        target_per_ref: Optional[RateReader] = None,
        price_per_target: Optional[RateReader] = None,
        target_oracle: Optional[PriceOracleAdapter] = None,
        reward_descriptor: Optional[RewardClaimDescriptor] = None,
        events: Optional[EventLog] = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the collateral in the SOUND state.

        Args:
            symbol: Token symbol.
            token: Contract of the wrapped token.
            oracle: Price oracle adapter for {UoA/tok}.
            decimals: Expected token decimals.
            max_trade_volume: Maximum trade size in UoA.
            target_name: Opaque name of the target unit (e.g. "USD").
            delay_until_default: Grace window for soft faults.
            ref_per_tok: Reader for {ref/tok}; constant 1 if omitted.
            target_per_ref: Reader for {target/ref}; constant 1 if omitted.
            price_per_target: Reader for {UoA/target}; constant 1 if omitted.
            target_oracle: Oracle over a target-unit feed. Supplies
                pricePerTarget when no reader is given and is closed
                with this collateral.
            reward_descriptor: How to claim rewards, if any.
            events: Event log for status changes and claims.
            clock: Source of the current time.
        """
        super().__init__(
            symbol=symbol,
            token=token,
            oracle=oracle,
            decimals=decimals,
            max_trade_volume=max_trade_volume,
            reward_descriptor=reward_descriptor,
            events=events,
        )
        if not target_name:
            raise ValueError("target_name is required")
        self._target_name = target_name
        self._target_oracle = target_oracle
        if price_per_target is None and target_oracle is not None:
            price_per_target = target_oracle.read_feed
        self._machine = StatusStateMachine(delay_until_default, clock)
        self._rates = ExchangeRateTracker(
            ref_per_tok=ref_per_tok or constant_rate(),
            target_per_ref=target_per_ref,
            price_per_target=price_per_target,
            clock=clock,
        )
        oracle.add_fallback("peg_estimate", self._peg_estimate)

    @property
    def is_collateral(self) -> bool:
        return True

    @property
    def target_name(self) -> str:
        return self._target_name

    @property
    def status(self) -> CollateralStatus:
        """Status computed by the last refresh()."""
        return self._machine.status

    @property
    def when_default(self) -> Optional[datetime]:
        return self._machine.when_default

    @property
    def delay_until_default(self) -> timedelta:
        return self._machine.delay_until_default

    @property
    def ref_per_tok(self) -> Fix:
        return self._rates.ref_per_tok

    @property
    def target_per_ref(self) -> Fix:
        return self._rates.target_per_ref

    @property
    def price_per_target(self) -> Fix:
        return self._rates.price_per_target

    def refresh(self) -> CollateralStatus:
        """Pull fresh prices and rates and update the default status.

        Never raises. Once DISABLED, rates and prices are still updated
        for reads but the status no longer changes.

        Returns:
            The status after the refresh.
        """
        outcome = self._oracle.refresh()
        observation = self._rates.refresh()

        if self._machine.status.is_terminal:
            return self._machine.status

        try:
            observed = self._assess(observation, outcome)
        except RefreshInvariantViolation as e:
            logger.error(e.message)
            observed = CollateralStatus.DISABLED
        except Exception as e:
            logger.warning(f"{self.symbol}: unexpected error during refresh, marking IFFY: {e}")
            observed = CollateralStatus.IFFY

        transition = self._machine.observe(observed)
        if transition.changed:
            self._on_status_changed(transition)
        return transition.new_status

    def _assess(self, observation: RateObservation, outcome: PriceOutcome) -> CollateralStatus:
        """Classify what refresh() observed.

        Returns:
            SOUND, IFFY for a soft fault, or DISABLED for a hard fault.

        Raises:
            RefreshInvariantViolation: For hard faults detected by checks.
        """
        if observation.has_failures:
            logger.warning(f"{self.symbol}: rate read failed: {observation.failures}")
            return CollateralStatus.IFFY
        if not outcome.ok:
            return CollateralStatus.IFFY
        return CollateralStatus.SOUND

    def _on_status_changed(self, transition: StatusTransition) -> None:
        old, new = transition.old_status, transition.new_status
        message = f"{self.symbol}: collateral status {old.name} -> {new.name}"
        if new is CollateralStatus.DISABLED:
            logger.error(message)
        elif new is CollateralStatus.IFFY:
            logger.warning(f"{message} (defaults at {self._machine.when_default.isoformat()})")
        else:
            logger.info(message)
        self._events.emit(CollateralStatusChanged(erc20=self.erc20, old_status=old, new_status=new))

    def _peg_estimate(self) -> Optional[Fix]:
        """Fallback {UoA/tok} assuming every link holds: pricePerTarget * targetPerRef * refPerTok."""
        snapshot = self._rates.snapshot
        return snapshot.peg_price.mul(snapshot.ref_per_tok)

    def dispose(self) -> None:
        if not self._disposed and self._target_oracle is not None:
            self._target_oracle.close()
        super().dispose()
