"""Price oracle adapter with strict and fallback paths.

The strict path reads the upstream feed and fails loudly when the
answer cannot be trusted. The fallback path degrades to an estimate
instead of failing, trying each configured strategy in order:
- a static fallback price fixed at admission time
- the last value the strict path produced (last-known-good)
- a derived estimate supplied by the owner (e.g. a peg assumption)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from app.reserve_assets.application.exceptions import (
    NoFallbackAvailableError,
    PriceOutsideRangeError,
    PriceUnavailableError,
    StalePriceError,
)
from app.reserve_assets.application.interfaces.price_feed import PriceFeed
from app.reserve_assets.domain.services.status_machine import Clock, utc_now
from app.reserve_assets.domain.value_objects.fix import Fix
from app.reserve_assets.domain.value_objects.price import Price

logger = logging.getLogger(__name__)

FallbackStrategy = Callable[[], Optional[Fix]]


@dataclass(frozen=True)
class PriceOutcome:
    """Result of a strict read taken during refresh().

    Exactly one of ``value`` and ``error`` is set.
    """

    value: Optional[Fix] = None
    error: Optional[PriceUnavailableError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class LastKnownGood:
    """Most recent strict price and when it was read."""

    value: Fix
    observed_at: datetime


class PriceOracleAdapter:
    """Produces strict and fallback {UoA/tok} prices for a single token.

    Before the first refresh() every strict read goes to the feed. After
    a refresh() the strict path reports what that refresh observed, so
    all reads inside one unit of work see the same price.

    Attributes:
        feed: Upstream price feed.
        oracle_timeout: Maximum age of a feed answer.
    """

    def __init__(
        self,
        symbol: str,
        feed: PriceFeed,
        oracle_timeout: timedelta,
        fallback_price: Optional[Fix] = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the adapter.

        Args:
            symbol: Symbol of the priced token, used in errors and logs.
            feed: Upstream feed reporting {UoA/tok}.
            oracle_timeout: Answers older than this are stale.
            fallback_price: Static fallback price, if the asset has one.
            clock: Source of the current time.
        """
        if oracle_timeout <= timedelta(0):
            raise ValueError("oracle_timeout must be positive")
        self._symbol = symbol
        self._feed = feed
        self._oracle_timeout = oracle_timeout
        self._clock = clock
        self._last_good: Optional[LastKnownGood] = None
        self._outcome: Optional[PriceOutcome] = None
        self._fallbacks: list[tuple[str, FallbackStrategy]] = []

        if fallback_price is not None:
            self.add_fallback("static", lambda: fallback_price)
        self.add_fallback("last_known_good", self._last_known_good_value)

    @property
    def feed(self) -> PriceFeed:
        return self._feed

    @property
    def oracle_timeout(self) -> timedelta:
        return self._oracle_timeout

    @property
    def last_known_good(self) -> Optional[LastKnownGood]:
        return self._last_good

    @property
    def fallback_names(self) -> list[str]:
        return [name for name, _ in self._fallbacks]

    def add_fallback(self, name: str, strategy: FallbackStrategy) -> None:
        """Append a fallback strategy; strategies are tried in insertion order."""
        self._fallbacks.append((name, strategy))

    def read_feed(self) -> Fix:
        """Read the feed and validate the answer, ignoring any refresh cache.

        Returns:
            The feed answer scaled to 18 decimals. A zero answer is a
            legitimate price and is returned as zero.

        Raises:
            StalePriceError: If the round is incomplete or older than
                the oracle timeout.
            PriceOutsideRangeError: If the answer is negative.
            PriceUnavailableError: If the feed could not be read.
        """
        feed_name = self._feed.feed_name
        try:
            feed_round = self._feed.latest_round()
        except PriceUnavailableError:
            raise
        except Exception as e:
            raise PriceUnavailableError(feed_name, f"{type(e).__name__}: {e}") from e

        if not feed_round.is_complete:
            raise StalePriceError(feed_name, f"round {feed_round.round_id} is incomplete")

        now = self._clock()
        age = now - feed_round.updated_at
        if age > self._oracle_timeout:
            raise StalePriceError(
                feed_name,
                f"answer is {int(age.total_seconds())}s old "
                f"(timeout {int(self._oracle_timeout.total_seconds())}s)",
            )

        if feed_round.answer < 0:
            raise PriceOutsideRangeError(feed_name, feed_round.answer)

        value = Fix.shift(feed_round.answer, -feed_round.decimals)
        self._last_good = LastKnownGood(value=value, observed_at=now)
        return value

    def refresh(self) -> PriceOutcome:
        """Take the strict reading for this unit of work. Never raises."""
        try:
            outcome = PriceOutcome(value=self.read_feed())
        except PriceUnavailableError as e:
            logger.warning(f"Strict price unavailable for {self._symbol}: {e.message}")
            outcome = PriceOutcome(error=e)
        self._outcome = outcome
        return outcome

    def strict_price(self) -> Fix:
        """Return the precise {UoA/tok} price.

        Raises:
            PriceUnavailableError: If the strict path cannot produce a
                value. Nothing is ever substituted on this path.
        """
        if self._outcome is None:
            return self.read_feed()
        if self._outcome.error is not None:
            raise self._outcome.error
        return self._outcome.value

    def fallback_price(self) -> Fix:
        """Return the first value any fallback strategy can produce.

        Raises:
            NoFallbackAvailableError: If every strategy yields nothing.
        """
        for name, strategy in self._fallbacks:
            try:
                value = strategy()
            except Exception as e:
                logger.warning(f"Fallback '{name}' failed for {self._symbol}: {e}")
                continue
            if value is not None:
                logger.debug(f"Using '{name}' fallback price {value} for {self._symbol}")
                return value
        raise NoFallbackAvailableError(self._symbol)

    def price(self, allow_fallback: bool) -> Price:
        """Return a price, optionally degrading to a fallback estimate.

        Args:
            allow_fallback: If False, behaves exactly like strict_price().

        Returns:
            Price with ``is_fallback`` set when a fallback supplied it.

        Raises:
            PriceUnavailableError: If the strict path fails and fallback
                is not allowed.
            NoFallbackAvailableError: If both paths fail.
        """
        try:
            return Price(self.strict_price(), is_fallback=False)
        except PriceUnavailableError:
            if not allow_fallback:
                raise
        return Price(self.fallback_price(), is_fallback=True)

    def close(self) -> None:
        self._feed.close()

    def _last_known_good_value(self) -> Optional[Fix]:
        return self._last_good.value if self._last_good else None
