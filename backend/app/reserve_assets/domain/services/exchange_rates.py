"""Exchange-rate tracker for the token -> ref -> target -> UoA ratio chain."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from app.reserve_assets.domain.services.status_machine import Clock, utc_now
from app.reserve_assets.domain.value_objects.fix import FIX_ONE, Fix

RateReader = Callable[[], Fix]


def constant_rate(value: Fix = FIX_ONE) -> RateReader:
    """Reader for a link that never moves (e.g. targetPerRef of a fiat peg)."""
    return lambda: value


@dataclass(frozen=True)
class RateSnapshot:
    """The three link ratios as sampled at one moment.

    Attributes:
        ref_per_tok: Reference units per token.
        target_per_ref: Target units per reference unit.
        price_per_target: UoA per target unit.
        observed_at: When the snapshot was taken.
    """

    ref_per_tok: Fix
    target_per_ref: Fix
    price_per_target: Fix
    observed_at: datetime

    @property
    def peg_price(self) -> Fix:
        """Expected {UoA/ref}: pricePerTarget * targetPerRef."""
        return self.price_per_target.mul(self.target_per_ref)


@dataclass(frozen=True)
class RateObservation:
    """Outcome of one tracker refresh.

    Attributes:
        previous: Snapshot before the refresh.
        current: Snapshot after the refresh. Links whose reader failed
            keep their previous value.
        failures: Link name -> error message for readers that failed.
    """

    previous: RateSnapshot
    current: RateSnapshot
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ref_per_tok_decreased(self) -> bool:
        return self.current.ref_per_tok < self.previous.ref_per_tok

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


class ExchangeRateTracker:
    """Maintains the ratio chain and its trend across refreshes.

    The tracker never decides status; it only supplies the raw ratios
    and whether refPerTok moved down since the previous refresh.
    """

    def __init__(
        self,
        ref_per_tok: RateReader,
        target_per_ref: Optional[RateReader] = None,
        price_per_target: Optional[RateReader] = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the tracker and take the first snapshot.

        Args:
            ref_per_tok: Reader for reference units per token.
            target_per_ref: Reader for target units per reference unit
                (defaults to a constant 1).
            price_per_target: Reader for UoA per target unit (defaults to
                a constant 1).
            clock: Source of the current time.

        Raises:
            Exception: Whatever a reader raises while taking the first
                snapshot; an asset whose rates cannot be read at all
                cannot be admitted.
        """
        self._readers: dict[str, RateReader] = {
            "ref_per_tok": ref_per_tok,
            "target_per_ref": target_per_ref or constant_rate(),
            "price_per_target": price_per_target or constant_rate(),
        }
        self._clock = clock
        self._snapshot = RateSnapshot(
            ref_per_tok=self._readers["ref_per_tok"](),
            target_per_ref=self._readers["target_per_ref"](),
            price_per_target=self._readers["price_per_target"](),
            observed_at=clock(),
        )

    @property
    def snapshot(self) -> RateSnapshot:
        return self._snapshot

    @property
    def ref_per_tok(self) -> Fix:
        return self._snapshot.ref_per_tok

    @property
    def target_per_ref(self) -> Fix:
        return self._snapshot.target_per_ref

    @property
    def price_per_target(self) -> Fix:
        return self._snapshot.price_per_target

    def refresh(self) -> RateObservation:
        """Re-sample every link and return the observation.

        A reader that raises does not abort the refresh: its link keeps
        the previous value and the failure is reported in the result.
        """
        previous = self._snapshot
        values: dict[str, Fix] = {}
        failures: dict[str, str] = {}

        for name, reader in self._readers.items():
            try:
                values[name] = reader()
            except Exception as e:
                failures[name] = f"{type(e).__name__}: {e}"
                values[name] = getattr(previous, name)

        self._snapshot = RateSnapshot(observed_at=self._clock(), **values)
        return RateObservation(previous=previous, current=self._snapshot, failures=failures)
