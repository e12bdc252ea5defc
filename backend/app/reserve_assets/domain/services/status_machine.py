"""Default-status state machine for collateral.

Encodes the SOUND -> IFFY -> DISABLED lattice:
- SOUND -> IFFY: a soft fault is observed; the grace window starts.
- IFFY -> SOUND: the soft fault clears before the grace window ends.
- IFFY -> DISABLED: the soft fault outlives the grace window, or a hard
  fault is observed.
- SOUND -> DISABLED: a hard fault is observed directly.
- DISABLED -> anything: never.

The machine stores the moment the collateral defaults (``when_default``)
rather than a bare state, so a fault that clears only after the grace
window has already elapsed still ends in DISABLED.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from app.reserve_assets.domain.entities.collateral_status import CollateralStatus

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StatusTransition:
    """Result of applying one observation to the machine."""

    old_status: CollateralStatus
    new_status: CollateralStatus

    @property
    def changed(self) -> bool:
        return self.old_status != self.new_status


class StatusStateMachine:
    """Tracks the default status of a single collateral instance.

    Attributes:
        delay_until_default: Grace window between entering IFFY and
            defaulting.
    """

    def __init__(self, delay_until_default: timedelta, clock: Clock = utc_now) -> None:
        """Initialize in the SOUND state.

        Args:
            delay_until_default: Grace window for soft faults. Zero means
                a soft fault defaults immediately.
            clock: Source of the current time (timezone-aware).

        Raises:
            ValueError: If the grace window is negative.
        """
        if delay_until_default < timedelta(0):
            raise ValueError("delay_until_default cannot be negative")
        self._delay_until_default = delay_until_default
        self._clock = clock
        self._when_default: Optional[datetime] = None
        self._status = CollateralStatus.SOUND

    @property
    def status(self) -> CollateralStatus:
        """Status as of the last observation."""
        return self._status

    @property
    def when_default(self) -> Optional[datetime]:
        """Moment the collateral defaults, or None while SOUND."""
        return self._when_default

    @property
    def delay_until_default(self) -> timedelta:
        return self._delay_until_default

    def already_defaulted(self, now: Optional[datetime] = None) -> bool:
        now = now or self._clock()
        return self._when_default is not None and self._when_default <= now

    def _status_at(self, now: datetime) -> CollateralStatus:
        if self._when_default is None:
            return CollateralStatus.SOUND
        if self._when_default > now:
            return CollateralStatus.IFFY
        return CollateralStatus.DISABLED

    def observe(self, observed: CollateralStatus) -> StatusTransition:
        """Apply what refresh() observed and return the resulting transition.

        Args:
            observed: SOUND when no fault is present, IFFY for a soft
                fault, DISABLED for a hard fault.

        Returns:
            StatusTransition from the previous status to the new one.
        """
        now = self._clock()
        old_status = self._status

        if self.already_defaulted(now):
            self._status = CollateralStatus.DISABLED
            return StatusTransition(old_status, self._status)

        if observed is CollateralStatus.SOUND:
            self._when_default = None
        elif observed is CollateralStatus.IFFY:
            deadline = now + self._delay_until_default
            if self._when_default is None or deadline < self._when_default:
                self._when_default = deadline
        else:
            if self._when_default is None or now < self._when_default:
                self._when_default = now

        self._status = self._status_at(now)
        return StatusTransition(old_status, self._status)
