"""Domain events observable by the caller after asset operations."""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Union

from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.value_objects.fix import Fix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewardsClaimed:
    """Rewards paid in ``erc20`` were claimed for a holder.

    Attributes:
        erc20: Address of the reward token.
        amount: Amount claimed, in whole tokens.
        holder: Account the rewards accrued to.
    """

    erc20: str
    amount: Fix
    holder: str
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class CollateralStatusChanged:
    """A collateral moved between default-risk states during refresh()."""

    erc20: str
    old_status: CollateralStatus
    new_status: CollateralStatus
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


DomainEvent = Union[RewardsClaimed, CollateralStatusChanged]
EventHandler = Callable[[DomainEvent], None]


class EventLog:
    """Bounded record of emitted domain events with subscribers.

    Only the most recent ``max_events`` events are kept; subscribers see
    every event as it is emitted.

    Subscribers are called synchronously in registration order. A
    failing subscriber is logged and does not stop delivery to the
    others, so emitting never fails for the emitter.
    """

    def __init__(self, max_events: int = 1000) -> None:
        if max_events <= 0:
            raise ValueError("max_events must be positive")
        self._events: deque[DomainEvent] = deque(maxlen=max_events)
        self._handlers: list[EventHandler] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: EventHandler) -> None:
        with self._lock:
            self._handlers.append(handler)

    def emit(self, event: DomainEvent) -> None:
        """Record an event and notify subscribers."""
        with self._lock:
            self._events.append(event)
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Event handler failed for {type(event).__name__}: {e}")

    @property
    def events(self) -> list[DomainEvent]:
        """Snapshot of the retained events, oldest first."""
        with self._lock:
            return list(self._events)

    def of_type(self, event_type: type) -> list[DomainEvent]:
        return [e for e in self.events if isinstance(e, event_type)]
