"""Price feed interface for reading upstream oracle rounds."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FeedRound:
    """One answer reported by an upstream price feed.

    This dataclass mirrors the round data of an on-chain aggregator and
    is also produced by off-chain feeds so that staleness checks apply
    uniformly.

    Attributes:
        round_id: Identifier of the round that produced the answer.
        answer: Raw signed integer answer, scaled by ``decimals``.
        decimals: Number of decimals in ``answer``.
        updated_at: When the answer was last updated (UTC), or None if
            the round never completed.
        answered_in_round: Round in which the answer was computed.
    """

    round_id: int
    answer: int
    decimals: int
    updated_at: datetime | None
    answered_in_round: int

    @property
    def is_complete(self) -> bool:
        """Whether the round finished and carries its own answer."""
        return self.updated_at is not None and self.answered_in_round >= self.round_id


class PriceFeed(ABC):
    """Abstract base class for upstream price feeds.

    Each adapter (on-chain aggregator, exchange ticker, etc.) implements
    this interface so the oracle adapter can apply one set of staleness
    and range rules. Reads are synchronous: a refresh() never suspends.
    """

    @property
    @abstractmethod
    def feed_name(self) -> str:
        """Return a human-readable identifier for this feed."""
        ...

    @abstractmethod
    def latest_round(self) -> FeedRound:
        """Return the latest round reported by the feed.

        Returns:
            The most recent FeedRound.

        Raises:
            Exception: Any transport or decoding error. The oracle
                adapter converts it into PriceUnavailableError.
        """
        ...

    def close(self) -> None:
        """Release any open connections or subscriptions."""
