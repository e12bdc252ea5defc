"""Collateral default-risk status."""

from enum import IntEnum


class CollateralStatus(IntEnum):
    """Assessed default risk of a collateral, totally ordered.

    SOUND < IFFY < DISABLED. DISABLED is terminal for the lifetime of
    the collateral instance.

    SOUND:
        - The backing guarantee holds; the price can be trusted.
    IFFY:
        - A soft fault was observed (peg drift, stale or failing feed).
        - Recovers to SOUND if the fault clears inside the grace window.
    DISABLED:
        - A hard fault was observed, or a soft fault outlived the grace
          window. The collateral is considered defaulted.
    """

    SOUND = 0
    IFFY = 1
    DISABLED = 2

    @property
    def is_terminal(self) -> bool:
        return self is CollateralStatus.DISABLED

    @classmethod
    def worst(cls, *statuses: "CollateralStatus") -> "CollateralStatus":
        """Return the riskiest of the given statuses (SOUND if none)."""
        return max(statuses, default=cls.SOUND)
