"""Peg policy domain service for soft-fault detection.

A reference unit is expected to trade at its peg,
``pricePerTarget * targetPerRef`` in UoA. The collateral is IFFY while
the observed reference price sits outside ``peg * (1 +/- threshold)``.
"""

from app.reserve_assets.domain.value_objects.fix import FIX_ONE, FIX_ZERO, Fix, RoundingMode


class PegPolicy:
    """Evaluates whether a reference price is within tolerance of its peg.

    Attributes:
        default_threshold: Allowed deviation as a fraction of the peg
            (e.g. 0.05 for 5%).
    """

    def __init__(self, default_threshold: Fix) -> None:
        if default_threshold > FIX_ONE:
            raise ValueError("default_threshold cannot exceed 1")
        self._default_threshold = default_threshold

    @property
    def default_threshold(self) -> Fix:
        return self._default_threshold

    def peg_bounds(self, peg: Fix) -> tuple[Fix, Fix]:
        """Return the inclusive (low, high) band around the peg."""
        delta = peg.mul(self._default_threshold, RoundingMode.FLOOR)
        return peg - delta, peg + delta

    def is_within_peg(self, reference_price: Fix, peg: Fix) -> bool:
        """Check whether the reference price is inside the tolerance band.

        Args:
            reference_price: Observed {UoA/ref}.
            peg: Expected {UoA/ref}.

        Returns:
            True if low <= reference_price <= high.
        """
        low, high = self.peg_bounds(peg)
        return low <= reference_price <= high

    def deviation(self, reference_price: Fix, peg: Fix) -> Fix:
        """Relative distance from the peg, as a fraction of the peg."""
        if peg == FIX_ZERO:
            return FIX_ZERO if reference_price == FIX_ZERO else FIX_ONE
        if reference_price >= peg:
            return (reference_price - peg).div(peg)
        return (peg - reference_price).div(peg)
