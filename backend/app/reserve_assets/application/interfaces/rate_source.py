"""Exchange-rate source interface for appreciating collateral."""

from abc import ABC, abstractmethod

from app.reserve_assets.domain.value_objects.fix import Fix


class ExchangeRateSource(ABC):
    """Reports how many reference units one token redeems for.

    Implemented by interest-bearing wrappers (cTokens, ERC4626 vaults),
    whose rate only grows unless funds are lost.
    """

    @abstractmethod
    def ref_per_tok(self) -> Fix:
        """Current reference units per whole token."""
        ...

    def close(self) -> None:
        """Release any open connections."""
