"""Token contract interface for ERC20 metadata and balances."""

from abc import ABC, abstractmethod


class TokenContract(ABC):
    """Read access to an external ERC20 token."""

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksummed token address."""
        ...

    @abstractmethod
    def decimals(self) -> int:
        """Decimals reported by the token itself."""
        ...

    @abstractmethod
    def balance_of(self, account: str) -> int:
        """Raw (unscaled) balance of ``account``."""
        ...
