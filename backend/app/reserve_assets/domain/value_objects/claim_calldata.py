"""Claim calldata value object describing a reward-claim call."""

from dataclasses import dataclass
from typing import Self

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class ClaimCalldata:
    """Target address and opaque payload for a reward claim.

    A zero target with an empty payload means the asset has no rewards.

    Attributes:
        target: Checksummed address the call is made to.
        payload: ABI-encoded call data (selector + arguments).
    """

    target: str
    payload: bytes

    @classmethod
    def empty(cls) -> Self:
        return cls(ZERO_ADDRESS, b"")

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to claim."""
        return self.target == ZERO_ADDRESS and not self.payload

    @property
    def payload_hex(self) -> str:
        return "0x" + self.payload.hex()
