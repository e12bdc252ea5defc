"""Reward claim descriptor.

Describes, without executing, the call that claims rewards accrued to a
holder of the wrapped token. The caller executes the call under its own
authority, so the descriptor only ever encodes a call whose sole
argument is the holder itself.
"""

import logging
import re

from eth_abi import decode, encode
from web3 import Web3

from app.reserve_assets.application.exceptions import (
    ClaimDelegationFailure,
    InvalidAssetConfigError,
)
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.value_objects.claim_calldata import ZERO_ADDRESS, ClaimCalldata

logger = logging.getLogger(__name__)

_SIGNATURE_PATTERN = re.compile(r"^(?P<name>[A-Za-z_][A-Za-z0-9_]*)\((?P<args>[a-z0-9,\[\]]*)\)$")

# Compound-style comptrollers pay COMP through claimComp(holder)
COMPTROLLER_CLAIM_SIGNATURE = "claimComp(address)"


class RewardClaimDescriptor:
    """Builds and checks claim calldata for one reward program.

    Attributes:
        target: Contract the claim call is sent to.
        function_signature: Canonical signature, e.g. ``claimComp(address)``.
        reward_token: Token the rewards are paid in.
    """

    def __init__(
        self,
        target: str,
        reward_token: TokenContract,
        function_signature: str = COMPTROLLER_CLAIM_SIGNATURE,
    ) -> None:
        """Initialize and validate the descriptor.

        Raises:
            InvalidAssetConfigError: If the target is not a usable address
                or the signature takes anything other than one address.
        """
        match = _SIGNATURE_PATTERN.match(function_signature)
        if match is None or match.group("args") != "address":
            raise InvalidAssetConfigError(
                function_signature,
                "claim function must take exactly one address argument (the holder)",
            )
        if not Web3.is_address(target) or target.lower() == ZERO_ADDRESS:
            raise InvalidAssetConfigError(function_signature, f"invalid claim target {target!r}")

        self._target = Web3.to_checksum_address(target)
        self._reward_token = reward_token
        self._function_signature = function_signature
        self._selector = bytes(Web3.keccak(text=function_signature)[:4])

    @property
    def target(self) -> str:
        return self._target

    @property
    def reward_token(self) -> TokenContract:
        return self._reward_token

    @property
    def reward_erc20(self) -> str:
        return self._reward_token.address

    @property
    def function_signature(self) -> str:
        return self._function_signature

    @property
    def selector(self) -> bytes:
        return self._selector

    def describe(self, holder: str) -> ClaimCalldata:
        """Return the claim call for ``holder``.

        Args:
            holder: Account whose accrued rewards are claimed.

        Returns:
            ClaimCalldata targeting the reward program.

        Raises:
            ValueError: If ``holder`` is not a valid address.
        """
        holder = Web3.to_checksum_address(holder)
        payload = self._selector + encode(["address"], [holder])
        return ClaimCalldata(target=self._target, payload=payload)

    def verify(self, calldata: ClaimCalldata, holder: str) -> None:
        """Refuse calldata that does not claim exactly for ``holder``.

        Raises:
            ClaimDelegationFailure: If the target, selector or argument
                differs from what this descriptor produces.
        """
        if calldata.target != self._target:
            raise ClaimDelegationFailure(calldata.target, "unexpected claim target")
        if calldata.payload[:4] != self._selector:
            raise ClaimDelegationFailure(calldata.target, "unexpected claim selector")
        try:
            (encoded_holder,) = decode(["address"], calldata.payload[4:])
        except Exception as e:
            raise ClaimDelegationFailure(calldata.target, f"undecodable claim payload: {e}") from e
        if len(calldata.payload) != 36 or Web3.to_checksum_address(encoded_holder) != Web3.to_checksum_address(holder):
            raise ClaimDelegationFailure(calldata.target, "claim payload does not name the holder")
