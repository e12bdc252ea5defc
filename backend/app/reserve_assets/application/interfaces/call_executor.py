"""Delegated call executor interface for reward claims."""

from abc import ABC, abstractmethod

from app.reserve_assets.domain.value_objects.claim_calldata import ClaimCalldata


class DelegatedCallExecutor(ABC):
    """Executes a described call under the holder's own authority.

    The asset layer only describes reward claims; the caller owns the
    authority (keys, account context) needed to execute them.
    """

    @abstractmethod
    def execute(self, holder: str, calldata: ClaimCalldata) -> None:
        """Execute ``calldata`` as ``holder``.

        Args:
            holder: Account the call is made from; rewards accrue to it.
            calldata: Target and payload to execute.

        Raises:
            ClaimDelegationFailure: If the target is unreachable or the
                call reverts.
        """
        ...
