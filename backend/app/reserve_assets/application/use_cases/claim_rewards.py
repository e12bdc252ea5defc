"""Use cases for describing and claiming rewards across the registry.

Claiming is a two-step protocol: assets describe the call, and the
caller executes it under its own authority. The whole sequence runs
under a non-reentrant lock. Rewards are measured as the holder's
reward-token balance change, so a sequence that fails part way still
reports what the completed calls paid out.
"""

import logging
import threading
from dataclasses import dataclass, field

from app.reserve_assets.application.assets.registry import AssetRegistry
from app.reserve_assets.application.dto.asset_dto import ClaimCalldataDTO
from app.reserve_assets.application.exceptions import (
    ClaimDelegationFailure,
    ClaimInProgressError,
)
from app.reserve_assets.application.interfaces.call_executor import DelegatedCallExecutor
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.events import EventLog, RewardsClaimed
from app.reserve_assets.domain.value_objects.claim_calldata import ClaimCalldata
from app.reserve_assets.domain.value_objects.fix import Fix

logger = logging.getLogger(__name__)


class GetClaimCalldataUseCase:
    """Application service describing the reward claim of one asset."""

    def __init__(self, registry: AssetRegistry) -> None:
        self._registry = registry

    def execute(self, identifier: str, holder: str) -> ClaimCalldataDTO:
        """Return the claim call for ``holder``.

        Raises:
            AssetNotFoundError: If the asset is not registered.
            ValueError: If ``holder`` is not a valid address.
        """
        asset = self._registry.get(identifier).asset
        calldata = asset.get_claim_calldata(holder)
        return ClaimCalldataDTO(
            symbol=asset.symbol,
            target=calldata.target,
            payload=calldata.payload_hex,
            reward_erc20=asset.reward_erc20,
        )


@dataclass
class _ClaimPlan:
    calls: list[ClaimCalldata] = field(default_factory=list)
    reward_tokens: dict[str, TokenContract] = field(default_factory=dict)


class ClaimRewardsUseCase:
    """Application service claiming every reward program for a holder.

    Each distinct (target, payload) is executed once even if several
    assets share it, and RewardsClaimed is emitted once per distinct
    reward token with a positive claimed amount.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        executor: DelegatedCallExecutor,
        events: EventLog,
    ) -> None:
        """Initialize the use case.

        Args:
            registry: Registry of admitted assets.
            executor: Executes claim calls under the holder's authority.
            events: Event log that receives RewardsClaimed.
        """
        self._registry = registry
        self._executor = executor
        self._events = events
        self._lock = threading.Lock()

    def execute(self, holder: str) -> list[RewardsClaimed]:
        """Claim all rewards accrued to ``holder``.

        Returns:
            RewardsClaimed events emitted, one per reward token claimed.

        Raises:
            ClaimInProgressError: If a claim sequence is already running.
            ClaimDelegationFailure: If any claim call fails. Rewards paid
                by calls that completed before it are emitted and attached
                to the exception as ``claimed``.
        """
        if not self._lock.acquire(blocking=False):
            raise ClaimInProgressError()
        try:
            return self._claim(holder)
        finally:
            self._lock.release()

    def _plan(self, holder: str) -> _ClaimPlan:
        plan = _ClaimPlan()
        seen: set[tuple[str, bytes]] = set()
        for entry in self._registry:
            asset = entry.asset
            descriptor = asset.reward_descriptor
            if descriptor is None:
                continue
            calldata = asset.get_claim_calldata(holder)
            descriptor.verify(calldata, holder)
            key = (calldata.target, calldata.payload)
            if key not in seen:
                seen.add(key)
                plan.calls.append(calldata)
            plan.reward_tokens.setdefault(descriptor.reward_erc20, descriptor.reward_token)
        return plan

    def _claim(self, holder: str) -> list[RewardsClaimed]:
        plan = self._plan(holder)
        if not plan.calls:
            logger.debug(f"No reward programs to claim for {holder}")
            return []

        before = {erc20: token.balance_of(holder) for erc20, token in plan.reward_tokens.items()}

        for index, calldata in enumerate(plan.calls):
            try:
                self._executor.execute(holder, calldata)
            except Exception as e:
                failure = e
                if not isinstance(e, ClaimDelegationFailure):
                    failure = ClaimDelegationFailure(calldata.target, str(e))
                # Completed calls have already paid the holder
                failure.claimed = self._record_claimed(plan, before, holder)
                logger.warning(
                    f"Claim call {index + 1}/{len(plan.calls)} via {calldata.target} failed; "
                    f"recorded {len(failure.claimed)} reward token(s) already claimed"
                )
                if failure is e:
                    raise
                raise failure from e

        claimed = self._record_claimed(plan, before, holder)
        logger.info(f"Claimed {len(claimed)} reward token(s) for {holder} via {len(plan.calls)} call(s)")
        return claimed

    def _record_claimed(
        self, plan: _ClaimPlan, before: dict[str, int], holder: str
    ) -> list[RewardsClaimed]:
        """Emit RewardsClaimed for every reward token whose balance grew."""
        claimed: list[RewardsClaimed] = []
        for erc20, token in plan.reward_tokens.items():
            delta = token.balance_of(holder) - before[erc20]
            if delta <= 0:
                continue
            claimed.append(
                RewardsClaimed(
                    erc20=erc20,
                    amount=Fix.shift(delta, -token.decimals()),
                    holder=holder,
                )
            )

        for event in claimed:
            self._events.emit(event)
        return claimed
