"""Asset facade: the read surface for one admitted token."""

import logging
from typing import Optional

from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter
from app.reserve_assets.application.assets.rewards import RewardClaimDescriptor
from app.reserve_assets.application.exceptions import (
    ClaimDelegationFailure,
    InvalidAssetConfigError,
)
from app.reserve_assets.application.interfaces.call_executor import DelegatedCallExecutor
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.events import EventLog, RewardsClaimed
from app.reserve_assets.domain.value_objects.claim_calldata import ZERO_ADDRESS, ClaimCalldata
from app.reserve_assets.domain.value_objects.fix import Fix
from app.reserve_assets.domain.value_objects.price import Price

logger = logging.getLogger(__name__)


class Asset:
    """Economic wrapper around one token admitted into the basket.

    Reports a {UoA/tok} price through its oracle adapter, balances in
    whole tokens, and describes how to claim rewards for holding it.
    Identity fields are fixed at construction.

    Attributes:
        symbol: Token symbol, used for display and registry lookups.
        erc20: Token address (identity).
        erc20_decimals: Token decimals, verified against the token.
        max_trade_volume: {UoA} cap per trade; configuration only.
    """

    def __init__(
        self,
        symbol: str,
        token: TokenContract,
        oracle: PriceOracleAdapter,
        decimals: int,
        max_trade_volume: Fix,
        reward_descriptor: Optional[RewardClaimDescriptor] = None,
        events: Optional[EventLog] = None,
    ) -> None:
        """Initialize the asset and check it against the token.

        Args:
            symbol: Token symbol.
            token: Contract of the wrapped token.
            oracle: Price oracle adapter for {UoA/tok}.
            decimals: Expected token decimals.
            max_trade_volume: Maximum trade size in UoA.
            reward_descriptor: How to claim rewards, if the token earns any.
            events: Event log that receives RewardsClaimed.

        Raises:
            InvalidAssetConfigError: If the token reports different
                decimals than configured.
        """
        reported = token.decimals()
        if reported != decimals:
            raise InvalidAssetConfigError(
                symbol, f"configured decimals {decimals} != token decimals {reported}"
            )

        self._symbol = symbol
        self._token = token
        self._erc20 = token.address
        self._decimals = decimals
        self._oracle = oracle
        self._max_trade_volume = max_trade_volume
        self._reward_descriptor = reward_descriptor
        self._events = events or EventLog()
        self._disposed = False

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def erc20(self) -> str:
        return self._erc20

    @property
    def erc20_decimals(self) -> int:
        return self._decimals

    @property
    def is_collateral(self) -> bool:
        return False

    @property
    def max_trade_volume(self) -> Fix:
        return self._max_trade_volume

    @property
    def oracle(self) -> PriceOracleAdapter:
        return self._oracle

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def reward_descriptor(self) -> Optional[RewardClaimDescriptor]:
        return self._reward_descriptor

    @property
    def reward_erc20(self) -> str:
        """Token rewards are paid in, or the zero address if none."""
        if self._reward_descriptor is None:
            return ZERO_ADDRESS
        return self._reward_descriptor.reward_erc20

    def configure_max_trade_volume(self, value: Fix) -> None:
        """Change the trade cap; only configuration may call this."""
        logger.info(f"{self._symbol}: maxTradeVolume {self._max_trade_volume} -> {value}")
        self._max_trade_volume = value

    def refresh(self) -> None:
        """Take this unit of work's strict price reading. Never raises."""
        self._oracle.refresh()

    def strict_price(self) -> Fix:
        """Precise {UoA/tok}; raises PriceUnavailableError on failure."""
        return self._oracle.strict_price()

    def price(self, allow_fallback: bool) -> Price:
        """{UoA/tok}, optionally degrading to a fallback estimate."""
        return self._oracle.price(allow_fallback)

    def bal(self, account: str) -> Fix:
        """Balance of ``account`` in whole tokens."""
        return Fix.shift(self._token.balance_of(account), -self._decimals)

    def get_claim_calldata(self, holder: str) -> ClaimCalldata:
        """Describe the reward claim for ``holder`` (the calling context).

        Returns:
            ClaimCalldata, empty when the asset earns no rewards.
        """
        if self._reward_descriptor is None:
            return ClaimCalldata.empty()
        return self._reward_descriptor.describe(holder)

    def claim_rewards(self, executor: DelegatedCallExecutor, holder: str) -> list[RewardsClaimed]:
        """Claim rewards for ``holder`` through the caller's executor.

        Args:
            executor: Executes the claim under the holder's authority.
            holder: Account the rewards accrue to.

        Returns:
            The RewardsClaimed events emitted (empty if nothing was claimed).

        Raises:
            ClaimDelegationFailure: If the claim call fails. No event is
                emitted in that case.
        """
        descriptor = self._reward_descriptor
        if descriptor is None:
            return []

        calldata = descriptor.describe(holder)
        descriptor.verify(calldata, holder)

        reward_token = descriptor.reward_token
        before = reward_token.balance_of(holder)
        try:
            executor.execute(holder, calldata)
        except ClaimDelegationFailure:
            raise
        except Exception as e:
            raise ClaimDelegationFailure(calldata.target, str(e)) from e
        after = reward_token.balance_of(holder)

        if after <= before:
            logger.info(f"{self._symbol}: no rewards accrued for {holder}")
            return []

        event = RewardsClaimed(
            erc20=descriptor.reward_erc20,
            amount=Fix.shift(after - before, -reward_token.decimals()),
            holder=holder,
        )
        self._events.emit(event)
        logger.info(f"{self._symbol}: claimed {event.amount} of {event.erc20} for {holder}")
        return [event]

    def dispose(self) -> None:
        """Release feed connections held by this asset. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._oracle.close()
        logger.debug(f"Disposed asset {self._symbol}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(symbol={self._symbol!r}, erc20={self._erc20!r})"
