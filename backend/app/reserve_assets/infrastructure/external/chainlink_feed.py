"""Chainlink aggregator price feed read through web3.

Reads ``latestRoundData`` from an AggregatorV3 contract. Staleness and
range checks are applied by the oracle adapter, not here.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from web3 import Web3

from app.reserve_assets.application.interfaces.price_feed import FeedRound, PriceFeed
from app.reserve_assets.infrastructure.external.abis import AGGREGATOR_V3_ABI

logger = logging.getLogger(__name__)


class ChainlinkPriceFeed(PriceFeed):
    """AggregatorV3 feed implementing the PriceFeed interface.

    Attributes:
        _contract: web3 contract bound to the aggregator.
        _decimals: Answer decimals, read once and cached.
    """

    def __init__(self, web3: Web3, address: str, name: Optional[str] = None) -> None:
        """Initialize the feed.

        Args:
            web3: Connected web3 instance.
            address: Aggregator contract address.
            name: Display name (e.g., "USDC / USD"); defaults to the address.
        """
        self._address = Web3.to_checksum_address(address)
        self._contract = web3.eth.contract(address=self._address, abi=AGGREGATOR_V3_ABI)
        self._name = name or self._address
        self._decimals: Optional[int] = None

    @property
    def feed_name(self) -> str:
        return f"Chainlink:{self._name}"

    @property
    def address(self) -> str:
        return self._address

    def decimals(self) -> int:
        if self._decimals is None:
            self._decimals = int(self._contract.functions.decimals().call())
        return self._decimals

    def latest_round(self) -> FeedRound:
        """Read the latest round from the aggregator.

        Raises:
            web3 / transport exceptions if the call fails.
        """
        round_id, answer, _started_at, updated_at, answered_in_round = (
            self._contract.functions.latestRoundData().call()
        )
        logger.debug(f"{self.feed_name} round {round_id}: answer={answer} updatedAt={updated_at}")
        return FeedRound(
            round_id=int(round_id),
            answer=int(answer),
            decimals=self.decimals(),
            updated_at=datetime.fromtimestamp(updated_at, tz=timezone.utc) if updated_at else None,
            answered_in_round=int(answered_in_round),
        )
