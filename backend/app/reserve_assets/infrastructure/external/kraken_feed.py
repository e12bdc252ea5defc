"""Kraken REST ticker used as an off-chain price feed.

Kraken API documentation: https://docs.kraken.com/rest/
Public endpoint rate limit: ~1 request per second.

The mid price of the best bid/ask is reported as the answer, stamped
with the time it was fetched.
"""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import httpx

from app.reserve_assets.application.interfaces.price_feed import FeedRound, PriceFeed

logger = logging.getLogger(__name__)

# Mapping from normalized token symbols to Kraken trading pairs
# Kraken uses their own pair naming convention (e.g., XXBTZUSD for BTC/USD)
KRAKEN_SYMBOL_MAP: dict[str, str] = {
    "BTC": "XXBTZUSD",
    "WBTC": "WBTCUSD",
    "ETH": "XETHZUSD",
    "WETH": "XETHZUSD",
    "COMP": "COMPUSD",
    "USDT": "USDTZUSD",
    "USDC": "USDCUSD",
    "DAI": "DAIUSD",
    "PAXG": "PAXGUSD",
}

# Answers are reported with the same precision as USD Chainlink feeds
ANSWER_DECIMALS = 8

DEFAULT_TIMEOUT_SECONDS = 10.0


class KrakenPriceFeed(PriceFeed):
    """Kraken ticker client implementing the PriceFeed interface.

    No authentication is required for public market data endpoints.
    Requests are synchronous so a refresh() never suspends.

    Attributes:
        _client: httpx Client for making HTTP requests.
        _pair: Kraken pair name being read.
    """

    def __init__(
        self,
        token_symbol: str,
        base_url: str = "https://api.kraken.com",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize the Kraken feed.

        Args:
            token_symbol: Normalized token symbol (e.g., "USDC").
            base_url: Kraken API base URL.
            timeout: HTTP request timeout in seconds.
            client: Preconfigured httpx client (used by tests).

        Raises:
            ValueError: If the token has no Kraken pair mapping.
        """
        pair = KRAKEN_SYMBOL_MAP.get(token_symbol.upper())
        if pair is None:
            raise ValueError(f"Kraken does not support token: {token_symbol}")
        self._pair = pair
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    @property
    def feed_name(self) -> str:
        return f"Kraken:{self._pair}"

    @staticmethod
    def supports_token(token_symbol: str) -> bool:
        return token_symbol.upper() in KRAKEN_SYMBOL_MAP

    def latest_round(self) -> FeedRound:
        """Fetch the ticker and report its mid price.

        Raises:
            httpx.HTTPError: On transport or HTTP status errors.
            ValueError: If the response carries an API error or no ticker.
        """
        response = self._client.get("/0/public/Ticker", params={"pair": self._pair})
        response.raise_for_status()
        data = response.json()

        if data.get("error"):
            raise ValueError(f"Kraken API error: {data['error']}")

        result = data.get("result") or {}
        # The result key may not exactly match the request pair
        ticker_data = next(iter(result.values()), None)
        if not ticker_data:
            raise ValueError(f"No ticker data in Kraken response for {self._pair}")

        # a: [ask_price, whole_lot_volume, lot_volume]
        # b: [bid_price, whole_lot_volume, lot_volume]
        ask_price = Decimal(ticker_data["a"][0])
        bid_price = Decimal(ticker_data["b"][0])
        mid = (bid_price + ask_price) / Decimal("2")
        answer = int((mid.scaleb(ANSWER_DECIMALS)).to_integral_value(rounding=ROUND_HALF_UP))

        now = datetime.now(timezone.utc)
        round_id = int(now.timestamp())
        logger.debug(f"{self.feed_name}: bid={bid_price} ask={ask_price} mid={mid}")
        return FeedRound(
            round_id=round_id,
            answer=answer,
            decimals=ANSWER_DECIMALS,
            updated_at=now,
            answered_in_round=round_id,
        )

    def close(self) -> None:
        """Close the HTTP client if this feed opened it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "KrakenPriceFeed":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
