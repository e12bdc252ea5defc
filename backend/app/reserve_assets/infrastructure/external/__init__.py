"""External adapters: price feeds and on-chain contract bindings."""

from app.reserve_assets.infrastructure.external.chainlink_feed import ChainlinkPriceFeed
from app.reserve_assets.infrastructure.external.kraken_feed import KrakenPriceFeed
from app.reserve_assets.infrastructure.external.web3_contracts import (
    CTokenRateSource,
    ERC4626RateSource,
    Web3CallExecutor,
    Web3TokenContract,
    create_web3,
)

__all__ = [
    "ChainlinkPriceFeed",
    "KrakenPriceFeed",
    "CTokenRateSource",
    "ERC4626RateSource",
    "Web3CallExecutor",
    "Web3TokenContract",
    "create_web3",
]
