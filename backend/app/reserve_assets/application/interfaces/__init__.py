"""Ports to external systems: price feeds, tokens, rate sources, executors."""

from app.reserve_assets.application.interfaces.call_executor import DelegatedCallExecutor
from app.reserve_assets.application.interfaces.price_feed import FeedRound, PriceFeed
from app.reserve_assets.application.interfaces.rate_source import ExchangeRateSource
from app.reserve_assets.application.interfaces.token import TokenContract

__all__ = [
    "DelegatedCallExecutor",
    "ExchangeRateSource",
    "FeedRound",
    "PriceFeed",
    "TokenContract",
]
