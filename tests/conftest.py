"""Shared fakes and fixtures for asset-layer tests.

The fakes implement the application interfaces in memory so tests can
drive feeds, balances and rates directly, with a clock they control.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Optional

import pytest

from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter
from app.reserve_assets.application.interfaces.call_executor import DelegatedCallExecutor
from app.reserve_assets.application.interfaces.price_feed import FeedRound, PriceFeed
from app.reserve_assets.application.interfaces.rate_source import ExchangeRateSource
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.events import EventLog
from app.reserve_assets.domain.value_objects.claim_calldata import ClaimCalldata
from app.reserve_assets.domain.value_objects.fix import Fix

TOKEN_ADDRESS = "0x" + "1" * 40
REWARD_TOKEN_ADDRESS = "0x" + "2" * 40
COMPTROLLER_ADDRESS = "0x" + "3" * 40
HOLDER_ADDRESS = "0x" + "4" * 40
OTHER_ADDRESS = "0x" + "5" * 40

ORACLE_TIMEOUT = timedelta(hours=24)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeFeed(PriceFeed):
    """In-memory feed whose answer, age and health tests set directly."""

    def __init__(self, clock: FakeClock, price: str = "1", decimals: int = 8, name: str = "fake") -> None:
        self._clock = clock
        self._name = name
        self.decimals = decimals
        self.answer = 0
        self.set_price(price)
        self.age = timedelta(0)
        self.incomplete = False
        self.never_updated = False
        self.error: Optional[Exception] = None
        self.reads = 0
        self.closed = False

    @property
    def feed_name(self) -> str:
        return self._name

    def set_price(self, price: str) -> None:
        self.answer = int(Decimal(price).scaleb(self.decimals))

    def latest_round(self) -> FeedRound:
        self.reads += 1
        if self.error is not None:
            raise self.error
        return FeedRound(
            round_id=10,
            answer=self.answer,
            decimals=self.decimals,
            updated_at=None if self.never_updated else self._clock() - self.age,
            answered_in_round=9 if self.incomplete else 10,
        )

    def close(self) -> None:
        self.closed = True


class FakeToken(TokenContract):
    """ERC20 with an in-memory balance table."""

    def __init__(self, address: str = TOKEN_ADDRESS, decimals: int = 18) -> None:
        self._address = address
        self._decimals = decimals
        self.balances: dict[str, int] = {}

    @property
    def address(self) -> str:
        return self._address

    def decimals(self) -> int:
        return self._decimals

    def balance_of(self, account: str) -> int:
        return self.balances.get(account.lower(), 0)

    def mint(self, account: str, amount: int) -> None:
        key = account.lower()
        self.balances[key] = self.balances.get(key, 0) + amount


class FakeRateSource(ExchangeRateSource):
    """Exchange-rate source returning a settable refPerTok."""

    def __init__(self, value: str = "1") -> None:
        self.value = Fix.from_decimal(value)
        self.error: Optional[Exception] = None
        self.closed = False

    def ref_per_tok(self) -> Fix:
        if self.error is not None:
            raise self.error
        return self.value

    def close(self) -> None:
        self.closed = True


class FakeExecutor(DelegatedCallExecutor):
    """Records executed calls and runs an optional side effect per call."""

    def __init__(self, on_execute: Optional[Callable[[str, ClaimCalldata], None]] = None) -> None:
        self.calls: list[tuple[str, ClaimCalldata]] = []
        self.on_execute = on_execute
        self.error: Optional[Exception] = None

    def execute(self, holder: str, calldata: ClaimCalldata) -> None:
        self.calls.append((holder, calldata))
        if self.error is not None:
            raise self.error
        if self.on_execute is not None:
            self.on_execute(holder, calldata)


@pytest.fixture
def clock() -> FakeClock:
    """Create a clock fixed at 2024-01-01 UTC."""
    return FakeClock()


@pytest.fixture
def feed(clock: FakeClock) -> FakeFeed:
    """Create a healthy feed answering 1.00 with 8 decimals."""
    return FakeFeed(clock)


@pytest.fixture
def token() -> FakeToken:
    """Create an 18-decimal token."""
    return FakeToken()


@pytest.fixture
def reward_token() -> FakeToken:
    """Create an 18-decimal reward token."""
    return FakeToken(address=REWARD_TOKEN_ADDRESS)


@pytest.fixture
def events() -> EventLog:
    """Create an empty event log."""
    return EventLog()


@pytest.fixture
def oracle(feed: FakeFeed, clock: FakeClock) -> PriceOracleAdapter:
    """Create an oracle adapter over the fake feed."""
    return PriceOracleAdapter(symbol="TKN", feed=feed, oracle_timeout=ORACLE_TIMEOUT, clock=clock)


@pytest.fixture
def make_feed(clock: FakeClock) -> Callable[..., FakeFeed]:
    """Factory for additional feeds sharing the test clock."""

    def _make(price: str = "1", decimals: int = 8, name: str = "fake") -> FakeFeed:
        return FakeFeed(clock, price=price, decimals=decimals, name=name)

    return _make


@pytest.fixture
def make_token() -> Callable[..., FakeToken]:
    """Factory for additional tokens."""

    def _make(address: str = TOKEN_ADDRESS, decimals: int = 18) -> FakeToken:
        return FakeToken(address=address, decimals=decimals)

    return _make


@pytest.fixture
def rate_source() -> FakeRateSource:
    """Create a rate source at refPerTok 1."""
    return FakeRateSource()


@pytest.fixture
def executor() -> FakeExecutor:
    """Create an executor that records calls and does nothing else."""
    return FakeExecutor()
