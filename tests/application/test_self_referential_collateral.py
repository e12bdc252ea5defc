"""Unit tests for SelfReferentialCollateral."""

from datetime import timedelta

import pytest

from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter
from app.reserve_assets.application.assets.self_referential_collateral import (
    SelfReferentialCollateral,
)
from app.reserve_assets.application.exceptions import PriceUnavailableError
from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.value_objects.fix import FIX_ONE, Fix


@pytest.fixture
def eth_feed(make_feed):
    return make_feed(price="2000", name="ETH/USD")


@pytest.fixture
def weth(token, eth_feed, clock) -> SelfReferentialCollateral:
    """Create WETH collateral targeting ETH."""
    return SelfReferentialCollateral(
        symbol="WETH",
        token=token,
        oracle=PriceOracleAdapter("WETH", eth_feed, timedelta(hours=24), clock=clock),
        decimals=18,
        max_trade_volume=Fix.from_int(1000),
        target_name="ETH",
        delay_until_default=timedelta(days=1),
        clock=clock,
    )


class TestSelfReferentialCollateral:
    """Tests for collateral priced purely by its own feed."""

    def test_price_per_target_comes_from_feed(self, weth: SelfReferentialCollateral) -> None:
        assert weth.refresh() is CollateralStatus.SOUND
        assert weth.price_per_target == Fix.from_int(2000)
        assert weth.ref_per_tok == FIX_ONE
        assert weth.target_per_ref == FIX_ONE

    def test_price_moves_without_fault(self, weth: SelfReferentialCollateral, eth_feed) -> None:
        eth_feed.set_price("1000")

        assert weth.refresh() is CollateralStatus.SOUND
        assert weth.price_per_target == Fix.from_int(1000)

    def test_feed_failure_is_soft_fault(self, weth: SelfReferentialCollateral, eth_feed) -> None:
        eth_feed.error = RuntimeError("down")

        assert weth.refresh() is CollateralStatus.IFFY

    def test_recovers_when_feed_returns(self, weth: SelfReferentialCollateral, eth_feed, clock) -> None:
        eth_feed.error = RuntimeError("down")
        weth.refresh()
        eth_feed.error = None
        clock.advance(hours=1)

        assert weth.refresh() is CollateralStatus.SOUND

    def test_fallback_uses_last_target_price(self, weth: SelfReferentialCollateral, eth_feed) -> None:
        eth_feed.error = RuntimeError("down")
        weth.refresh()

        price = weth.price(allow_fallback=True)

        assert price.is_fallback
        assert price.value == Fix.from_int(2000)

    def test_requires_working_feed_at_construction(self, token, make_feed, clock) -> None:
        broken = make_feed(price="2000")
        broken.error = RuntimeError("down")

        with pytest.raises(PriceUnavailableError):
            SelfReferentialCollateral(
                symbol="WETH",
                token=token,
                oracle=PriceOracleAdapter("WETH", broken, timedelta(hours=24), clock=clock),
                decimals=18,
                max_trade_volume=FIX_ONE,
                target_name="ETH",
                delay_until_default=timedelta(days=1),
                clock=clock,
            )
