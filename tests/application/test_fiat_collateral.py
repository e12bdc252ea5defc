"""Unit tests for FiatCollateral peg tracking and default status."""

from datetime import timedelta

import pytest

from app.reserve_assets.application.assets.fiat_collateral import FiatCollateral
from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter
from app.reserve_assets.application.exceptions import StalePriceError
from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.events import CollateralStatusChanged
from app.reserve_assets.domain.value_objects.fix import FIX_ONE, FIX_ZERO, Fix

DELAY = timedelta(days=1)
THRESHOLD = Fix.from_decimal("0.05")


@pytest.fixture
def usdc(make_token, oracle, events, clock) -> FiatCollateral:
    """Create USDC collateral targeting USD with a 5% band and one-day window."""
    return FiatCollateral(
        symbol="USDC",
        token=make_token(decimals=6),
        oracle=oracle,
        decimals=6,
        max_trade_volume=Fix.from_int(1_000_000),
        target_name="USD",
        delay_until_default=DELAY,
        default_threshold=THRESHOLD,
        events=events,
        clock=clock,
    )


class TestFiatCollateralState:
    """Tests for the initial read surface."""

    def test_initial_state(self, usdc: FiatCollateral) -> None:
        assert usdc.is_collateral
        assert usdc.status is CollateralStatus.SOUND
        assert usdc.when_default is None
        assert usdc.target_name == "USD"
        assert usdc.ref_per_tok == FIX_ONE
        assert usdc.target_per_ref == FIX_ONE
        assert usdc.price_per_target == FIX_ONE
        assert usdc.default_threshold == THRESHOLD

    def test_healthy_refresh_stays_sound(self, usdc: FiatCollateral, events) -> None:
        assert usdc.refresh() is CollateralStatus.SOUND
        assert events.events == []

    def test_status_changes_only_on_refresh(self, usdc: FiatCollateral, feed) -> None:
        feed.set_price("0.80")

        assert usdc.status is CollateralStatus.SOUND
        usdc.refresh()
        assert usdc.status is CollateralStatus.IFFY


class TestFiatCollateralPeg:
    """Tests for peg drift, recovery and default."""

    def test_depeg_marks_iffy(self, usdc: FiatCollateral, feed, clock, events) -> None:
        feed.set_price("0.90")

        assert usdc.refresh() is CollateralStatus.IFFY
        assert usdc.when_default == clock.now + DELAY
        changes = events.of_type(CollateralStatusChanged)
        assert len(changes) == 1
        assert changes[0].old_status is CollateralStatus.SOUND
        assert changes[0].new_status is CollateralStatus.IFFY
        assert changes[0].erc20 == usdc.erc20

    def test_price_on_band_edge_is_sound(self, usdc: FiatCollateral, feed) -> None:
        feed.set_price("0.95")

        assert usdc.refresh() is CollateralStatus.SOUND

    def test_recovery_inside_window(self, usdc: FiatCollateral, feed, clock) -> None:
        feed.set_price("0.90")
        usdc.refresh()

        clock.advance(hours=12)
        feed.set_price("1.00")

        assert usdc.refresh() is CollateralStatus.SOUND
        assert usdc.when_default is None

    def test_depeg_outliving_window_disables(self, usdc: FiatCollateral, feed, clock, events) -> None:
        feed.set_price("0.90")
        usdc.refresh()
        clock.advance(hours=25)

        assert usdc.refresh() is CollateralStatus.DISABLED
        assert [e.new_status for e in events.of_type(CollateralStatusChanged)] == [
            CollateralStatus.IFFY,
            CollateralStatus.DISABLED,
        ]

    def test_disabled_does_not_recover(self, usdc: FiatCollateral, feed, clock) -> None:
        feed.set_price("0.90")
        usdc.refresh()
        clock.advance(days=2)
        usdc.refresh()

        feed.set_price("1.00")
        clock.advance(hours=1)

        assert usdc.refresh() is CollateralStatus.DISABLED

    def test_zero_ref_per_tok_disables(self, make_token, oracle, clock) -> None:
        rates = iter([FIX_ONE, FIX_ZERO])
        collateral = FiatCollateral(
            symbol="USDC",
            token=make_token(decimals=6),
            oracle=oracle,
            decimals=6,
            max_trade_volume=FIX_ONE,
            target_name="USD",
            delay_until_default=DELAY,
            default_threshold=THRESHOLD,
            ref_per_tok=lambda: next(rates),
            clock=clock,
        )

        assert collateral.refresh() is CollateralStatus.DISABLED


class TestFiatCollateralPricing:
    """Tests for strict and fallback prices under feed faults."""

    def test_stale_feed_marks_iffy(self, usdc: FiatCollateral, feed) -> None:
        feed.age = timedelta(days=2)

        assert usdc.refresh() is CollateralStatus.IFFY

    def test_stale_feed_fallback_versus_strict(self, usdc: FiatCollateral, feed) -> None:
        usdc.refresh()
        feed.age = timedelta(days=2)
        usdc.refresh()

        with pytest.raises(StalePriceError):
            usdc.price(allow_fallback=False)
        price = usdc.price(allow_fallback=True)
        assert price.is_fallback
        assert price.value == FIX_ONE

    def test_peg_estimate_without_any_good_read(self, usdc: FiatCollateral, feed) -> None:
        feed.error = RuntimeError("down")
        usdc.refresh()

        price = usdc.price(allow_fallback=True)

        assert price.is_fallback
        assert price.value == FIX_ONE
        assert usdc.oracle.fallback_names == ["last_known_good", "peg_estimate"]


class TestNonFiatTarget:
    """Tests for collateral whose target has its own price feed."""

    @pytest.fixture
    def btc_feed(self, make_feed):
        return make_feed(price="40000", name="BTC/USD")

    @pytest.fixture
    def wbtc(self, make_token, make_feed, btc_feed, clock) -> FiatCollateral:
        wbtc_feed = make_feed(price="40000", name="WBTC/USD")
        btc_oracle = PriceOracleAdapter("BTC", btc_feed, timedelta(hours=24), clock=clock)
        return FiatCollateral(
            symbol="WBTC",
            token=make_token(decimals=8),
            oracle=PriceOracleAdapter("WBTC", wbtc_feed, timedelta(hours=24), clock=clock),
            decimals=8,
            max_trade_volume=FIX_ONE,
            target_name="BTC",
            delay_until_default=DELAY,
            default_threshold=THRESHOLD,
            price_per_target=btc_oracle.read_feed,
            clock=clock,
        )

    def test_tracks_target_price(self, wbtc: FiatCollateral) -> None:
        assert wbtc.refresh() is CollateralStatus.SOUND
        assert wbtc.price_per_target == Fix.from_int(40000)

    def test_target_feed_failure_is_soft_fault(self, wbtc: FiatCollateral, btc_feed) -> None:
        btc_feed.error = RuntimeError("down")

        assert wbtc.refresh() is CollateralStatus.IFFY
        assert wbtc.price_per_target == Fix.from_int(40000)
