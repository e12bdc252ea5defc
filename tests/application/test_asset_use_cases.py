"""Unit tests for the read and refresh use cases."""

from datetime import timedelta

import pytest

from app.reserve_assets.application.assets.asset import Asset
from app.reserve_assets.application.assets.fiat_collateral import FiatCollateral
from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter
from app.reserve_assets.application.assets.registry import AssetRegistry
from app.reserve_assets.application.exceptions import (
    AssetNotFoundError,
    PriceUnavailableError,
)
from app.reserve_assets.application.use_cases.get_asset_price import (
    GetAssetPriceUseCase,
    GetBalanceUseCase,
)
from app.reserve_assets.application.use_cases.get_asset_state import (
    GetAssetStateUseCase,
    ListAssetsUseCase,
)
from app.reserve_assets.application.use_cases.refresh_assets import RefreshAssetsUseCase
from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.value_objects.fix import Fix

HOLDER = "0x" + "4" * 40


@pytest.fixture
def usdc_token(make_token):
    return make_token(address="0x" + "a" * 40, decimals=6)


@pytest.fixture
def registry(make_token, make_feed, usdc_token, feed, clock) -> AssetRegistry:
    """Create a registry with COMP (asset) and USDC (collateral, shared `feed`)."""
    registry = AssetRegistry()
    registry.register(
        Asset(
            symbol="COMP",
            token=make_token(address="0x" + "c" * 40),
            oracle=PriceOracleAdapter("COMP", make_feed(price="50"), timedelta(hours=24), clock=clock),
            decimals=18,
            max_trade_volume=Fix.from_int(100),
        )
    )
    registry.register(
        FiatCollateral(
            symbol="USDC",
            token=usdc_token,
            oracle=PriceOracleAdapter("USDC", feed, timedelta(hours=24), clock=clock),
            decimals=6,
            max_trade_volume=Fix.from_int(1_000_000),
            target_name="USD",
            delay_until_default=timedelta(days=1),
            default_threshold=Fix.from_decimal("0.05"),
            clock=clock,
        )
    )
    return registry


class TestGetAssetPriceUseCase:
    """Tests for strict and fallback price DTOs."""

    def test_strict_price(self, registry: AssetRegistry) -> None:
        dto = GetAssetPriceUseCase(registry).strict("COMP")

        assert dto.value == "50"
        assert not dto.is_fallback

    def test_fallback_price(self, registry: AssetRegistry, feed) -> None:
        feed.error = RuntimeError("down")
        registry.refresh_all()

        dto = GetAssetPriceUseCase(registry).execute("USDC", allow_fallback=True)

        assert dto.value == "1"
        assert dto.is_fallback

    def test_strict_failure_propagates(self, registry: AssetRegistry, feed) -> None:
        feed.error = RuntimeError("down")

        with pytest.raises(PriceUnavailableError):
            GetAssetPriceUseCase(registry).execute("USDC", allow_fallback=False)

    def test_unknown_asset(self, registry: AssetRegistry) -> None:
        with pytest.raises(AssetNotFoundError):
            GetAssetPriceUseCase(registry).execute("DAI")


class TestGetBalanceUseCase:
    def test_balance(self, registry: AssetRegistry, usdc_token) -> None:
        usdc_token.mint(HOLDER, 1_250_000)

        dto = GetBalanceUseCase(registry).execute("USDC", HOLDER)

        assert dto.balance == "1.25"


class TestAssetStateUseCases:
    """Tests for state DTOs."""

    def test_collateral_state(self, registry: AssetRegistry, feed, clock) -> None:
        feed.set_price("0.5")
        registry.refresh_all()

        state = GetAssetStateUseCase(registry).execute("USDC")

        assert state.is_collateral
        assert state.status is CollateralStatus.IFFY
        assert state.status_name == "IFFY"
        assert state.when_default == clock.now + timedelta(days=1)
        assert state.ref_per_tok == "1"
        assert state.target_name == "USD"

    def test_plain_asset_state(self, registry: AssetRegistry) -> None:
        state = GetAssetStateUseCase(registry).execute("COMP")

        assert not state.is_collateral
        assert state.status is None
        assert state.max_trade_volume == "100"
        assert state.reward_erc20 == "0x" + "0" * 40

    def test_list_puts_collateral_first(self, registry: AssetRegistry) -> None:
        symbols = [s.symbol for s in ListAssetsUseCase(registry).execute()]

        assert symbols == ["USDC", "COMP"]


class TestRefreshAssetsUseCase:
    def test_reports_status_names(self, registry: AssetRegistry) -> None:
        result = RefreshAssetsUseCase(registry).execute()

        assert result.statuses == {"USDC": "SOUND"}
        assert result.refreshed_at is not None
