"""Tests for loading asset configurations and building the registry."""

import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock, patch

import httpx
import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.reserve_assets.application.assets.appreciating_collateral import AppreciatingCollateral
from app.reserve_assets.application.assets.fiat_collateral import FiatCollateral
from app.reserve_assets.application.exceptions import InvalidAssetConfigError
from app.reserve_assets.domain.events import EventLog
from app.reserve_assets.domain.value_objects.fix import Fix
from app.reserve_assets.infrastructure.assets_factory import (
    AssetConfig,
    AssetFactory,
    create_default_registry,
    load_asset_configs,
)

USDC = "0x" + "a" * 40
CUSDC = "0x" + "b" * 40
COMPTROLLER = "0x" + "3" * 40
COMP = "0x" + "c" * 40


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, delay_until_default_seconds=3600)


@pytest.fixture
def web3() -> MagicMock:
    """Create a web3 mock whose every token reports 6 decimals."""
    web3 = MagicMock()
    contract = web3.eth.contract.return_value
    contract.functions.decimals.return_value.call.return_value = 6
    contract.functions.exchangeRateStored.return_value.call.return_value = 225_000_000_000_000
    return web3


@pytest.fixture
def http_client() -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"error": [], "result": {"USDCUSD": {"a": ["1.0001"], "b": ["0.9999"]}}}
        )

    return httpx.Client(transport=httpx.MockTransport(handler), base_url="https://api.kraken.com")


def usdc_config(**overrides) -> dict:
    config = {
        "kind": "fiat",
        "symbol": "USDC",
        "erc20": USDC,
        "decimals": 6,
        "target_name": "USD",
        "feed": {"source": "kraken", "symbol": "USDC"},
    }
    config.update(overrides)
    return config


class TestAssetConfig:
    """Tests for configuration validation."""

    def test_load_from_file(self, tmp_path) -> None:
        path = tmp_path / "assets.json"
        path.write_text(json.dumps({"assets": [usdc_config(default_threshold="0.02")]}))

        configs = load_asset_configs(path)

        assert len(configs) == 1
        assert configs[0].default_threshold == Decimal("0.02")

    def test_collateral_requires_target(self) -> None:
        with pytest.raises(ValidationError):
            AssetConfig.model_validate(usdc_config(target_name=None))

    def test_appreciating_requires_rate_source(self) -> None:
        with pytest.raises(ValidationError):
            AssetConfig.model_validate(usdc_config(kind="appreciating"))

    def test_chainlink_requires_address(self) -> None:
        with pytest.raises(ValidationError):
            AssetConfig.model_validate(usdc_config(feed={"source": "chainlink"}))

    def test_invalid_erc20(self) -> None:
        with pytest.raises(ValidationError):
            AssetConfig.model_validate(usdc_config(erc20="0x1234"))

    def test_threshold_bounds(self) -> None:
        with pytest.raises(ValidationError):
            AssetConfig.model_validate(usdc_config(default_threshold="1.5"))


class TestCreateDefaultRegistry:
    """Tests for building assets from configurations."""

    def test_builds_fiat_collateral_with_defaults(self, settings, web3, http_client) -> None:
        registry = create_default_registry(
            settings,
            EventLog(),
            web3,
            configs=[AssetConfig.model_validate(usdc_config())],
            http_client=http_client,
        )

        usdc = registry.get_collateral("USDC")
        assert isinstance(usdc, FiatCollateral)
        assert usdc.default_threshold == Fix.from_decimal("0.05")
        assert usdc.delay_until_default == timedelta(hours=1)
        assert usdc.max_trade_volume == Fix.from_int(1_000_000)
        assert usdc.strict_price() == Fix.from_int(1)

    def test_builds_appreciating_collateral_with_rewards(self, settings, web3, http_client) -> None:
        config = usdc_config(
            kind="appreciating",
            symbol="cUSDC",
            erc20=CUSDC,
            rate_source={"kind": "ctoken", "ref_decimals": 6},
            reward={"target": COMPTROLLER, "reward_token": COMP},
            delay_until_default_seconds=60,
        )

        registry = create_default_registry(
            settings, EventLog(), web3, configs=[AssetConfig.model_validate(config)], http_client=http_client
        )

        cusdc = registry.get_collateral("cUSDC")
        assert isinstance(cusdc, AppreciatingCollateral)
        assert cusdc.ref_per_tok == Fix.from_decimal("0.0225")
        assert cusdc.delay_until_default == timedelta(seconds=60)
        assert cusdc.get_claim_calldata("0x" + "4" * 40).target == COMPTROLLER

    def test_broken_asset_is_skipped(self, settings, web3, http_client) -> None:
        configs = [
            AssetConfig.model_validate(usdc_config()),
            AssetConfig.model_validate(usdc_config(symbol="DAI", erc20=CUSDC, decimals=18)),
        ]

        registry = create_default_registry(settings, EventLog(), web3, configs=configs, http_client=http_client)

        assert registry.registered_symbols == ["USDC"]

    def test_duplicate_asset_is_skipped(self, settings, web3, http_client) -> None:
        configs = [AssetConfig.model_validate(usdc_config()), AssetConfig.model_validate(usdc_config())]

        registry = create_default_registry(settings, EventLog(), web3, configs=configs, http_client=http_client)

        assert len(registry) == 1

    def test_no_config_path_gives_empty_registry(self, settings, web3) -> None:
        assert len(create_default_registry(settings, EventLog(), web3)) == 0


def wbtc_config(**overrides) -> dict:
    config = usdc_config(
        symbol="WBTC",
        target_name="BTC",
        feed={"source": "kraken", "symbol": "WBTC"},
        price_per_target_feed={"source": "kraken", "symbol": "BTC"},
    )
    config.update(overrides)
    return config


class TestAssetFactory:
    """Tests for feed ownership of built assets."""

    @pytest.fixture
    def feeds(self, clock, make_feed) -> list:
        clock.now = datetime.now(timezone.utc)
        return [make_feed("30000", name="WBTC"), make_feed("30000", name="BTC")]

    def test_dispose_closes_target_feed(self, settings, web3, feeds) -> None:
        factory = AssetFactory(web3, settings, EventLog())

        with patch.object(AssetFactory, "build_feed", side_effect=feeds):
            wbtc = factory.build(AssetConfig.model_validate(wbtc_config()))

        assert wbtc.price_per_target == Fix.from_int(30000)

        wbtc.dispose()

        assert [feed.closed for feed in feeds] == [True, True]

    def test_failed_build_closes_opened_feeds(self, settings, web3, feeds) -> None:
        factory = AssetFactory(web3, settings, EventLog())

        with patch.object(AssetFactory, "build_feed", side_effect=feeds):
            with pytest.raises(InvalidAssetConfigError):
                factory.build(AssetConfig.model_validate(wbtc_config(decimals=18)))

        assert [feed.closed for feed in feeds] == [True, True]
