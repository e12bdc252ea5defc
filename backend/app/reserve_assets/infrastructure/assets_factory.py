"""Builds the asset registry from a JSON list of asset configurations.

Example file::

    {
      "assets": [
        {
          "kind": "appreciating",
          "symbol": "cUSDC",
          "erc20": "0x39AA39c021dfbaE8faC545936693aC917d5E7563",
          "decimals": 8,
          "target_name": "USD",
          "feed": {"source": "chainlink", "address": "0x8fFf..."},
          "rate_source": {"kind": "ctoken", "ref_decimals": 6},
          "reward": {
            "target": "0x3d9819210A31b4961b30EF54bE2aeD79B9c9Cd3B",
            "reward_token": "0xc00e94Cb662C3520282E6f5717214004A7f26888"
          }
        }
      ]
    }
"""

import logging
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from typing import Callable, Literal, Optional

import httpx
from pydantic import BaseModel, Field, model_validator
from web3 import Web3

from app.core.config import Settings
from app.reserve_assets.application.assets.appreciating_collateral import (
    AppreciatingCollateral,
)
from app.reserve_assets.application.assets.asset import Asset
from app.reserve_assets.application.assets.fiat_collateral import FiatCollateral
from app.reserve_assets.application.assets.price_oracle import PriceOracleAdapter
from app.reserve_assets.application.assets.registry import AssetRegistry
from app.reserve_assets.application.assets.rewards import (
    COMPTROLLER_CLAIM_SIGNATURE,
    RewardClaimDescriptor,
)
from app.reserve_assets.application.assets.self_referential_collateral import (
    SelfReferentialCollateral,
)
from app.reserve_assets.application.exceptions import InvalidAssetConfigError
from app.reserve_assets.application.interfaces.price_feed import PriceFeed
from app.reserve_assets.application.interfaces.rate_source import ExchangeRateSource
from app.reserve_assets.application.interfaces.token import TokenContract
from app.reserve_assets.domain.events import EventLog
from app.reserve_assets.domain.value_objects.fix import Fix
from app.reserve_assets.infrastructure.external.chainlink_feed import ChainlinkPriceFeed
from app.reserve_assets.infrastructure.external.kraken_feed import KrakenPriceFeed
from app.reserve_assets.infrastructure.external.web3_contracts import (
    CTokenRateSource,
    ERC4626RateSource,
    Web3TokenContract,
)

logger = logging.getLogger(__name__)

AssetKindName = Literal["asset", "fiat", "appreciating", "self_referential"]


class FeedConfig(BaseModel):
    """Where a {UoA/unit} price comes from."""

    source: Literal["chainlink", "kraken"]
    address: Optional[str] = Field(default=None, description="Chainlink aggregator address")
    symbol: Optional[str] = Field(default=None, description="Kraken token symbol")
    name: Optional[str] = Field(default=None, description="Display name")

    @model_validator(mode="after")
    def _check_source_fields(self) -> "FeedConfig":
        if self.source == "chainlink" and not self.address:
            raise ValueError("chainlink feeds require an address")
        if self.source == "kraken" and not self.symbol:
            raise ValueError("kraken feeds require a symbol")
        return self


class RateSourceConfig(BaseModel):
    """Exchange-rate source for appreciating collateral."""

    kind: Literal["ctoken", "erc4626"]
    ref_decimals: int = Field(ge=0, le=36, description="Decimals of the reference token")


class RewardConfig(BaseModel):
    """Reward program of an asset."""

    target: str
    reward_token: str
    function_signature: str = COMPTROLLER_CLAIM_SIGNATURE


class AssetConfig(BaseModel):
    """One admitted asset.

    Per-asset policy fields fall back to the global Settings when unset.
    """

    kind: AssetKindName = "asset"
    symbol: str = Field(min_length=1)
    erc20: str
    decimals: int = Field(ge=0, le=36)
    feed: FeedConfig
    fallback_price: Optional[Decimal] = Field(default=None, ge=0)
    max_trade_volume: Optional[Decimal] = Field(default=None, ge=0)
    oracle_timeout_seconds: Optional[int] = Field(default=None, gt=0)

    # Collateral only
    target_name: Optional[str] = None
    default_threshold: Optional[Decimal] = Field(default=None, ge=0, le=1)
    delay_until_default_seconds: Optional[int] = Field(default=None, ge=0)
    rate_source: Optional[RateSourceConfig] = None
    price_per_target_feed: Optional[FeedConfig] = None

    reward: Optional[RewardConfig] = None

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "AssetConfig":
        if self.kind != "asset" and not self.target_name:
            raise ValueError(f"{self.kind} collateral requires target_name")
        if self.kind == "appreciating" and self.rate_source is None:
            raise ValueError("appreciating collateral requires rate_source")
        if not Web3.is_address(self.erc20):
            raise ValueError(f"invalid erc20 address {self.erc20!r}")
        return self


class AssetsFile(BaseModel):
    """Top-level shape of the assets configuration file."""

    assets: list[AssetConfig] = Field(default_factory=list)


def load_asset_configs(path: str | Path) -> list[AssetConfig]:
    """Read and validate the assets configuration file.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the file does not match AssetsFile.
    """
    raw = Path(path).read_text(encoding="utf-8")
    return AssetsFile.model_validate_json(raw).assets


class AssetFactory:
    """Turns AssetConfig entries into asset facades bound to live adapters.

    Attributes:
        _web3: web3 instance used for every on-chain binding.
        _settings: Global defaults for per-asset policy.
        _events: Shared event log handed to every asset.
    """

    def __init__(
        self,
        web3: Web3,
        settings: Settings,
        events: EventLog,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize the factory.

        Args:
            web3: Connected web3 instance.
            settings: Application settings.
            events: Event log shared by the built assets.
            http_client: Client reused by Kraken feeds (tests inject a
                mock transport here); each feed opens its own otherwise.
        """
        self._web3 = web3
        self._settings = settings
        self._events = events
        self._http_client = http_client

    def build_feed(self, config: FeedConfig) -> PriceFeed:
        if config.source == "chainlink":
            return ChainlinkPriceFeed(self._web3, config.address, name=config.name)
        return KrakenPriceFeed(
            config.symbol,
            base_url=self._settings.kraken_base_url,
            timeout=self._settings.http_timeout_seconds,
            client=self._http_client,
        )

    def build_token(self, address: str) -> TokenContract:
        return Web3TokenContract(self._web3, address)

    def build_rate_source(self, config: AssetConfig) -> ExchangeRateSource:
        rate = config.rate_source
        if rate.kind == "ctoken":
            return CTokenRateSource(self._web3, config.erc20, rate.ref_decimals)
        return ERC4626RateSource(
            self._web3,
            config.erc20,
            share_decimals=config.decimals,
            asset_decimals=rate.ref_decimals,
        )

    def build(self, config: AssetConfig) -> Asset:
        """Build one asset or collateral.

        Feeds and rate sources opened for an asset that then fails to
        build are closed before the error propagates.

        Raises:
            InvalidAssetConfigError: If the asset rejects its configuration.
            Exception: Adapter errors raised while reading construction-time
                values (token decimals, initial exchange rates).
        """
        opened: list[Callable[[], None]] = []
        try:
            return self._build(config, opened)
        except Exception:
            for close in reversed(opened):
                try:
                    close()
                except Exception as e:
                    logger.warning(f"Failed to close adapter of {config.symbol}: {e}")
            raise

    def _build(self, config: AssetConfig, opened: list[Callable[[], None]]) -> Asset:
        settings = self._settings
        feed = self.build_feed(config.feed)
        opened.append(feed.close)
        oracle_timeout = timedelta(
            seconds=config.oracle_timeout_seconds or settings.oracle_timeout_seconds
        )
        oracle = PriceOracleAdapter(
            symbol=config.symbol,
            feed=feed,
            oracle_timeout=oracle_timeout,
            fallback_price=(
                Fix.from_decimal(config.fallback_price)
                if config.fallback_price is not None
                else None
            ),
        )
        max_trade_volume = Fix.from_decimal(
            config.max_trade_volume
            if config.max_trade_volume is not None
            else settings.default_max_trade_volume
        )
        reward_descriptor = None
        if config.reward is not None:
            reward_descriptor = RewardClaimDescriptor(
                target=config.reward.target,
                reward_token=self.build_token(config.reward.reward_token),
                function_signature=config.reward.function_signature,
            )

        common = dict(
            symbol=config.symbol,
            token=self.build_token(config.erc20),
            oracle=oracle,
            decimals=config.decimals,
            max_trade_volume=max_trade_volume,
            reward_descriptor=reward_descriptor,
            events=self._events,
        )
        if config.kind == "asset":
            return Asset(**common)

        delay_seconds = (
            config.delay_until_default_seconds
            if config.delay_until_default_seconds is not None
            else settings.delay_until_default_seconds
        )
        collateral = dict(
            common,
            target_name=config.target_name,
            delay_until_default=timedelta(seconds=delay_seconds),
        )
        if config.kind == "self_referential":
            return SelfReferentialCollateral(**collateral)

        threshold = Fix.from_decimal(
            config.default_threshold
            if config.default_threshold is not None
            else settings.default_threshold
        )
        target_oracle = None
        if config.price_per_target_feed is not None:
            target_feed = self.build_feed(config.price_per_target_feed)
            opened.append(target_feed.close)
            target_oracle = PriceOracleAdapter(
                symbol=config.target_name,
                feed=target_feed,
                oracle_timeout=oracle_timeout,
            )

        if config.kind == "appreciating":
            rate_source = self.build_rate_source(config)
            opened.append(rate_source.close)
            return AppreciatingCollateral(
                **collateral,
                default_threshold=threshold,
                rate_source=rate_source,
                target_oracle=target_oracle,
            )
        return FiatCollateral(
            **collateral,
            default_threshold=threshold,
            target_oracle=target_oracle,
        )


def create_default_registry(
    settings: Settings,
    events: EventLog,
    web3: Web3,
    configs: Optional[list[AssetConfig]] = None,
    http_client: Optional[httpx.Client] = None,
) -> AssetRegistry:
    """Create a registry holding every configured asset.

    Factory function that reads AssetConfig entries (from
    ``settings.assets_config_path`` unless given) and admits each one.
    An asset that fails to build is logged and skipped so one broken
    feed cannot keep the rest of the basket offline.

    Args:
        settings: Application settings.
        events: Event log shared by all assets.
        web3: Connected web3 instance.
        configs: Asset configurations; read from the settings path if None.
        http_client: Optional shared client for HTTP feeds.

    Returns:
        Configured AssetRegistry instance.
    """
    if configs is None:
        if not settings.assets_config_path:
            logger.warning("No assets_config_path configured; starting with an empty registry")
            configs = []
        else:
            configs = load_asset_configs(settings.assets_config_path)

    factory = AssetFactory(web3, settings, events, http_client=http_client)
    registry = AssetRegistry()
    for config in configs:
        try:
            asset = factory.build(config)
        except Exception as e:
            logger.error(f"Failed to build asset {config.symbol}: {e}")
            continue
        try:
            registry.register(asset)
        except InvalidAssetConfigError as e:
            logger.error(f"Failed to admit asset {config.symbol}: {e.message}")
            asset.dispose()
    logger.info(f"Asset registry ready with {len(registry)} assets")
    return registry
