"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from token_portfolio.cache import TTLCache
from token_portfolio.config import (
    AppConfig,
    DexScreenerConfig,
    HoldingConfig,
    MonitorConfig,
    PortfolioConfig,
    PriceConfig,
)
from token_portfolio.models import PriceQuote, TradingPair
from token_portfolio.services.price_resolver import PriceResolver


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMarketData:
    """In-memory market-data source with per-key failure injection."""

    def __init__(self) -> None:
        self.symbol_pairs: dict[str, list[TradingPair]] = {}
        self.address_pairs: dict[str, list[TradingPair]] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[str] = []

    async def search_by_symbol(self, symbol: str) -> list[TradingPair]:
        self.calls.append(symbol)
        if symbol in self.failures:
            raise self.failures[symbol]
        return list(self.symbol_pairs.get(symbol, []))

    async def get_pairs_by_address(self, address: str) -> list[TradingPair]:
        self.calls.append(address)
        if address in self.failures:
            raise self.failures[address]
        return list(self.address_pairs.get(address, []))


def make_pair(
    symbol: str,
    price: str | None = "1.0",
    liquidity: float | None = 1000.0,
    pair_address: str = "0xpair",
    chain_id: str = "ethereum",
    change: float | None = 0.0,
    name: str | None = None,
) -> TradingPair:
    return TradingPair(
        base_symbol=symbol,
        base_name=name or f"{symbol} Token",
        price_usd=price,
        change_24h=change,
        liquidity_usd=liquidity,
        pair_address=pair_address,
        chain_id=chain_id,
        dex_id="uniswap",
    )


# ---------------------------------------------------------------------------
# Resolver fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> TTLCache[str, PriceQuote]:
    return TTLCache(default_ttl=30.0, clock=clock)


@pytest.fixture()
def market() -> FakeMarketData:
    source = FakeMarketData()
    source.symbol_pairs["BTC"] = [
        make_pair("BTC", price="60000.5", liquidity=5_000_000.0, pair_address="0xbtc"),
    ]
    source.symbol_pairs["ETH"] = [
        make_pair("ETH", price="3000", liquidity=50.0, pair_address="0xeth-a"),
        make_pair("ETH", price="3010", liquidity=500.0, pair_address="0xeth-b"),
        make_pair("ETH", price="2990", liquidity=10.0, pair_address="0xeth-c"),
    ]
    return source


@pytest.fixture()
def resolver(
    market: FakeMarketData, cache: TTLCache[str, PriceQuote]
) -> PriceResolver:
    return PriceResolver(market, cache, ttl=30.0)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_app_config() -> AppConfig:
    return AppConfig(
        price=PriceConfig(
            cache_ttl_seconds=30.0,
            dexscreener=DexScreenerConfig(
                base_url="https://dex.example.com/latest/dex", request_timeout=5
            ),
        ),
        monitor=MonitorConfig(refresh_interval_seconds=15),
        portfolios=(
            PortfolioConfig(
                label="main",
                holdings=(
                    HoldingConfig(ticker="BTC", amount=1.0),
                    HoldingConfig(ticker="BADTICKER", amount=5.0),
                ),
            ),
            PortfolioConfig(label="empty", holdings=()),
        ),
    )


SAMPLE_YAML = textwrap.dedent("""\
    price:
      cache_ttl_seconds: 45
      dexscreener:
        base_url: "https://dex.example.com/latest/dex"
        request_timeout: 7
    monitor:
      refresh_interval_seconds: 120
    portfolios:
      - label: main
        holdings:
          - {ticker: btc, amount: 0.5}
          - {ticker: ETH, amount: 2}
      - label: alt
        holdings: []
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Sample DexScreener payloads
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_search_payload() -> dict:
    return {
        "schemaVersion": "1.0.0",
        "pairs": [
            {
                "chainId": "ethereum",
                "dexId": "uniswap",
                "pairAddress": "0xpair1",
                "baseToken": {"address": "0xt", "name": "Pepe", "symbol": "PEPE"},
                "priceUsd": "0.00001234",
                "priceChange": {"h24": -3.5},
                "liquidity": {"usd": 1500000.5},
            },
            {
                "chainId": "bsc",
                "dexId": "pancakeswap",
                "pairAddress": "0xpair2",
                "baseToken": {"address": "0xu", "name": "Not Pepe", "symbol": "NPEPE"},
                "priceUsd": "0.5",
            },
        ],
    }
