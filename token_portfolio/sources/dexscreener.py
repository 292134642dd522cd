"""DexScreener market-data client."""
from __future__ import annotations

import logging
import ssl
from typing import Any
from urllib.parse import quote

import aiohttp
import certifi

from ..config import DexScreenerConfig
from ..errors import MarketDataError
from ..models import TradingPair

logger = logging.getLogger(__name__)


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_pair(raw: dict[str, Any]) -> TradingPair:
    """Convert one DexScreener pair object into a :class:`TradingPair`."""
    base = raw.get("baseToken") or {}
    price_change = raw.get("priceChange") or {}
    liquidity = raw.get("liquidity") or {}

    price = raw.get("priceUsd")
    return TradingPair(
        base_symbol=str(base.get("symbol") or ""),
        base_name=str(base.get("name") or ""),
        price_usd=None if price is None else str(price),
        change_24h=_optional_float(price_change.get("h24")),
        liquidity_usd=_optional_float(liquidity.get("usd")),
        pair_address=str(raw.get("pairAddress") or ""),
        chain_id=str(raw.get("chainId") or ""),
        dex_id=str(raw.get("dexId") or ""),
    )


class DexScreenerClient:
    """Look up trading pairs on DexScreener."""

    def __init__(self, config: DexScreenerConfig) -> None:
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.request_timeout

    async def _get(self, url: str) -> dict[str, Any]:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.get(
                url, timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                if response.status != 200:
                    raise MarketDataError(
                        f"DexScreener request failed: HTTP {response.status}"
                    )
                data = await response.json()

        if not isinstance(data, dict):
            raise MarketDataError("DexScreener returned a malformed payload")
        return data

    def _parse_pairs(self, data: dict[str, Any]) -> list[TradingPair]:
        raw_pairs = data.get("pairs") or []
        if not isinstance(raw_pairs, list):
            raise MarketDataError("DexScreener 'pairs' is not a list")
        return [parse_pair(p) for p in raw_pairs if isinstance(p, dict)]

    async def search_by_symbol(self, symbol: str) -> list[TradingPair]:
        """Search trading pairs matching ``symbol``."""
        url = f"{self.base_url}/search?q={quote(symbol)}"
        pairs = self._parse_pairs(await self._get(url))
        logger.debug("DexScreener search %s returned %d pairs", symbol, len(pairs))
        return pairs

    async def get_pairs_by_address(self, address: str) -> list[TradingPair]:
        """Fetch trading pairs for a token contract address."""
        url = f"{self.base_url}/tokens/{quote(address)}"
        pairs = self._parse_pairs(await self._get(url))
        logger.debug("DexScreener token %s returned %d pairs", address, len(pairs))
        return pairs
