"""Portfolio tracking orchestration — wires source, cache, resolver and valuation."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from ..cache import TTLCache
from ..config import AppConfig
from ..errors import PriceError
from ..holdings import ConfigHoldingsSource, verify_ticker
from ..interfaces.holdings_source import HoldingsSource
from ..interfaces.market_data import MarketDataSource
from ..models import (
    PriceQuote,
    PricedHolding,
    QuoteStatus,
    ResolvedQuote,
    TokenAddress,
    Valuation,
)
from ..sources import DexScreenerClient
from .price_resolver import PriceResolver
from .valuation import ValuationAggregator

logger = logging.getLogger(__name__)


class PortfolioTracker:
    """Values configured portfolios and renders reports."""

    def __init__(
        self,
        config: AppConfig,
        source: MarketDataSource | None = None,
        holdings: HoldingsSource | None = None,
        cache: TTLCache[str, PriceQuote] | None = None,
    ) -> None:
        self._config = config

        self._source: MarketDataSource = source or DexScreenerClient(
            config.price.dexscreener
        )
        if cache is None:
            cache = TTLCache(default_ttl=config.price.cache_ttl_seconds)
        self._cache: TTLCache[str, PriceQuote] = cache
        self._resolver = PriceResolver(
            self._source, self._cache, ttl=config.price.cache_ttl_seconds
        )
        self._aggregator = ValuationAggregator(self._resolver)
        self._holdings: HoldingsSource = holdings or ConfigHoldingsSource(config)

    @property
    def resolver(self) -> PriceResolver:
        return self._resolver

    @property
    def default_portfolio(self) -> str:
        return self._config.portfolios[0].label

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def _holding_line(holding: PricedHolding) -> str:
        line = (
            f"  {holding.ticker}: {holding.amount:,.4f} @ ${holding.unit_price:,.6f}"
            f" = ${holding.holdings_value:,.2f}"
        )
        if holding.status is QuoteStatus.STALE:
            line += " (stale price)"
        elif holding.status is QuoteStatus.UNAVAILABLE:
            line += " (price unavailable)"
        return line

    @staticmethod
    def format_quote(resolved: ResolvedQuote) -> str:
        quote = resolved.quote
        text = (
            f"{quote.symbol} ({quote.display_name}) ${quote.price_usd:,.6f}\n"
            f"24h: {quote.change_24h_pct:+.2f}% · Liquidity: ${quote.liquidity_usd:,.0f}\n"
            f"Pair: {quote.source_pair_id} on {quote.chain_id}/{quote.dex_id}"
        )
        if resolved.stale:
            text += "\n⚠️ Upstream unavailable, showing last known price"
        return text

    def format_report(self, label: str, valuation: Valuation) -> str:
        info = valuation.level_info
        lines = [f"📊 Portfolio {label}", ""]
        if valuation.holdings:
            lines.extend(self._holding_line(h) for h in valuation.holdings)
        else:
            lines.append("  No holdings.")
        lines.extend(
            [
                "",
                f"Total: ${valuation.total_value:,.2f}",
                f"Level {info.level} · ${info.current_threshold:,.2f} → "
                f"${info.next_threshold:,.2f} · {info.progress_pct:.1f}%",
            ]
        )
        if valuation.unavailable:
            lines.append(
                "⚠️ Excluded (price unavailable): " + ", ".join(valuation.unavailable)
            )
        lines.extend(["", f"{self._now_str()} UTC"])
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Core workflows
    # ------------------------------------------------------------------

    async def price(self, ticker: str) -> ResolvedQuote:
        return await self._resolver.lookup(ticker)

    async def price_by_address(self, chain_id: str, address: str) -> ResolvedQuote:
        return await self._resolver.lookup(TokenAddress(chain_id, address))

    async def valuate_portfolio(self, label: str | None = None) -> Valuation:
        """Run one valuation pass over a portfolio's holdings."""
        label = label or self.default_portfolio
        holdings = await self._holdings.fetch_holdings(label)
        valuation = await self._aggregator.evaluate(holdings)

        info = valuation.level_info
        logger.info(
            "Portfolio %s — Total: $%.2f  Level: %d  Progress: %.1f%%",
            label,
            valuation.total_value,
            info.level,
            info.progress_pct,
        )
        for holding in valuation.holdings:
            if holding.degraded:
                logger.warning(
                    "Portfolio %s — %s price is %s",
                    label,
                    holding.ticker,
                    holding.status.value,
                )
        return valuation

    async def check_portfolio(
        self, label: str | None = None
    ) -> list[tuple[str, str | None, PriceError | None]]:
        """Confirm every ticker of a portfolio resolves to a price.

        Returns ``(ticker, display_name, error)`` per holding, in order; exactly
        one of ``display_name`` and ``error`` is set.
        """
        label = label or self.default_portfolio
        holdings = await self._holdings.fetch_holdings(label)

        async def _check(ticker: str) -> tuple[str, str | None, PriceError | None]:
            try:
                return ticker, await verify_ticker(self._resolver, ticker), None
            except PriceError as e:
                logger.warning("Portfolio %s — cannot price %s: %s", label, ticker, e)
                return ticker, None, e

        return list(await asyncio.gather(*(_check(h.ticker) for h in holdings)))

    async def run_continuous(
        self, label: str | None = None, interval_seconds: int | None = None
    ) -> None:
        """Re-value a portfolio periodically until cancelled."""
        interval = interval_seconds or self._config.monitor.refresh_interval_seconds
        label = label or self.default_portfolio
        # Unknown portfolios fail here instead of being retried forever
        await self._holdings.fetch_holdings(label)
        logger.info(
            "Starting portfolio refresh for %s (every %d seconds)", label, interval
        )

        while True:
            try:
                valuation = await self.valuate_portfolio(label)
                print(self.format_report(label, valuation), flush=True)
            except Exception as e:
                logger.error("Error in refresh loop: %s", e)
            await asyncio.sleep(interval)
