"""Price resolver — cache-fronted price lookup with stale-on-failure fallback."""
from __future__ import annotations

import logging
import math

from ..cache import TTLCache
from ..errors import PriceUnavailableError, TokenNotFoundError
from ..interfaces.market_data import MarketDataSource
from ..models import (
    LookupKey,
    PriceQuote,
    QuoteStatus,
    ResolvedQuote,
    TokenAddress,
    TradingPair,
)

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30.0


def _cache_key(key: LookupKey) -> str:
    if isinstance(key, TokenAddress):
        if not key.chain_id or not key.address:
            raise ValueError("Chain ID and contract address are required")
        return key.cache_key
    ticker = key.strip().upper()
    if not ticker:
        raise ValueError("Token ticker is required")
    return ticker


def _parse_price(raw: str | None) -> float:
    try:
        price = float(raw) if raw is not None else 0.0
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def select_best_pair(ticker: str, pairs: list[TradingPair]) -> TradingPair | None:
    """Return the most liquid pair whose base symbol matches ``ticker``.

    Matching is case-insensitive. Ties go to the first pair encountered.
    """
    wanted = ticker.lower()
    best: TradingPair | None = None
    for pair in pairs:
        if pair.base_symbol.lower() != wanted:
            continue
        if best is None or (pair.liquidity_usd or 0.0) > (best.liquidity_usd or 0.0):
            best = pair
    return best


def to_quote(pair: TradingPair) -> PriceQuote:
    """Normalize a trading pair into a :class:`PriceQuote`."""
    return PriceQuote(
        symbol=pair.base_symbol,
        display_name=pair.base_name,
        price_usd=_parse_price(pair.price_usd),
        change_24h_pct=pair.change_24h or 0.0,
        liquidity_usd=pair.liquidity_usd or 0.0,
        source_pair_id=pair.pair_address,
        chain_id=pair.chain_id,
        dex_id=pair.dex_id,
    )


class PriceResolver:
    """Resolve tickers and contract addresses to USD quotes.

    The cache is the first line of defence against upstream rate limits: a
    fresh entry is served without a network call, and when the upstream
    fails an expired entry is served instead of an error.
    """

    def __init__(
        self,
        source: MarketDataSource,
        cache: TTLCache[str, PriceQuote],
        ttl: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._source = source
        self._cache = cache
        self._ttl = ttl

    async def _fetch(self, key: LookupKey, cache_key: str) -> PriceQuote:
        if isinstance(key, TokenAddress):
            pairs = await self._source.get_pairs_by_address(key.address)
            if not pairs:
                raise TokenNotFoundError(
                    cache_key, f"Token not found at address {key.address}"
                )
            return to_quote(pairs[0])

        pairs = await self._source.search_by_symbol(cache_key)
        if not pairs:
            raise TokenNotFoundError(cache_key)
        best = select_best_pair(cache_key, pairs)
        if best is None:
            raise TokenNotFoundError(
                cache_key, f"No matching pairs found for {cache_key}"
            )
        return to_quote(best)

    async def lookup(self, key: LookupKey) -> ResolvedQuote:
        """Resolve ``key`` and report whether the value is fresh or stale.

        Raises:
            TokenNotFoundError: upstream has no match and nothing is cached.
                Kept distinct from ``PriceUnavailableError`` so callers can
                report an unknown ticker instead of a transient failure; both
                derive from ``PriceError``.
            PriceUnavailableError: upstream failed and nothing is cached.
        """
        cache_key = _cache_key(key)

        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Price for %s from cache: %s", cache_key, cached.price_usd)
            return ResolvedQuote(quote=cached, status=QuoteStatus.CACHED)

        try:
            quote = await self._fetch(key, cache_key)
        except Exception as e:
            stale = self._cache.get_stale(cache_key)
            if stale is not None:
                logger.warning(
                    "Price lookup for %s failed (%s); serving stale cached price",
                    cache_key,
                    e,
                )
                return ResolvedQuote(quote=stale, status=QuoteStatus.STALE)

            logger.error("Error fetching price for %s: %s", cache_key, e)
            if isinstance(e, TokenNotFoundError):
                raise
            raise PriceUnavailableError(cache_key, str(e) or type(e).__name__) from e

        self._cache.put(cache_key, quote, self._ttl)
        logger.info("Price for %s: %s", cache_key, quote.price_usd)
        return ResolvedQuote(quote=quote, status=QuoteStatus.FRESH)

    async def resolve(self, key: LookupKey) -> PriceQuote:
        """Resolve ``key`` to a quote, fresh or stale."""
        return (await self.lookup(key)).quote
