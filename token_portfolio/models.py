"""Data models — all frozen (immutable)."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class TradingPair:
    """Single market listing as reported by the market-data source."""

    base_symbol: str
    base_name: str
    price_usd: str | None
    change_24h: float | None
    liquidity_usd: float | None
    pair_address: str
    chain_id: str
    dex_id: str = ""


@dataclass(frozen=True)
class TokenAddress:
    """Contract address lookup key."""

    chain_id: str
    address: str

    @property
    def cache_key(self) -> str:
        return f"{self.chain_id}:{self.address}"


LookupKey = Union[str, TokenAddress]


@dataclass(frozen=True)
class PriceQuote:
    """Normalized USD price for one token."""

    symbol: str
    display_name: str
    price_usd: float
    change_24h_pct: float = 0.0
    liquidity_usd: float = 0.0
    source_pair_id: str = ""
    chain_id: str = ""
    dex_id: str = ""


class QuoteStatus(str, Enum):
    """Where a price came from."""

    FRESH = "fresh"
    CACHED = "cached"
    STALE = "stale"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ResolvedQuote:
    """Quote plus the freshness of the value that was served."""

    quote: PriceQuote
    status: QuoteStatus

    @property
    def stale(self) -> bool:
        return self.status is QuoteStatus.STALE


@dataclass(frozen=True)
class Holding:
    """Amount of a token held by the user."""

    ticker: str
    amount: float

    def __post_init__(self) -> None:
        if not self.ticker or not self.ticker.strip():
            raise ValueError("Token ticker is required")
        if not self.amount > 0 or math.isinf(self.amount):
            raise ValueError("Token amount must be greater than 0")


@dataclass(frozen=True)
class PricedHolding:
    """Holding enriched with its unit price and USD value."""

    ticker: str
    amount: float
    unit_price: float
    holdings_value: float
    status: QuoteStatus = QuoteStatus.FRESH
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.status in (QuoteStatus.STALE, QuoteStatus.UNAVAILABLE)


@dataclass(frozen=True)
class LevelInfo:
    """Level derived from total portfolio value."""

    level: int
    current_threshold: float
    next_threshold: float
    progress_pct: float
    total_value: float


@dataclass(frozen=True)
class Valuation:
    """Result of one valuation pass."""

    total_value: float
    holdings: tuple[PricedHolding, ...]
    level_info: LevelInfo

    @property
    def degraded(self) -> tuple[str, ...]:
        """Tickers whose price is stale or could not be resolved."""
        return tuple(h.ticker for h in self.holdings if h.degraded)

    @property
    def unavailable(self) -> tuple[str, ...]:
        """Tickers valued at 0 because the price lookup failed."""
        return tuple(
            h.ticker for h in self.holdings if h.status is QuoteStatus.UNAVAILABLE
        )
