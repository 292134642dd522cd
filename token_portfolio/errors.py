"""Price resolution errors."""
from __future__ import annotations


class PriceError(Exception):
    """Base class for errors surfaced by the price resolver."""

    def __init__(self, key: str, detail: str = "") -> None:
        self.key = key
        self.detail = detail
        super().__init__(detail or key)


class TokenNotFoundError(PriceError):
    """Upstream returned no matching pair for a ticker or address."""

    def __init__(self, key: str, detail: str = "") -> None:
        super().__init__(key, detail or f"Token {key} not found")


class PriceUnavailableError(PriceError):
    """Upstream failed and no cached price (fresh or stale) exists."""

    def __init__(self, key: str, detail: str = "") -> None:
        super().__init__(key, f"Unable to fetch price for {key}: {detail}")
        self.upstream_detail = detail


class MarketDataError(Exception):
    """Market-data source returned an error status or a malformed payload."""
