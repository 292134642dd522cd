"""Holding validation and the config-backed holdings source."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .models import Holding

if TYPE_CHECKING:
    from .config import AppConfig
    from .services.price_resolver import PriceResolver

logger = logging.getLogger(__name__)


def validate_holding(ticker: Any, amount: Any) -> Holding:
    """Build a :class:`Holding` from raw input, raising ``ValueError`` if invalid.

    The ticker is stripped and upper-cased; the amount must be a number > 0.
    """
    ticker = str(ticker).strip() if ticker is not None else ""
    if not ticker or amount is None or amount == "":
        raise ValueError("Token ticker and amount are required")

    try:
        value = float(amount)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Token amount must be a number, got {amount!r}") from e

    if not value > 0:
        raise ValueError("Token amount must be greater than 0")

    return Holding(ticker=ticker.upper(), amount=value)


async def verify_ticker(resolver: PriceResolver, ticker: str) -> str:
    """Confirm ``ticker`` resolves to a price and return the token's name.

    Raises the resolver's ``PriceError`` when the ticker cannot be priced.
    """
    quote = await resolver.resolve(ticker)
    return quote.display_name or ticker.upper()


class ConfigHoldingsSource:
    """Serve holdings from the ``portfolios`` section of the config."""

    def __init__(self, config: AppConfig) -> None:
        self._portfolios: dict[str, list[Holding]] = {}
        for portfolio in config.portfolios:
            self._portfolios[portfolio.label] = [
                validate_holding(h.ticker, h.amount) for h in portfolio.holdings
            ]

    @property
    def labels(self) -> list[str]:
        return list(self._portfolios)

    async def fetch_holdings(self, portfolio: str) -> list[Holding]:
        if portfolio not in self._portfolios:
            raise KeyError(
                f"Unknown portfolio '{portfolio}' "
                f"(known: {', '.join(self.labels) or 'none'})"
            )
        holdings = list(self._portfolios[portfolio])
        logger.debug("Loaded %d holdings for portfolio %s", len(holdings), portfolio)
        return holdings
