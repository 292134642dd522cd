"""Valuation aggregator — prices a set of holdings concurrently."""
from __future__ import annotations

import asyncio
import logging

from ..errors import PriceError
from ..levels import level_info
from ..models import Holding, PricedHolding, QuoteStatus, Valuation
from .price_resolver import PriceResolver

logger = logging.getLogger(__name__)


class ValuationAggregator:
    """Sum the USD value of holdings and derive the portfolio level."""

    def __init__(self, resolver: PriceResolver) -> None:
        self._resolver = resolver

    async def _price_holding(self, holding: Holding) -> PricedHolding:
        try:
            resolved = await self._resolver.lookup(holding.ticker)
        except PriceError as e:
            logger.warning(
                "Failed to fetch price for %s, valuing at 0: %s", holding.ticker, e
            )
            return PricedHolding(
                ticker=holding.ticker,
                amount=holding.amount,
                unit_price=0.0,
                holdings_value=0.0,
                status=QuoteStatus.UNAVAILABLE,
                error=str(e),
            )

        unit_price = resolved.quote.price_usd
        return PricedHolding(
            ticker=holding.ticker,
            amount=holding.amount,
            unit_price=unit_price,
            holdings_value=holding.amount * unit_price,
            status=resolved.status,
        )

    async def valuate(
        self, holdings: list[Holding]
    ) -> tuple[float, list[PricedHolding]]:
        """Price every holding concurrently.

        A failed lookup yields a zero-valued holding flagged ``UNAVAILABLE``
        and never aborts the others. The result keeps the input order.
        """
        if not holdings:
            return 0.0, []

        priced = list(
            await asyncio.gather(*(self._price_holding(h) for h in holdings))
        )
        total = sum(p.holdings_value for p in priced)
        return total, priced

    async def evaluate(self, holdings: list[Holding]) -> Valuation:
        """Price holdings and attach the level derived from the total."""
        total, priced = await self.valuate(holdings)
        return Valuation(
            total_value=total,
            holdings=tuple(priced),
            level_info=level_info(total),
        )
