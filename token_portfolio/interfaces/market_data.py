"""Market-data source protocol — trading pair lookup abstraction."""
from typing import Protocol

from ..models import TradingPair


class MarketDataSource(Protocol):
    """Abstract interface for looking up trading pairs."""

    async def search_by_symbol(self, symbol: str) -> list[TradingPair]: ...

    async def get_pairs_by_address(self, address: str) -> list[TradingPair]: ...
