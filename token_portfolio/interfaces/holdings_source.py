"""Holdings source protocol — where a user's holdings come from."""
from typing import Protocol

from ..models import Holding


class HoldingsSource(Protocol):
    """Abstract interface for fetching the holdings of a portfolio."""

    async def fetch_holdings(self, portfolio: str) -> list[Holding]: ...
