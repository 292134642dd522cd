"""Protocol interfaces for the token portfolio tracker."""
from .holdings_source import HoldingsSource
from .market_data import MarketDataSource

__all__ = ["HoldingsSource", "MarketDataSource"]
