"""Market-data sources."""
from .dexscreener import DexScreenerClient, parse_pair

__all__ = ["DexScreenerClient", "parse_pair"]
