"""Service modules"""
from .price_resolver import PriceResolver
from .tracker import PortfolioTracker
from .valuation import ValuationAggregator

__all__ = ["PriceResolver", "ValuationAggregator", "PortfolioTracker"]
