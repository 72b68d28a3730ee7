"""Data models for the crypto tracker."""

from .market_data import CoinListing, FearGreedPoint, MarketSnapshot, Quote, normalize_name
from .portfolio import PortfolioConfig, TokenEntry

__all__ = [
    "CoinListing",
    "FearGreedPoint",
    "MarketSnapshot",
    "Quote",
    "normalize_name",
    "PortfolioConfig",
    "TokenEntry",
]
