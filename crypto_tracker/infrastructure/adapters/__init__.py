"""Provider adapters."""

from .coinmarketcap import CoinMarketCapClient

__all__ = ["CoinMarketCapClient"]
