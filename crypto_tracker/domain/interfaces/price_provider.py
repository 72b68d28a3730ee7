"""Price provider interface for dependency injection."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Sequence

from ...models.market_data import FearGreedPoint, MarketSnapshot


class PriceProvider(ABC):
    """Interface for market data sources (CoinMarketCap, test fakes)."""

    @abstractmethod
    def fetch_prices(self, api_key: str, token_names: Sequence[str]) -> MarketSnapshot:
        """
        Fetch the latest quotes for the given token names.

        Args:
            api_key: Provider API key.
            token_names: Names as configured by the user (provider slugs).

        Returns:
            A complete snapshot. Names the provider does not know are omitted.

        Raises:
            PriceFetchError: On transport, provider or decoding failure.
        """
        pass

    @abstractmethod
    def fetch_fear_greed(self, api_key: str, limit: int) -> List[FearGreedPoint]:
        """
        Fetch fear & greed index history, newest first.

        Raises:
            PriceFetchError: On transport, provider or decoding failure.
        """
        pass
