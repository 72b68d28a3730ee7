"""Portfolio persistence interface."""

from __future__ import annotations
from abc import ABC, abstractmethod

from ...models.portfolio import PortfolioConfig


class PortfolioRepository(ABC):
    """Loads the portfolio at startup and saves it after each edit."""

    @abstractmethod
    def load(self) -> PortfolioConfig:
        """
        Raises:
            ConfigurationError: If the portfolio cannot be read or parsed.
        """
        pass

    @abstractmethod
    def save(self, config: PortfolioConfig) -> None:
        """
        Raises:
            PersistenceError: If the portfolio cannot be written.
        """
        pass
