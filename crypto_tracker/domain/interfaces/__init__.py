"""Domain interfaces for external collaborators."""

from .portfolio_repository import PortfolioRepository
from .price_provider import PriceProvider

__all__ = ["PortfolioRepository", "PriceProvider"]
