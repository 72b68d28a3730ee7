"""File-backed stores."""

from .portfolio_store import PortfolioStore, parse_portfolio, serialize_portfolio

__all__ = ["PortfolioStore", "parse_portfolio", "serialize_portfolio"]
