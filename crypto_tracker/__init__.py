"""Crypto Tracker - terminal dashboard for a crypto watchlist and portfolio."""

__version__ = "0.1.0"
