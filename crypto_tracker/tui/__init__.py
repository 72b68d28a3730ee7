"""Terminal dashboard (Textual)."""

from .app import CryptoTrackerApp

__all__ = ["CryptoTrackerApp"]
