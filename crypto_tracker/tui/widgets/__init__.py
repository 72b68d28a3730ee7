"""Dashboard widgets."""

from .coin_table import CoinTable
from .fear_greed_panel import FearGreedPanel
from .header import HeaderWidget
from .summary_panel import SummaryPanel

__all__ = ["CoinTable", "FearGreedPanel", "HeaderWidget", "SummaryPanel"]
