"""Core detection components."""

from .symbols import SymbolNormalizer
from .rate_graph import RateGraph
from .cycle_detector import CycleDetector
from .update_processor import UpdateProcessor
from .ticker_feed import TickerFeed

__all__ = [
    "SymbolNormalizer",
    "RateGraph",
    "CycleDetector",
    "UpdateProcessor",
    "TickerFeed",
]
