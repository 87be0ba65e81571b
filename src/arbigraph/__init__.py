"""
Arbigraph - streaming arbitrage detection over a live exchange-rate graph.
"""

from .config import config
from .models import (
    Tick,
    ConversionEdge,
    GraphSnapshot,
    ArbitrageCycle,
    NoArbitrage,
    DetectionResult,
    BatchOutcome,
)
from .utils import format_path, format_percentage

__version__ = "1.0.0"
__all__ = [
    "config",
    "Tick",
    "ConversionEdge",
    "GraphSnapshot",
    "ArbitrageCycle",
    "NoArbitrage",
    "DetectionResult",
    "BatchOutcome",
    "format_path",
    "format_percentage",
]
