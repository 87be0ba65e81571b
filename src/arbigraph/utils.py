"""Utility functions for Arbigraph."""
import math
from typing import Iterable, Sequence


def format_percentage(value: float, decimals: int = 4) -> str:
    """Format percentage value."""
    return f"{value:.{decimals}f}%"


def format_path(path: Sequence[str]) -> str:
    """Format conversion path for display."""
    return " → ".join(path)


def is_valid_rate(rate: float) -> bool:
    """Rates must be finite and strictly positive."""
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        return False
    return math.isfinite(rate) and rate > 0


def log_weight(rate: float) -> float:
    """Edge weight for a conversion rate; a negative cycle means profit."""
    return -math.log(rate)


def compound_rate(rates: Iterable[float]) -> float:
    """Calculate compound rate through a chain of conversions."""
    rate = 1.0
    for r in rates:
        rate *= r
    return rate
