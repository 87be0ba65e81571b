"""Infrastructure components for error handling and performance monitoring."""

from .error_handling import (
    ArbigraphError,
    TickError,
    InvalidSymbol,
    InvalidPrice,
    InvalidRate,
    FeedDecodeError,
    ErrorHandler,
    async_retry_with_backoff,
)
from .performance import StageTimings, PerformanceMonitor, StageTimer

__all__ = [
    "ArbigraphError",
    "TickError",
    "InvalidSymbol",
    "InvalidPrice",
    "InvalidRate",
    "FeedDecodeError",
    "ErrorHandler",
    "async_retry_with_backoff",
    "StageTimings",
    "PerformanceMonitor",
    "StageTimer",
]
