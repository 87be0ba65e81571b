"""Error types, error accounting and reconnect backoff."""
import asyncio
from typing import Callable, Optional, Type, Tuple
from functools import wraps
from loguru import logger


class ArbigraphError(Exception):
    """Base class for all engine errors."""
    pass


class TickError(ArbigraphError):
    """A single tick could not be applied. Never fatal."""

    kind = "tick_error"

    def __init__(self, message: str, symbol: Optional[str] = None):
        super().__init__(message)
        self.symbol = symbol


class InvalidSymbol(TickError):
    """Pair symbol is unparseable or names the same currency twice."""
    kind = "invalid_symbol"


class InvalidPrice(TickError):
    """Price string is not a number."""
    kind = "invalid_price"


class InvalidRate(TickError):
    """Rate is zero, negative, NaN or infinite."""
    kind = "invalid_rate"


class FeedDecodeError(ArbigraphError):
    """Raised when a feed frame cannot be decoded into ticks."""
    pass


def async_retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    max_delay: float = 60.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
):
    """
    Decorator for retrying async function with exponential backoff.
    
    Args:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds
        backoff_factor: Multiplier for delay after each retry
        max_delay: Maximum delay between retries
        exceptions: Tuple of exceptions to catch and retry
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            delay = initial_delay
            
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                
                except exceptions as e:
                    if attempt == max_retries:
                        logger.error(
                            f"{func.__name__} failed after {max_retries} retries: {e}"
                        )
                        raise
                    
                    logger.warning(
                        f"{func.__name__} failed (attempt {attempt + 1}/{max_retries}), "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    
                    await asyncio.sleep(delay)
                    delay = min(delay * backoff_factor, max_delay)
        
        return wrapper
    return decorator


class ErrorHandler:
    """Per-kind error counters."""
    
    def __init__(self):
        """Initialize error handler."""
        self.error_counts: dict[str, int] = {}
    
    def record_error(self, error_type: str):
        """Record an error occurrence."""
        self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1
    
    def get_error_stats(self) -> dict:
        """Get error statistics."""
        return {
            'total_errors': sum(self.error_counts.values()),
            'error_types': self.error_counts.copy(),
        }
