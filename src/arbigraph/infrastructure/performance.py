"""Timing of the batch pipeline and graph growth."""
import time
import psutil
from typing import Dict, Any
from dataclasses import dataclass, field
from collections import defaultdict, deque
from loguru import logger


@dataclass
class StageTimings:
    """Durations recorded for one pipeline stage, in seconds."""
    count: int = 0
    total: float = 0.0
    slowest: float = 0.0
    recent: deque = field(default_factory=lambda: deque(maxlen=100))

    def add(self, duration: float):
        self.count += 1
        self.total += duration
        self.slowest = max(self.slowest, duration)
        self.recent.append(duration)

    @property
    def mean_ms(self) -> float:
        return self.total / self.count * 1000 if self.count else 0.0

    @property
    def recent_ms(self) -> float:
        """Mean over the last 100 runs."""
        if not self.recent:
            return 0.0
        return sum(self.recent) / len(self.recent) * 1000


class StageTimer:
    """Context manager timing one run of a stage."""

    def __init__(self, monitor: "PerformanceMonitor", stage: str):
        self.monitor = monitor
        self.stage = stage
        self.start_time = None
        self.duration = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        self.monitor.stages[self.stage].add(self.duration)
        return False


class PerformanceMonitor:
    """Tracks stage latency, tick throughput and rate graph size."""

    def __init__(self):
        self.stages: Dict[str, StageTimings] = defaultdict(StageTimings)
        self.batches = 0
        self.ticks = 0
        self.currencies = 0
        self.edges = 0
        self.start_time = time.time()
        self.process = psutil.Process()

    def measure(self, stage: str) -> StageTimer:
        """Time a stage, e.g. ``process_batch`` or ``detect_cycle``."""
        return StageTimer(self, stage)

    def record_batch(self, ticks: int, currencies: int, edges: int):
        """Note one processed batch and the graph size after it."""
        self.batches += 1
        self.ticks += ticks
        self.currencies = currencies
        self.edges = edges

    @property
    def ticks_per_batch(self) -> float:
        return self.ticks / self.batches if self.batches else 0.0

    def get_summary(self) -> Dict[str, Any]:
        return {
            'uptime_seconds': time.time() - self.start_time,
            'batches': self.batches,
            'ticks_per_batch': self.ticks_per_batch,
            'currencies': self.currencies,
            'edges': self.edges,
            'memory_mb': self.process.memory_info().rss / 1024 / 1024,
            'stages': {
                name: {
                    'runs': timings.count,
                    'mean_ms': timings.mean_ms,
                    'recent_ms': timings.recent_ms,
                    'slowest_ms': timings.slowest * 1000,
                }
                for name, timings in self.stages.items()
            },
        }

    def log_summary(self):
        """Log performance summary."""
        summary = self.get_summary()

        logger.info("=" * 60)
        logger.info(
            f"Processed {summary['batches']} batches in {summary['uptime_seconds']:.1f}s "
            f"({summary['ticks_per_batch']:.1f} ticks/batch)"
        )
        logger.info(
            f"Rate graph: {summary['currencies']} currencies, {summary['edges']} edges, "
            f"{summary['memory_mb']:.1f} MB resident"
        )
        for stage, stats in summary['stages'].items():
            logger.info(
                f"  {stage}: {stats['runs']} runs, mean {stats['mean_ms']:.3f}ms, "
                f"slowest {stats['slowest_ms']:.3f}ms"
            )
        logger.info("=" * 60)
