"""Applies tick batches to the rate graph and runs detection."""
import re
from typing import AsyncIterable, Callable, Iterable, Optional
from loguru import logger
from arbigraph.models import (
    ArbitrageCycle, BatchOutcome, DetectionResult, NoArbitrage, ProcessorStats, Tick
)
from arbigraph.core.symbols import SymbolNormalizer
from arbigraph.core.rate_graph import RateGraph
from arbigraph.core.cycle_detector import CycleDetector
from arbigraph.infrastructure.error_handling import (
    ErrorHandler, InvalidPrice, InvalidRate, InvalidSymbol, TickError
)
from arbigraph.infrastructure.performance import PerformanceMonitor

ResultSink = Callable[[DetectionResult], None]

# plain decimal or exponent form; nan and inf parse here and fail as rates later
_PRICE_RE = re.compile(
    r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:nan|inf|infinity)",
    re.IGNORECASE,
)


class UpdateProcessor:
    """Sole writer of the rate graph.

    Each batch runs normalize -> upsert -> detect to completion without
    yielding, so every detection pass sees a fully applied batch.
    """

    def __init__(
        self,
        normalizer: SymbolNormalizer,
        graph: Optional[RateGraph] = None,
        detector: Optional[CycleDetector] = None,
        sink: Optional[ResultSink] = None,
        performance: Optional[PerformanceMonitor] = None,
    ):
        """Initialise the processor; a fresh graph is created if none is given."""
        self.normalizer = normalizer
        self._graph = graph if graph is not None else RateGraph()
        self.detector = detector or CycleDetector()
        self.sink = sink
        self.performance = performance or PerformanceMonitor()
        self.errors = ErrorHandler()
        self.stats = ProcessorStats()

    @property
    def graph(self) -> RateGraph:
        return self._graph

    def process_batch(self, ticks: Iterable[Tick]) -> BatchOutcome:
        """Apply every tick, then detect once and emit the result."""
        with self.performance.measure("process_batch") as timer:
            outcome = BatchOutcome(result=NoArbitrage())

            for tick in ticks:
                outcome.received += 1
                try:
                    self._apply(tick)
                except TickError as e:
                    self._record_skip(outcome, e)
                else:
                    outcome.applied += 1

            with self.performance.measure("detect_cycle"):
                outcome.result = self.detector.detect(self._graph.snapshot())

        self.performance.record_batch(
            outcome.received, self._graph.vertex_count(), self._graph.edge_count()
        )

        outcome.duration = timer.duration
        self._update_stats(outcome)
        self._emit(outcome.result)
        return outcome

    async def run(self, batches: AsyncIterable[Iterable[Tick]]) -> int:
        """Process batches from an async source until it is exhausted."""
        processed = 0
        async for batch in batches:
            self.process_batch(batch)
            processed += 1
        logger.info(f"Batch source exhausted after {processed} batches")
        return processed

    @property
    def error_counts(self) -> dict:
        return self.errors.get_error_stats()['error_types']

    def _apply(self, tick: Tick):
        base, quote = self.normalizer.normalize(tick.symbol)
        rate = self._parse_price(tick)
        self._graph.upsert(base, quote, rate)

    @staticmethod
    def _parse_price(tick: Tick) -> float:
        price = tick.last_price
        if not isinstance(price, str) or not _PRICE_RE.fullmatch(price):
            raise InvalidPrice(
                f"Unparseable price {price!r} for {tick.symbol}", symbol=tick.symbol
            )
        return float(price)

    def _record_skip(self, outcome: BatchOutcome, error: TickError):
        self.errors.record_error(error.kind)
        if isinstance(error, InvalidSymbol):
            outcome.invalid_symbol += 1
        elif isinstance(error, InvalidPrice):
            outcome.invalid_price += 1
        elif isinstance(error, InvalidRate):
            outcome.invalid_rate += 1
        logger.debug(f"Skipped tick: {error}")

    def _update_stats(self, outcome: BatchOutcome):
        stats = self.stats
        stats.batches += 1
        stats.ticks_received += outcome.received
        stats.ticks_applied += outcome.applied
        stats.invalid_symbol += outcome.invalid_symbol
        stats.invalid_price += outcome.invalid_price
        stats.invalid_rate += outcome.invalid_rate

        if isinstance(outcome.result, ArbitrageCycle):
            stats.cycles_found += 1
            stats.last_cycle = outcome.result
            logger.success(f"Arbitrage cycle: {outcome.result}")
        elif outcome.skipped:
            logger.debug(
                f"Batch {stats.batches}: applied {outcome.applied}/{outcome.received}, "
                f"skipped {outcome.skipped}"
            )

    def _emit(self, result: DetectionResult):
        if self.sink is not None:
            self.sink(result)
