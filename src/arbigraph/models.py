"""Data models for the rate graph and cycle detection."""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple, Union
from arbigraph.utils import compound_rate, format_path, log_weight


@dataclass(frozen=True)
class Tick:
    """One raw price update for a currency pair."""
    symbol: str
    last_price: str


@dataclass(frozen=True)
class ConversionEdge:
    """One unit of from_currency converts to `rate` units of to_currency."""
    from_currency: str
    to_currency: str
    rate: float
    weight: float  # -ln(rate)

    @property
    def pair(self) -> Tuple[str, str]:
        return self.from_currency, self.to_currency


@dataclass(frozen=True)
class GraphSnapshot:
    """Read-only view of the rate graph at one instant."""
    vertices: Tuple[str, ...] = ()
    edges: Tuple[ConversionEdge, ...] = ()

    @classmethod
    def from_rates(cls, rates: Iterable[Tuple[str, str, float]]) -> "GraphSnapshot":
        """Build a snapshot from (from, to, rate) triples, no inverses added."""
        edges = tuple(
            ConversionEdge(u, v, float(r), log_weight(r)) for u, v, r in rates
        )
        vertices: Dict[str, None] = {}
        for edge in edges:
            vertices.setdefault(edge.from_currency, None)
            vertices.setdefault(edge.to_currency, None)
        return cls(vertices=tuple(vertices), edges=edges)

    def vertex_count(self) -> int:
        return len(self.vertices)

    def edge_count(self) -> int:
        return len(self.edges)


@dataclass(frozen=True)
class ArbitrageCycle:
    """Represents a detected arbitrage cycle."""
    currencies: Tuple[str, ...]  # e.g. ('USDT', 'BTC', 'ETH', 'USDT')
    rates: Tuple[float, ...]

    @property
    def hops(self) -> int:
        """Number of conversions along the cycle."""
        return len(self.currencies) - 1

    @property
    def product(self) -> float:
        """Compound conversion rate around the cycle."""
        return compound_rate(self.rates)

    @property
    def profit_percentage(self) -> float:
        return (self.product - 1.0) * 100

    def __str__(self) -> str:
        """String representation of the cycle."""
        path_str = format_path(self.currencies)
        return f"{path_str} | Profit: {self.profit_percentage:.4f}%"


@dataclass(frozen=True)
class NoArbitrage:
    """Detection pass that found no negative cycle."""

    def __str__(self) -> str:
        return "no arbitrage"


DetectionResult = Union[ArbitrageCycle, NoArbitrage]


@dataclass
class BatchOutcome:
    """Result of applying one batch of ticks."""
    result: DetectionResult
    received: int = 0
    applied: int = 0
    invalid_symbol: int = 0
    invalid_price: int = 0
    invalid_rate: int = 0
    duration: float = 0.0

    @property
    def skipped(self) -> int:
        return self.invalid_symbol + self.invalid_price + self.invalid_rate

    @property
    def found_cycle(self) -> bool:
        return isinstance(self.result, ArbitrageCycle)


@dataclass
class ProcessorStats:
    """Cumulative counters kept by the update processor."""
    batches: int = 0
    ticks_received: int = 0
    ticks_applied: int = 0
    invalid_symbol: int = 0
    invalid_price: int = 0
    invalid_rate: int = 0
    cycles_found: int = 0
    last_cycle: Optional[ArbitrageCycle] = field(default=None)

    def as_dict(self) -> dict:
        """Plain dict form, used by the monitor tables."""
        return {
            'batches': self.batches,
            'ticks_received': self.ticks_received,
            'ticks_applied': self.ticks_applied,
            'invalid_symbol': self.invalid_symbol,
            'invalid_price': self.invalid_price,
            'invalid_rate': self.invalid_rate,
            'cycles_found': self.cycles_found,
        }
