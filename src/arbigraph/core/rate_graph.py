"""Live exchange-rate graph."""
from typing import Dict, Iterator, Optional, Tuple
from arbigraph.models import ConversionEdge, GraphSnapshot
from arbigraph.utils import is_valid_rate, log_weight
from arbigraph.infrastructure.error_handling import InvalidRate


class RateGraph:
    """Directed graph of currencies keyed by (from, to).

    Every upsert writes a pair's forward edge and its inverse together.
    The latest rate for a pair replaces the previous one; nothing is
    ever evicted.
    """

    def __init__(self):
        """Initialise an empty graph."""
        # dict used as an insertion-ordered set
        self._vertices: Dict[str, None] = {}
        self._edges: Dict[Tuple[str, str], ConversionEdge] = {}

    def upsert(self, from_currency: str, to_currency: str, rate: float):
        """Insert or overwrite the edge for a pair and its inverse."""
        if from_currency == to_currency:
            raise InvalidRate(
                f"Cannot convert {from_currency} into itself", symbol=from_currency
            )
        if not is_valid_rate(rate):
            raise InvalidRate(
                f"Rejected rate {rate!r} for {from_currency}->{to_currency}",
                symbol=f"{from_currency}{to_currency}",
            )

        inverse_rate = 1.0 / rate
        if not is_valid_rate(inverse_rate):
            # subnormal rates overflow on inversion
            raise InvalidRate(
                f"Rate {rate!r} for {from_currency}->{to_currency} has no finite inverse",
                symbol=f"{from_currency}{to_currency}",
            )

        weight = log_weight(rate)
        forward = ConversionEdge(from_currency, to_currency, float(rate), weight)
        # exact negation keeps a pair's round trip at zero weight
        inverse = ConversionEdge(to_currency, from_currency, inverse_rate, -weight)

        self._vertices.setdefault(from_currency, None)
        self._vertices.setdefault(to_currency, None)
        self._edges[forward.pair] = forward
        self._edges[inverse.pair] = inverse

    def get_edge(self, from_currency: str, to_currency: str) -> Optional[ConversionEdge]:
        return self._edges.get((from_currency, to_currency))

    def vertices(self) -> Tuple[str, ...]:
        return tuple(self._vertices)

    def snapshot_edges(self) -> Tuple[ConversionEdge, ...]:
        """Current edge set as an immutable tuple."""
        return tuple(self._edges.values())

    def snapshot(self) -> GraphSnapshot:
        """Consistent read-only view for the cycle detector."""
        return GraphSnapshot(vertices=self.vertices(), edges=self.snapshot_edges())

    def vertex_count(self) -> int:
        return len(self._vertices)

    def edge_count(self) -> int:
        return len(self._edges)

    def __contains__(self, currency: object) -> bool:
        return currency in self._vertices

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[ConversionEdge]:
        return iter(self.snapshot_edges())
