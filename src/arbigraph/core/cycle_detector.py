"""Negative-cycle detection over the rate graph."""
import math
from typing import Dict, List, Optional, Tuple
from loguru import logger
from arbigraph.models import (
    ArbitrageCycle, ConversionEdge, DetectionResult, GraphSnapshot, NoArbitrage
)

# stands in for the virtual source vertex; never a currency code
_SOURCE = object()

_Relaxation = Tuple[object, str, float, Optional[ConversionEdge]]


class CycleDetector:
    """Bellman-Ford over -ln(rate) weights with a virtual source.

    The virtual source has a zero-weight edge to every currency, so one
    pass covers every component of the graph. A cycle is reported only if
    its compound rate is strictly greater than 1.
    """

    def __init__(self, tolerance: float = 1e-12):
        """
        Initialise the detector.

        Args:
            tolerance: How far a relaxation must improve a distance to
                count. Absorbs rounding in cross rates that are equal on
                paper, e.g. 0.05 * 50000 against 2500.
        """
        if not math.isfinite(tolerance) or tolerance < 0:
            raise ValueError(f"tolerance must be finite and >= 0, got {tolerance}")
        self.tolerance = tolerance

    def detect(self, snapshot: GraphSnapshot) -> DetectionResult:
        """Return one arbitrage cycle in the snapshot, or NoArbitrage."""
        vertices = self._collect_vertices(snapshot)
        if not vertices or not snapshot.edges:
            return NoArbitrage()

        relaxations: List[_Relaxation] = [(_SOURCE, v, 0.0, None) for v in vertices]
        relaxations.extend(
            (edge.from_currency, edge.to_currency, edge.weight, edge)
            for edge in snapshot.edges
        )

        dist: Dict[object, float] = {v: math.inf for v in vertices}
        dist[_SOURCE] = 0.0
        # edge used to reach each vertex; None means the virtual source
        pred: Dict[str, Optional[ConversionEdge]] = {}

        # |V| real vertices plus the source: |V| rounds
        for _ in range(len(vertices)):
            changed = False
            for u, v, w, edge in relaxations:
                candidate = dist[u] + w
                if self._improves(candidate, dist[v]):
                    dist[v] = candidate
                    pred[v] = edge
                    changed = True
            if not changed:
                return NoArbitrage()

        for edge in snapshot.edges:
            candidate = dist[edge.from_currency] + edge.weight
            if self._improves(candidate, dist[edge.to_currency]):
                pred[edge.to_currency] = edge
                return self._reconstruct(edge.to_currency, pred, len(vertices))

        return NoArbitrage()

    def _improves(self, candidate: float, current: float) -> bool:
        # NaN and inf never count as an improvement
        return math.isfinite(candidate) and candidate < current - self.tolerance

    @staticmethod
    def _collect_vertices(snapshot: GraphSnapshot) -> Tuple[str, ...]:
        seen: Dict[str, None] = dict.fromkeys(snapshot.vertices)
        for edge in snapshot.edges:
            seen.setdefault(edge.from_currency, None)
            seen.setdefault(edge.to_currency, None)
        return tuple(seen)

    def _reconstruct(
        self,
        start: str,
        pred: Dict[str, Optional[ConversionEdge]],
        vertex_count: int,
    ) -> DetectionResult:
        """Walk predecessors back from `start` until a currency repeats."""
        walked: List[ConversionEdge] = []
        position: Dict[str, int] = {}
        current = start

        # vertex_count + 1 visits must revisit some currency
        for _ in range(vertex_count + 1):
            if current in position:
                cycle_edges = walked[position[current]:]
                cycle_edges.reverse()
                return self._to_cycle(cycle_edges)

            edge = pred.get(current)
            if edge is None:
                logger.warning(f"Predecessor walk from {start} reached the virtual source")
                return NoArbitrage()

            position[current] = len(walked)
            walked.append(edge)
            current = edge.from_currency

        logger.warning(f"No cycle closed within {vertex_count + 1} steps from {start}")
        return NoArbitrage()

    def _to_cycle(self, edges: List[ConversionEdge]) -> DetectionResult:
        currencies = tuple(e.from_currency for e in edges) + (edges[-1].to_currency,)
        cycle = ArbitrageCycle(
            currencies=currencies,
            rates=tuple(e.rate for e in edges),
        )

        if cycle.hops < 2 or not cycle.product > 1.0:
            logger.debug(f"Discarding non-profitable cycle {cycle}")
            return NoArbitrage()

        return cycle
