"""Tests for the rate graph."""
import math
import pytest
from arbigraph.core.rate_graph import RateGraph
from arbigraph.models import ConversionEdge, GraphSnapshot
from arbigraph.infrastructure.error_handling import InvalidRate


class TestRateGraph:
    """Test suite for edge upserts and snapshots."""
    
    @pytest.fixture
    def graph(self):
        """Create empty graph."""
        return RateGraph()
    
    def test_empty_graph(self, graph):
        """Test a new graph has nothing in it."""
        assert graph.vertex_count() == 0
        assert graph.edge_count() == 0
        assert graph.snapshot_edges() == ()
        assert len(graph) == 0
    
    @pytest.mark.parametrize("rate", [50000.0, 0.05, 1.0, 2400, 1e-8, 1e12])
    def test_upsert_adds_forward_and_inverse(self, graph, rate):
        """Test both directions are stored with reciprocal rates."""
        graph.upsert("BTC", "USDT", rate)
        
        forward = graph.get_edge("BTC", "USDT")
        inverse = graph.get_edge("USDT", "BTC")
        
        assert forward.rate == rate
        assert inverse.rate == pytest.approx(1 / rate)
        assert forward.rate * inverse.rate == pytest.approx(1.0)
        assert graph.edge_count() == 2
        assert graph.vertex_count() == 2
    
    def test_edge_weights_cancel_exactly(self, graph):
        """Test a pair's round trip has exactly zero weight."""
        graph.upsert("ETH", "BTC", 0.0537)
        
        forward = graph.get_edge("ETH", "BTC")
        inverse = graph.get_edge("BTC", "ETH")
        
        assert forward.weight == pytest.approx(-math.log(0.0537))
        assert forward.weight + inverse.weight == 0.0
    
    def test_latest_tick_wins(self, graph):
        """Test upsert overwrites the previous rate."""
        graph.upsert("BTC", "USDT", 50000.0)
        graph.upsert("BTC", "USDT", 51000.0)
        
        assert graph.get_edge("BTC", "USDT").rate == 51000.0
        assert graph.get_edge("USDT", "BTC").rate == pytest.approx(1 / 51000.0)
        assert graph.edge_count() == 2
    
    def test_reverse_listing_overwrites_inverse(self, graph):
        """Test a pair quoted in the other direction replaces both edges."""
        graph.upsert("BTC", "USDT", 50000.0)
        graph.upsert("USDT", "BTC", 1 / 40000.0)
        
        assert graph.get_edge("BTC", "USDT").rate == pytest.approx(40000.0)
        assert graph.edge_count() == 2
    
    @pytest.mark.parametrize("rate", [0.0, -1.0, -0.0, math.nan, math.inf, -math.inf, 1e-320])
    def test_invalid_rate_leaves_graph_unchanged(self, graph, rate):
        """Test rejected rates never touch the edge set."""
        graph.upsert("BTC", "USDT", 50000.0)
        before = graph.snapshot()
        
        with pytest.raises(InvalidRate):
            graph.upsert("ETH", "USDT", rate)
        
        assert graph.edge_count() == 2
        assert graph.snapshot() == before
        assert "ETH" not in graph
    
    def test_non_numeric_rate_rejected(self, graph):
        """Test strings and booleans are not rates."""
        with pytest.raises(InvalidRate):
            graph.upsert("BTC", "USDT", "50000")
        with pytest.raises(InvalidRate):
            graph.upsert("BTC", "USDT", True)
        
        assert graph.edge_count() == 0
    
    def test_self_loop_rejected(self, graph):
        """Test a currency cannot convert into itself."""
        with pytest.raises(InvalidRate):
            graph.upsert("BTC", "BTC", 1.0)
        
        assert graph.edge_count() == 0
    
    def test_vertices_keep_insertion_order(self, graph):
        """Test currencies appear in first-seen order."""
        graph.upsert("BTC", "USDT", 50000.0)
        graph.upsert("ETH", "BTC", 0.05)
        graph.upsert("DOGE", "USDT", 0.1)
        
        assert graph.vertices() == ("BTC", "USDT", "ETH", "DOGE")
        assert graph.edge_count() == 6
    
    def test_snapshot_is_isolated_from_later_updates(self, graph):
        """Test snapshots are not affected by subsequent upserts."""
        graph.upsert("BTC", "USDT", 50000.0)
        snapshot = graph.snapshot()
        
        graph.upsert("ETH", "USDT", 2500.0)
        graph.upsert("BTC", "USDT", 10.0)
        
        assert isinstance(snapshot, GraphSnapshot)
        assert snapshot.vertex_count() == 2
        assert snapshot.edge_count() == 2
        rates = {edge.pair: edge.rate for edge in snapshot.edges}
        assert rates[("BTC", "USDT")] == 50000.0
    
    def test_snapshot_edges_are_immutable(self, graph):
        """Test edges handed out cannot be modified."""
        graph.upsert("BTC", "USDT", 50000.0)
        edge = graph.snapshot_edges()[0]
        
        assert isinstance(edge, ConversionEdge)
        with pytest.raises(AttributeError):
            edge.rate = 1.0
