"""
Tests for graph inputs and the graph protocol.
"""

import pytest

from force_layout import Graph, GraphLike, InvalidGraphError, NodeList, resolve_graph
from force_layout.graph import edge_weight


class EdgeListOnly:
    """GraphLike without edge weights."""

    def nodes(self):
        return [1, 2, 3]

    def edges(self):
        return [(1, 2), (2, 3)]


class TestGraph:
    """Tests for the Graph container."""

    def test_nodes_in_insertion_order(self):
        """Test nodes keep insertion order, edge endpoints included."""
        g = Graph(nodes=["c", "a"])
        g.add_edge("a", "b")
        assert g.nodes() == ["c", "a", "b"]

    def test_edges(self):
        """Test edges keep insertion order."""
        g = Graph([(0, 1), (1, 2)])
        assert g.edges() == [(0, 1), (1, 2)]
        assert len(g) == 3
        assert 2 in g
        assert 5 not in g

    def test_edge_attributes(self):
        """Test attributes are readable in either direction."""
        g = Graph()
        g.add_edge("a", "b", weight=2.5)
        assert g.edge_weight("a", "b", "weight") == 2.5
        assert g.edge_weight("b", "a", "weight") == 2.5
        assert g.edge_weight("a", "b", "length") is None
        assert g.edge_weight("a", "c", "weight") is None

    def test_attribute_tuples(self):
        """Test (u, v, attrs) tuples in the constructor."""
        g = Graph([(0, 1, {"weight": 3})])
        assert g.edge_weight(0, 1, "weight") == 3

    def test_degree(self):
        """Test degree counts incident edges, self-loops once."""
        g = Graph([(0, 1), (0, 2), (0, 0)])
        assert g.degree(0) == 3
        assert g.degree(1) == 1

    def test_is_graph_like(self):
        """Test Graph satisfies the GraphLike protocol."""
        assert isinstance(Graph(), GraphLike)


class TestResolveGraph:
    """Tests for resolve_graph."""

    def test_graph_passes_through(self):
        """Test GraphLike objects are returned unchanged."""
        g = EdgeListOnly()
        assert resolve_graph(g) is g

    def test_node_list(self):
        """Test a bare node sequence becomes an edgeless graph."""
        resolved = resolve_graph(["x", "y"])
        assert isinstance(resolved, NodeList)
        assert resolved.nodes() == ["x", "y"]
        assert resolved.edges() == []

    def test_range(self):
        """Test any iterable of node ids is accepted."""
        assert resolve_graph(range(3)).nodes() == [0, 1, 2]

    @pytest.mark.parametrize("bad", ["abc", b"abc", 42, None])
    def test_rejects_non_graphs(self, bad):
        """Test strings and non-iterables are rejected."""
        with pytest.raises(InvalidGraphError):
            resolve_graph(bad)


class TestEdgeWeight:
    """Tests for edge weight lookup."""

    def test_no_attribute(self):
        """Test attr=None means unit weight."""
        g = Graph([(0, 1, {"weight": 5})])
        assert edge_weight(g, 0, 1, None) == 1.0

    def test_attribute(self):
        """Test the attribute value is returned as float."""
        g = Graph([(0, 1, {"weight": 5})])
        assert edge_weight(g, 0, 1, "weight") == 5.0

    def test_missing_or_zero(self):
        """Test missing and zero weights count as 1."""
        g = Graph([(0, 1, {"weight": 0}), (1, 2)])
        assert edge_weight(g, 0, 1, "weight") == 1.0
        assert edge_weight(g, 1, 2, "weight") == 1.0

    def test_graph_without_lookup(self):
        """Test graphs without edge_weight use unit weights."""
        assert edge_weight(EdgeListOnly(), 1, 2, "weight") == 1.0
