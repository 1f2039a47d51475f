"""
Tests for the Fruchterman-Reingold layout algorithm.
"""

import itertools

import numpy as np
import pytest

from force_layout import (
    EventType,
    FruchtermanReingoldLayout,
    Graph,
    LayoutWarning,
    fruchterman_reingold_layout,
    spring_layout,
)

# =============================================================================
# Test Fixtures
# =============================================================================


def create_complete_graph(n=4):
    """Create the complete graph on n nodes."""
    return Graph(itertools.combinations(range(n), 2), nodes=range(n))


def create_path_graph(n=5):
    """Create a path 0-1-...-(n-1)."""
    return Graph([(i, i + 1) for i in range(n - 1)])


def pairwise_distances(pos):
    """All pairwise distances of a position map."""
    return [np.linalg.norm(pos[u] - pos[v]) for u, v in itertools.combinations(pos, 2)]


# =============================================================================
# Basic Functionality Tests
# =============================================================================


class TestFruchtermanReingoldBasic:
    """Basic functionality tests for Fruchterman-Reingold."""

    def test_one_entry_per_node(self):
        """Test the result has a finite dim-vector per node."""
        pos = fruchterman_reingold_layout(create_path_graph(6), seed=1)

        assert set(pos) == set(range(6))
        for p in pos.values():
            assert p.shape == (2,)
            assert np.all(np.isfinite(p))

    def test_complete_graph_is_nearly_symmetric(self):
        """Test K4 pairwise distances stay within 50% of their mean."""
        pos = fruchterman_reingold_layout(create_complete_graph(4), iterations=200, seed=3)

        dist = np.array(pairwise_distances(pos))
        deviation = np.max(np.abs(dist - dist.mean())) / dist.mean()
        assert deviation < 0.5

    def test_deterministic_with_seed(self):
        """Test identical seeds give identical layouts."""
        g = create_complete_graph(6)
        a = fruchterman_reingold_layout(g, seed=42)
        b = fruchterman_reingold_layout(g, seed=42)

        for node in a:
            np.testing.assert_allclose(a[node], b[node], atol=1e-10)

    def test_different_seeds_differ(self):
        """Test different seeds give different layouts."""
        g = create_path_graph(5)
        a = fruchterman_reingold_layout(g, seed=1)
        b = fruchterman_reingold_layout(g, seed=2)
        assert any(not np.allclose(a[n], b[n]) for n in a)

    def test_rescaled_to_scale_and_center(self):
        """Test the result fits a ball of radius scale around center."""
        pos = fruchterman_reingold_layout(
            create_path_graph(7), scale=3.0, center=(5.0, -1.0), seed=4
        )
        arr = np.array(list(pos.values()))
        radius = np.linalg.norm(arr - [5.0, -1.0], axis=1)
        assert radius.max() == pytest.approx(3.0)
        np.testing.assert_allclose(arr.mean(axis=0), [5.0, -1.0], atol=1e-12)

    @pytest.mark.parametrize("dim", [1, 3, 4])
    def test_other_dimensions(self, dim):
        """Test layouts in dimensions other than 2."""
        pos = fruchterman_reingold_layout(create_complete_graph(5), dim=dim, seed=8)
        for p in pos.values():
            assert p.shape == (dim,)
            assert np.all(np.isfinite(p))

    def test_node_list_input(self):
        """Test a bare node list is laid out without edges."""
        pos = fruchterman_reingold_layout(["a", "b", "c"], seed=5)
        assert set(pos) == {"a", "b", "c"}

    def test_spring_layout_alias(self):
        """Test spring_layout gives the same result."""
        g = create_path_graph(4)
        a = fruchterman_reingold_layout(g, seed=9)
        b = spring_layout(g, seed=9)
        for node in a:
            np.testing.assert_array_equal(a[node], b[node])

    def test_coincident_start_positions(self):
        """Test coincident starting points give a finite result."""
        g = create_path_graph(3)
        pos = fruchterman_reingold_layout(g, pos={0: (0, 0), 1: (0, 0), 2: (0, 0)}, seed=1)
        for p in pos.values():
            assert np.all(np.isfinite(p))


# =============================================================================
# Degenerate Cases
# =============================================================================


class TestFruchtermanReingoldDegenerate:
    """Tests for empty and single-node graphs."""

    def test_empty(self):
        """Test zero nodes gives an empty map."""
        assert fruchterman_reingold_layout(Graph()) == {}

    def test_single_node_at_center(self):
        """Test one node sits exactly on the center."""
        pos = fruchterman_reingold_layout(["only"], center=(2.0, 3.0))
        assert pos["only"].tolist() == [2.0, 3.0]


# =============================================================================
# Fixed Nodes and Initial Positions
# =============================================================================


class TestFruchtermanReingoldFixed:
    """Tests for fixed nodes and partial initial positions."""

    def test_fixed_nodes_do_not_move(self):
        """Test fixed nodes keep their initial position exactly."""
        g = create_path_graph(4)
        initial = {0: (0.0, 0.0), 1: (1.0, 0.0), 2: (1.0, 1.0), 3: (0.0, 1.0)}
        pos = fruchterman_reingold_layout(g, pos=initial, fixed=[0, 3], seed=2)

        assert pos[0].tolist() == [0.0, 0.0]
        assert pos[3].tolist() == [0.0, 1.0]
        assert not np.allclose(pos[1], [1.0, 0.0])

    def test_missing_nodes_start_in_bounding_box(self):
        """Test unplaced nodes are drawn inside the supplied bounding box."""
        g = Graph([(0, 1), (1, 2), (2, 3)])
        initial = {0: (0.0, 0.0), 1: (2.0, 4.0)}
        pos = fruchterman_reingold_layout(g, pos=initial, fixed=[0, 1], iterations=0, seed=6)

        for node in (2, 3):
            assert 0.0 <= pos[node][0] <= 2.0
            assert 0.0 <= pos[node][1] <= 4.0

    def test_unknown_fixed_node_warns(self):
        """Test fixing a node that is not in the graph warns."""
        with pytest.warns(LayoutWarning, match="not in the graph"):
            fruchterman_reingold_layout(create_path_graph(3), fixed=["ghost"], seed=1)


# =============================================================================
# Class API
# =============================================================================


class TestFruchtermanReingoldLayoutClass:
    """Tests for the FruchtermanReingoldLayout class."""

    def test_properties(self):
        """Test constructor arguments are exposed as properties."""
        layout = FruchtermanReingoldLayout(
            graph=create_path_graph(3), optimal_distance=0.2, temperature=0.5, iterations=10
        )
        assert layout.optimal_distance == 0.2
        assert layout.temperature == 0.5
        assert layout.iterations == 10

    def test_runs_full_budget(self):
        """Test all iterations run and the temperature cools linearly."""
        layout = FruchtermanReingoldLayout(graph=create_path_graph(4), iterations=30, random_seed=1)
        layout.run()

        assert layout.iteration == 30
        assert layout.current_temperature == pytest.approx(0.1 / 31)

    def test_events(self):
        """Test start, tick and end events fire."""
        seen = []
        layout = FruchtermanReingoldLayout(
            graph=create_path_graph(3),
            iterations=5,
            random_seed=1,
            on_start=lambda e: seen.append(e["type"]),
            on_end=lambda e: seen.append(e["type"]),
        )
        layout.on("tick", lambda e: seen.append(e["type"]))
        layout.run()

        assert seen[0] == EventType.start
        assert seen[-1] == EventType.end
        assert seen.count(EventType.tick) == 5

    def test_run_returns_self(self):
        """Test run() supports chaining."""
        layout = FruchtermanReingoldLayout(graph=create_path_graph(3), random_seed=1)
        assert layout.run() is layout
        assert len(layout.positions) == 3
