"""
Tests for the Kamada-Kawai layout algorithm.
"""

import numpy as np
import pytest

from force_layout import EventType, Graph, KamadaKawaiLayout, kamada_kawai_layout
from force_layout.force.kamada_kawai import initial_placement
from force_layout.optimization import DISCONNECTED_DISTANCE

# =============================================================================
# Test Fixtures
# =============================================================================


def create_path_graph(n=5):
    """Create a path 0-1-...-(n-1)."""
    return Graph([(i, i + 1) for i in range(n - 1)])


def create_cycle_graph(n=6):
    """Create a cycle on n nodes."""
    return Graph([(i, (i + 1) % n) for i in range(n)])


def distance(pos, u, v):
    return float(np.linalg.norm(pos[u] - pos[v]))


# =============================================================================
# Basic Functionality Tests
# =============================================================================


class TestKamadaKawaiBasic:
    """Basic functionality tests for Kamada-Kawai."""

    def test_path_distances_increase(self):
        """Test distance from an end grows along a path."""
        pos = kamada_kawai_layout(create_path_graph(5))

        assert distance(pos, 0, 2) > distance(pos, 0, 1)
        assert distance(pos, 0, 3) > distance(pos, 0, 2)
        assert distance(pos, 0, 4) > distance(pos, 0, 3)

    def test_cycle_is_regular(self):
        """Test a cycle is drawn with near-equal edge lengths."""
        pos = kamada_kawai_layout(create_cycle_graph(6))
        lengths = [distance(pos, i, (i + 1) % 6) for i in range(6)]
        assert max(lengths) / min(lengths) < 1.05

    def test_deterministic(self):
        """Test repeated runs give identical layouts."""
        g = create_cycle_graph(7)
        a = kamada_kawai_layout(g)
        b = kamada_kawai_layout(g)
        for node in a:
            np.testing.assert_allclose(a[node], b[node], atol=1e-10)

    def test_rescaled(self):
        """Test the result is rescaled to scale around center."""
        pos = kamada_kawai_layout(create_path_graph(4), scale=2.0, center=(1.0, -1.0))
        arr = np.array(list(pos.values()))
        radius = np.linalg.norm(arr - [1.0, -1.0], axis=1)
        assert radius.max() == pytest.approx(2.0)
        np.testing.assert_allclose(arr.mean(axis=0), [1.0, -1.0], atol=1e-12)

    @pytest.mark.parametrize("dim", [1, 3, 4])
    def test_other_dimensions(self, dim):
        """Test layouts in dimensions other than 2."""
        pos = kamada_kawai_layout(create_cycle_graph(5), dim=dim, seed=3)
        assert len(pos) == 5
        for p in pos.values():
            assert p.shape == (dim,)
            assert np.all(np.isfinite(p))

    def test_high_dimension_seeded(self):
        """Test dim >= 4 placement is reproducible with a seed."""
        g = create_path_graph(4)
        a = kamada_kawai_layout(g, dim=5, seed=12)
        b = kamada_kawai_layout(g, dim=5, seed=12)
        for node in a:
            np.testing.assert_allclose(a[node], b[node], atol=1e-10)

    def test_disconnected_components(self):
        """Test disconnected graphs give finite layouts."""
        g = Graph([(0, 1), (1, 2), (3, 4)])
        layout = KamadaKawaiLayout(graph=g)
        layout.run()

        assert layout.distance_matrix[0, 3] == DISCONNECTED_DISTANCE
        for p in layout.positions.values():
            assert np.all(np.isfinite(p))

    def test_explicit_distances(self):
        """Test a supplied distance mapping overrides graph distances."""
        g = Graph([(0, 1), (1, 2)])
        dist = {
            0: {1: 1.0, 2: 1.0},
            1: {0: 1.0, 2: 1.0},
            2: {0: 1.0, 1: 1.0},
        }
        pos = kamada_kawai_layout(g, dist=dist)

        # Equal targets give an equilateral triangle instead of a line
        lengths = [distance(pos, 0, 1), distance(pos, 1, 2), distance(pos, 0, 2)]
        assert max(lengths) / min(lengths) < 1.01

    def test_weighted_edges(self):
        """Test edge weights act as edge lengths."""
        g = Graph([(0, 1, {"weight": 3.0}), (1, 2, {"weight": 1.0})])
        pos = kamada_kawai_layout(g)
        assert distance(pos, 0, 1) > 2.0 * distance(pos, 1, 2)

    def test_initial_positions(self):
        """Test supplied initial positions are used as the start."""
        g = create_path_graph(3)
        start = {0: (0.0, 0.0), 1: (1.0, 0.1), 2: (2.0, 0.0)}
        pos = kamada_kawai_layout(g, pos=start)
        assert distance(pos, 0, 2) > distance(pos, 0, 1)

    def test_node_list(self):
        """Test a bare node list is accepted."""
        pos = kamada_kawai_layout(["a", "b", "c"])
        assert set(pos) == {"a", "b", "c"}

    def test_degenerate(self):
        """Test empty and single-node graphs."""
        assert kamada_kawai_layout(Graph()) == {}
        pos = kamada_kawai_layout(["x"], dim=3, center=(1, 2, 3))
        assert pos["x"].tolist() == [1.0, 2.0, 3.0]


# =============================================================================
# Initial Placement
# =============================================================================


class TestInitialPlacement:
    """Tests for the default starting layouts."""

    def test_line(self):
        """Test dim 1 spaces nodes evenly on [0, 1]."""
        arr = initial_placement(5, 1, np.zeros(1))
        np.testing.assert_allclose(arr[:, 0], [0.0, 0.25, 0.5, 0.75, 1.0])

    def test_circle(self):
        """Test dim 2 places nodes on the unit circle around center."""
        arr = initial_placement(6, 2, np.array([1.0, 2.0]))
        np.testing.assert_allclose(np.linalg.norm(arr - [1.0, 2.0], axis=1), 1.0)
        np.testing.assert_allclose(arr[0], [2.0, 2.0])

    def test_sphere(self):
        """Test dim 3 places nodes on the unit sphere."""
        arr = initial_placement(10, 3, np.zeros(3))
        np.testing.assert_allclose(np.linalg.norm(arr, axis=1), 1.0)
        assert len({tuple(np.round(p, 9)) for p in arr}) == 10

    def test_hypersphere(self):
        """Test dim >= 4 places nodes on the unit hypersphere."""
        from force_layout import LinearCongruentialRandom

        arr = initial_placement(8, 4, np.zeros(4), LinearCongruentialRandom(seed=1))
        np.testing.assert_allclose(np.linalg.norm(arr, axis=1), 1.0)


# =============================================================================
# Class API
# =============================================================================


class TestKamadaKawaiLayoutClass:
    """Tests for the KamadaKawaiLayout class."""

    def test_converges_on_small_graph(self):
        """Test the gradient norm drops below gtol on a triangle."""
        layout = KamadaKawaiLayout(graph=Graph([(0, 1), (1, 2), (2, 0)]))
        layout.run()

        assert layout.converged
        assert layout.gradient_norm < layout.gtol
        assert layout.iteration < layout.iterations

    def test_iteration_cap(self):
        """Test max_iter bounds the number of L-BFGS steps."""
        layout = KamadaKawaiLayout(graph=create_path_graph(8), iterations=3)
        layout.run()
        assert layout.iteration == 3
        assert not layout.converged

    def test_stress_events(self):
        """Test tick events report a non-increasing stress trend."""
        stresses = []
        layout = KamadaKawaiLayout(
            graph=create_path_graph(5),
            on_tick=lambda e: stresses.append(e["stress"]),
        )
        layout.run()

        assert stresses
        assert stresses[-1] < stresses[0]
        assert layout.stress == pytest.approx(stresses[-1])

    def test_start_and_end_events(self):
        """Test start and end events fire once each."""
        seen = []
        layout = KamadaKawaiLayout(graph=create_path_graph(3))
        layout.on(EventType.start, lambda e: seen.append("start"))
        layout.on(EventType.end, lambda e: seen.append("end"))
        layout.run()
        assert seen == ["start", "end"]
