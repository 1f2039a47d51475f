"""
Tests for the ARF (attractive and repulsive forces) layout algorithm.
"""

import numpy as np
import pytest

from force_layout import ARFLayout, Graph, InvalidParameterError, arf_layout


def create_path_graph(n=4):
    """Create a path 0-1-...-(n-1)."""
    return Graph([(i, i + 1) for i in range(n - 1)])


class TestARFBasic:
    """Basic functionality tests for ARF."""

    def test_one_entry_per_node(self):
        """Test the result has a finite vector per node."""
        pos = arf_layout(create_path_graph(5), seed=1)
        assert set(pos) == set(range(5))
        for p in pos.values():
            assert p.shape == (2,)
            assert np.all(np.isfinite(p))

    def test_deterministic_with_seed(self):
        """Test identical seeds give identical layouts."""
        g = create_path_graph(4)
        a = arf_layout(g, seed=5)
        b = arf_layout(g, seed=5)
        for node in a:
            np.testing.assert_allclose(a[node], b[node], atol=1e-10)

    def test_three_dimensions(self):
        """Test ARF works in 3D."""
        pos = arf_layout(create_path_graph(4), dim=3, seed=2)
        for p in pos.values():
            assert p.shape == (3,)

    def test_converges(self):
        """Test a small graph reaches the error tolerance given enough steps."""
        layout = ARFLayout(graph=Graph([(0, 1), (1, 2), (2, 0)]), iterations=50000, random_seed=3)
        layout.run()

        assert layout.converged
        assert layout.error <= 1e-6

    def test_springs_hold_nodes_together(self):
        """Test the layout stays bounded instead of diverging."""
        pos = arf_layout(create_path_graph(6), seed=4)
        arr = np.array(list(pos.values()))
        assert np.max(np.abs(arr)) < 100.0

    def test_scale_and_center_do_not_rescale(self):
        """Test scale/center leave multi-node results in simulation coordinates."""
        g = create_path_graph(4)
        plain = ARFLayout(graph=g, iterations=200, random_seed=6).run().positions
        scaled = ARFLayout(
            graph=g, iterations=200, random_seed=6, scale=5.0, center=(10.0, 10.0)
        ).run().positions
        for node in plain:
            np.testing.assert_allclose(plain[node], scaled[node], atol=1e-12)

    def test_center_places_single_node(self):
        """Test center still positions the node of a one-node graph."""
        layout = ARFLayout(graph=["x"], center=(2.0, -1.0))
        assert layout.run().positions["x"].tolist() == [2.0, -1.0]

    def test_degenerate(self):
        """Test empty and single-node graphs."""
        assert arf_layout([]) == {}
        assert arf_layout(["x"])["x"].tolist() == [0.0, 0.0]


class TestARFValidation:
    """Tests for ARF parameter validation."""

    @pytest.mark.parametrize("a", [1.0, 0.9, 0.0])
    def test_spring_strength_must_exceed_one(self, a):
        """Test a <= 1 is rejected."""
        with pytest.raises(InvalidParameterError, match="larger than 1"):
            arf_layout(create_path_graph(3), a=a)

    def test_setter_validates(self):
        """Test the a property validates too."""
        layout = ARFLayout(graph=create_path_graph(3))
        layout.a = 2.0
        assert layout.a == 2.0
        with pytest.raises(InvalidParameterError):
            layout.a = 1.0
