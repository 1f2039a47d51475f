"""
Tests for the seeded linear-congruential random source.
"""

import numpy as np
import pytest

from force_layout.rng import (
    LCG_INCREMENT,
    LCG_MODULUS,
    LCG_MULTIPLIER,
    LinearCongruentialRandom,
)


class TestLinearCongruentialRandom:
    """Tests for LinearCongruentialRandom."""

    def test_first_draw_follows_recurrence(self):
        """Test the first value is (a*seed + c) mod m, divided by m."""
        rng = LinearCongruentialRandom(seed=42)
        expected = ((LCG_MULTIPLIER * 42 + LCG_INCREMENT) % LCG_MODULUS) / LCG_MODULUS
        assert rng.next() == expected

    def test_same_seed_same_sequence(self):
        """Test two sources with the same seed agree."""
        a = LinearCongruentialRandom(seed=7)
        b = LinearCongruentialRandom(seed=7)
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_different_seeds_differ(self):
        """Test different seeds give different sequences."""
        a = LinearCongruentialRandom(seed=1)
        b = LinearCongruentialRandom(seed=2)
        assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]

    def test_values_in_unit_interval(self):
        """Test every draw lies in [0, 1)."""
        rng = LinearCongruentialRandom(seed=123)
        values = rng.fill(1000)
        assert np.all(values >= 0.0)
        assert np.all(values < 1.0)

    def test_seed_is_recorded(self):
        """Test the seed property reports the seed."""
        assert LinearCongruentialRandom(seed=99).seed == 99

    def test_unseeded_draws_a_seed(self):
        """Test an unseeded source picks a usable seed."""
        rng = LinearCongruentialRandom()
        assert 0 <= rng.seed < 1_000_000
        assert 0.0 <= rng.next() < 1.0


class TestFill:
    """Tests for fill() and uniform()."""

    def test_scalar(self):
        """Test fill() without a shape returns a float."""
        value = LinearCongruentialRandom(seed=3).fill()
        assert isinstance(value, float)

    @pytest.mark.parametrize("shape", [5, (5,), (4, 3), (2, 3, 4)])
    def test_shapes(self, shape):
        """Test fill() honors int and tuple shapes."""
        values = LinearCongruentialRandom(seed=3).fill(shape)
        expected = (shape,) if isinstance(shape, int) else shape
        assert values.shape == expected

    def test_row_major_order(self):
        """Test arrays are filled in the order values are drawn."""
        seq = LinearCongruentialRandom(seed=11)
        grid = LinearCongruentialRandom(seed=11).fill((2, 3))
        expected = np.array([seq.next() for _ in range(6)]).reshape(2, 3)
        np.testing.assert_array_equal(grid, expected)

    def test_uniform_bounds(self):
        """Test uniform() draws in [low, high)."""
        values = LinearCongruentialRandom(seed=5).uniform(-1.0, 1.0, (200, 2))
        assert values.shape == (200, 2)
        assert values.min() >= -1.0
        assert values.max() < 1.0
