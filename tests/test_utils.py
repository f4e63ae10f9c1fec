"""Tests for the numeric helpers in curvegraph.utils."""
import math

import pytest

from curvegraph.model.geometry_primitives import Point
from curvegraph.utils import mean, midpoint, summation, to_degrees, to_radians


def test_angle_conversion():
    assert to_degrees(math.pi) == pytest.approx(180)
    assert to_radians(90) == pytest.approx(math.pi / 2)


def test_mean():
    assert mean(1, 2, 3, 4) == 2.5
    with pytest.raises(ValueError):
        mean()


def test_midpoint():
    assert midpoint(Point(0, 0), Point(4, -2)) == Point(2, -1)


class TestSummation:
    def test_finite(self):
        assert summation(lambda i: i, 1, 100) == 5050

    def test_empty_range(self):
        assert summation(lambda i: i, 5, 4) == 0

    def test_geometric_series(self):
        assert summation(lambda i: 0.5 ** i, 0, math.inf) == pytest.approx(2.0)

    def test_series_with_leading_zero_term(self):
        assert summation(lambda i: i / 2 ** i, 0, math.inf) == pytest.approx(2.0)

    def test_all_zero_series(self):
        assert summation(lambda i: 0.0, 0, math.inf) == 0.0

    def test_negative_infinity(self):
        assert summation(lambda i: i, 0, -math.inf) == 0

    def test_divergent_is_indeterminate(self, caplog):
        assert summation(lambda i: 1, 0, math.inf, max_terms=1000) is None
        assert "indeterminate" in caplog.text

    def test_recursion_is_indeterminate(self):
        def runaway(i):
            return runaway(i)

        assert summation(runaway, 0, math.inf) is None

    def test_overflow_is_indeterminate(self):
        assert summation(lambda i: math.exp(1000 + i), 0, math.inf) is None
