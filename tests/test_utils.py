"""Tests for the shared numeric helpers."""

import numpy as np
import pytest

from impulse_filters import InvalidSignal
from impulse_filters.utils import as_signal, linear_interpolate, mad, median


def test_median_odd_count():
    assert median([5.0, 1.0, 3.0]) == 3.0


def test_median_even_count_averages_central_values():
    assert median([4.0, 1.0, 3.0, 2.0]) == 2.5


def test_median_empty_is_zero():
    assert median([]) == 0.0


def test_median_does_not_reorder_input():
    values = np.array([3.0, 1.0, 2.0])
    median(values)
    np.testing.assert_array_equal(values, [3.0, 1.0, 2.0])


def test_mad_around_given_center():
    # |x - 2| = [1, 0, 1, 8] -> median 1.0
    assert mad([1.0, 2.0, 3.0, 10.0], 2.0) == 1.0


def test_mad_constant_is_zero():
    assert mad([4.0] * 6, 4.0) == 0.0


def test_linear_interpolate_midpoint():
    assert linear_interpolate(0, 0.0, 4, 8.0, 1) == pytest.approx(2.0)


def test_linear_interpolate_extrapolates():
    assert linear_interpolate(0, 0.0, 1, 1.0, 3) == pytest.approx(3.0)


def test_linear_interpolate_coincident_nodes_returns_y1():
    """Nodes closer than the epsilon must not divide by ~zero."""
    assert linear_interpolate(1.0, 7.0, 1.0 + 1e-12, 100.0, 5.0) == 7.0


class TestAsSignal:

    def test_list_becomes_float_array(self):
        arr = as_signal([1, 2, 3])
        assert arr.dtype == np.float64
        np.testing.assert_array_equal(arr, [1.0, 2.0, 3.0])

    def test_scalar_becomes_length_one(self):
        assert as_signal(4.0).shape == (1,)

    def test_empty_is_allowed(self):
        assert as_signal([]).size == 0

    def test_two_dimensional_rejected(self):
        with pytest.raises(InvalidSignal, match="2D"):
            as_signal(np.zeros((3, 2)))
