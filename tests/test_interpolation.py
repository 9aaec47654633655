"""Tests for the construction of an initial band."""

import numpy as np
import pytest

from nebfire.Interpolation.linear_interpolation import (calc_path_length_list, distribute_geometry,
                                                        linear_interpolation)


class TestLinearInterpolation:

    def test_count_and_end_points(self):
        start = np.zeros((2, 3))
        end = np.ones((2, 3))
        geometry_list = linear_interpolation(start, end, 3)
        assert len(geometry_list) == 5
        np.testing.assert_allclose(geometry_list[0], start)
        np.testing.assert_allclose(geometry_list[-1], end)
        np.testing.assert_allclose(geometry_list[2], 0.5)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            linear_interpolation(np.zeros((2, 3)), np.zeros((3, 3)), 2)


class TestDistribution:

    def test_path_length(self):
        geometry_list = [np.array([[x, 0.0, 0.0]]) for x in (0.0, 1.0, 3.0)]
        assert calc_path_length_list(geometry_list) == pytest.approx([0.0, 1.0, 3.0])

    def test_evenly_spaced_nodes(self):
        geometry_list = [np.array([[x, 0.0, 0.0]]) for x in (0.0, 0.1, 0.2, 3.0)]
        new_list = distribute_geometry(geometry_list)
        assert len(new_list) == 4
        np.testing.assert_allclose([g[0, 0] for g in new_list], [0.0, 1.0, 2.0, 3.0])

    def test_zero_length_path(self):
        geometry_list = [np.zeros((1, 3))] * 3
        new_list = distribute_geometry(geometry_list)
        assert len(new_list) == 3
        assert not np.any(new_list)
