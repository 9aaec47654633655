"""Tests for the vector field utilities shared by the optimizers and the NEB forces."""

import numpy as np
import pytest

from nebfire.Optimizer.optimizer_base import Optimizer
from nebfire.Utils import calc_tools


class TestNorms:

    def test_atom_norms(self):
        field = np.array([[3.0, 4.0, 0.0], [0.0, 0.0, 2.0]])
        np.testing.assert_allclose(calc_tools.atom_norms(field), [5.0, 2.0])

    def test_field_norm_is_global(self):
        field = np.array([[3.0, 4.0, 0.0], [0.0, 0.0, 12.0]])
        assert calc_tools.field_norm(field) == pytest.approx(13.0)

    def test_norm1D_field_and_flat_vector(self):
        np.testing.assert_allclose(calc_tools.norm1D(np.array([[1.0, 2.0, 2.0]])), [3.0])
        np.testing.assert_allclose(calc_tools.norm1D(np.array([-1.0, 2.0])), [1.0, 2.0])

    def test_max_atom_norm(self):
        field = np.array([[1.0, 0.0, 0.0], [0.0, -2.0, 0.0]])
        assert calc_tools.max_atom_norm(field) == pytest.approx(2.0)


class TestProducts:

    def test_flatdot_flattens(self):
        a = np.arange(6.0).reshape(2, 3)
        assert calc_tools.flatdot(a, a) == pytest.approx(55.0)

    def test_project(self):
        field = np.array([[1.0, 1.0, 0.0]])
        onto = np.array([[2.0, 0.0, 0.0]])
        np.testing.assert_allclose(calc_tools.project(field, onto), [[1.0, 0.0, 0.0]])

    def test_project_onto_zero_vector_is_nan(self):
        with np.errstate(invalid="ignore", divide="ignore"):
            result = calc_tools.project(np.ones((1, 3)), np.zeros((1, 3)))
        assert np.all(np.isnan(result))

    def test_as_field_copies_and_reshapes(self):
        flat = np.arange(6.0)
        field = calc_tools.as_field(flat)
        assert field.shape == (2, 3)
        field[0, 0] = 100.0
        assert flat[0] == 0.0

    def test_zeros_like(self):
        zeros = calc_tools.zeros_like(np.ones((2, 3), dtype=int))
        assert zeros.dtype == np.float64
        assert not zeros.any()


class TestOptimizerBase:

    def test_abstract(self):
        with pytest.raises(TypeError):
            Optimizer()

    def test_shared_algebra(self):
        assert Optimizer.flatdot([1.0, 2.0], [3.0, 4.0]) == pytest.approx(11.0)
        np.testing.assert_allclose(Optimizer.norm1D(np.array([[0.0, 3.0, 4.0]])), [5.0])
