"""
Pytest configuration and fixtures for nebfire tests.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from nebfire.MEP.image_chain import Image, ImageChain


# =============================================================================
# MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# =============================================================================
# MODEL POTENTIALS
# =============================================================================

def double_well(R):
    """Two atoms, atom 0 pinned at the origin, atom 1 in E = (x^2 - 1)^2 + y^2.

    Minima at x = -1 and x = 1, saddle point at the origin with E = 1.
    """
    R = np.asarray(R, dtype="float64").reshape(-1, 3)
    x, y = R[1][0], R[1][1]
    energy = (x ** 2 - 1.0) ** 2 + y ** 2
    forces = np.zeros_like(R)
    forces[1] = [-4.0 * x * (x ** 2 - 1.0), -2.0 * y, 0.0]
    return energy, forces


@pytest.fixture
def double_well_calculator():
    return double_well


@pytest.fixture
def bowed_double_well_path():
    """Initial/final minima and three interior images bent away from the valley."""
    geometry_list = []
    for x, y in [(-1.0, 0.0), (-0.5, 0.3), (0.0, 0.4), (0.5, 0.3), (1.0, 0.0)]:
        geometry_list.append(np.array([[0.0, 0.0, 0.0], [x, y, 0.0]]))
    return geometry_list


# =============================================================================
# CHAINS
# =============================================================================

@pytest.fixture
def make_chain():
    """Factory for single-atom chains with fixed energies and forces.

    positions : list of 3-vectors, one per image
    energies : list of floats, one per image
    forces : list of 3-vectors, default zero
    """
    def _make(positions, energies, forces=None, **kwargs):
        if forces is None:
            forces = [[0.0, 0.0, 0.0]] * len(positions)
        images = [Image([R], F=[F], E=E) for R, E, F in zip(positions, energies, forces)]
        return ImageChain(images, **kwargs)
    return _make


@pytest.fixture
def straight_chain(make_chain):
    """Three equally spaced images along x with a maximum at the centre."""
    return make_chain(
        positions=[[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [2.0, 0.0, 0.0]],
        energies=[0.0, 1.0, 0.0],
        forces=[[0.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 0.0, 0.0]],
    )


@pytest.fixture
def xyz_file(tmp_path):
    """Writer of small xyz files into the test folder."""
    def _write(name, elements, coords, comment="test"):
        path = tmp_path / name
        lines = [str(len(elements)), comment]
        for element, (x, y, z) in zip(elements, coords):
            lines.append(f"{element} {x:.8f} {y:.8f} {z:.8f}")
        path.write_text("\n".join(lines) + "\n")
        return str(path)
    return _write
