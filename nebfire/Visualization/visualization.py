import os

import matplotlib.pyplot as plt
import numpy as np
from scipy.interpolate import CubicSpline


def spline_energy_profile(reaction_coordinates, energies, n_points=200):
    """Cubic spline of the energy along the band.

    Parameters
    ----------
    reaction_coordinates : array_like
        Accumulated path length of every image (strictly increasing)
    energies : array_like
        Energy of every image
    n_points : int, optional
        Number of points of the dense curve

    Returns
    -------
    tuple
        (dense reaction coordinates, dense energies, barrier relative to the
        initial image, reaction coordinate of the maximum)
    """
    reaction_coordinates = np.asarray(reaction_coordinates, dtype="float64")
    energies = np.asarray(energies, dtype="float64")
    spline = CubicSpline(reaction_coordinates, energies, bc_type="natural")
    x_dense = np.linspace(reaction_coordinates[0], reaction_coordinates[-1], n_points)
    E_dense = spline(x_dense)
    idx = int(np.argmax(E_dense))
    barrier = E_dense[idx] - energies[0]
    return x_dense, E_dense, barrier, x_dense[idx]


class NEBVisualizer:
    """Visualization functionality for NEB calculations"""

    def __init__(self, directory="."):
        self.directory = directory
        self.color_list = ["b", "r"]  # for matplotlib

    def _save(self, fig, name):
        path = os.path.join(self.directory, f"{name}.png")
        fig.tight_layout()
        fig.savefig(path, format="png", dpi=200)
        plt.close(fig)
        return path

    def plot_energy_profile(self, table, name="energy_profile", axis_name_1="Reaction coordinate",
                            axis_name_2="Energy relative to initial image"):
        """Plot one sweep of `NEB.results` with its spline, returns (path, barrier)."""
        table = np.asarray(table, dtype="float64")
        reaction_coordinates = table[:, 1]
        energies = table[:, 3]
        x_dense, E_dense, barrier, _ = spline_energy_profile(reaction_coordinates, energies)

        fig, ax = plt.subplots()
        ax.plot(x_dense, E_dense, self.color_list[0] + "-")
        ax.plot(reaction_coordinates, energies, self.color_list[0] + "o")
        ax.set_title(f"barrier: {barrier:.6f}")
        ax.set_xlabel(axis_name_1)
        ax.set_ylabel(axis_name_2)
        return self._save(fig, name), barrier

    def plot_history(self, num_list, data_list, name="max_neb_force", axis_name_1="ITR.",
                     axis_name_2="max |F_NEB|"):
        fig, ax = plt.subplots()
        ax.plot(num_list, data_list, self.color_list[1] + "--o", markersize=3)
        ax.set_xlabel(axis_name_1)
        ax.set_ylabel(axis_name_2)
        return self._save(fig, name)
