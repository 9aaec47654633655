import logging
import os
import re

import numpy as np

from nebfire.MEP.observer import NEBObserver

logger = logging.getLogger(__name__)

IMAGE_FILES = (
    ("R", "Coordinates"),
    ("F", "Constrained force"),
    ("F.P", "Perpendicular force"),
    ("F.S", "Spring force"),
    ("F.NEB", "Resulting NEB force"),
    ("T", "NEB tangent"),
    ("dR_prev", "Reaction distance (previous)"),
    ("dR_next", "Reaction distance (next)"),
)

RESULTS_FILE = "NEB.results"


def get_pattern_xyz():
    pattern_xyz = re.compile(r"\s*([A-Za-z]+)\s+([+-]?(?:\d+(?:\.\d+)?)(?:[eE][+-]?\d+)?)(?:\s+([+-]?(?:\d+(?:\.\d+)?)(?:[eE][+-]?\d+)?))(?:\s+([+-]?(?:\d+(?:\.\d+)?)(?:[eE][+-]?\d+)?))\s*")
    return pattern_xyz


def xyz2list(file_path):
    """Read a single-frame xyz file, returns (geometry (n_atoms, 3), element_list)."""
    pattern_xyz = get_pattern_xyz()
    element_list = []
    geometry_list = []
    with open(file_path, "r") as f:
        words = f.read().splitlines()
    # skip atom count and comment line
    for word in words[2:]:
        if re.match(pattern_xyz, word):
            geometry_list.append(word.split()[1:4])
            element_list.append(word.split()[0])
    if len(element_list) == 0:
        raise ValueError(f"No atoms found in {file_path}")
    return np.array(geometry_list, dtype="float64"), element_list


def traj2list(file_path):
    """Read every frame of a multi-frame xyz file.

    Returns
    -------
    tuple
        (list of (n_atoms, 3) arrays, element_list of the first frame)
    """
    with open(file_path, "r") as f:
        lines = f.read().splitlines()

    geometries = []
    element_list = None
    i = 0
    while i < len(lines):
        if lines[i].strip() == "":
            i += 1
            continue
        natoms = int(lines[i].split()[0])
        block = lines[i + 2:i + 2 + natoms]
        elements = [line.split()[0] for line in block]
        geometries.append(np.array([line.split()[1:4] for line in block], dtype="float64"))
        if element_list is None:
            element_list = elements
        i += 2 + natoms
    if len(geometries) == 0:
        raise ValueError(f"No frames found in {file_path}")
    return geometries, element_list


def write_xyz_file(element_list, coords, file_path, comment="save", mode="w"):
    with open(file_path, mode) as f:
        f.write(str(len(element_list)) + '\n')
        f.write(comment + '\n')
        for i in range(len(element_list)):
            f.write(f"{element_list[i]:2}  {float(coords[i][0]):>17.12f}   {float(coords[i][1]):>17.12f}   {float(coords[i][2]):>17.12f}\n")
    return


def write_path_xyz(element_list, geometry_list, file_path, energy_list=None):
    """Save all images of a band as frames of one xyz file."""
    with open(file_path, "w"):
        pass
    for num, geometry in enumerate(geometry_list):
        comment = f"Frame {num}"
        if energy_list is not None:
            comment += f" E={energy_list[num]}"
        write_xyz_file(element_list, geometry, file_path, comment=comment, mode="a")
    return


def make_workspace(directory):
    if not os.path.exists(directory):
        os.makedirs(directory)
    return directory


def read_neb_results(file_path):
    """Read `NEB.results`, returns a list with one (n_images + 2, 6) table per sweep."""
    data = np.loadtxt(file_path, comments="#", ndmin=2)
    if data.size == 0:
        return []
    sweeps = []
    start = 0
    for row in range(1, len(data) + 1):
        # a sweep starts again at image 0
        if row == len(data) or data[row][0] == 0:
            sweeps.append(data[start:row])
            start = row
    return sweeps


class NEBFileIO(NEBObserver):
    """Write the per-image vectors and the per-sweep results of a band to files.

    Files are named `NEB.<image>.<quantity>` and `NEB.results` and hold the
    arrays in 3xN text format, one block per sweep.
    """

    def __init__(self, directory, n_images):
        self.directory = make_workspace(directory)
        self.n_images = n_images
        self.init_files()

    def _path(self, name):
        return os.path.join(self.directory, name)

    def init_files(self):
        def new_file(fname, *headers):
            with open(self._path(fname), "w") as f:
                for header in headers:
                    f.write("# " + header + "\n")

        new_file(RESULTS_FILE, "NEB results file",
                 "Image reaction-coordinate Energy E-diff Curvature F-max(atom)")
        for img in range(1, self.n_images + 1):
            for suffix, header in IMAGE_FILES:
                new_file(f"NEB.{img}.{suffix}", header)
        logger.debug("NEB output files initialized in %s", self.directory)

    def image_forces(self, record):
        arrays = (record.R, record.F, record.perpendicular_force, record.spring_force,
                  record.neb_force, record.tangent, record.dR_prev, record.dR_next)
        for (suffix, _), array in zip(IMAGE_FILES, arrays):
            with open(self._path(f"NEB.{record.image}.{suffix}"), "a") as f:
                np.savetxt(f, np.asarray(array).reshape(-1, 3))

    def sweep_results(self, iteration, table):
        with open(self._path(RESULTS_FILE), "a") as f:
            np.savetxt(f, table, fmt=["%d", "%.10e", "%.10e", "%.10e", "%.10e", "%.10e"])
