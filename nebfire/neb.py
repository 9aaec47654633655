import datetime
import logging
import os

import numpy as np

from nebfire.errors import ConfigurationError, ShapeMismatchError
from nebfire.fileio import NEBFileIO, make_workspace, traj2list, write_path_xyz, xyz2list
from nebfire.Interpolation.linear_interpolation import distribute_geometry, linear_interpolation
from nebfire.MEP.image_chain import DEFAULT_CLIMBING, DEFAULT_SPRING_CONSTANT, Image, ImageChain
from nebfire.MEP.neb_methods import make_neb_force_calculator
from nebfire.Optimizer.fire_neb import FIRE
from nebfire.Utils.calc_tools import as_field, max_atom_norm
from nebfire.Visualization.visualization import NEBVisualizer

logger = logging.getLogger(__name__)

FIRE_KEYS = ("dt_init", "dt_max", "dt_min", "f_inc", "f_dec", "f_alpha", "alpha_init",
             "N_min", "correct", "direction", "max_dF", "tolerance", "mass", "fixed_atom")


class NEBConfig:
    """Configuration management class for NEB calculations

    Built from an argparse namespace, keywords override the namespace.
    Unset FIRE options keep the defaults of `FIRE`.
    """

    def __init__(self, args=None, **kwargs):
        values = dict(vars(args)) if args is not None else {}
        values.update(kwargs)
        self.values = values

        # NEB specific settings
        self.neb_type = values.get("neb_type", "NEB")
        self.NSTEP = values.get("NSTEP", 300)
        self.partition = values.get("partition", 8)
        self.spring_constant = values.get("spring_constant", DEFAULT_SPRING_CONSTANT)
        self.climbing = values.get("climbing", DEFAULT_CLIMBING)
        self.climbing_tol = values.get("climbing_tol", 0.005)
        self.neb_temp = values.get("neb_temp", 650.0)
        self.align_distances = values.get("align_distances", False)

        # FIRE settings
        self.fire = {key: values[key] for key in FIRE_KEYS if values.get(key) is not None}

        # Output
        self.save_files = values.get("save_files", False)
        self.save_pict = values.get("save_pict", False)
        self.NEB_FOLDER_DIRECTORY = values.get("NEB_FOLDER_DIRECTORY", None)

    def make_neb_work_directory(self, input_file="neb"):
        """Create NEB working directory path"""
        if self.NEB_FOLDER_DIRECTORY is not None:
            return self.NEB_FOLDER_DIRECTORY
        tmp_name = os.path.splitext(input_file)[0]
        timestamp = str(datetime.datetime.now().strftime("%Y_%m_%d_%H_%M_%S_%f")[:-2])
        self.NEB_FOLDER_DIRECTORY = tmp_name + "_NEB_" + self.neb_type + "_" + timestamp + "/"
        return self.NEB_FOLDER_DIRECTORY


def make_geometry_list(input_files, partition, align_distances=False):
    """Geometries of a band from xyz files.

    Two single-frame files are linearly interpolated with `partition`
    interior images, a single multi-frame file or more than two files are
    used as they are. With `align_distances` the interior images are
    redistributed at equal intervals along the path.
    """
    if isinstance(input_files, str):
        input_files = [input_files]
    if len(input_files) == 1:
        geometry_list, element_list = traj2list(input_files[0])
    else:
        geometry_list = []
        element_list = None
        for file in input_files:
            geometry, elements = xyz2list(file)
            geometry_list.append(geometry)
            if element_list is None:
                element_list = elements

    if len(geometry_list) == 2:
        geometry_list = linear_interpolation(geometry_list[0], geometry_list[1], partition)
    elif align_distances:
        geometry_list = distribute_geometry(geometry_list)
    return geometry_list, element_list


class NEB:
    """Relax a band of images with one FIRE integrator per interior image.

    Parameters
    ----------
    config : NEBConfig
    geometry_list : sequence of array_like
        Coordinates of all images, initial and final included
    calculator : callable
        `calculator(R) -> (energy, forces)` for a (n_atoms, 3) geometry
    element_list : list of str, optional
        Element symbols, only used for the xyz output
    """

    def __init__(self, config, geometry_list, calculator, element_list=None):
        self.config = config
        self.calculator = calculator
        self.chain = ImageChain([Image(geometry) for geometry in geometry_list],
                                k=config.spring_constant,
                                climbing=config.climbing,
                                climbing_tol=config.climbing_tol)
        if self.chain.n_images < 1:
            raise ConfigurationError("NEB: at least one interior image is required")
        n_atoms = self.chain.initial.n_atoms
        self.element_list = element_list if element_list is not None else ["X"] * n_atoms

        self.file_io = None
        observers = []
        if config.save_files or config.save_pict:
            make_workspace(config.make_neb_work_directory())
        if config.save_files:
            self.file_io = NEBFileIO(config.NEB_FOLDER_DIRECTORY, self.chain.n_images)
            observers.append(self.file_io)

        self.neb_force = make_neb_force_calculator(config.neb_type, self.chain, observers,
                                                   neb_temp=config.neb_temp)
        self.optimizers = {i: FIRE(**config.fire) for i in range(1, self.chain.n_images + 1)}

        self.converged = False
        self.energy_history = []
        self.max_force_history = []
        self.results = []

    def evaluate(self, image):
        energy, forces = self.calculator(self.chain[image].R.copy())
        forces = as_field(forces)
        if forces.shape != self.chain[image].R.shape:
            raise ShapeMismatchError(f"calculator returned forces of shape {forces.shape} for image {image}, "
                                     f"expected {self.chain[image].R.shape}")
        self.chain[image].set(E=energy, F=forces)
        return energy, forces

    def interior(self):
        return range(1, self.chain.n_images + 1)

    def run(self):
        """Execute NEB calculation"""
        chain = self.chain
        # end points are never moved
        self.evaluate(0)
        self.evaluate(chain.n_images + 1)
        self.neb_force.info()

        for optimize_num in range(self.config.NSTEP):
            for i in self.interior():
                self.evaluate(i)

            # all forces before any move, they depend on the neighbours
            neb_forces = {i: self.neb_force.force(i) for i in self.interior()}
            new_geometry = {i: self.optimizers[i].optimize(chain[i].R, neb_forces[i])
                            for i in self.interior()}

            table = self.neb_force.save()
            self.results.append(table)
            self.energy_history.append(chain.energies())
            max_force = max(max_atom_norm(force) for force in neb_forces.values())
            self.max_force_history.append(max_force)

            for i in self.interior():
                chain[i].set(R=new_geometry[i])

            logger.info("ITR. %d  max |F_NEB| = %.6e  E_max - E_0 = %.6e",
                        chain.niter, max_force, np.max(table[:, 3]))

            if all(optimizer.is_converged for optimizer in self.optimizers.values()):
                self.converged = True
                logger.info("NEB converged after %d iterations", chain.niter)
                break
        else:
            logger.warning("NEB did not converge within %d iterations", self.config.NSTEP)

        self.save_path()
        return self

    def save_path(self):
        if self.config.save_files:
            write_path_xyz(self.element_list, [image.R for image in self.chain],
                           os.path.join(self.config.NEB_FOLDER_DIRECTORY, "path.xyz"),
                           energy_list=self.chain.energies())
        if self.config.save_pict and len(self.results) > 0:
            visualizer = NEBVisualizer(self.config.NEB_FOLDER_DIRECTORY)
            _, barrier = visualizer.plot_energy_profile(self.results[-1])
            visualizer.plot_history(range(1, len(self.max_force_history) + 1), self.max_force_history)
            logger.info("Estimated barrier: %.6f", barrier)

    def get_geometry_list(self):
        return [image.R.copy() for image in self.chain]
