import logging

import nebfire.interface
import nebfire.neb

logger = logging.getLogger(__name__)


class NEBJob:
    """
    Wrapper class to define and run a Nudged Elastic Band (NEB) job
    from a Python script instead of nebmain.py.
    """

    def __init__(self, input_files, calculator):
        """
        Initializes the NEB job settings.

        Args:
            input_files (list):
                A list of input file paths (e.g., ["reactant.xyz", "product.xyz"]
                or ["img1.xyz", "img2.xyz", ...]).
            calculator (callable):
                calculator(R) -> (energy, forces) for a (n_atoms, 3) geometry.
        """
        if not isinstance(input_files, list) or len(input_files) == 0:
            raise TypeError("input_files must be a non-empty list of strings.")
        if not callable(calculator):
            raise TypeError("calculator must be callable.")

        self.input_args = input_files
        self.calculator = calculator

        # Get default args from the command line parser
        parser = nebfire.interface.init_parser()
        self.args = nebfire.interface.nebparser(parser, self.input_args)

        self._neb_instance = None

    def set_option(self, key, value):
        """Sets a single NEB job option."""
        if not hasattr(self.args, key):
            logger.warning("Option '%s' is not a default argparse argument.", key)
        setattr(self.args, key, value)
        logger.info("Set option: %s = %s", key, value)

    def set_options(self, **kwargs):
        """Sets multiple NEB job options using keyword arguments."""
        for key, value in kwargs.items():
            self.set_option(key, value)

    def run(self):
        """Executes the NEB job."""
        logger.info("Starting NEB job with settings: %s", vars(self.args))
        config = nebfire.neb.NEBConfig(self.args)
        geometry_list, element_list = nebfire.neb.make_geometry_list(self.args.INPUT, config.partition,
                                                                     config.align_distances)
        self._neb_instance = nebfire.neb.NEB(config, geometry_list, self.calculator,
                                             element_list=element_list)
        self._neb_instance.run()
        logger.info("NEB job finished, converged: %s", self._neb_instance.converged)
        return self._neb_instance

    def get_results(self):
        """Retrieves the NEB instance after the job has been run."""
        if self._neb_instance is None:
            logger.error(".run() must be called before get_results().")
            return None
        return self._neb_instance
