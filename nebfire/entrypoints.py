import logging
import os

import nebfire.errors
import nebfire.interface
import nebfire.neb
from nebfire.fileio import RESULTS_FILE, read_neb_results
from nebfire.Visualization.visualization import NEBVisualizer

logger = logging.getLogger(__name__)


def setup_logging(level=logging.INFO):
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")


def run_nebmain(args_list=None):
    """ Entry point for the Nudged Elastic Band (NEB) calculation script (nebmain.py). """
    setup_logging()
    parser = nebfire.interface.init_parser()
    args = nebfire.interface.nebparser(parser, args_list)
    calculator = nebfire.interface.load_calculator(args.calculator)

    config = nebfire.neb.NEBConfig(args)
    if len(args.INPUT) > 0:
        config.make_neb_work_directory(os.path.basename(args.INPUT[0]))
    geometry_list, element_list = nebfire.neb.make_geometry_list(args.INPUT, config.partition,
                                                                  config.align_distances)
    NEB = nebfire.neb.NEB(config, geometry_list, calculator, element_list=element_list)
    NEB.run()
    return NEB


def run_nebplot(args_list=None):
    """ Entry point plotting the energy profile stored in NEB.results. """
    setup_logging()
    parser = nebfire.interface.init_parser()
    args = nebfire.interface.plotparser(parser, args_list)

    file_path = args.INPUT
    if os.path.isdir(file_path):
        file_path = os.path.join(file_path, RESULTS_FILE)
    sweeps = read_neb_results(file_path)
    if len(sweeps) == 0:
        raise nebfire.errors.ConfigurationError(f"no NEB results in {file_path}")

    directory = args.output if args.output is not None else os.path.dirname(os.path.abspath(file_path))
    visualizer = NEBVisualizer(directory)
    path, barrier = visualizer.plot_energy_profile(sweeps[args.sweep])
    logger.info("Energy profile saved to %s", path)
    print(f"Estimated barrier: {barrier:.6f}")
    return barrier
