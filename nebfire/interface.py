import argparse
import importlib

from nebfire.errors import ConfigurationError
from nebfire.MEP.neb_methods import NEB_FORCE_METHODS


def init_parser():
    parser = argparse.ArgumentParser()
    return parser


def climbing_type(value):
    """int, or true/false to use the default threshold / disable climbing."""
    lowered = str(value).lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid climbing value: {value!r}")


def nebparser(parser, args_list=None):
    parser = call_nebparser(parser)
    parser = parser_for_fire(parser)

    # Pass the args_list to parser2args
    args = parser2args(parser, args_list)

    if len(args.spring_constant) == 1:
        args.spring_constant = args.spring_constant[0]
    args.neb_type = args.neb_type.upper()
    return args


def plotparser(parser, args_list=None):
    parser.add_argument("INPUT", help='NEB.results file or the NEB output folder')
    parser.add_argument("-sweep", "--sweep", type=int, default=-1, help='sweep to plot (default: -1, the last one)')
    parser.add_argument("-o", "--output", type=str, default=None, help='folder for the plot (default: folder of INPUT)')
    args = parser2args(parser, args_list)
    return args


def call_nebparser(parser):
    parser.add_argument("INPUT", help='input xyz files (initial and final structure, all images, or one multi-frame file)', nargs="*")
    parser.add_argument("-calc", "--calculator", type=str, default=None, help='energy and force evaluator as module:function, called as function(R) -> (energy, forces) (ex.) mymodule:lennard_jones')

    parser.add_argument("-ns", "--NSTEP", type=int, default=300, help='iter. number')
    parser.add_argument("-p", "--partition", type=int, default=8, help='number of nodes between the initial and final structure')
    parser.add_argument("-type", "--neb_type", type=str, default="NEB", help='NEB force variant (' + ", ".join(NEB_FORCE_METHODS) + ') (default: NEB)')
    parser.add_argument("-k", "--spring_constant", type=float, nargs="*", default=[10.0], help='spring constant, one value for all images or one value per interior image (default: 10.0)')
    parser.add_argument("-ci", "--climbing", type=climbing_type, default=5, help='number of iterations before the climbing image is considered, true/false to use the default or disable it (default: 5)')
    parser.add_argument("-citol", "--climbing_tol", type=float, default=0.005, help='energy tolerance for an image to be climbing (default: 0.005)')
    parser.add_argument("-temp", "--neb_temp", type=float, default=650.0, help='temperature [K] of the temperature dependent NEB variants (default: 650)')
    parser.add_argument("-ad", "--align_distances", action='store_true', help='distribute the given images at equal intervals on the reaction coordinate')

    parser.add_argument("-o", "--NEB_FOLDER_DIRECTORY", type=str, default=None, help='output folder (default: <input>_NEB_<type>_<timestamp>/)')
    parser.add_argument("-save_files", "--save_files", action='store_true', help='write the per image vectors (NEB.<image>.<quantity>) and NEB.results')
    parser.add_argument("-save_pict", "--save_pict", action='store_true', help='plot the energy profile and the force history')
    return parser


def parser_for_fire(parser):
    parser.add_argument("-dt", "--dt_init", type=float, default=None, help='FIRE initial time step (default: 1.0)')
    parser.add_argument("-dtmax", "--dt_max", type=float, default=None, help='FIRE maximum time step (default: 10 * dt_init)')
    parser.add_argument("-dtmin", "--dt_min", type=float, default=None, help='FIRE minimum time step (default: 1e-8 * dt_init)')
    parser.add_argument("-finc", "--f_inc", type=float, default=None, help='FIRE time step increase factor (default: 1.1)')
    parser.add_argument("-fdec", "--f_dec", type=float, default=None, help='FIRE time step decrease factor (default: 0.5)')
    parser.add_argument("-falpha", "--f_alpha", type=float, default=None, help='FIRE mixing parameter decay factor (default: 0.99)')
    parser.add_argument("-alpha", "--alpha_init", type=float, default=None, help='FIRE initial mixing parameter (default: 0.1)')
    parser.add_argument("-nmin", "--N_min", type=int, default=None, help='FIRE steps with positive power before the time step grows (default: 5)')
    parser.add_argument("-corr", "--correct", type=str, choices=["local", "global"], default=None, help='FIRE step size correction (default: local)')
    parser.add_argument("-dir", "--direction", type=str, choices=["local", "global"], default=None, help='FIRE velocity mixing (default: global)')
    parser.add_argument("-maxdf", "--max_dF", type=float, default=None, help='FIRE maximum displacement (default: 0.1)')
    parser.add_argument("-tol", "--tolerance", type=float, default=None, help='convergence threshold of the maximum atomic NEB force (default: 0.02)')
    parser.add_argument("-fix", "--fixed_atom", type=int, default=None, help='atom (0-based) whose force is zeroed when no atom is constrained (default: 0)')
    return parser


def parser2args(parser, args_list=None):
    """
    Parses arguments and returns the args namespace.

    If args_list is None, it parses from sys.argv[1:] (command line).
    If args_list is provided (e.g., []), it parses from that list.
    """
    if args_list is None:
        args = parser.parse_args()
    else:
        args = parser.parse_args(args_list)
    return args


def load_calculator(target):
    """Resolve a "module:function" string to the evaluator callable."""
    if target is None or ":" not in target:
        raise ConfigurationError(f"calculator must be given as module:function, got {target!r}")
    module_name, func_name = target.split(":", 1)
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"cannot import calculator module {module_name!r}") from e
    calculator = getattr(module, func_name, None)
    if not callable(calculator):
        raise ConfigurationError(f"{target!r} is not a callable calculator")
    return calculator
