from nebfire.errors import ConfigurationError
from nebfire.MEP.pathopt_dneb_force import CalculationDNEB
from nebfire.MEP.pathopt_neb_force import CalculationNEB
from nebfire.MEP.pathopt_tdneb_force import CalculationTDCINEB, CalculationTDNEB

NEB_FORCE_METHODS = {
    "NEB": CalculationNEB,
    "DNEB": CalculationDNEB,
    "TDCINEB": CalculationTDCINEB,
    "TDNEB": CalculationTDNEB,
}


def make_neb_force_calculator(neb_type, chain, observers=None, **config):
    """Return the force calculator of the requested NEB variant."""
    if neb_type is None:
        raise ConfigurationError("NEB: no NEB type specified, choose from "
                                 + ", ".join(NEB_FORCE_METHODS))
    method = NEB_FORCE_METHODS.get(str(neb_type).upper())
    if method is None:
        raise ConfigurationError(f"NEB: unknown NEB type {neb_type!r}, choose from "
                                 + ", ".join(NEB_FORCE_METHODS))
    return method(chain, observers, **config)
