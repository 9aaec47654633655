from nebfire.MEP.pathopt_neb_force import CalculationNEB
from nebfire.Parameters.unit_values import UnitValueLib
from nebfire.Utils.calc_tools import field_norm


class CalculationTDCINEB(CalculationNEB):
    """Temperature dependent climbing image NEB.

    The perpendicular force is shifted by the curvature scaled with the
    thermal energy k_B*T, T being the effective temperature `neb_temp` (K).
    """

    neb_type = "TDCINEB"
    label = "Temperature Dependent CI-Nudged Elastic Band"

    def __init__(self, chain, observers=None, **config):
        super().__init__(chain, observers, **config)
        self.neb_temp = config.get("neb_temp", 650.0)
        self.boltzmann = config.get("boltzmann", UnitValueLib().boltzmann_constant_eV)
        self.beta = 1.0 / (self.neb_temp * self.boltzmann)

    def climbing_force(self, image):
        if field_norm(self.tangent(image)) == 0.0:
            return self.chain[image].F
        return super().climbing_force(image)

    def temperature_force(self, image):
        return self.perpendicular_force(image) - self.curvature(image) / self.beta

    def neb_force(self, image):
        self.chain.check_index(image)
        if self.climbing_active(image):
            return self.climbing_force(image)
        return self.temperature_force(image) + self.spring_force(image)


class CalculationTDNEB(CalculationTDCINEB):
    """Temperature dependent NEB, no climbing image."""

    neb_type = "TDNEB"
    label = "Temperature Dependent Nudged Elastic Band"

    def neb_force(self, image):
        self.chain.check_index(image)
        return self.temperature_force(image) + self.spring_force(image)
