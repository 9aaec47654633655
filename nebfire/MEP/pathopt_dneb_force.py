from nebfire.MEP.pathopt_neb_force import CalculationNEB
from nebfire.Utils.calc_tools import field_norm, project


class CalculationDNEB(CalculationNEB):
    """Doubly nudged elastic band.

    ref.: S. A. Trygubenko, D. J. Wales, J. Chem. Phys. 120, 2082 (2004)
    """

    neb_type = "DNEB"
    label = "D-Nudged Elastic Band"

    def climbing_force(self, image):
        if field_norm(self.tangent(image)) == 0.0:
            return self.chain[image].F
        return super().climbing_force(image)

    def dneb_force(self, image):
        """Part of the perpendicular spring force orthogonal to the perpendicular force."""
        # zero up to rounding, the spring force already lies along the tangent
        perp_spring_F = self.perpendicular_spring_force(image)
        return perp_spring_F - project(perp_spring_F, self.perpendicular_force(image))

    def neb_force(self, image):
        self.chain.check_index(image)
        if self.climbing_active(image):
            return self.climbing_force(image)
        return self.perpendicular_force(image) + self.spring_force(image) + self.dneb_force(image)
