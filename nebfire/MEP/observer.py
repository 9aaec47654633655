from collections import namedtuple

NEBImageRecord = namedtuple(
    "NEBImageRecord",
    ["image", "iteration", "R", "F", "perpendicular_force", "spring_force",
     "neb_force", "tangent", "dR_prev", "dR_next"],
)

RESULT_COLUMNS = ("image", "reaction_coordinate", "energy", "energy_difference",
                  "curvature", "max_neb_force")


class NEBObserver:
    """Receives the intermediate vectors of a band, one image at a time.

    Subclasses override what they need; the default implementation ignores
    everything.
    """

    def image_forces(self, record):
        pass

    def sweep_results(self, iteration, table):
        pass
