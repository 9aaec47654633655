import logging

import numpy as np

from nebfire.MEP.observer import NEBImageRecord
from nebfire.MEP.tangent import calc_tangent
from nebfire.Utils.calc_tools import field_norm, flatdot, norm1D, project

logger = logging.getLogger(__name__)


class CalculationNEB:
    """Nudged elastic band force of the interior images of a chain.

    ref.: G. Henkelman, H. Jonsson, J. Chem. Phys. 113, 9978 (2000)
    ref.: G. Henkelman, B. P. Uberuaga, H. Jonsson, J. Chem. Phys. 113, 9901 (2000)

    The chain is read, never written, apart from its iteration counter which
    is advanced once per sweep by `force(1)`.
    """

    neb_type = "NEB"
    label = "Nudged Elastic Band"

    def __init__(self, chain, observers=None, **config):
        self.chain = chain
        self.config = config
        self.observers = list(observers) if observers is not None else []

    def add_observer(self, observer):
        self.observers.append(observer)

    def tangent(self, image):
        self.chain.check_index(image)
        chain = self.chain
        return calc_tangent(chain[image - 1].E, chain[image].E, chain[image + 1].E,
                            chain.displacement(image - 1, image),
                            chain.displacement(image, image + 1))

    def climbing(self, image):
        """True if the image lies higher than both neighbours by more than the tolerance."""
        self.chain.check_index(image)
        E_prev = self.chain[image - 1].E
        E_this = self.chain[image].E
        E_next = self.chain[image + 1].E
        tol = self.chain.climbing_tol
        return (E_this - E_prev > tol) and (E_this - E_next > tol)

    def climbing_active(self, image):
        # Only run climbing image after a certain amount of steps
        return self.chain.niter > self.chain.climbing and self.climbing(image)

    def spring_force(self, image):
        self.chain.check_index(image)
        dR_prev = field_norm(self.chain.displacement(image - 1, image))
        dR_next = field_norm(self.chain.displacement(image, image + 1))
        return self.chain.k[image] * (dR_next - dR_prev) * self.tangent(image)

    def perpendicular_force(self, image):
        self.chain.check_index(image)
        F = self.chain[image].F
        tangent = self.tangent(image)
        if field_norm(tangent) == 0.0:
            return F
        return F - project(F, tangent)

    def perpendicular_spring_force(self, image):
        self.chain.check_index(image)
        spring_F = self.spring_force(image)
        tangent = self.tangent(image)
        if field_norm(tangent) == 0.0:
            return spring_F
        return spring_F - project(spring_F, tangent)

    def curvature(self, image):
        """Force component along the (normalized) tangent."""
        self.chain.check_index(image)
        return flatdot(self.chain[image].F, self.tangent(image))

    def climbing_force(self, image):
        F = self.chain[image].F
        return F - 2.0 * project(F, self.tangent(image))

    def neb_force(self, image):
        self.chain.check_index(image)
        if self.climbing_active(image):
            return self.climbing_force(image)
        return self.perpendicular_force(image) + self.spring_force(image)

    def force(self, image):
        """Per-sweep entry point: NEB force of `image`, observers are notified."""
        self.chain.check_index(image)
        if image == 1:
            self.chain.increment_iteration()

        chain = self.chain
        tangent = self.tangent(image)
        perp_F = self.perpendicular_force(image)
        spring_F = self.spring_force(image)
        NEB_F = self.neb_force(image)

        if self.observers:
            record = NEBImageRecord(
                image=image,
                iteration=chain.niter,
                R=chain[image].R,
                F=chain[image].F,
                perpendicular_force=perp_F,
                spring_force=spring_F,
                neb_force=NEB_F,
                tangent=tangent,
                dR_prev=chain.displacement(image - 1, image),
                dR_next=chain.displacement(image, image + 1),
            )
            for observer in self.observers:
                observer.image_forces(record)

        return NEB_F

    def save(self):
        """Collect the results of the current sweep and hand them to the observers.

        Returns
        -------
        numpy.ndarray
            (n_images + 2, 6) table: image, reaction coordinate, energy,
            energy relative to the initial image, curvature and the maximum
            atomic norm of the NEB force (zero for the end points).
        """
        chain = self.chain
        n_total = chain.n_images + 2
        E0 = chain[0].E
        reaction_coordinates = chain.reaction_coordinates()
        table = np.zeros((n_total, 6))
        for i in range(n_total):
            row = table[i]
            row[0] = i
            row[1] = reaction_coordinates[i]
            row[2] = chain[i].E
            row[3] = chain[i].E - E0
            if i == 0 or i == n_total - 1:
                continue
            row[4] = self.curvature(i)
            row[5] = np.max(norm1D(self.neb_force(i)))

        for observer in self.observers:
            observer.sweep_results(chain.niter, table)
        return table

    def info(self):
        chain = self.chain
        lines = [
            "============================================",
            f"  The NEB type is : {self.label}",
            "============================================",
            f"NEB has {chain.n_images} images",
            f"NEB uses climbing after {chain.climbing} steps",
            "NEB reaction coordinates: ",
            str(chain.reaction_coordinates()[1:]),
            "NEB spring constant: ",
            str(chain.k.default) if chain.k.is_uniform() else str(chain.spring_constants()),
        ]
        text = "\n".join(lines)
        logger.info("\n%s", text)
        return text
