from abc import ABC, abstractmethod

from nebfire.Utils import calc_tools


class Optimizer(ABC):
    """Base class for the per-image relaxation algorithms of a band.

    Every optimizer owns its own state, is fed the current coordinates `F`
    and the driving force `G` of a single image and returns the updated
    coordinates. The vector algebra is shared with the NEB force composer.
    """

    norm1D = staticmethod(calc_tools.norm1D)
    flatdot = staticmethod(calc_tools.flatdot)

    is_optimized = False
    niter = 0

    @abstractmethod
    def reset(self):
        """Restore the adaptive parameters to their initial values"""
        pass

    @abstractmethod
    def optimize(self, F, G):
        """Execute optimization step"""
        pass

    @property
    def is_converged(self):
        return self.is_optimized

    def iteration(self):
        return self.niter

    def info(self):
        return type(self).__name__
