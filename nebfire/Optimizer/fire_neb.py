import logging

import numpy as np

from nebfire.errors import ConfigurationError, ShapeMismatchError
from nebfire.Optimizer.optimizer_base import Optimizer
from nebfire.Utils.calc_tools import zeros_like
from nebfire.Utils.lookup import DefaultLookup

logger = logging.getLogger(__name__)

VALID_MODES = ("local", "global")


class FIRE(Optimizer):
    """Fast Inertial Relaxation Engine for a single image of a band.

    E. Bitzek, P. Koskinen, F. Gähler, M. Moseler, P. Gumbsch,
    Structural relaxation made simple, Phys. Rev. Lett. 97, 170201 (2006).

    The MD step is an Euler step with mid-point correction,
    dF = [V(0) + G*dt/2] * dt.

    Parameters
    ----------
    dt_init : float, optional
        Initial time step, default 1.0
    dt_max : float, optional
        Maximum time step, default 10 * dt_init
    dt_min : float, optional
        Lower bound of the time step, default 1e-8 * dt_init
    f_inc, f_dec : float, optional
        Time step increase/decrease factors, default 1.1 / 0.5
    f_alpha : float, optional
        Decay factor of the mixing parameter, default 0.99
    alpha_init : float, optional
        Initial mixing parameter, default 0.1
    N_min : int, optional
        Consecutive steps with positive power before accelerating, default 5
    correct : str, optional
        "local" clamps every coordinate of the step to max_dF,
        "global" rescales the whole step (default "local")
    direction : str, optional
        "global" mixes the velocity with the globally rescaled force,
        "local" rescales per atom (default "global")
    max_dF : float, optional
        Maximum displacement, default 0.1
    tolerance : float, optional
        Convergence tolerance of the maximum atomic force, default 0.02
    mass : float, dict or list, optional
        Atomic masses, uniform unit mass when not given
    fixed_atom : int, optional
        Atom whose force is zeroed when no atom is constrained, default 0
    """

    def __init__(self, **config):
        self.config = config

        self.dt_init = config.get("dt_init", 1.0)
        self.dt_max = config.get("dt_max", 10.0 * self.dt_init)
        self.dt_min = config.get("dt_min", 1e-8 * self.dt_init)

        self.f_inc = config.get("f_inc", 1.1)
        self.f_dec = config.get("f_dec", 0.5)
        self.f_alpha = config.get("f_alpha", 0.99)
        self.alpha_init = config.get("alpha_init", 0.1)
        self.N_min = config.get("N_min", 5)

        self.correct = config.get("correct", "local")
        self.direction = config.get("direction", "global")
        self.max_dF = config.get("max_dF", 0.1)
        self.tolerance = config.get("tolerance", 0.02)
        self.fixed_atom = config.get("fixed_atom", 0)

        self._check_mode("direction", self.direction)
        self._check_mode("correct", self.correct)

        # Counter for number of P > 0
        self.n_P_pos = 0
        self.niter = 0
        self.is_optimized = False
        self.weight = 0.0
        self._constraint_reported = False
        self.V = None
        self.mass = None
        self.set_mass(config.get("mass", None))

        self.reset()

    @staticmethod
    def _check_mode(name, value):
        if value not in VALID_MODES:
            raise ConfigurationError(
                f"FIRE: {name} variable must be either local/global, got {value!r}")

    def reset(self):
        """Reset time step and mixing parameter, configuration is kept."""
        self.dt = self.dt_init
        self.alpha = self.alpha_init
        if self.mass is None:
            self.set_mass()

    def set_velocity(self, V):
        self.V = np.array(V, dtype="float64")

    def set_mass(self, mass=None):
        """Update the masses, uniform unit mass when `mass` is None."""
        self.mass = DefaultLookup.from_value(mass, 1.0)

    def correct_dF(self, dF):
        """Limit the step to `max_dF` according to the correction mode."""
        self._check_mode("correct", self.correct)

        if self.correct == "global":
            max_norm = np.max(self.norm1D(dF))
            if max_norm <= self.max_dF:
                return dF
            return dF * (self.max_dF / max_norm)

        return np.clip(dF, -self.max_dF, self.max_dF)

    def MD(self, V, G):
        # dF = V(0) * dt / 2 + [V(0) + G*dt] * dt / 2
        return (V + G * (self.dt / 2.0)) * self.dt

    def optimized(self, G):
        """Determine whether the maximum atomic force is below tolerance."""
        norm = np.max(self.norm1D(G))
        self.is_optimized = bool(norm < self.tolerance)
        return self.is_optimized

    def _enforce_constraint(self, G):
        # MD based relaxation requires at least one fixed atom
        if G.ndim != 2 or np.min(self.norm1D(G)) == 0.0:
            return G
        if not self._constraint_reported:
            logger.warning("FIRE: enforcing constraint on atom %d, the FIRE algorithm is MD based "
                           "and requires at least a fixed atom", self.fixed_atom)
            self._constraint_reported = True
        G[self.fixed_atom] = 0.0
        return G

    def _mix_velocity(self, G):
        self._check_mode("direction", self.direction)

        V = (1.0 - self.alpha) * self.V
        if self.direction == "global":
            V = V + self.alpha * G / np.sqrt(self.flatdot(G, G)) * np.sqrt(self.flatdot(self.V, self.V))
            return V

        G_norms = self.norm1D(G)
        V_norms = self.norm1D(self.V)
        for i in range(len(V)):
            if G_norms[i] != 0.0:
                V[i] = V[i] + self.alpha * G[i] / G_norms[i] * V_norms[i]
        return V

    def optimize(self, F, G):
        """Calculate the new coordinates of one FIRE step.

        Parameters
        ----------
        F : numpy.ndarray
            Current coordinates
        G : numpy.ndarray
            Driving force (NEB force) at `F`

        Returns
        -------
        numpy.ndarray
            Updated coordinates, an unchanged copy of `F` once converged
        """
        F = np.asarray(F, dtype="float64")
        G = np.array(G, dtype="float64")
        if G.shape != F.shape:
            raise ShapeMismatchError(f"FIRE: force shape {G.shape} does not match coordinates {F.shape}")

        if self.V is None:
            self.set_velocity(zeros_like(G))

        # Convergence is judged before the constraint is enforced
        self.optimized(G)
        G = self._enforce_constraint(G)

        P = self.flatdot(G, self.V)

        if P > 0.0:
            V = self._mix_velocity(G)
            if self.n_P_pos >= self.N_min:
                self.dt = min(self.dt * self.f_inc, self.dt_max)
                self.alpha = self.alpha * self.f_alpha
            self.n_P_pos += 1
        else:
            # Climbing up hill, stop
            V = self.V * 0.0
            self.dt = max(self.dt * self.f_dec, self.dt_min)
            self.alpha = self.alpha_init
            self.n_P_pos = 0

        dF = self.MD(V, G)
        self.weight = abs(self.flatdot(G, dF))
        dF = self.correct_dF(dF)

        self.set_velocity(V + G * self.dt)

        if not self.is_optimized:
            new_F = F + dF
        else:
            new_F = F.copy()

        self.niter += 1
        logger.debug("FIRE: iter %d  P=%.6e  dt=%.6f  alpha=%.6f  n_P_pos=%d",
                     self.niter, P, self.dt, self.alpha, self.n_P_pos)
        return new_F

    def info(self):
        lines = [
            f"FIRE: dT initial / current / max:  {self.dt_init:.4f} / {self.dt:.4f} / {self.dt_max:.4f}",
            f"FIRE: alpha initial / current:  {self.alpha_init:.4f} / {self.alpha:.4f}",
            f"FIRE: # of positive G.V {self.n_P_pos}",
            f"FIRE: Tolerance {self.tolerance:.4f}",
            f"FIRE: Maximum change {self.max_dF:.4f}",
            f"FIRE: Direction update: {self.direction}",
            f"FIRE: Correction update: {self.correct}",
        ]
        text = "\n".join(lines)
        logger.info("\n%s", text)
        return text
