import numpy as np


def as_field(array):
    """Return a float64 copy of `array` shaped as (n_atoms, 3)."""
    return np.array(array, dtype="float64").reshape(-1, 3)


def zeros_like(field):
    return np.zeros_like(field, dtype="float64")


def atom_norms(field):
    """Euclidean norm of every atomic vector of a (n_atoms, 3) field."""
    return np.linalg.norm(np.asarray(field, dtype="float64").reshape(-1, 3), axis=1)


def field_norm(field):
    """Global norm of the flattened field."""
    return np.linalg.norm(np.asarray(field, dtype="float64").reshape(-1))


def norm1D(array):
    """Atom-wise norm of a vector field, absolute value of a flat vector.

    Parameters
    ----------
    array : numpy.ndarray
        Either a (n_atoms, 3) field or a 1-D array.

    Returns
    -------
    numpy.ndarray
        1-D array with one entry per atom (or per element for a flat vector).
    """
    array = np.asarray(array, dtype="float64")
    if array.ndim == 2:
        return atom_norms(array)
    return np.abs(array)


def max_atom_norm(field):
    return np.max(norm1D(field))


def flatdot(lhs, rhs):
    """Flatten both operands and return their dot product."""
    return np.dot(np.asarray(lhs, dtype="float64").reshape(-1),
                  np.asarray(rhs, dtype="float64").reshape(-1))


def project(field, onto):
    """Vector projection of `field` onto `onto`.

    No guard against a zero-norm `onto`: numpy yields nan there and the
    callers decide whether to check the norm first.
    """
    onto = np.asarray(onto, dtype="float64")
    return onto * (flatdot(field, onto) / flatdot(onto, onto))
