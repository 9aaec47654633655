from nebfire.Utils.calc_tools import field_norm


def _normalize(tangent):
    norm = field_norm(tangent)
    if norm == 0.0:
        return tangent
    return tangent / norm


def calc_tangent(E_prev, E_this, E_next, dR_prev, dR_next):
    """Improved tangent estimate of an image.

    ref.: G. Henkelman, H. Jonsson, J. Chem. Phys. 113, 9978 (2000)

    Parameters
    ----------
    E_prev, E_this, E_next : float
        Energies of the previous, current and next image
    dR_prev : numpy.ndarray
        R[i] - R[i-1]
    dR_next : numpy.ndarray
        R[i+1] - R[i]

    Returns
    -------
    numpy.ndarray
        Normalized tangent, or the raw tangent when a norm it would be
        divided by is zero.
    """
    if E_next > E_this and E_this > E_prev:
        return _normalize(dR_next)

    elif E_next < E_this and E_this < E_prev:
        return _normalize(dR_prev)

    # extremum (or plateau), mix both directions weighted by energy
    dE_max = max(abs(E_next - E_this), abs(E_prev - E_this))
    dE_min = min(abs(E_next - E_this), abs(E_prev - E_this))
    if E_next > E_prev:
        tangent = dR_next * dE_max + dR_prev * dE_min
    else:
        tangent = dR_next * dE_min + dR_prev * dE_max

    if field_norm(dR_next) == 0.0 or field_norm(dR_prev) == 0.0:
        return tangent
    return _normalize(tangent)
