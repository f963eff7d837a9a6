"""
Normalization Utilities
=======================
Min-max scaling with a safe degenerate case, and the fixed day-of-year scale.
"""

import numpy as np

DAYS_IN_YEAR = 366.0


def min_max_scale(value, vmin, vmax):
    """
    Scale value into [0, 1] against (vmin, vmax).

    Works on scalars and numpy arrays. When vmin == vmax the result is exactly
    0.0 (or an array of zeros) instead of a division by zero.

    Args:
        value: float or numpy array
        vmin: Lower bound
        vmax: Upper bound

    Returns:
        Scaled value with the same shape as the input
    """
    if vmax == vmin:
        if np.ndim(value) == 0:
            return 0.0
        return np.zeros(np.shape(value), dtype=np.float64)
    if np.ndim(value) == 0:
        return (float(value) - vmin) / (vmax - vmin)
    return (np.asarray(value, dtype=np.float64) - vmin) / (vmax - vmin)


def scale_day_of_year(doy):
    """Scale day-of-year by the constant 366 (not min-max)."""
    if np.ndim(doy) == 0:
        return float(doy) / DAYS_IN_YEAR
    return np.asarray(doy, dtype=np.float64) / DAYS_IN_YEAR
