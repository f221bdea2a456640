"""3-vector helpers used by the pose basis.

Vectors are numpy float64 arrays. Only the first three components are read or
written, so the 4-slot blocks of a pose transform can be passed directly.
"""

from __future__ import annotations

import math

import numpy as np

# A vector of magnitude 1e-20 is rejected, a unit vector is accepted.
NORMALIZE_EPS = 1e-12


def dot(x: np.ndarray, y: np.ndarray) -> float:
    return float(x[0] * y[0] + x[1] * y[1] + x[2] * y[2])


def require_float_array(a: np.ndarray, name: str) -> None:
    """In-place helpers only accept floating-point numpy arrays."""
    if not isinstance(a, np.ndarray) or not np.issubdtype(a.dtype, np.floating):
        dtype = getattr(a, "dtype", type(a).__name__)
        raise ValueError(
            f"{name} must be a float numpy array for in-place update, got {dtype}"
        )


def normalize(x: np.ndarray, eps: float = NORMALIZE_EPS) -> bool:
    """Scale x[:3] to unit length in place.

    Returns False and leaves x untouched when its length is at or below eps.
    """
    require_float_array(x, "vector")
    length = math.sqrt(dot(x, x))
    if length <= eps:
        return False
    x[:3] /= length
    return True


def cross(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    return np.array(
        [
            x[1] * y[2] - x[2] * y[1],
            x[2] * y[0] - x[0] * y[2],
            x[0] * y[1] - x[1] * y[0],
        ],
        dtype=np.float64,
    )
