"""Quaternion utilities for camera orientation.

Conventions (shared with ``campose.pose``):
  - quaternions are float64 arrays ordered (x, y, z, w), scalar last
  - matrices are flat 16-element float64 arrays, column-major: slot 4*j + i
    holds row i, column j. The blocks at offsets 0, 4, 8 are therefore the
    rotated x, y, z axes and offset 12 holds the translation.
  - angles at the API boundary are in degrees

Functions documented as in-place mutate their array argument and return it.
Inputs are expected to be non-zero quaternions; q_normalize resets a zero
quaternion to identity rather than producing NaNs.
"""

from __future__ import annotations

import math

import numpy as np

from .vector import normalize, require_float_array

QUATERNION_ORDER = "xyzw"
MATRIX_LAYOUT = "column-major"
ANGLE_UNITS = "degrees"

# Above this |cos(angle)| slerp degrades to normalized lerp.
SLERP_LINEAR_THRESHOLD = 0.9995


def identity_q() -> np.ndarray:
    return np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64)


def _hamilton(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    ax, ay, az, aw = (float(c) for c in a)
    bx, by, bz, bw = (float(c) for c in b)
    return np.array(
        [
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
            aw * bw - ax * bx - ay * by - az * bz,
        ],
        dtype=np.float64,
    )


def _check_matrix(m: np.ndarray) -> None:
    # a 2-D (4, 4) array would be read in the wrong order
    if np.ndim(m) != 1 or np.size(m) != 16:
        raise ValueError(
            f"Expected flat 16-element column-major matrix, got shape {np.shape(m)}"
        )


def q_normalize(q: np.ndarray) -> np.ndarray:
    """Scale q to unit length in place. q must be a float array."""
    require_float_array(q, "quaternion")
    n = math.sqrt(float(np.dot(q, q)))
    if n < 1e-12:
        q[:] = identity_q()
        return q
    q /= n
    return q


def q_invert(q: np.ndarray) -> np.ndarray:
    """Inverse of a unit quaternion: its conjugate, renormalized. q is not modified."""
    out = np.array([-q[0], -q[1], -q[2], q[3]], dtype=np.float64)
    return q_normalize(out)


def q_mul(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """q1 <- q1 * q2 (Hamilton product, in place).

    The result applies q2's rotation first, then q1's. q1 must be a float array.
    """
    require_float_array(q1, "quaternion")
    q1[:] = _hamilton(q1, q2)
    return q1


def q_rotate_vec(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector v by unit quaternion q: v' = q*(v,0)*q^{-1}."""
    vq = np.array([float(v[0]), float(v[1]), float(v[2]), 0.0], dtype=np.float64)
    return _hamilton(_hamilton(q, vq), q_invert(q))[:3]


def axis_angle_to_q(axis: np.ndarray, angle_deg: float) -> np.ndarray:
    """Unit quaternion for a rotation of angle_deg about axis (any length > 0)."""
    unit = np.array([float(axis[0]), float(axis[1]), float(axis[2])], dtype=np.float64)
    if not normalize(unit):
        raise ValueError(f"rotation axis must be non-zero, got {tuple(unit)}")
    half = math.radians(angle_deg) / 2.0
    s = math.sin(half)
    return np.array(
        [unit[0] * s, unit[1] * s, unit[2] * s, math.cos(half)],
        dtype=np.float64,
    )


def q_to_mat(q: np.ndarray, m: np.ndarray) -> np.ndarray:
    """Write the 3x3 rotation block of q into m in place.

    Only slots 0-2, 4-6 and 8-10 are written; translation and the affine row
    belong to the caller. m must be a flat float array.
    """
    _check_matrix(m)
    require_float_array(m, "matrix")
    x, y, z, w = (float(c) for c in q)
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z

    # column 0
    m[0] = 1.0 - 2.0 * (yy + zz)
    m[1] = 2.0 * (xy + wz)
    m[2] = 2.0 * (xz - wy)
    # column 1
    m[4] = 2.0 * (xy - wz)
    m[5] = 1.0 - 2.0 * (xx + zz)
    m[6] = 2.0 * (yz + wx)
    # column 2
    m[8] = 2.0 * (xz + wy)
    m[9] = 2.0 * (yz - wx)
    m[10] = 1.0 - 2.0 * (xx + yy)
    return m


def mat_to_q(m: np.ndarray) -> np.ndarray:
    """Convert the rotation block of a column-major 4x4 matrix to a unit quaternion [x, y, z, w]."""
    _check_matrix(m)
    m = np.asarray(m, dtype=np.float64).reshape(16)
    R = m.reshape(4, 4).T

    trace = float(R[0, 0] + R[1, 1] + R[2, 2])
    if trace > 0.0:
        s = math.sqrt(trace + 1.0) * 2.0
        qw = 0.25 * s
        qx = (R[2, 1] - R[1, 2]) / s
        qy = (R[0, 2] - R[2, 0]) / s
        qz = (R[1, 0] - R[0, 1]) / s
    elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
        s = math.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2]) * 2.0
        qw = (R[2, 1] - R[1, 2]) / s
        qx = 0.25 * s
        qy = (R[0, 1] + R[1, 0]) / s
        qz = (R[0, 2] + R[2, 0]) / s
    elif R[1, 1] > R[2, 2]:
        s = math.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2]) * 2.0
        qw = (R[0, 2] - R[2, 0]) / s
        qx = (R[0, 1] + R[1, 0]) / s
        qy = 0.25 * s
        qz = (R[1, 2] + R[2, 1]) / s
    else:
        s = math.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1]) * 2.0
        qw = (R[1, 0] - R[0, 1]) / s
        qx = (R[0, 2] + R[2, 0]) / s
        qy = (R[1, 2] + R[2, 1]) / s
        qz = 0.25 * s

    return q_normalize(np.array([qx, qy, qz, qw], dtype=np.float64))


def q_slerp(
    q1: np.ndarray,
    q2: np.ndarray,
    t: float,
    linear_threshold: float = SLERP_LINEAR_THRESHOLD,
) -> np.ndarray:
    """Spherical linear interpolation between unit quaternions, t in [0, 1].

    Takes the shorter arc. The endpoints are returned as given, so t=1 yields
    q2 even when the arc was computed against -q2. In that case the
    components jump from about -q2 just below t=1 to q2 at t=1; both are the
    same rotation, but callers blending raw components should align signs
    (dot(q1, q2) >= 0) before interpolating.
    """
    q1 = np.asarray(q1, dtype=np.float64)
    q2 = np.asarray(q2, dtype=np.float64)
    if t <= 0.0:
        return q1.copy()
    if t >= 1.0:
        return q2.copy()

    target = q2
    cos_omega = float(np.dot(q1, q2))
    # take shortest path
    if cos_omega < 0.0:
        target = -q2
        cos_omega = -cos_omega

    if cos_omega > linear_threshold:
        # nearly identical, sin(omega) ~ 0
        return q_normalize(q1 + t * (target - q1))

    omega = math.acos(min(cos_omega, 1.0))
    sin_omega = math.sin(omega)
    s1 = math.sin((1.0 - t) * omega) / sin_omega
    s2 = math.sin(t * omega) / sin_omega
    return s1 * q1 + s2 * target
