"""Vector and quaternion primitives for camera poses."""

from .quaternion import (
    ANGLE_UNITS,
    MATRIX_LAYOUT,
    QUATERNION_ORDER,
    SLERP_LINEAR_THRESHOLD,
    axis_angle_to_q,
    identity_q,
    mat_to_q,
    q_invert,
    q_mul,
    q_normalize,
    q_rotate_vec,
    q_slerp,
    q_to_mat,
)
from .vector import NORMALIZE_EPS, cross, dot, normalize

__all__ = [
    "ANGLE_UNITS",
    "MATRIX_LAYOUT",
    "NORMALIZE_EPS",
    "QUATERNION_ORDER",
    "SLERP_LINEAR_THRESHOLD",
    "axis_angle_to_q",
    "cross",
    "dot",
    "identity_q",
    "mat_to_q",
    "normalize",
    "q_invert",
    "q_mul",
    "q_normalize",
    "q_rotate_vec",
    "q_slerp",
    "q_to_mat",
]
