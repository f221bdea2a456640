"""Camera pose container for keyframed camera paths.

The transform is a flat, column-major 4x4 matrix (see ``campose.math3d``):

  transform[0:4]    right axis
  transform[4:8]    up axis
  transform[8:12]   ahead axis
  transform[12:16]  position (x, y, z, 1)

The orientation quaternion (x, y, z, w) is stored next to it. The two are
mutated independently: ``rotate`` only touches the quaternion and
``orthogonalize`` only touches the basis. Callers that need both in sync use
``update_basis_from_orientation`` / ``update_orientation_from_basis``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from .math3d.quaternion import (
    axis_angle_to_q,
    identity_q,
    mat_to_q,
    q_mul,
    q_normalize,
    q_to_mat,
)
from .math3d.vector import cross, dot, normalize

logger = logging.getLogger(__name__)

RIGHT_OFFSET = 0
UP_OFFSET = 4
AHEAD_OFFSET = 8
POSITION_OFFSET = 12


def _identity_transform() -> np.ndarray:
    return np.eye(4, dtype=np.float64).reshape(16)


def _any_perpendicular(v: np.ndarray) -> np.ndarray:
    # cross with the world axis least aligned with v
    helper = np.zeros(3, dtype=np.float64)
    helper[int(np.argmin(np.abs(v[:3])))] = 1.0
    out = cross(v, helper)
    normalize(out)
    return out


@dataclass(slots=True, eq=False)
class CameraPose:
    """Camera pose in world space.

    transform:
      16 doubles, four consecutive 4-vectors (right, up, ahead, position).
    orientation:
      Orientation quaternion [x, y, z, w], unit length.
    key_frame:
      True when this pose is a recorded animation keyframe.
    """

    transform: np.ndarray = field(default_factory=_identity_transform)
    orientation: np.ndarray = field(default_factory=identity_q)
    key_frame: bool = False

    def __post_init__(self) -> None:
        transform = np.array(self.transform, dtype=np.float64)
        if transform.size != 16:
            raise ValueError(f"transform must have 16 elements, got {transform.size}")
        orientation = np.array(self.orientation, dtype=np.float64)
        if orientation.size != 4:
            raise ValueError(f"orientation must have 4 elements, got {orientation.size}")
        self.transform = transform.reshape(16)
        self.orientation = orientation.reshape(4)
        self.key_frame = bool(self.key_frame)

    @classmethod
    def from_position_orientation(
        cls,
        position: np.ndarray,
        orientation: np.ndarray,
        key_frame: bool = False,
    ) -> "CameraPose":
        """Build a pose whose basis matches the given orientation."""
        pose = cls(orientation=orientation, key_frame=key_frame)
        q_normalize(pose.orientation)
        pose.update_basis_from_orientation()
        pose.position()[:3] = np.asarray(position, dtype=np.float64)[:3]
        return pose

    def copy(self) -> "CameraPose":
        return CameraPose(
            transform=self.transform.copy(),
            orientation=self.orientation.copy(),
            key_frame=self.key_frame,
        )

    def is_key_frame(self) -> bool:
        return self.key_frame

    def set_key_frame(self, flag: bool) -> None:
        self.key_frame = bool(flag)

    # Views into transform; writes go straight to the pose.
    def position(self) -> np.ndarray:
        return self.transform[POSITION_OFFSET : POSITION_OFFSET + 4]

    def right_axis(self) -> np.ndarray:
        return self.transform[RIGHT_OFFSET : RIGHT_OFFSET + 4]

    def up_axis(self) -> np.ndarray:
        return self.transform[UP_OFFSET : UP_OFFSET + 4]

    def ahead_axis(self) -> np.ndarray:
        return self.transform[AHEAD_OFFSET : AHEAD_OFFSET + 4]

    def move(self, d_right: float, d_up: float, d_ahead: float) -> None:
        """Translate along the pose's own (possibly drifted) axes."""
        step = (
            d_right * self.right_axis()[:3]
            + d_up * self.up_axis()[:3]
            + d_ahead * self.ahead_axis()[:3]
        )
        self.position()[:3] += step

    def move_absolute(self, direction: np.ndarray, distance: float) -> None:
        """Translate by direction * distance in world space. direction is used as given."""
        direction = np.asarray(direction, dtype=np.float64)
        self.position()[:3] += direction[:3] * distance

    def distance_to(self, other: "CameraPose") -> float:
        d = self.position()[:3] - other.position()[:3]
        return math.sqrt(dot(d, d))

    def rotate(self, angle_deg: float, axis_x: float, axis_y: float, axis_z: float) -> None:
        """Left-compose the orientation with a rotation of angle_deg about the axis.

        The basis vectors in transform are not updated.
        """
        axis = np.array([axis_x, axis_y, axis_z], dtype=np.float64)
        if not normalize(axis):
            logger.warning(
                "[POSE] rotate ignored, zero-length axis (%g, %g, %g)", axis_x, axis_y, axis_z
            )
            return
        q = axis_angle_to_q(axis, angle_deg)
        q_mul(q, self.orientation)
        self.orientation[:] = q
        q_normalize(self.orientation)

    def orthogonalize(self) -> None:
        """Gram-Schmidt the basis in place, keeping the ahead direction.

        Position and orientation are left alone.
        """
        right = self.right_axis()
        up = self.up_axis()
        ahead = self.ahead_axis()

        if not normalize(ahead):
            logger.debug("[POSE] ahead axis collapsed, rebuilding from right x up")
            ahead[:3] = cross(right, up)
            if not normalize(ahead):
                ahead[:3] = (0.0, 0.0, 1.0)

        right[:3] -= dot(right, ahead) * ahead[:3]
        if not normalize(right):
            logger.debug("[POSE] right axis parallel to ahead, rebuilding from up x ahead")
            right[:3] = cross(up, ahead)
            if not normalize(right):
                right[:3] = _any_perpendicular(ahead)

        up[:3] -= dot(up, ahead) * ahead[:3]
        up[:3] -= dot(up, right) * right[:3]
        if not normalize(up):
            logger.debug("[POSE] up axis collapsed, rebuilding from ahead x right")
            up[:3] = cross(ahead, right)
            normalize(up)

    def update_basis_from_orientation(self) -> None:
        q_to_mat(self.orientation, self.transform)

    def update_orientation_from_basis(self) -> None:
        self.orientation[:] = mat_to_q(self.transform)

    def basis_error(self) -> float:
        """Largest deviation of the basis from orthonormal."""
        axes = (self.right_axis(), self.up_axis(), self.ahead_axis())
        err = max(abs(math.sqrt(dot(a, a)) - 1.0) for a in axes)
        for i in range(3):
            for j in range(i + 1, 3):
                err = max(err, abs(dot(axes[i], axes[j])))
        return err

    def is_orthonormal(self, tol: float = 1e-10) -> bool:
        return self.basis_error() <= tol


def identity_pose() -> CameraPose:
    return CameraPose()
