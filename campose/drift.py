"""Orientation/basis drift check.

Composes many incremental rotations on a pose the way an interactive camera
does: the quaternion through ``CameraPose.rotate`` and the basis vectors by
rotating each stored axis. Floating error accumulates in the basis until
``orthogonalize`` corrects it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .config import DriftCheckConfig
from .math3d.quaternion import axis_angle_to_q, mat_to_q, q_rotate_vec
from .pose import CameraPose, identity_pose

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DriftReport:
    steps: int
    orientation_norm_error: float
    basis_error_before: float
    basis_error_after: float
    orientation_gap_deg: float
    tolerance: float

    @property
    def ok(self) -> bool:
        return self.basis_error_after <= self.tolerance


def orientation_gap_deg(pose: CameraPose) -> float:
    """Angle between the stored quaternion and the rotation encoded by the basis."""
    q_basis = mat_to_q(pose.transform)
    d = min(1.0, abs(float(np.dot(q_basis, pose.orientation))))
    return math.degrees(2.0 * math.acos(d))


def run_drift_check(cfg: DriftCheckConfig, pose: CameraPose | None = None) -> DriftReport:
    pose = pose if pose is not None else identity_pose()
    rng = np.random.default_rng(cfg.seed)
    axes = (pose.right_axis(), pose.up_axis(), pose.ahead_axis())

    for step in range(1, cfg.steps + 1):
        axis = rng.normal(size=3)
        pose.rotate(cfg.angle_deg, *axis)
        q_inc = axis_angle_to_q(axis, cfg.angle_deg)
        for view in axes:
            view[:3] = q_rotate_vec(q_inc, view)
        if cfg.orthogonalize_every and step % cfg.orthogonalize_every == 0:
            pose.orthogonalize()
            logger.debug("[DRIFT] step %d orthogonalized", step)

    norm_error = abs(math.sqrt(float(np.dot(pose.orientation, pose.orientation))) - 1.0)
    before = pose.basis_error()
    pose.orthogonalize()
    after = pose.basis_error()
    gap = orientation_gap_deg(pose)

    logger.info(
        "[DRIFT] steps=%d angle=%.3fdeg |q|-1=%.3e basis_err before=%.3e after=%.3e gap=%.3edeg",
        cfg.steps,
        cfg.angle_deg,
        norm_error,
        before,
        after,
        gap,
    )
    return DriftReport(
        steps=cfg.steps,
        orientation_norm_error=norm_error,
        basis_error_before=before,
        basis_error_after=after,
        orientation_gap_deg=gap,
        tolerance=cfg.tolerance,
    )
