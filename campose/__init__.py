"""Camera pose container and vector/quaternion primitives for keyframed camera paths."""

from .pose import CameraPose, identity_pose

__all__ = [
    "CameraPose",
    "identity_pose",
]
