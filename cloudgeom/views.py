from __future__ import annotations

from enum import Enum
from typing import Any

import numpy as np

from .arrays import as_points


class ViewFace(str, Enum):
    FRONT = "front"    # XZ plane (look along +-Y)
    BACK = "back"      # same projection as FRONT
    LEFT = "left"      # same projection as RIGHT
    RIGHT = "right"    # YZ plane (look along +-X)
    TOP = "top"        # XY plane (look along +-Z)
    BOTTOM = "bottom"  # same projection as TOP


# (horizontal, vertical) axes kept for each face
_FACE_AXES = {
    ViewFace.FRONT: (0, 2),
    ViewFace.BACK: (0, 2),
    ViewFace.LEFT: (1, 2),
    ViewFace.RIGHT: (1, 2),
    ViewFace.TOP: (0, 1),
    ViewFace.BOTTOM: (0, 1),
}


def project_to_face(points: Any, face: ViewFace) -> np.ndarray:
    """Drop the viewing axis: (N, 3) -> (N, 2)."""
    pts = as_points(points)
    a, b = _FACE_AXES[ViewFace(face)]
    return pts[:, [a, b]].copy()


def project_to_face_3d(points: Any, face: ViewFace) -> np.ndarray:
    """Squash the viewing axis to zero, keeping 3D coordinates."""
    pts = as_points(points)
    keep = list(_FACE_AXES[ViewFace(face)])
    out = np.zeros_like(pts)
    out[:, keep] = pts[:, keep]
    return out
