"""Small array helpers shared by the geometry modules."""
from __future__ import annotations

from typing import Any

import numpy as np

from exceptions.exceptions import InvalidArgumentError


def as_points(points: Any, name: str = "points") -> np.ndarray:
    """Return `points` as a float64 (N, 3) array.

    Raises InvalidArgumentError for None or a wrongly shaped input. An empty
    sequence becomes a (0, 3) array.
    """
    if points is None:
        raise InvalidArgumentError(f"{name} must not be None", context=name)
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidArgumentError(f"{name} must have shape (N, 3), got {arr.shape}", context=name)
    return arr


def as_vector(value: Any, name: str = "vector") -> np.ndarray:
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None", context=name)
    arr = np.asarray(value, dtype=np.float64).reshape(-1)
    if arr.shape != (3,):
        raise InvalidArgumentError(f"{name} must have 3 components, got {arr.shape}", context=name)
    return arr


def frozen(arr: np.ndarray) -> np.ndarray:
    """Read-only float64 copy, so value objects cannot be patched in place."""
    out = np.array(arr, dtype=np.float64, copy=True)
    out.flags.writeable = False
    return out


def normalized(vec: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(vec))
    if n == 0.0:
        return np.zeros(3, dtype=np.float64)
    return vec / n


def in_plane_axes(normal: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return (u, v) completing `normal` to a right-handed orthonormal frame.

    The helper axis is +Z unless the normal is within ~25 degrees of vertical,
    where +Y is used so that u stays well conditioned.
    """
    helper = np.array([0.0, 0.0, 1.0])
    if abs(float(normal[2])) >= 0.9:
        helper = np.array([0.0, 1.0, 0.0])
    u = normalized(np.cross(helper, normal))
    v = normalized(np.cross(normal, u))
    return u, v
