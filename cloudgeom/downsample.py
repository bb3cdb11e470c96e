from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np

from exceptions.exceptions import InvalidArgumentError
from .arrays import as_points

logger = logging.getLogger(__name__)


def voxel_cell_indices(points: np.ndarray, cell_size: float) -> np.ndarray:
    """Integer (ix, iy, iz) grid cell of every point, floor(coord / cell_size)."""
    return np.floor(points / cell_size).astype(np.int64)


def voxel_down_sample(points: Any, cell_size: float) -> np.ndarray:
    """Keep the first point seen in each occupied cubic cell.

    Unlike Open3D's voxel_down_sample this does not average: surviving points
    are original input points, in first-occurrence order.

    Args:
        points: (N, 3) array-like.
        cell_size: edge length of the grid cells, same unit as the points.

    Returns:
        (M, 3) array with M <= N and no two rows sharing a cell.
    """
    if cell_size is None or not math.isfinite(cell_size) or cell_size <= 0:
        raise InvalidArgumentError(f"cell_size must be > 0, got {cell_size}", context="voxel_down_sample")
    pts = as_points(points)
    if len(pts) == 0:
        return pts.copy()

    cells = voxel_cell_indices(pts, cell_size)
    # np.unique returns the index of the first occurrence of each row
    _, first_idx = np.unique(cells, axis=0, return_index=True)
    keep = np.sort(first_idx)
    logger.debug("voxel_down_sample: %d -> %d points (cell %.4g)", len(pts), len(keep), cell_size)
    return pts[keep]
