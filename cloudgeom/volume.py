"""Blob volume estimation by normal-aligned height slices.

Material above a reference plane is cut into bands of constant thickness
along the plane normal. Each band's cross-section is replaced by a disc whose
radius is the RMS distance of the band's points from their centroid, and the
volume is the sum of disc area times thickness.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import numpy as np

from exceptions.exceptions import InvalidArgumentError
from .arrays import as_points, frozen, in_plane_axes
from .plane import PlaneFitResult

logger = logging.getLogger(__name__)

_EPS_SQ = 1e-12


@dataclass(frozen=True)
class BlobSlice:
    """One height band [h0, h1) of a blob, approximated as a disc."""

    h0: float
    h1: float
    h_center: float
    center_world: np.ndarray
    normal: np.ndarray
    radius: float
    area: float
    point_count: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "center_world", frozen(self.center_world))
        object.__setattr__(self, "normal", frozen(self.normal))


@dataclass(frozen=True)
class BlobVolumeResult:
    volume: float
    slices: Tuple[BlobSlice, ...] = field(default_factory=tuple)
    plane: Optional[PlaneFitResult] = None  # orientation-normalized plane actually used
    retained_points: int = 0

    @property
    def is_empty(self) -> bool:
        return len(self.slices) == 0


def oriented_upward(plane: PlaneFitResult) -> PlaneFitResult:
    """Return `plane` or a flipped copy so the normal has a non-negative Z component."""
    if float(plane.normal[2]) < 0.0:
        return plane.flipped()
    return plane


def local_coordinates(points: np.ndarray, plane: PlaneFitResult) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """(u, v, h) coordinates of points relative to the plane centroid."""
    n = plane.normal / np.linalg.norm(plane.normal)
    u_axis, v_axis = in_plane_axes(n)
    rel = points - plane.centroid
    return rel @ u_axis, rel @ v_axis, rel @ n


def _band_indices(h: np.ndarray, min_h: float, thickness: float) -> np.ndarray:
    """Band index of every height, matching `min_h + i*t <= h < min_h + (i+1)*t` exactly."""
    idx = np.floor((h - min_h) / thickness).astype(np.int64)
    # floor of the quotient can land one band off at the edges; compare
    # against the same bound expressions a per-band scan would use
    lower = min_h + idx * thickness
    idx = np.where(h < lower, idx - 1, idx)
    upper = min_h + (idx + 1) * thickness
    idx = np.where(h >= upper, idx + 1, idx)
    return idx


def estimate_blob_volume_by_slices(
    points: Any,
    plane: PlaneFitResult,
    slice_thickness: float,
    min_points_per_slice: int = 50,
) -> BlobVolumeResult:
    """Estimate the volume of material protruding above a reference plane.

    Args:
        points: (N, 3) cloud, same unit as the plane.
        plane: reference plane; its centroid is height zero. The caller's
            value is never modified; a downward normal is replaced by a
            flipped copy returned in the result.
        slice_thickness: band height along the normal, > 0.
        min_points_per_slice: bands with fewer points are left out.

    Returns:
        BlobVolumeResult with the total volume (cubic input unit) and the
        accepted slices in ascending height. A degenerate plane or a cloud
        with nothing above the plane yields volume 0 and no slices.

    Raises:
        InvalidArgumentError: slice_thickness <= 0, or a missing cloud/plane.
    """
    if slice_thickness is None or not slice_thickness > 0:
        raise InvalidArgumentError(
            f"slice_thickness must be > 0, got {slice_thickness}", context="estimate_blob_volume_by_slices"
        )
    if plane is None:
        raise InvalidArgumentError("plane must not be None", context="estimate_blob_volume_by_slices")
    pts = as_points(points)

    n_raw = np.asarray(plane.normal, dtype=float)
    if float(n_raw @ n_raw) < _EPS_SQ:
        logger.debug("Degenerate reference plane; reporting zero volume")
        return BlobVolumeResult(volume=0.0)

    plane = oriented_upward(plane)
    n = plane.normal / np.linalg.norm(plane.normal)
    u_axis, v_axis = in_plane_axes(n)

    if len(pts) == 0:
        return BlobVolumeResult(volume=0.0, plane=plane)

    rel = pts - plane.centroid
    h = rel @ n
    above = h > 0.0
    if not np.any(above):
        return BlobVolumeResult(volume=0.0, plane=plane)

    u = rel[above] @ u_axis
    v = rel[above] @ v_axis
    h = h[above]

    min_h = max(float(h.min()), 0.0)
    max_h = float(h.max())
    slice_count = int(math.ceil((max_h - min_h) / slice_thickness))
    if slice_count <= 0:
        return BlobVolumeResult(volume=0.0, plane=plane, retained_points=int(len(h)))

    band = _band_indices(h, min_h, slice_thickness)
    in_range = (band >= 0) & (band < slice_count)
    band, u, v = band[in_range], u[in_range], v[in_range]

    order = np.argsort(band, kind="stable")
    band, u, v = band[order], u[order], v[order]
    starts = np.searchsorted(band, np.arange(slice_count), side="left")
    ends = np.searchsorted(band, np.arange(slice_count), side="right")

    total = 0.0
    slices: List[BlobSlice] = []
    for i in range(slice_count):
        count = int(ends[i] - starts[i])
        if count < min_points_per_slice or count == 0:
            logger.debug("slice %d skipped: %d points (< %d)", i, count, min_points_per_slice)
            continue

        su = u[starts[i]:ends[i]]
        sv = v[starts[i]:ends[i]]
        cx = float(su.mean())
        cy = float(sv.mean())
        mean_sq = float(np.mean((su - cx) ** 2 + (sv - cy) ** 2))
        radius = math.sqrt(mean_sq)
        if radius <= 0.0:
            logger.debug("slice %d skipped: zero radius", i)
            continue

        h0 = min_h + i * slice_thickness
        h1 = min_h + (i + 1) * slice_thickness
        hc = 0.5 * (h0 + h1)
        area = math.pi * radius * radius
        total += area * slice_thickness

        center = plane.centroid + n * hc + u_axis * cx + v_axis * cy
        slices.append(
            BlobSlice(
                h0=h0,
                h1=h1,
                h_center=hc,
                center_world=center,
                normal=n,
                radius=radius,
                area=area,
                point_count=count,
            )
        )

    return BlobVolumeResult(volume=float(total), slices=tuple(slices), plane=plane, retained_points=int(len(h)))


def blob_footprint_area(points: Any, plane: PlaneFitResult) -> float:
    """Area of the 2D convex hull of the protruding points in the plane frame.

    For 2D, scipy ConvexHull.volume equals polygon area. Returns 0.0 when
    fewer than three points lie above the plane or the hull is flat.
    """
    from scipy.spatial import ConvexHull, QhullError

    pts = as_points(points)
    n_raw = np.asarray(plane.normal, dtype=float)
    if len(pts) == 0 or float(n_raw @ n_raw) < _EPS_SQ:
        return 0.0
    u, v, h = local_coordinates(pts, oriented_upward(plane))
    above = h > 0.0
    if int(above.sum()) < 3:
        return 0.0
    try:
        hull = ConvexHull(np.column_stack([u[above], v[above]]))
    except QhullError:
        return 0.0
    return float(hull.volume)
