from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np

from exceptions.exceptions import DegenerateGeometryError, InvalidArgumentError
from .arrays import as_points, as_vector, frozen, in_plane_axes

_EPS_SQ = 1e-12


@dataclass(frozen=True)
class PlaneBasis:
    """Orthonormal frame anchored on a plane.

    `origin` is a point on the plane, `u` and `v` span it and `normal` is
    perpendicular to both. Arrays are stored as read-only copies.
    """

    origin: np.ndarray
    u: np.ndarray
    v: np.ndarray
    normal: np.ndarray

    def __post_init__(self) -> None:
        for name in ("origin", "u", "v", "normal"):
            object.__setattr__(self, name, frozen(as_vector(getattr(self, name), name)))


@dataclass(frozen=True)
class PlaneFitResult:
    """A plane basis plus the anchor point heights are measured from."""

    basis: PlaneBasis
    centroid: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "centroid", frozen(as_vector(self.centroid, "centroid")))

    @property
    def normal(self) -> np.ndarray:
        return self.basis.normal

    @property
    def origin(self) -> np.ndarray:
        return self.basis.origin

    def flipped(self) -> "PlaneFitResult":
        """Same plane with the normal reversed; v is negated too so v = n x u still holds."""
        b = self.basis
        return PlaneFitResult(
            basis=PlaneBasis(origin=b.origin, u=b.u, v=-b.v, normal=-b.normal),
            centroid=self.centroid,
        )


def create_plane_from_triangle(p0: Any, p1: Any, p2: Any) -> PlaneBasis:
    """Build a plane basis from three points.

    The normal follows the winding p0 -> p1 -> p2 (right-hand rule), u points
    along p1 - p0 and the origin is p0.

    Raises:
        DegenerateGeometryError: an edge is (nearly) zero length or the points
            are colinear.
    """
    a = as_vector(p0, "p0")
    e1 = as_vector(p1, "p1") - a
    e2 = as_vector(p2, "p2") - a

    if float(e1 @ e1) < _EPS_SQ or float(e2 @ e2) < _EPS_SQ:
        raise DegenerateGeometryError("Triangle edges are degenerate.", context="create_plane_from_triangle")

    n = np.cross(e1, e2)
    if float(n @ n) < _EPS_SQ:
        raise DegenerateGeometryError(
            "Triangle points are colinear, cannot form a plane.", context="create_plane_from_triangle"
        )

    n = n / np.linalg.norm(n)
    u = e1 / np.linalg.norm(e1)
    v = np.cross(n, u)
    v = v / np.linalg.norm(v)
    return PlaneBasis(origin=a, u=u, v=v, normal=n)


def plane_fit_from_triangle(p0: Any, p1: Any, p2: Any) -> PlaneFitResult:
    """Plane fit anchored at the triangle centroid."""
    basis = create_plane_from_triangle(p0, p1, p2)
    centroid = (as_vector(p0, "p0") + as_vector(p1, "p1") + as_vector(p2, "p2")) / 3.0
    return PlaneFitResult(basis=basis, centroid=centroid)


def project_point_to_plane_2d(point: Any, basis: PlaneBasis) -> Tuple[float, float]:
    """In-plane (u, v) coordinates of a point."""
    vec = as_vector(point, "point") - basis.origin
    return float(vec @ basis.u), float(vec @ basis.v)


def project_point_to_plane_3d(point: Any, basis: PlaneBasis) -> np.ndarray:
    """Orthogonally project a 3D point onto the plane."""
    p = as_vector(point, "point")
    dist = float((p - basis.origin) @ basis.normal)  # signed distance
    return p - dist * basis.normal


def project_points_to_plane_2d(points: Any, basis: PlaneBasis) -> np.ndarray:
    """Batch form of `project_point_to_plane_2d`; returns (N, 2) in input order."""
    pts = as_points(points)
    rel = pts - basis.origin
    return np.column_stack([rel @ basis.u, rel @ basis.v])


def project_points_to_plane_3d(points: Any, basis: PlaneBasis) -> np.ndarray:
    """Batch form of `project_point_to_plane_3d`; returns (N, 3) in input order."""
    pts = as_points(points)
    dists = (pts - basis.origin) @ basis.normal
    return pts - dists[:, None] * basis.normal


def project_points_to_plane_2d_from_triangle(points: Any, p0: Any, p1: Any, p2: Any) -> np.ndarray:
    pts = as_points(points)
    return project_points_to_plane_2d(pts, create_plane_from_triangle(p0, p1, p2))


def project_points_to_plane_3d_from_triangle(points: Any, p0: Any, p1: Any, p2: Any) -> np.ndarray:
    pts = as_points(points)
    return project_points_to_plane_3d(pts, create_plane_from_triangle(p0, p1, p2))


def signed_heights(points: Any, plane: PlaneFitResult) -> np.ndarray:
    """Signed distance of each point from the plane, positive along the normal."""
    pts = as_points(points)
    return (pts - plane.centroid) @ plane.normal


def fit_reference_plane(
    points: Any,
    distance_threshold: float = 0.5,
    ransac_n: int = 3,
    num_iterations: int = 1000,
) -> PlaneFitResult:
    """Fit the dominant baseline plane in the cloud via RANSAC.

    The plane is anchored at the centroid of its inliers; u/v come from the
    in-plane axis convention used by the volume estimator.
    """
    import open3d as o3d

    pts = as_points(points)
    if len(pts) < 3:
        raise InvalidArgumentError("Need at least 3 points to fit a plane", context="fit_reference_plane")
    if not distance_threshold > 0:
        raise InvalidArgumentError("distance_threshold must be > 0", context="fit_reference_plane")

    pcd = o3d.geometry.PointCloud()
    pcd.points = o3d.utility.Vector3dVector(pts)
    plane_model, inliers = pcd.segment_plane(
        distance_threshold=distance_threshold, ransac_n=ransac_n, num_iterations=num_iterations
    )
    a, b, c, _ = plane_model
    n = np.array([a, b, c], dtype=float)
    n_norm = np.linalg.norm(n)
    if n_norm < 1e-12:
        raise DegenerateGeometryError("RANSAC returned a zero plane normal", context="fit_reference_plane")
    n = n / n_norm

    centroid = pts[np.asarray(inliers, dtype=int)].mean(axis=0)
    u, v = in_plane_axes(n)
    return PlaneFitResult(basis=PlaneBasis(origin=centroid, u=u, v=v, normal=n), centroid=centroid)
