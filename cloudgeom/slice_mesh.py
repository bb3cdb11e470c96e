"""Disc meshes for displaying blob slices.

Purely a rendering aid: each accepted slice becomes a fan-triangulated disc
in its own plane. The meshes are plain NumPy arrays; `DiscMesh.to_open3d`
hands one to an Open3D viewer.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from exceptions.exceptions import InvalidArgumentError
from .arrays import frozen, in_plane_axes, normalized
from .volume import BlobSlice


@dataclass(frozen=True)
class DiscMesh:
    vertices: np.ndarray  # (steps + 1, 3), vertex 0 is the disc center
    triangles: np.ndarray  # (steps, 3) int32
    slice: BlobSlice

    def __post_init__(self) -> None:
        object.__setattr__(self, "vertices", frozen(self.vertices))
        tris = np.array(self.triangles, dtype=np.int32, copy=True)
        tris.flags.writeable = False
        object.__setattr__(self, "triangles", tris)

    def to_open3d(self, color: Optional[Tuple[float, float, float]] = None):
        """Convert to an Open3D TriangleMesh with vertex normals computed."""
        import open3d as o3d

        mesh = o3d.geometry.TriangleMesh()
        mesh.vertices = o3d.utility.Vector3dVector(np.asarray(self.vertices, dtype=np.float64))
        mesh.triangles = o3d.utility.Vector3iVector(np.asarray(self.triangles, dtype=np.int32))
        mesh.compute_vertex_normals()
        if color is not None:
            mesh.paint_uniform_color(list(color))
        return mesh


def radial_steps(angle_step_degrees: float) -> int:
    """Number of rim vertices for a given angular step, at least 6."""
    if angle_step_degrees is None or not angle_step_degrees > 0:
        raise InvalidArgumentError(
            f"angle_step_degrees must be > 0, got {angle_step_degrees}", context="build_blob_slices_model"
        )
    return max(6, int(round(360.0 / angle_step_degrees)))


def build_disc(center: np.ndarray, normal: np.ndarray, radius: float, steps: int) -> Tuple[np.ndarray, np.ndarray]:
    """Fan-triangulated disc; triangle winding faces along `normal`."""
    n = normalized(np.asarray(normal, dtype=float))
    u, v = in_plane_axes(n)
    angles = np.arange(steps) * (2.0 * math.pi / steps)
    rim = center + radius * (np.cos(angles)[:, None] * u + np.sin(angles)[:, None] * v)
    vertices = np.vstack([center[None, :], rim])

    k = np.arange(steps)
    triangles = np.column_stack([np.zeros(steps, dtype=np.int32), 1 + k, 1 + (k + 1) % steps]).astype(np.int32)
    return vertices, triangles


def build_blob_slices_model(slices: Iterable[BlobSlice], angle_step_degrees: float = 15.0) -> List[DiscMesh]:
    """One disc mesh per slice with a positive radius, in slice order."""
    steps = radial_steps(angle_step_degrees)
    if slices is None:
        raise InvalidArgumentError("slices must not be None", context="build_blob_slices_model")

    meshes: List[DiscMesh] = []
    for s in slices:
        if not s.radius > 0:
            continue
        vertices, triangles = build_disc(np.asarray(s.center_world, dtype=float), s.normal, s.radius, steps)
        meshes.append(DiscMesh(vertices=vertices, triangles=triangles, slice=s))
    return meshes


def merge_disc_meshes(meshes: Sequence[DiscMesh]) -> Tuple[np.ndarray, np.ndarray]:
    """Concatenate disc meshes into one (vertices, triangles) pair (no vertex deduplication)."""
    if not meshes:
        return np.zeros((0, 3), dtype=np.float64), np.zeros((0, 3), dtype=np.int32)
    all_verts = []
    all_tris = []
    offset = 0
    for m in meshes:
        all_verts.append(np.asarray(m.vertices))
        all_tris.append(np.asarray(m.triangles) + offset)
        offset += m.vertices.shape[0]
    return np.vstack(all_verts), np.vstack(all_tris).astype(np.int32)
