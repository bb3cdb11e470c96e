"""Minimal scene tree for imported meshes.

A scene is either a `GroupNode` holding children or a `LeafMesh` holding
vertex positions and (optionally) triangle indices. Traversal uses an
explicit stack with a depth guard.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

import numpy as np

from exceptions.exceptions import InvalidArgumentError, NotFoundError
from .arrays import as_points
from .plane import create_plane_from_triangle, project_points_to_plane_2d

MAX_SCENE_DEPTH = 64


@dataclass(frozen=True)
class LeafMesh:
    positions: np.ndarray
    triangle_indices: Optional[np.ndarray] = None  # flat, three per triangle

    def __post_init__(self) -> None:
        pos = as_points(self.positions, "positions").copy()
        pos.flags.writeable = False
        object.__setattr__(self, "positions", pos)
        if self.triangle_indices is not None:
            idx = np.asarray(self.triangle_indices, dtype=np.int64).reshape(-1).copy()
            idx.flags.writeable = False
            object.__setattr__(self, "triangle_indices", idx)

    @property
    def triangle_count(self) -> int:
        if self.triangle_indices is None:
            return 0
        return len(self.triangle_indices) // 3


@dataclass(frozen=True)
class GroupNode:
    children: Tuple["SceneNode", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


SceneNode = Union[GroupNode, LeafMesh]


def iter_leaves(node: SceneNode, max_depth: int = MAX_SCENE_DEPTH) -> Iterator[LeafMesh]:
    """Depth-first leaves in child order."""
    if node is None:
        raise InvalidArgumentError("scene node must not be None", context="iter_leaves")
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        if depth > max_depth:
            raise InvalidArgumentError(f"scene nesting deeper than {max_depth}", context="iter_leaves")
        if isinstance(current, LeafMesh):
            yield current
        elif isinstance(current, GroupNode):
            # reversed so the first child is visited first
            for child in reversed(current.children):
                stack.append((child, depth + 1))
        else:
            raise InvalidArgumentError(f"unexpected scene node {type(current).__name__}", context="iter_leaves")


def collect_all_positions(node: SceneNode, max_depth: int = MAX_SCENE_DEPTH) -> np.ndarray:
    """All vertex positions of the scene as one (N, 3) array. Transforms are not modeled."""
    chunks = [leaf.positions for leaf in iter_leaves(node, max_depth) if len(leaf.positions)]
    if not chunks:
        return np.zeros((0, 3), dtype=np.float64)
    return np.vstack(chunks)


def find_first_mesh(node: SceneNode, max_depth: int = MAX_SCENE_DEPTH) -> Optional[LeafMesh]:
    return next(iter_leaves(node, max_depth), None)


def try_get_triangle_from_first_mesh(
    node: SceneNode, triangle_index: int = 0
) -> Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
    """Vertices of triangle `triangle_index` of the first mesh, or None if unavailable."""
    mesh = find_first_mesh(node)
    if mesh is None or mesh.triangle_indices is None or len(mesh.triangle_indices) < 3:
        return None
    if triangle_index < 0:
        return None
    base = triangle_index * 3
    if base + 2 >= len(mesh.triangle_indices):
        return None
    i0, i1, i2 = (int(i) for i in mesh.triangle_indices[base:base + 3])
    n = len(mesh.positions)
    if not (0 <= i0 < n and 0 <= i1 < n and 0 <= i2 < n):
        return None
    return mesh.positions[i0].copy(), mesh.positions[i1].copy(), mesh.positions[i2].copy()


def project_model_to_face_plane(node: SceneNode, triangle_index: int = 0) -> np.ndarray:
    """Project every scene vertex into the plane of one triangle of the first mesh.

    Returns (N, 2) in-plane coordinates ready for a 2D profile plot.
    """
    if node is None:
        raise InvalidArgumentError("scene node must not be None", context="project_model_to_face_plane")
    tri = try_get_triangle_from_first_mesh(node, triangle_index)
    if tri is None:
        raise NotFoundError("Could not find a valid mesh/triangle in the model.", context="project_model_to_face_plane")
    basis = create_plane_from_triangle(*tri)
    return project_points_to_plane_2d(collect_all_positions(node), basis)


def scene_from_triangle_mesh(vertices: Any, triangles: Any = None) -> LeafMesh:
    """Leaf from (V, 3) vertices and (T, 3) or flat triangle indices."""
    return LeafMesh(positions=vertices, triangle_indices=None if triangles is None else np.asarray(triangles))
