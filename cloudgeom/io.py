from __future__ import annotations

import os

import numpy as np
import open3d as o3d

from exceptions.exceptions import InvalidArgumentError
from .scene import LeafMesh, collect_all_positions, scene_from_triangle_mesh

MESH_EXTENSIONS = (".stl", ".obj", ".off", ".gltf", ".glb")


def read_scene(path: str) -> LeafMesh:
    """Read a triangle mesh from disk using Open3D into a scene leaf.

    Supported formats include STL/PLY/OBJ depending on Open3D compilation.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    mesh = o3d.io.read_triangle_mesh(path)
    vertices = np.asarray(mesh.vertices, dtype=np.float64)
    if vertices.size == 0:
        raise InvalidArgumentError(f"No vertices read from {path}", context="read_scene")
    triangles = np.asarray(mesh.triangles, dtype=np.int64)
    return scene_from_triangle_mesh(vertices, triangles if triangles.size else None)


def read_points(path: str) -> np.ndarray:
    """Read positions from a mesh or point-cloud file as an (N, 3) array.

    Mesh formats yield their vertices; anything else is read as a point cloud.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    if path.lower().endswith(MESH_EXTENSIONS):
        return collect_all_positions(read_scene(path))
    pcd = o3d.io.read_point_cloud(path)
    points = np.asarray(pcd.points, dtype=np.float64)
    if points.size == 0:
        raise InvalidArgumentError(f"No points read from {path}", context="read_points")
    return points
