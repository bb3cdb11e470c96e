"""Geometry core for laser-profile point clouds.

Reference planes, voxel thinning, sliced blob volumes, slice disc meshes and
ray picking. This package keeps `__init__` side-effect free: importing it does
not import Open3D or SciPy.

Use explicit imports:
`from cloudgeom.volume import estimate_blob_volume_by_slices`
"""

__all__: list[str] = []
