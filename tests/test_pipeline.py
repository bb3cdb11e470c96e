"""
End-to-end tests: files on disk through the pipeline and the CLI entry point.
"""

import math

import numpy as np
import pytest

o3d = pytest.importorskip("open3d")

from cloudgeom.pipeline import reference_plane_for, run_volume_pipeline  # noqa: E402
from cloudgeom.synthetic import generate_flat_surface  # noqa: E402
from common.config import Config, Downsample, Plane, Volume  # noqa: E402
from estimate_blob_volume import main  # noqa: E402
from exceptions.exceptions import InvalidArgumentError  # noqa: E402

RADIUS = 5.0
HEIGHT = 10.0
RING_POINTS = 64
RING_STEP = 0.25


def _wall_rings() -> np.ndarray:
    """Stacked rings of a cylinder wall at heights 0.25, 0.5, ..., 10."""
    theta = np.arange(RING_POINTS) * (2.0 * math.pi / RING_POINTS)
    rings = []
    for k in range(1, int(HEIGHT / RING_STEP) + 1):
        z = np.full(RING_POINTS, k * RING_STEP)
        rings.append(np.column_stack([RADIUS * np.cos(theta), RADIUS * np.sin(theta), z]))
    return np.vstack(rings)


@pytest.fixture
def cylinder_stl(tmp_path):
    """Base triangle first, then the cylinder wall as quads split in two."""
    base = np.array([[-20.0, -20.0, 0.0], [20.0, -20.0, 0.0], [0.0, 20.0, 0.0]])
    wall = _wall_rings()
    vertices = np.vstack([base, wall])

    triangles = [[0, 1, 2]]
    rings = len(wall) // RING_POINTS
    for r in range(rings - 1):
        for k in range(RING_POINTS):
            a = 3 + r * RING_POINTS + k
            b = 3 + r * RING_POINTS + (k + 1) % RING_POINTS
            triangles.append([a, b, a + RING_POINTS])
            triangles.append([b, b + RING_POINTS, a + RING_POINTS])

    mesh = o3d.geometry.TriangleMesh()
    mesh.vertices = o3d.utility.Vector3dVector(vertices)
    mesh.triangles = o3d.utility.Vector3iVector(np.asarray(triangles, dtype=np.int32))
    mesh.compute_triangle_normals()
    path = tmp_path / "cylinder.stl"
    assert o3d.io.write_triangle_mesh(str(path), mesh)
    return str(path)


@pytest.fixture
def cylinder_pcd(tmp_path):
    pts = np.vstack([generate_flat_surface(nx=60, ny=60, origin=(-30.0, -30.0)), _wall_rings()])
    pcd = o3d.geometry.PointCloud()
    pcd.points = o3d.utility.Vector3dVector(pts)
    path = tmp_path / "cylinder.pcd"
    assert o3d.io.write_point_cloud(str(path), pcd)
    return str(path)


def _config(**plane) -> Config:
    return Config(
        downsample=Downsample(cell_size=0.05),
        plane=Plane(**plane),
        volume=Volume(slice_thickness=1.0, min_points_per_slice=10),
    )


class TestRunVolumePipeline:
    """The cylinder wall integrates to pi R^2 H."""

    def test_triangle_reference_from_mesh(self, cylinder_stl, capsys):
        result = run_volume_pipeline(cylinder_stl, _config(method="triangle"))

        assert result.volume.volume == pytest.approx(math.pi * RADIUS ** 2 * HEIGHT, rel=0.05)
        assert result.plane.normal[2] == pytest.approx(1.0)
        assert len(result.discs) == len(result.volume.slices)
        assert "volume:" in capsys.readouterr().out

    def test_ransac_reference_from_cloud(self, cylinder_pcd):
        cfg = _config(method="ransac", distance_threshold=0.1)
        result = run_volume_pipeline(cylinder_pcd, cfg, verbose=False)

        assert result.volume.volume == pytest.approx(math.pi * RADIUS ** 2 * HEIGHT, rel=0.1)
        assert result.footprint_area == pytest.approx(math.pi * RADIUS ** 2, rel=0.05)
        assert result.analysed_points <= result.input_points

    def test_triangle_method_needs_a_mesh(self, cylinder_pcd):
        with pytest.raises(InvalidArgumentError):
            run_volume_pipeline(cylinder_pcd, _config(method="triangle"), verbose=False)

    def test_unknown_plane_method(self):
        with pytest.raises(InvalidArgumentError):
            reference_plane_for(None, np.zeros((3, 3)), _config(method="lsq"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            run_volume_pipeline(str(tmp_path / "missing.pcd"), verbose=False)


class TestMain:
    """Exit codes of the CLI entry point."""

    def test_success(self, cylinder_pcd, capsys):
        code = main([cylinder_pcd, "--plane-method", "ransac", "--min-points", "10", "--list-slices"])
        assert code == 0
        out = capsys.readouterr().out
        assert "volume:" in out
        assert "radius" in out

    def test_missing_input(self, tmp_path):
        assert main([str(tmp_path / "missing.pcd")]) == 2

    def test_geometry_error(self, cylinder_stl):
        assert main([cylinder_stl, "--triangle-index", "100000"]) == 1
