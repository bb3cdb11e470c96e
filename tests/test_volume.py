"""
Unit tests for the slice-based blob volume estimator.
"""

import math

import numpy as np
import pytest

from cloudgeom.plane import PlaneBasis, PlaneFitResult, plane_fit_from_triangle
from cloudgeom.synthetic import generate_cylinder_blob, generate_flat_surface
from cloudgeom.volume import blob_footprint_area, estimate_blob_volume_by_slices, oriented_upward
from exceptions.exceptions import InvalidArgumentError


def _ground(z: float = 0.0) -> PlaneFitResult:
    return plane_fit_from_triangle([0, 0, z], [1, 0, z], [0, 1, z])


def _ring(radius: float, h: float, count: int = 8, center=(0.0, 0.0)) -> np.ndarray:
    theta = np.arange(count) * (2.0 * math.pi / count)
    return np.column_stack(
        [center[0] + radius * np.cos(theta), center[1] + radius * np.sin(theta), np.full(count, h)]
    )


class TestDegenerateInputs:
    """Inputs that yield zero volume or raise."""

    def test_empty_cloud(self):
        result = estimate_blob_volume_by_slices(np.zeros((0, 3)), _ground(), 1.0)
        assert result.volume == 0.0
        assert result.is_empty

    def test_nothing_above_plane(self):
        pts = generate_flat_surface(nx=10, ny=10, z=-1.0)
        pts = np.vstack([pts, generate_flat_surface(nx=10, ny=10, z=0.0)])
        result = estimate_blob_volume_by_slices(pts, _ground(), 0.5, min_points_per_slice=1)
        assert result.volume == 0.0
        assert result.slices == ()

    @pytest.mark.parametrize("thickness", [0.0, -1.0, None])
    def test_bad_thickness(self, thickness):
        with pytest.raises(InvalidArgumentError):
            estimate_blob_volume_by_slices(_ring(1.0, 1.0), _ground(), thickness)

    def test_missing_plane(self):
        with pytest.raises(InvalidArgumentError):
            estimate_blob_volume_by_slices(_ring(1.0, 1.0), None, 1.0)

    def test_degenerate_plane_normal(self):
        basis = PlaneBasis(origin=[0, 0, 0], u=[1, 0, 0], v=[0, 1, 0], normal=[0, 0, 0])
        plane = PlaneFitResult(basis=basis, centroid=[0, 0, 0])
        result = estimate_blob_volume_by_slices(_ring(1.0, 1.0), plane, 1.0, min_points_per_slice=1)
        assert result.volume == 0.0
        assert result.plane is None

    def test_sparse_slices_are_skipped(self):
        pts = np.vstack([_ring(2.0, 0.5, count=5), _ring(2.0, 1.5, count=5)])
        result = estimate_blob_volume_by_slices(pts, _ground(), 1.0, min_points_per_slice=6)
        assert result.volume == 0.0
        assert result.retained_points == 10


class TestCylinder:
    """A cylinder wall sampled above z = 0 should integrate to pi R^2 H."""

    def setup_method(self):
        self.radius = 5.0
        self.height = 10.0
        self.points = generate_cylinder_blob(
            radius=self.radius, height=self.height, n_points=20000, center=(3.0, 4.0), seed=42
        )

    def test_volume_close_to_analytic(self):
        result = estimate_blob_volume_by_slices(self.points, _ground(), self.height / 10.0, min_points_per_slice=10)
        expected = math.pi * self.radius ** 2 * self.height
        assert result.volume == pytest.approx(expected, rel=0.1)

    def test_slices_ascend_and_have_disc_area(self):
        result = estimate_blob_volume_by_slices(self.points, _ground(), 1.0, min_points_per_slice=10)
        h0s = [s.h0 for s in result.slices]
        assert h0s == sorted(h0s)
        for s in result.slices:
            assert s.area == pytest.approx(math.pi * s.radius ** 2)
            assert s.h1 - s.h0 == pytest.approx(1.0)
            assert s.h_center == pytest.approx(0.5 * (s.h0 + s.h1))
            assert s.radius == pytest.approx(self.radius, rel=0.02)
        assert sum(s.point_count for s in result.slices) == len(self.points)

    def test_slice_centers_follow_the_axis(self):
        result = estimate_blob_volume_by_slices(self.points, _ground(), 1.0, min_points_per_slice=10)
        for s in result.slices:
            assert s.center_world[0] == pytest.approx(3.0, abs=0.4)
            assert s.center_world[1] == pytest.approx(4.0, abs=0.4)
            assert s.center_world[2] == pytest.approx(s.h_center)
            np.testing.assert_allclose(s.normal, [0, 0, 1])

    def test_downward_normal_gives_same_volume(self):
        up = _ground()
        down = up.flipped()
        r_up = estimate_blob_volume_by_slices(self.points, up, 1.0, min_points_per_slice=10)
        r_down = estimate_blob_volume_by_slices(self.points, down, 1.0, min_points_per_slice=10)

        assert r_down.volume == pytest.approx(r_up.volume)
        assert r_down.plane.normal[2] > 0
        # the caller's plane is left untouched
        np.testing.assert_allclose(down.normal, [0, 0, -1])

    def test_higher_minimum_drops_more(self):
        loose = estimate_blob_volume_by_slices(self.points, _ground(), 1.0, min_points_per_slice=1)
        strict = estimate_blob_volume_by_slices(self.points, _ground(), 1.0, min_points_per_slice=100000)
        assert loose.volume > 0
        assert strict.volume == 0.0

    def test_tilted_frame_is_invariant(self):
        angle = math.radians(30.0)
        rot = np.array(
            [[1, 0, 0], [0, math.cos(angle), -math.sin(angle)], [0, math.sin(angle), math.cos(angle)]]
        )
        tri = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float) @ rot.T
        plane = plane_fit_from_triangle(*tri)
        level = estimate_blob_volume_by_slices(self.points, _ground(), 1.0, min_points_per_slice=10)
        tilted = estimate_blob_volume_by_slices(self.points @ rot.T, plane, 1.0, min_points_per_slice=10)
        assert tilted.volume == pytest.approx(level.volume, rel=1e-6)


class TestBandMembership:
    """Band edges are half-open: [h0, h1)."""

    def test_points_on_edges(self):
        pts = np.vstack([_ring(1.0, 1.0), _ring(1.0, 2.0), _ring(1.0, 3.0)])
        result = estimate_blob_volume_by_slices(pts, _ground(), 1.0, min_points_per_slice=1)

        # minH = 1, maxH = 3 -> two bands; the top ring sits on the last upper edge
        assert len(result.slices) == 2
        assert [s.point_count for s in result.slices] == [8, 8]
        assert result.slices[0].h0 == pytest.approx(1.0)
        assert result.slices[0].h1 == pytest.approx(2.0)
        assert result.volume == pytest.approx(2 * math.pi * 1.0)

    def test_points_below_plane_are_ignored(self):
        pts = np.vstack([_ring(1.0, 1.0), _ring(1.0, 1.5), _ring(50.0, -2.0)])
        result = estimate_blob_volume_by_slices(pts, _ground(), 1.0, min_points_per_slice=1)
        assert result.retained_points == 16
        assert all(s.radius == pytest.approx(1.0) for s in result.slices)

    def test_single_height_yields_nothing(self):
        result = estimate_blob_volume_by_slices(_ring(1.0, 2.0), _ground(), 1.0, min_points_per_slice=1)
        assert result.volume == 0.0
        assert result.retained_points == 8


class TestOrientation:
    def test_oriented_upward(self):
        up = _ground()
        assert oriented_upward(up) is up
        assert oriented_upward(up.flipped()).normal[2] == pytest.approx(1.0)


class TestFootprint:
    """Convex hull area of the protruding points."""

    def test_cylinder_footprint(self):
        pts = generate_cylinder_blob(radius=5.0, height=10.0, n_points=5000, seed=1)
        area = blob_footprint_area(pts, _ground())
        assert area == pytest.approx(math.pi * 25.0, rel=0.02)

    def test_too_few_points(self):
        assert blob_footprint_area(_ring(1.0, 1.0, count=2), _ground()) == 0.0
        assert blob_footprint_area(np.zeros((0, 3)), _ground()) == 0.0

    def test_colinear_points(self):
        pts = np.array([[0, 0, 1], [1, 0, 1], [2, 0, 1], [3, 0, 1]], dtype=float)
        assert blob_footprint_area(pts, _ground()) == 0.0
