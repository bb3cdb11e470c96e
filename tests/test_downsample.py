"""
Unit tests for first-point-per-cell voxel thinning.
"""

import numpy as np
import pytest

from cloudgeom.downsample import voxel_cell_indices, voxel_down_sample
from exceptions.exceptions import InvalidArgumentError


class TestVoxelDownSample:
    """Tests for voxel_down_sample."""

    @pytest.mark.parametrize("cell_size", [0.1, 0.5, 2.0, 25.0])
    def test_one_point_per_cell(self, cell_size):
        rng = np.random.default_rng(42)
        pts = rng.uniform(-10, 10, (2000, 3))
        out = voxel_down_sample(pts, cell_size)

        assert len(out) <= len(pts)
        cells = voxel_cell_indices(out, cell_size)
        assert len(np.unique(cells, axis=0)) == len(out)
        # every occupied input cell is represented
        assert len(np.unique(voxel_cell_indices(pts, cell_size), axis=0)) == len(out)

    def test_keeps_first_occurrence_in_input_order(self):
        pts = np.array(
            [
                [0.9, 0.9, 0.9],  # cell (0, 0, 0)
                [5.2, 0.1, 0.1],  # cell (5, 0, 0)
                [0.1, 0.2, 0.3],  # cell (0, 0, 0) again
                [-0.5, 0.0, 0.0],  # cell (-1, 0, 0)
                [5.9, 0.9, 0.9],  # cell (5, 0, 0) again
            ]
        )
        out = voxel_down_sample(pts, 1.0)
        np.testing.assert_array_equal(out, pts[[0, 1, 3]])

    def test_negative_coordinates_floor(self):
        # -0.1 and 0.1 straddle zero and land in different cells
        out = voxel_down_sample([[-0.1, 0, 0], [0.1, 0, 0]], 1.0)
        assert len(out) == 2

    def test_output_points_are_input_points(self):
        rng = np.random.default_rng(3)
        pts = rng.normal(size=(500, 3))
        out = voxel_down_sample(pts, 0.3)
        as_rows = {tuple(p) for p in pts}
        assert all(tuple(p) in as_rows for p in out)

    def test_empty_input(self):
        out = voxel_down_sample(np.zeros((0, 3)), 1.0)
        assert out.shape == (0, 3)

    @pytest.mark.parametrize("cell_size", [0.0, -1.0, float("nan"), float("inf"), None])
    def test_invalid_cell_size(self, cell_size):
        with pytest.raises(InvalidArgumentError):
            voxel_down_sample([[0, 0, 0]], cell_size)

    def test_none_points(self):
        with pytest.raises(InvalidArgumentError):
            voxel_down_sample(None, 1.0)
