from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from common.config import Config
from exceptions.exceptions import InvalidArgumentError, NotFoundError
from .downsample import voxel_down_sample
from .io import read_points, read_scene, MESH_EXTENSIONS
from .plane import PlaneFitResult, fit_reference_plane, plane_fit_from_triangle
from .presenters import print_slice_table, print_volume_summary
from .scene import LeafMesh, collect_all_positions, try_get_triangle_from_first_mesh
from .slice_mesh import DiscMesh, build_blob_slices_model
from .volume import BlobVolumeResult, blob_footprint_area, estimate_blob_volume_by_slices

logger = logging.getLogger(__name__)

PLANE_METHODS = ("triangle", "ransac")


@dataclass(frozen=True)
class PipelineResult:
    input_points: int
    analysed_points: int
    plane: PlaneFitResult
    volume: BlobVolumeResult
    footprint_area: float
    discs: List[DiscMesh] = field(default_factory=list)


def reference_plane_for(scene: Optional[LeafMesh], points: np.ndarray, cfg: Config) -> PlaneFitResult:
    """Reference plane per `cfg.plane.method`.

    "triangle" takes triangle `triangle_index` of the first mesh in the file
    (vertex winding decides which side is up before orientation);
    "ransac" fits the dominant plane of the (downsampled) points.
    """
    method = cfg.plane.method
    if method not in PLANE_METHODS:
        raise InvalidArgumentError(f"Unknown plane method {method!r}; expected one of {PLANE_METHODS}")
    if method == "ransac":
        return fit_reference_plane(
            points,
            distance_threshold=cfg.plane.distance_threshold,
            ransac_n=cfg.plane.ransac_n,
            num_iterations=cfg.plane.num_iterations,
        )
    if scene is None:
        raise InvalidArgumentError("Plane method 'triangle' needs a mesh input")
    tri = try_get_triangle_from_first_mesh(scene, cfg.plane.triangle_index)
    if tri is None:
        raise NotFoundError(f"No triangle #{cfg.plane.triangle_index} in the first mesh")
    return plane_fit_from_triangle(*tri)


def run_volume_pipeline(path: str, cfg: Optional[Config] = None, verbose: bool = True) -> PipelineResult:
    """End-to-end blob volume estimate for one mesh or point-cloud file.

    Steps:
      1) Read positions (mesh vertices or cloud points).
      2) Optionally voxel-downsample them.
      3) Obtain the reference plane (mesh triangle or RANSAC).
      4) Slice the material above the plane and sum disc volumes.
      5) Build disc meshes for the viewer and print the summary.

    Raises:
      FileNotFoundError, InvalidArgumentError, DegenerateGeometryError and
      NotFoundError from the steps above; nothing is caught here.
    """
    cfg = cfg or Config()

    scene = read_scene(path) if path.lower().endswith(MESH_EXTENSIONS) else None
    points = collect_all_positions(scene) if scene is not None else read_points(path)
    logger.info("Loaded %d points from %s", len(points), path)

    analysed = points
    if cfg.downsample.enabled:
        analysed = voxel_down_sample(points, cfg.downsample.cell_size)
        logger.info("Downsampled to %d points (cell %.4g)", len(analysed), cfg.downsample.cell_size)

    plane = reference_plane_for(scene, analysed, cfg)
    result = estimate_blob_volume_by_slices(
        analysed,
        plane,
        slice_thickness=cfg.volume.slice_thickness,
        min_points_per_slice=cfg.volume.min_points_per_slice,
    )
    if result.is_empty:
        logger.warning("No slice reached %d points; volume is 0", cfg.volume.min_points_per_slice)

    footprint = blob_footprint_area(analysed, plane)
    discs = build_blob_slices_model(result.slices, angle_step_degrees=cfg.slice_mesh.angle_step_degrees)

    if verbose:
        unit = cfg.report.length_unit
        print_volume_summary(result, unit=unit, input_points=len(analysed), footprint_area=footprint)
        if cfg.report.list_slices:
            print_slice_table(result.slices, unit=unit)

    return PipelineResult(
        input_points=int(len(points)),
        analysed_points=int(len(analysed)),
        plane=result.plane or plane,
        volume=result,
        footprint_area=footprint,
        discs=discs,
    )
