"""estimate_blob_volume CLI (thin wrapper)

This script delegates blob volume analysis to cloudgeom.pipeline.
It only parses CLI arguments, merges them over the YAML config and invokes
the pipeline with the selected options.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional

from common.cli import EXIT_OK, add_config_arg, add_log_level_arg, exit_code_for, parse_args_with_config, setup_logging
from common.config import Config
from common.logging import counting_warnings
from exceptions.exceptions import GeometryError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate the volume of material protruding above a reference plane"
    )
    parser.add_argument("path", help="Path to input mesh (STL/OBJ) or point cloud (PCD/PLY/XYZ)")
    add_config_arg(parser)
    add_log_level_arg(parser)
    parser.add_argument("--cell-size", type=float, help="Voxel cell size for downsampling")
    parser.add_argument(
        "--no-downsample",
        dest="downsample",
        action="store_false",
        help="Analyse every input point",
    )
    parser.add_argument(
        "--plane-method",
        choices=["triangle", "ransac"],
        help="Reference plane from a mesh triangle or from a RANSAC fit",
    )
    parser.add_argument("--triangle-index", type=int, help="Triangle of the first mesh used as reference")
    parser.add_argument("--slice-thickness", type=float, help="Height of each slice along the plane normal")
    parser.add_argument("--min-points", type=int, help="Minimum points for a slice to count")
    parser.add_argument("--angle-step", type=float, help="Angular step (degrees) of the slice disc meshes")
    parser.add_argument("--unit", help="Length unit label used in the report")
    parser.add_argument("--list-slices", action="store_true", default=None, help="Print one row per slice")
    return parser


def defaults_from_cfg(cfg: Config) -> dict:
    return {
        "log_level": cfg.logging.level,
        "downsample": cfg.downsample.enabled,
        "cell_size": cfg.downsample.cell_size,
        "plane_method": cfg.plane.method,
        "triangle_index": cfg.plane.triangle_index,
        "slice_thickness": cfg.volume.slice_thickness,
        "min_points": cfg.volume.min_points_per_slice,
        "angle_step": cfg.slice_mesh.angle_step_degrees,
        "unit": cfg.report.length_unit,
        "list_slices": cfg.report.list_slices,
    }


def config_from_args(args: argparse.Namespace, cfg: Config) -> Config:
    """Fold CLI values back into the frozen config the pipeline reads."""
    return replace(
        cfg,
        downsample=replace(cfg.downsample, enabled=args.downsample, cell_size=args.cell_size),
        plane=replace(cfg.plane, method=args.plane_method, triangle_index=args.triangle_index),
        volume=replace(cfg.volume, slice_thickness=args.slice_thickness, min_points_per_slice=args.min_points),
        slice_mesh=replace(cfg.slice_mesh, angle_step_degrees=args.angle_step),
        report=replace(cfg.report, length_unit=args.unit, list_slices=bool(args.list_slices)),
    )


def main(argv: Optional[list] = None) -> int:
    args, cfg = parse_args_with_config(build_parser, defaults_from_cfg, argv)
    setup_logging(args.log_level)

    # Imported late so --help works without the numeric stack loaded
    from cloudgeom.pipeline import run_volume_pipeline

    with counting_warnings() as counter:
        try:
            run_volume_pipeline(args.path, config_from_args(args, cfg))
        except (FileNotFoundError, GeometryError) as e:
            return exit_code_for(e)
        finally:
            logging.info("Done with %s", counter.summary())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
