import os
import yaml
from dataclasses import dataclass, replace
from typing import Optional


def _read(path: str):
    with open(path, "r") as f:
        return yaml.safe_load(f)


@dataclass(frozen=True)
class Logging:
    level: str = "INFO"

@dataclass(frozen=True)
class Downsample:
    enabled: bool = True
    cell_size: float = 0.5

@dataclass(frozen=True)
class Plane:
    method: str = "triangle"  # "triangle" | "ransac"
    triangle_index: int = 0
    distance_threshold: float = 0.5
    ransac_n: int = 3
    num_iterations: int = 1000

@dataclass(frozen=True)
class Volume:
    slice_thickness: float = 1.0
    min_points_per_slice: int = 50

@dataclass(frozen=True)
class SliceMesh:
    angle_step_degrees: float = 15.0

@dataclass(frozen=True)
class Report:
    length_unit: str = "mm"
    list_slices: bool = False


@dataclass(frozen=True)
class Config:
    logging: Logging = Logging()
    downsample: Downsample = Downsample()
    plane: Plane = Plane()
    volume: Volume = Volume()
    slice_mesh: SliceMesh = SliceMesh()
    report: Report = Report()

def load_config(path: Optional[str]) -> Config:
    cfg = Config()
    if path and os.path.isfile(path):
        data = _read(path) or {}
        logging = replace(cfg.logging, **(data.get("logging", {}) or {}))
        downsample = replace(cfg.downsample, **(data.get("downsample", {}) or {}))
        plane = replace(cfg.plane, **(data.get("plane", {}) or {}))
        volume = replace(cfg.volume, **(data.get("volume", {}) or {}))
        slice_mesh = replace(cfg.slice_mesh, **(data.get("slice_mesh", {}) or {}))
        report = replace(cfg.report, **(data.get("report", {}) or {}))
        cfg = replace(cfg, logging=logging, downsample=downsample, plane=plane, volume=volume, slice_mesh=slice_mesh, report=report)
    return cfg
