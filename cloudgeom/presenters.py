"""Output presentation helpers for volume results.

Separates printing/formatting logic from the pipeline orchestration.
"""
from __future__ import annotations

from typing import Optional, Sequence

from .volume import BlobSlice, BlobVolumeResult


def format_volume(volume: float, unit: str = "mm") -> str:
    """Short status-line text, e.g. 'volume: 12.345 mm³'."""
    return f"volume: {volume:.3f} {unit}³"


def print_volume_summary(
    result: BlobVolumeResult,
    unit: str = "mm",
    input_points: Optional[int] = None,
    footprint_area: Optional[float] = None,
) -> None:
    """Print formatted summary for one volume estimate."""
    print("\nBlob Volume Results")
    if input_points is not None:
        print(f"  Points analysed: {input_points}")
    print(f"  Points above plane: {result.retained_points}")
    if result.plane is not None:
        n = result.plane.normal
        c = result.plane.centroid
        print(f"  Plane normal: ({n[0]:.4f}, {n[1]:.4f}, {n[2]:.4f})")
        print(f"  Plane anchor: ({c[0]:.4f}, {c[1]:.4f}, {c[2]:.4f})")
    else:
        print("  Plane: degenerate")
    print(f"  Slices used: {len(result.slices)}")
    if result.slices:
        top = result.slices[-1]
        print(f"  Height range: {result.slices[0].h0:.4f} .. {top.h1:.4f} {unit}")
    if footprint_area is not None:
        print(f"  Footprint area (convex hull): {footprint_area:.4f} {unit}²")
    print(f"  {format_volume(result.volume, unit)}")


def print_slice_table(slices: Sequence[BlobSlice], unit: str = "mm") -> None:
    """Print one row per slice."""
    if len(slices) == 0:
        print("\n  (no slices)")
        return
    print(f"\n  {'#':>3} {'h0':>10} {'h1':>10} {'radius':>10} {'area':>12} {'points':>7}")
    for i, s in enumerate(slices):
        print(f"  {i:>3} {s.h0:>10.4f} {s.h1:>10.4f} {s.radius:>10.4f} {s.area:>12.4f} {s.point_count:>7}")
    print(f"  (lengths in {unit}, areas in {unit}²)")
