from __future__ import annotations

"""Synthetic data helpers for tests and demos.

Deterministic (seeded) generators for laser profiles, flat baselines and
blobs sitting on them.
"""

import math
from typing import Optional, Tuple

import numpy as np


def _rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(None if seed is None else int(seed))


# ---------------------------------------------------------------------
# 1) A single laser profile with a few bumps
# ---------------------------------------------------------------------

def generate_random_profile(
    span: float = 430.0,
    n: int = 2048,
    base_z: float = 100.0,
    noise: float = 1.0,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Simulate one sensor profile: X across the laser line, Z as range.

    The profile starts at `base_z`, adds 2-4 Gaussian bumps (amplitude 5-25,
    sigma 10-60, centers anywhere on the span) and uniform noise of +-`noise`.

    Returns
    -------
    profile : (n, 2) float64
        Columns are X (from -span/2 to +span/2) and Z.
    """
    g = _rng(seed)
    x = np.linspace(-span / 2.0, span / 2.0, n)
    z = np.full(n, float(base_z))

    peak_count = int(g.integers(2, 5))
    centers = -span / 2.0 + g.random(peak_count) * span
    amps = 5.0 + g.random(peak_count) * 20.0
    widths = 10.0 + g.random(peak_count) * 50.0
    for c, a, s in zip(centers, amps, widths):
        z += a * np.exp(-((x - c) ** 2) / (2.0 * s * s))

    if noise > 0:
        z += (g.random(n) - 0.5) * 2.0 * noise
    return np.column_stack([x, z])


# ---------------------------------------------------------------------
# 2) A flat baseline surface
# ---------------------------------------------------------------------

def generate_flat_surface(
    nx: int = 60,
    ny: int = 60,
    spacing: float = 1.0,
    z: float = 0.0,
    jitter_z: float = 0.0,
    origin: Tuple[float, float] = (0.0, 0.0),
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Regular XY grid at height `z`, row-major (y as rows, x as columns).

    `jitter_z` adds Gaussian noise to the height; keep it 0 for a surface
    that lies exactly on the plane.
    """
    g = _rng(seed)
    x = np.arange(nx, dtype=float) * spacing + origin[0]
    y = np.arange(ny, dtype=float) * spacing + origin[1]
    xx, yy = np.meshgrid(x, y)
    zz = np.full_like(xx, float(z))
    if jitter_z > 0:
        zz = zz + g.normal(0.0, jitter_z, size=zz.shape)
    return np.column_stack([xx.ravel(), yy.ravel(), zz.ravel()])


# ---------------------------------------------------------------------
# 3) Blobs above the baseline
# ---------------------------------------------------------------------

def generate_cylinder_blob(
    radius: float = 5.0,
    height: float = 10.0,
    n_points: int = 5000,
    center: Tuple[float, float] = (0.0, 0.0),
    base_z: float = 0.0,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Sample the lateral surface of an upright cylinder standing on z = base_z.

    Heights are drawn from (0, height], so every point is strictly above the
    base. Points sit on the wall (like scanned or mesh-vertex data), which is
    what makes the RMS radius of each band equal `radius`.
    """
    g = _rng(seed)
    theta = 2.0 * math.pi * g.random(n_points)
    h = height * (1.0 - g.random(n_points))
    x = center[0] + radius * np.cos(theta)
    y = center[1] + radius * np.sin(theta)
    return np.column_stack([x, y, base_z + h]).astype(np.float64, copy=False)


def generate_gaussian_mound(
    center: Tuple[float, float] = (30.0, 30.0),
    radius: float = 10.0,
    height: float = 8.0,
    n_points: int = 4000,
    sigma: Optional[float] = None,
    z_noise: float = 0.0,
    base_z: float = 0.0,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Sample a bell-shaped deposit rising above z = base_z.

    The profile is z = base_z + height * exp(-0.5 * r^2 / sigma^2), sampled
    area-uniformly over a disc of `radius`; sigma defaults to radius / 2.
    """
    g = _rng(seed)
    sigma = radius / 2.0 if sigma is None else float(sigma)
    r = radius * np.sqrt(g.random(n_points))
    theta = 2.0 * math.pi * g.random(n_points)
    x = center[0] + r * np.cos(theta)
    y = center[1] + r * np.sin(theta)
    z = base_z + height * np.exp(-0.5 * (r * r) / (sigma * sigma))
    if z_noise > 0:
        z += g.normal(0.0, z_noise, size=n_points)
    return np.column_stack([x, y, z]).astype(np.float64, copy=False)
