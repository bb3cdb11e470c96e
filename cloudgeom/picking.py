"""Resolve a screen interaction to a 3D point.

Exact surface hits from the viewport win; otherwise the cloud point closest
to the pick ray (in front of its origin) is chosen, and failing that the
point nearest the ray origin. The viewport is reached only through the
`HitTester` port so no rendering pipeline is needed here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol, Sequence, Tuple

import numpy as np

from exceptions.exceptions import InvalidArgumentError, NotFoundError
from .arrays import as_points, as_vector, frozen


@dataclass(frozen=True)
class Ray:
    """Half-line from `origin` along `direction` (normalized on construction)."""

    origin: np.ndarray
    direction: np.ndarray

    def __post_init__(self) -> None:
        d = as_vector(self.direction, "direction")
        length = float(np.linalg.norm(d))
        if length < 1e-12:
            raise InvalidArgumentError("Ray direction must be non-zero", context="Ray")
        object.__setattr__(self, "origin", frozen(as_vector(self.origin, "origin")))
        object.__setattr__(self, "direction", frozen(d / length))


@dataclass(frozen=True, order=True)
class HitCandidate:
    distance: float
    point: np.ndarray = field(compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "point", frozen(as_vector(self.point, "point")))


class PickSource(str, Enum):
    HIT = "hit"
    RAY = "ray"
    ORIGIN = "origin"
    NONE = "none"


@dataclass(frozen=True)
class PickResult:
    found: bool
    point: Optional[np.ndarray] = None
    source: PickSource = PickSource.NONE

    def point_or_raise(self) -> np.ndarray:
        if not self.found or self.point is None:
            raise NotFoundError("No hit and no cloud point to fall back to", context="pick")
        return self.point


class HitTester(Protocol):
    """Port: hit testing supplied by the host viewport."""

    def find_hits(self, screen_point: Tuple[float, float]) -> Sequence[HitCandidate]:
        """Surface intersections under the screen point, any order."""
        ...

    def project_ray(self, screen_point: Tuple[float, float]) -> Optional[Ray]:
        """World-space pick ray through the screen point, or None if it cannot be built."""
        ...


def nearest_to_point(points: np.ndarray, target: np.ndarray) -> Optional[np.ndarray]:
    """Cloud point with minimum squared distance to `target`; None for an empty cloud."""
    if len(points) == 0:
        return None
    d2 = np.sum((points - target) ** 2, axis=1)
    return points[int(np.argmin(d2))].copy()


def nearest_to_ray(points: np.ndarray, ray: Ray) -> Optional[np.ndarray]:
    """Point closest to the ray line among those strictly in front of the origin."""
    if len(points) == 0:
        return None
    d = ray.direction
    rel = points - ray.origin
    t = (rel @ d) / float(d @ d)
    ahead = t > 0.0
    if not np.any(ahead):
        return None
    perp = rel[ahead] - t[ahead, None] * d
    d2 = np.sum(perp * perp, axis=1)
    return points[ahead][int(np.argmin(d2))].copy()


def try_hit_or_nearest_point(
    points: Any,
    candidates: Optional[Sequence[HitCandidate]] = None,
    ray: Optional[Ray] = None,
    fallback_origin: Any = (0.0, 0.0, 0.0),
) -> PickResult:
    """Pick a 3D point for an interaction.

    Args:
        points: (N, 3) cloud, preferably downsampled; scanned linearly.
        candidates: hits from the viewport's own hit test. The nearest one is
            returned whenever the list is non-empty.
        ray: pick ray, or None when the viewport could not build one.
        fallback_origin: used as the ray origin when `ray` is None.

    Returns:
        PickResult; `found` is False only for an empty cloud with no hits.
    """
    if candidates:
        best = min(candidates, key=lambda c: c.distance)
        return PickResult(found=True, point=np.array(best.point), source=PickSource.HIT)

    pts = as_points(points)
    if ray is not None:
        p = nearest_to_ray(pts, ray)
        if p is not None:
            return PickResult(found=True, point=p, source=PickSource.RAY)
        origin = ray.origin
    else:
        origin = as_vector(fallback_origin, "fallback_origin")

    p = nearest_to_point(pts, origin)
    if p is None:
        return PickResult(found=False)
    return PickResult(found=True, point=p, source=PickSource.ORIGIN)


def resolve_interaction(
    hit_tester: HitTester,
    screen_point: Tuple[float, float],
    points: Any,
    fallback_origin: Any = (0.0, 0.0, 0.0),
) -> PickResult:
    """Query the viewport port for hits and a ray, then pick."""
    hits = list(hit_tester.find_hits(screen_point) or [])
    ray = None if hits else hit_tester.project_ray(screen_point)
    return try_hit_or_nearest_point(points, candidates=hits, ray=ray, fallback_origin=fallback_origin)
