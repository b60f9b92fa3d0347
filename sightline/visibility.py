"""Visibility polygon from a point, with tile-map edges as occluders.

The algorithm is an angular sweep. For every endpoint of every edge we cast
three rays from the origin: one straight at the endpoint and two offset by
``RAY_EPSILON`` radians on either side. The offset rays are what let the
polygon wrap around a corner: the straight ray stops at the corner, while one
of the offsets slips past it and lands on whatever lies behind. Each ray is
tested against every edge and keeps its nearest hit. The hit points, sorted
by their own angle from the origin, are the vertices of the visibility
polygon; a consumer draws them as a fan around the origin, wrapping from the
largest angle back to the smallest.

Ray/segment intersection uses the parametric form, for ray origin O, ray
vector R, segment start S and segment vector D::

    t2 = (Rx*(Sy - Oy) + Ry*(Ox - Sx)) / (Dx*Ry - Dy*Rx)
    t1 = (Sx + Dx*t2 - Ox) / Rx

A hit is valid when ``t1 > 0`` and ``0 <= t2 <= 1``. Pairs are skipped
unless ``|Dx - Rx| > 0`` and ``|Dy - Ry| > 0``. That guard is a coarse
colinearity filter, not a cross-product parallel test, and it is kept
as-is: changing it changes which corner rays survive. ``radius`` only scales
the ray vector, so hits farther away than ``radius`` are still reported.

Zero denominators (and a zero ``Rx``) produce inf/nan parameters that can
never become the nearest valid hit, so they are masked out rather than
special-cased.

Performance notes:
- ``compute_visibility`` is O(E^2) per query: 6 rays per edge, each tested
  against all E edges. The (rays x edges) tests run as numpy matrix
  operations, in row blocks so memory stays bounded for large maps.
- Angles and ray vectors are O(E) and use ``math`` rather than numpy's
  trig, whose last bit can differ from libm; the exact ray aims straight at
  a corner, so that bit decides whether it stops there or slips past.
- ``cast_ray`` is the scalar version of the same test, for single probes.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from .tilemap import BoundaryGrid
from .types import Edge, Point2D, VisibilityPoint

RAY_EPSILON = 1e-4

# Upper bound on (rays x edges) cells evaluated per numpy block.
_BLOCK_CELLS = 1 << 20

EdgeSource = BoundaryGrid | np.ndarray | Sequence[Edge]


def _segment_array(edges: EdgeSource) -> np.ndarray:
    """Normalize any accepted edge source to an (E, 4) float64 array."""
    if isinstance(edges, BoundaryGrid):
        return edges.edge_array()
    if isinstance(edges, np.ndarray):
        arr = np.asarray(edges, dtype=np.float64)
    else:
        arr = np.array(
            [e.as_tuple() if isinstance(e, Edge) else tuple(e) for e in edges],
            dtype=np.float64,
        )
    if arr.size == 0:
        return arr.reshape(0, 4)
    if arr.ndim != 2 or arr.shape[1] != 4:
        raise ValueError(f"edges must have shape (E, 4), got {arr.shape}")
    return arr


def _check_radius(radius: float) -> float:
    if not radius > 0:
        raise ValueError(f"radius must be positive, got {radius!r}")
    return float(radius)


def _ray_segment_intersection(
    ox: float,
    oy: float,
    rx: float,
    ry: float,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
) -> float | None:
    """Ray parameter t1 where O + t1*R crosses segment (x1,y1)-(x2,y2).

    Returns None for a miss or a pair rejected by the colinearity guard.
    """
    dx = x2 - x1
    dy = y2 - y1
    if not (abs(dx - rx) > 0.0 and abs(dy - ry) > 0.0):
        return None
    denom = dx * ry - dy * rx
    if denom == 0.0 or rx == 0.0:
        return None
    t2 = (rx * (y1 - oy) + ry * (ox - x1)) / denom
    t1 = (x1 + dx * t2 - ox) / rx
    if t1 > 0.0 and 0.0 <= t2 <= 1.0:
        return t1
    return None


def cast_ray(
    origin: Point2D | tuple[float, float],
    angle: float,
    radius: float,
    edges: EdgeSource,
) -> VisibilityPoint | None:
    """Nearest edge hit along one ray, or None if it hits nothing."""
    o = Point2D.from_pair(origin)
    radius = _check_radius(radius)
    ox, oy = float(o.x), float(o.y)
    rx = radius * math.cos(angle)
    ry = radius * math.sin(angle)

    min_t1 = math.inf
    for x1, y1, x2, y2 in _segment_array(edges).tolist():
        t1 = _ray_segment_intersection(ox, oy, rx, ry, x1, y1, x2, y2)
        if t1 is not None and t1 < min_t1:
            min_t1 = t1
    if min_t1 == math.inf:
        return None
    px = ox + rx * min_t1
    py = oy + ry * min_t1
    return VisibilityPoint(px, py, math.atan2(py - oy, px - ox))


class VisibilityCalculator:
    """Computes visibility polygons using three rays per edge endpoint."""

    def __init__(self, epsilon: float = RAY_EPSILON) -> None:
        if not epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {epsilon!r}")
        self.epsilon = epsilon

    def ray_angles(self, ox: float, oy: float, segs: np.ndarray) -> np.ndarray:
        """Angles of all probe rays, in emission order.

        Per edge: start then end; per endpoint: -epsilon, exact, +epsilon.
        """
        eps = self.epsilon
        angles = []
        for x, y in segs.reshape(-1, 2).tolist():
            base = math.atan2(y - oy, x - ox)
            angles.extend((base - eps, base, base + eps))
        return np.array(angles, dtype=np.float64)

    def compute(
        self,
        origin: Point2D | tuple[float, float],
        radius: float,
        edges: EdgeSource,
    ) -> list[VisibilityPoint]:
        """Visible points around ``origin``, sorted ascending by angle.

        Equal angles keep their emission order.
        """
        o = Point2D.from_pair(origin)
        radius = _check_radius(radius)
        segs = _segment_array(edges)
        if len(segs) == 0:
            return []

        ox, oy = float(o.x), float(o.y)
        angles = self.ray_angles(ox, oy, segs).tolist()
        ray_x = np.array([radius * math.cos(a) for a in angles])
        ray_y = np.array([radius * math.sin(a) for a in angles])

        # Per-segment values (S,)
        seg_x = segs[:, 0]
        seg_y = segs[:, 1]
        seg_dx = segs[:, 2] - seg_x
        seg_dy = segs[:, 3] - seg_y
        d_x1 = seg_x - ox
        d_y1 = seg_y - oy

        n_rays = len(angles)
        min_t1 = np.empty(n_rays, dtype=np.float64)
        block = max(1, _BLOCK_CELLS // len(segs))
        with np.errstate(divide="ignore", invalid="ignore"):
            for lo in range(0, n_rays, block):
                rx = ray_x[lo : lo + block, None]
                ry = ray_y[lo : lo + block, None]

                guard = (np.abs(seg_dx[None, :] - rx) > 0.0) & (
                    np.abs(seg_dy[None, :] - ry) > 0.0
                )
                denom = seg_dx[None, :] * ry - seg_dy[None, :] * rx
                t2 = (rx * d_y1[None, :] - ry * d_x1[None, :]) / denom
                t1 = (seg_x[None, :] + seg_dx[None, :] * t2 - ox) / rx

                valid = guard & (t1 > 0.0) & (t2 >= 0.0) & (t2 <= 1.0)
                min_t1[lo : lo + block] = np.min(
                    np.where(valid, t1, np.inf), axis=1
                )

        hit = np.isfinite(min_t1)
        px = (ox + ray_x[hit] * min_t1[hit]).tolist()
        py = (oy + ray_y[hit] * min_t1[hit]).tolist()
        points = [
            VisibilityPoint(x, y, math.atan2(y - oy, x - ox))
            for x, y in zip(px, py)
        ]
        # sorted() is stable
        return sorted(points, key=lambda p: p.angle)


_DEFAULT_CALCULATOR = VisibilityCalculator()


def compute_visibility(
    origin: Point2D | tuple[float, float],
    radius: float,
    edges: EdgeSource,
) -> list[VisibilityPoint]:
    """Visibility polygon vertices using the default ray offset."""
    return _DEFAULT_CALCULATOR.compute(origin, radius, edges)


def visibility_polygon(points: Sequence[VisibilityPoint]) -> ShapelyPolygon:
    """Closed polygon through angle-sorted visibility points.

    Fewer than three points give an empty polygon. Self-touching rings
    (repeated corner hits) are cleaned up with a zero-width buffer.
    """
    if len(points) < 3:
        return ShapelyPolygon()
    poly = ShapelyPolygon([(p.x, p.y) for p in points])
    if not poly.is_valid:
        poly = poly.buffer(0)
    return poly


def visible_area(points: Sequence[VisibilityPoint]) -> float:
    return visibility_polygon(points).area


def is_point_visible(
    points: Sequence[VisibilityPoint], x: float, y: float
) -> bool:
    """True if (x, y) lies inside or on the visibility polygon."""
    poly = visibility_polygon(points)
    if poly.is_empty:
        return False
    return bool(poly.covers(ShapelyPoint(x, y)))
