"""
Cartesian <-> polar conversion and slope/angle helpers.

All angles are radians in [0, 2*pi) unless the function name says degrees.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
import sys

from curvegraph.config import TAU
from curvegraph.model.geometry_primitives import Point
from curvegraph.utils import to_degrees, to_radians


@dataclass(frozen=True)
class PolarPoint:
    r: float
    theta: float


def round_small(value: float) -> float:
    """Collapse magnitudes below machine epsilon to exactly 0."""
    if abs(value) < sys.float_info.epsilon:
        return 0.0
    return value


def to_polar(x: float, y: float) -> PolarPoint:
    """
    Convert a cartesian point to polar coordinates.

    On the y-axis the angle is pi/2 (y > 0) or 3*pi/2 (y < 0); the origin
    maps to (0, 0). Elsewhere theta = atan(y/x) followed by at most one
    quadrant correction: +pi when x < 0, otherwise +2*pi when y < 0.
    """
    if x == 0:
        if y > 0:
            return PolarPoint(r=y, theta=math.pi / 2)
        if y < 0:
            return PolarPoint(r=abs(y), theta=3 * math.pi / 2)
        return PolarPoint(r=0.0, theta=0.0)

    theta = math.atan(y / x)

    # single-branch correction, order matters
    if x < 0:
        theta += math.pi
    elif y < 0:
        theta += 2 * math.pi

    return PolarPoint(r=math.hypot(x, y), theta=theta)


def from_polar(r: float, theta: float) -> Point:
    """Convert polar (radians) to cartesian. Real values, no screen scaling."""
    return Point(
        round_small(r * math.cos(theta)),
        round_small(r * math.sin(theta)),
    )


def normalize_radians(angle: float) -> float:
    """Fold an angle into [0, 2*pi) by repeated +/- 2*pi."""
    if not math.isfinite(angle):
        raise ValueError(f"Cannot normalize non-finite angle: {angle}")
    while angle >= TAU:
        angle -= TAU
    while angle < 0:
        angle += TAU
    return angle


def normalize_degrees(angle: float) -> float:
    """Fold an angle into [0, 360) by repeated +/- 360."""
    if not math.isfinite(angle):
        raise ValueError(f"Cannot normalize non-finite angle: {angle}")
    while angle >= 360:
        angle -= 360
    while angle < 0:
        angle += 360
    return angle


def slope_to_radians(slope: float) -> float:
    """Angle on the unit circle of a ray from the origin with the given slope."""
    if slope == math.inf:
        return 0.5 * math.pi
    if slope == -math.inf:
        return 1.5 * math.pi
    return to_polar(1.0, slope).theta


def slope_to_degrees(slope: float) -> float:
    if slope == math.inf:
        return 90.0
    if slope == -math.inf:
        return 270.0
    return to_degrees(slope_to_radians(slope))


def radians_to_slope(angle: float) -> float:
    """Slope of the ray at the given angle; +/-inf at pi/2 and 3*pi/2."""
    angle = normalize_radians(angle)
    if angle == math.pi / 2:
        return math.inf
    if angle == 3 * math.pi / 2:
        return -math.inf
    return round_small(math.tan(angle))


def degrees_to_slope(angle: float) -> float:
    angle = normalize_degrees(angle)
    if angle == 90:
        return math.inf
    if angle == 270:
        return -math.inf
    return round_small(math.tan(to_radians(angle)))


def get_slope(start: Point, end: Point) -> float:
    """
    Slope between two points. A vertical segment yields +/-inf,
    coincident points yield nan.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    if dx == 0:
        if dy == 0:
            return math.nan
        return math.copysign(math.inf, dy)
    return dy / dx


def get_finite_slope(start: Point, end: Point) -> float | None:
    """Like get_slope, but None instead of an infinite/undefined slope."""
    slope = get_slope(start, end)
    return slope if math.isfinite(slope) else None
