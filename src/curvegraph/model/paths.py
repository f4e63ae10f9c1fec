"""
Screen-space path and fill-region values produced by the path builder.

Both are immutable: every build returns fresh objects, the static cache
hands out the same objects until it is invalidated.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from functools import cached_property
from typing import Iterable, Optional, TYPE_CHECKING

import numpy as np
from matplotlib.path import Path as MplPath

from curvegraph.model.geometry_primitives import Point

if TYPE_CHECKING:
    import numpy.typing as npt


def as_polyline(points: Iterable | npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Copy points into a read-only (N, 2) float array."""
    arr = np.array(points, dtype=np.float64).reshape(-1, 2)
    arr.setflags(write=False)
    return arr


def distance_to_polyline(polyline: npt.NDArray[np.float64], point: Point) -> float:
    """
    Smallest distance between a point and a polyline (N, 2).

    Returns:
        inf for an empty polyline, the point distance for a single vertex.
    """
    if len(polyline) == 0:
        return np.inf

    p = point.to_array()
    if len(polyline) == 1:
        return float(np.linalg.norm(polyline[0] - p))

    a = polyline[:-1]
    ab = polyline[1:] - a
    ap = p - a
    length_sq = np.einsum("ij,ij->i", ab, ab)

    # zero-length segments project onto their start vertex
    t = np.divide(
        np.einsum("ij,ij->i", ap, ab),
        length_sq,
        out=np.zeros_like(length_sq),
        where=length_sq > 0.0,
    )
    t = np.clip(t, 0.0, 1.0)
    closest = a + t[:, None] * ab
    return float(np.min(np.linalg.norm(p - closest, axis=1)))


@dataclass(frozen=True, eq=False)
class Path:
    """
    Ordered subpaths of screen points. `continuous` is False when any
    discontinuity forced a break while the path was built.
    """
    subpaths: tuple[npt.NDArray[np.float64], ...] = ()
    continuous: bool = True

    @classmethod
    def from_subpaths(cls, subpaths: Iterable, continuous: bool = True) -> Path:
        polylines = tuple(as_polyline(s) for s in subpaths)
        return cls(subpaths=tuple(s for s in polylines if len(s) > 0), continuous=continuous)

    @property
    def is_empty(self) -> bool:
        return not self.subpaths

    @property
    def n_points(self) -> int:
        return sum(len(s) for s in self.subpaths)

    @property
    def points(self) -> npt.NDArray[np.float64]:
        """All vertices in drawing order, shape (N, 2)."""
        if not self.subpaths:
            return np.empty((0, 2), dtype=np.float64)
        return np.vstack(self.subpaths)

    def stroke_contains(self, point: Point, half_width: float) -> bool:
        """True if the point lies within half_width pixels of the stroked path."""
        return any(distance_to_polyline(s, point) <= half_width for s in self.subpaths)


class FillKind(StrEnum):
    """Which side of the curve a region shades."""
    ABOVE = "above"
    BELOW = "below"
    LEFT = "left"
    RIGHT = "right"
    INTERIOR = "interior"
    EXTERIOR = "exterior"


@dataclass(frozen=True, eq=False)
class FillRegion:
    """
    Closed polygon(s) used for shading. Every ring is implicitly closed;
    overlapping rings combine with the even-odd rule.
    """
    kind: FillKind
    rings: tuple[npt.NDArray[np.float64], ...]

    @classmethod
    def from_rings(cls, kind: FillKind, rings: Iterable) -> FillRegion:
        polylines = tuple(as_polyline(r) for r in rings)
        return cls(kind=kind, rings=tuple(r for r in polylines if len(r) > 0))

    @cached_property
    def _mpl_paths(self) -> tuple[MplPath, ...]:
        return tuple(MplPath(ring) for ring in self.rings if len(ring) >= 3)

    def contains(self, point: Point) -> bool:
        xy = (point.x, point.y)
        crossings = sum(1 for path in self._mpl_paths if path.contains_point(xy))
        return crossings % 2 == 1


@dataclass(frozen=True, eq=False)
class CurveGeometry:
    """Everything one build produces for one curve."""
    path: Path
    fill_above: Optional[FillRegion] = None
    fill_below: Optional[FillRegion] = None

    @property
    def continuous(self) -> bool:
        return self.path.continuous
