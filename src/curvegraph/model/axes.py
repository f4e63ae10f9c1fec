"""
Background geometry of the coordinate plane: grid lines, the two axes and
the tick marks, all derived from the mapper's origin and tick spacing.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import TYPE_CHECKING

import numpy as np

from curvegraph.model.paths import Path

if TYPE_CHECKING:
    import numpy.typing as npt
    from curvegraph.model.mapper import CoordinateMapper


def half_tick_length(tick_spacing: float) -> float:
    """Half the length of a tick mark, clamped to [3, 5] pixels."""
    return max(min(5.0, 0.25 * tick_spacing), 3.0)


def grid_positions(origin: float, spacing: float, limit: float, include_origin: bool = True) -> npt.NDArray[np.float64]:
    """
    Screen coordinates origin + k * spacing (k integer) strictly inside
    (0, limit), in ascending order. The origin itself is kept when
    `include_origin` is set and it lies in [0, limit).
    """
    k_min = math.floor(-origin / spacing)
    k_max = math.ceil((limit - origin) / spacing)
    ks = np.arange(k_min, k_max + 1, dtype=np.float64)
    positions = origin + ks * spacing

    keep = (positions > 0) & (positions < limit) & (ks != 0)
    if include_origin:
        keep |= (ks == 0) & (positions >= 0) & (positions < limit)
    return positions[keep]


@dataclass(frozen=True, eq=False)
class BackgroundGeometry:
    grid: Path
    x_axis: Path
    y_axis: Path
    ticks: Path


def _segments(starts: npt.NDArray[np.float64], ends: npt.NDArray[np.float64]) -> Path:
    return Path.from_subpaths(np.stack((starts, ends), axis=1))


def build_background(mapper: CoordinateMapper) -> BackgroundGeometry:
    """Grid, axes and ticks for the mapper's current view."""
    w, h = mapper.width, mapper.height
    ox, oy = mapper.origin.x, mapper.origin.y
    spacing = mapper.tick_spacing

    xs = grid_positions(ox, spacing, w)
    ys = grid_positions(oy, spacing, h)

    vertical = _segments(np.column_stack((xs, np.zeros_like(xs))), np.column_stack((xs, np.full_like(xs, h))))
    horizontal = _segments(np.column_stack((np.zeros_like(ys), ys)), np.column_stack((np.full_like(ys, w), ys)))
    grid = Path.from_subpaths(vertical.subpaths + horizontal.subpaths)

    x_axis = Path.from_subpaths([[(0.0, oy), (w, oy)]])
    y_axis = Path.from_subpaths([[(ox, 0.0), (ox, h)]])

    half = half_tick_length(spacing)
    tick_xs = grid_positions(ox, spacing, w, include_origin=False)
    tick_ys = grid_positions(oy, spacing, h, include_origin=False)
    on_x_axis = _segments(
        np.column_stack((tick_xs, np.full_like(tick_xs, oy - half))),
        np.column_stack((tick_xs, np.full_like(tick_xs, oy + half))),
    )
    on_y_axis = _segments(
        np.column_stack((np.full_like(tick_ys, ox - half), tick_ys)),
        np.column_stack((np.full_like(tick_ys, ox + half), tick_ys)),
    )
    ticks = Path.from_subpaths(on_x_axis.subpaths + on_y_axis.subpaths)

    return BackgroundGeometry(grid=grid, x_axis=x_axis, y_axis=y_axis, ticks=ticks)
