"""
Path Builder
============
Samples a CurveModel through the CoordinateMapper into screen-space geometry.

Why is this file needed?
------------------------
1. Dispatch: each curve family has its own sampling rule. The family is
   resolved once, when the model is created (`sampler_for`), and never
   re-checked per sample.
2. Robustness: evaluators are caller code. A sample that raises or returns a
   non-finite value breaks the path at that sample instead of breaking the
   frame.
3. Geometry: builds the fill regions used both for shading and for
   classifying points against the curve.

Classes:
    CurveSampler: Abstract sampling rule.
    ExplicitYSampler, ExplicitXSampler, PolarSampler, ParametricSampler.
    PathBuilder: Entry point, `PathBuilder.build(model, mapper)`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
import logging
import math
from typing import Any, Callable, ClassVar, Optional, TYPE_CHECKING

import numpy as np

from curvegraph.model.curve_options import CurveType, Position
from curvegraph.model.geometry_primitives import Point
from curvegraph.model.paths import CurveGeometry, FillKind, FillRegion, Path
from curvegraph.model.polar import from_polar, to_polar

if TYPE_CHECKING:
    import numpy.typing as npt
    from curvegraph.model.curves import CurveModel
    from curvegraph.model.mapper import CoordinateMapper

logger = logging.getLogger(__name__)

# Relative slack so that e.g. 10 / 1 or 2*pi / (2*pi/360) yields the last sample
_STEP_SLACK = 1e-9


# ------------------------------------------------------------------------------
# Sampling helpers
# ------------------------------------------------------------------------------

def _evaluate(evaluator: Callable[[float], Any], value: float) -> Any:
    try:
        return evaluator(value)
    except Exception as e:
        logger.debug(f"Evaluator failed at {value!r}: {e!r}")
        return None


def _to_finite(result: Any) -> float:
    try:
        value = float(result)
    except (TypeError, ValueError, OverflowError):
        return math.nan
    return value if math.isfinite(value) else math.nan


def _to_xy(result: Any) -> tuple[float, float]:
    """Parametric results: Point-like objects, {'x','y'} mappings or (x, y) pairs."""
    if result is None:
        return math.nan, math.nan
    if hasattr(result, "x") and hasattr(result, "y"):
        return _to_finite(result.x), _to_finite(result.y)
    if isinstance(result, dict):
        return _to_finite(result.get("x")), _to_finite(result.get("y"))
    try:
        x, y = result
    except (TypeError, ValueError):
        return math.nan, math.nan
    return _to_finite(x), _to_finite(y)


def sample_scalar(evaluator: Callable[[float], Any], inputs: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Evaluate one input at a time; failures and non-finite results become nan."""
    values = np.array([_to_finite(_evaluate(evaluator, float(v))) for v in inputs], dtype=np.float64)
    failures = int(np.count_nonzero(np.isnan(values)))
    if failures:
        logger.debug(f"{failures} of {len(values)} samples failed or were non-finite.")
    return values


def sample_xy(evaluator: Callable[[float], Any], inputs: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Like sample_scalar for evaluators returning points; shape (N, 2)."""
    values = np.array([_to_xy(_evaluate(evaluator, float(v))) for v in inputs], dtype=np.float64).reshape(-1, 2)
    failures = int(np.count_nonzero(np.isnan(values).any(axis=1)))
    if failures:
        logger.debug(f"{failures} of {len(values)} samples failed or were non-finite.")
    return values


def fixed_steps(start: float, end: float, step: float) -> npt.NDArray[np.float64]:
    """
    start, start + step, ... up to and including end. A degenerate domain
    (end <= start) yields only `start`.
    """
    if end <= start:
        return np.array([start], dtype=np.float64)
    count = math.floor((end - start) / step * (1 + _STEP_SLACK))
    return start + step * np.arange(count + 1, dtype=np.float64)


def split_runs(
    points: npt.NDArray[np.float64],
    axis: Optional[int] = None,
    limit: float = 0.0,
) -> tuple[list[npt.NDArray[np.float64]], bool]:
    """
    Split sampled screen points into subpaths.

    Consecutive samples are not connected when either one is not finite, or,
    if `axis` is given, when one lies below 0 and the other beyond `limit`
    on that axis (an asymptote).

    Returns:
        The non-empty runs and whether no break was found.
    """
    if len(points) == 0:
        return [], True

    valid = np.isfinite(points).all(axis=1)
    breaks = ~valid[:-1] | ~valid[1:]

    if axis is not None:
        prev = points[:-1, axis]
        cur = points[1:, axis]
        with np.errstate(invalid="ignore"):
            breaks |= ((cur < 0) & (prev > limit)) | ((prev < 0) & (cur > limit))

    continuous = bool(valid.all()) and not bool(breaks.any())
    runs = np.split(points, np.flatnonzero(breaks) + 1)
    runs = [run[np.isfinite(run).all(axis=1)] for run in runs]
    return [run for run in runs if len(run)], continuous


def _round_small(values: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    return np.where(np.abs(values) < np.finfo(np.float64).eps, 0.0, values)


def extend_to_edges(run: npt.NDArray[np.float64], axis: int, limit: float, margin: float) -> npt.NDArray[np.float64]:
    """
    Continue a run past the canvas edge along `axis` when its first or last
    sample lies on (or beyond) that edge, holding the other coordinate.
    Fill rings built from the result cover the edge column or row itself.
    """
    def outside(value: float) -> Optional[float]:
        if value <= 0:
            return -margin
        if value >= limit:
            return limit + margin
        return None

    head, tail = run[:1].copy(), run[-1:].copy()
    parts = [run]
    first, last = outside(run[0, axis]), outside(run[-1, axis])
    if first is not None:
        head[0, axis] = first
        parts.insert(0, head)
    if last is not None:
        tail[0, axis] = last
        parts.append(tail)
    return np.vstack(parts)


# ------------------------------------------------------------------------------
# Samplers
# ------------------------------------------------------------------------------

class CurveSampler(ABC):
    """
    Sampling rule for one curve family.
    """
    curve_type: ClassVar[CurveType]

    @abstractmethod
    def evaluate_screen(self, model: CurveModel, mapper: CoordinateMapper, value: float) -> Point:
        """Map one evaluator input to its screen point."""
        pass

    @abstractmethod
    def build(self, model: CurveModel, mapper: CoordinateMapper) -> CurveGeometry:
        """Sample the whole domain into a fresh CurveGeometry."""
        pass

    def position_by_evaluation(self, model: CurveModel, mapper: CoordinateMapper, point: Point) -> Position:
        """Classify a screen point by evaluating the curve directly."""
        return Position.UNKNOWN


class _ExplicitSampler(CurveSampler):
    """
    Shared column/row walk for y = f(x) and x = f(y). Index `i` runs one
    pixel at a time along the independent axis.
    """
    # axis of the dependent (evaluated) screen coordinate
    dependent_axis: ClassVar[int]

    @abstractmethod
    def _index_range(self, model: CurveModel, mapper: CoordinateMapper) -> tuple[float, float]: ...

    @abstractmethod
    def _screen_points(self, model: CurveModel, mapper: CoordinateMapper,
                       indices: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]: ...

    @abstractmethod
    def _fill_regions(self, runs: list[npt.NDArray[np.float64]], mapper: CoordinateMapper,
                      line_width: float) -> tuple[FillRegion, FillRegion]: ...

    def build(self, model: CurveModel, mapper: CoordinateMapper) -> CurveGeometry:
        initial, final = self._index_range(model, mapper)
        indices = fixed_steps(initial, final, 1.0)

        with np.errstate(over="ignore", invalid="ignore"):
            points = self._screen_points(model, mapper, indices)

        limit = mapper.height if self.dependent_axis == 1 else mapper.width
        runs, continuous = split_runs(points, axis=self.dependent_axis, limit=limit)

        above, below = self._fill_regions(runs, mapper, model.style.line_width)
        return CurveGeometry(
            path=Path.from_subpaths(runs, continuous=continuous),
            fill_above=above,
            fill_below=below,
        )


class ExplicitYSampler(_ExplicitSampler):
    curve_type = CurveType.EXPLICIT_Y
    dependent_axis = 1

    def evaluate_screen(self, model: CurveModel, mapper: CoordinateMapper, value: float) -> Point:
        return Point(mapper.x_to_screen(value), mapper.y_to_screen(_to_finite(_evaluate(model.evaluator, value))))

    def _index_range(self, model: CurveModel, mapper: CoordinateMapper) -> tuple[float, float]:
        initial = max(0.0, mapper.x_to_screen(model.start.x))
        final = min(mapper.width, mapper.x_to_screen(model.end.x))
        return initial, final

    def _screen_points(self, model, mapper, indices):
        ys = sample_scalar(model.evaluator, mapper.x_to_real(indices))
        return np.column_stack((indices, mapper.y_to_screen(ys)))

    def _fill_regions(self, runs, mapper, line_width):
        top = -line_width
        bottom = mapper.height + line_width
        runs = [extend_to_edges(run, 0, mapper.width, line_width) for run in runs]
        above = [np.vstack((run, [[run[-1, 0], top], [run[0, 0], top]])) for run in runs]
        below = [np.vstack((run, [[run[-1, 0], bottom], [run[0, 0], bottom]])) for run in runs]
        return FillRegion.from_rings(FillKind.ABOVE, above), FillRegion.from_rings(FillKind.BELOW, below)

    def position_by_evaluation(self, model, mapper, point):
        curve_y = _to_finite(_evaluate(model.evaluator, mapper.x_to_real(point.x)))
        return _compare(mapper.y_to_real(point.y), curve_y)


class ExplicitXSampler(_ExplicitSampler):
    """
    x = f(y). Index i counts rows up from the bottom edge; the row drawn is
    height - i.
    """
    curve_type = CurveType.EXPLICIT_X
    dependent_axis = 0

    def evaluate_screen(self, model: CurveModel, mapper: CoordinateMapper, value: float) -> Point:
        return Point(mapper.x_to_screen(_to_finite(_evaluate(model.evaluator, value))), mapper.y_to_screen(value))

    def _index_range(self, model: CurveModel, mapper: CoordinateMapper) -> tuple[float, float]:
        h = mapper.height
        initial = max(0.0, h - mapper.y_to_screen(model.start.y))
        final = min(h, h - mapper.y_to_screen(model.end.y))
        return initial, final

    def _screen_points(self, model, mapper, indices):
        rows = mapper.height - indices
        xs = sample_scalar(model.evaluator, mapper.y_to_real(rows))
        return np.column_stack((mapper.x_to_screen(xs), rows))

    def _fill_regions(self, runs, mapper, line_width):
        left = -line_width
        right = mapper.width + line_width
        runs = [extend_to_edges(run, 1, mapper.height, line_width) for run in runs]
        right_rings = [np.vstack((run, [[right, run[-1, 1]], [right, run[0, 1]]])) for run in runs]
        left_rings = [np.vstack((run, [[left, run[-1, 1]], [left, run[0, 1]]])) for run in runs]
        return FillRegion.from_rings(FillKind.RIGHT, right_rings), FillRegion.from_rings(FillKind.LEFT, left_rings)

    def position_by_evaluation(self, model, mapper, point):
        # right of the curve counts as "above"
        curve_x = _to_finite(_evaluate(model.evaluator, mapper.y_to_real(point.y)))
        return _compare(mapper.x_to_real(point.x), curve_x)


class _ClosedCurveSampler(CurveSampler):
    """Polar and parametric curves: no asymptote test, interior/exterior fills."""

    @staticmethod
    def _closed_regions(runs: list[npt.NDArray[np.float64]], mapper: CoordinateMapper,
                        line_width: float) -> tuple[FillRegion, FillRegion]:
        lw = line_width
        canvas = np.array([
            [mapper.width + lw, -lw],
            [mapper.width + lw, mapper.height + lw],
            [-lw, mapper.height + lw],
            [-lw, -lw],
        ])
        exterior = FillRegion.from_rings(FillKind.EXTERIOR, [canvas, *runs])
        interior = FillRegion.from_rings(FillKind.INTERIOR, runs)
        return exterior, interior

    def _geometry(self, model: CurveModel, mapper: CoordinateMapper,
                  points: npt.NDArray[np.float64]) -> CurveGeometry:
        runs, continuous = split_runs(points)
        above, below = self._closed_regions(runs, mapper, model.style.line_width)
        return CurveGeometry(
            path=Path.from_subpaths(runs, continuous=continuous),
            fill_above=above,
            fill_below=below,
        )


class PolarSampler(_ClosedCurveSampler):
    curve_type = CurveType.POLAR

    def evaluate_screen(self, model: CurveModel, mapper: CoordinateMapper, value: float) -> Point:
        r = _to_finite(_evaluate(model.evaluator, value))
        p = from_polar(r * mapper.scale, value)
        return Point(mapper.origin.x + p.x, mapper.origin.y - p.y)

    def build(self, model: CurveModel, mapper: CoordinateMapper) -> CurveGeometry:
        thetas = fixed_steps(model.start.theta, model.end.theta, model.theta_step)
        scaled = sample_scalar(model.evaluator, thetas) * mapper.scale

        with np.errstate(over="ignore", invalid="ignore"):
            xs = _round_small(scaled * np.cos(thetas))
            ys = _round_small(scaled * np.sin(thetas))
            points = np.column_stack((mapper.origin.x + xs, mapper.origin.y - ys))

        return self._geometry(model, mapper, points)

    def position_by_evaluation(self, model, mapper, point):
        # outside the curve counts as "above"
        real = mapper.to_real(point)
        polar = to_polar(real.x, real.y)
        curve_r = _to_finite(_evaluate(model.evaluator, polar.theta))
        return _compare(polar.r, curve_r)


class ParametricSampler(_ClosedCurveSampler):
    curve_type = CurveType.PARAMETRIC

    def evaluate_screen(self, model: CurveModel, mapper: CoordinateMapper, value: float) -> Point:
        x, y = _to_xy(_evaluate(model.evaluator, value))
        return Point(mapper.x_to_screen(x), mapper.y_to_screen(y))

    def build(self, model: CurveModel, mapper: CoordinateMapper) -> CurveGeometry:
        ts = fixed_steps(model.start.t, model.end.t, model.t_step)
        real = sample_xy(model.evaluator, ts)

        with np.errstate(over="ignore", invalid="ignore"):
            points = np.column_stack((mapper.x_to_screen(real[:, 0]), mapper.y_to_screen(real[:, 1])))

        return self._geometry(model, mapper, points)


def _compare(point_value: float, curve_value: float) -> Position:
    if math.isnan(curve_value) or math.isnan(point_value):
        return Position.UNKNOWN
    if point_value == curve_value:
        return Position.ON
    if point_value > curve_value:
        return Position.ABOVE
    return Position.BELOW


_SAMPLERS: dict[CurveType, CurveSampler] = {
    sampler.curve_type: sampler
    for sampler in (ExplicitYSampler(), ExplicitXSampler(), PolarSampler(), ParametricSampler())
}


def sampler_for(curve_type: CurveType) -> CurveSampler:
    return _SAMPLERS[CurveType(curve_type)]


class PathBuilder:
    """Entry point used by curve models and the static cache."""

    @staticmethod
    def build(model: CurveModel, mapper: Optional[CoordinateMapper] = None) -> CurveGeometry:
        """
        Sample `model` into one Path and its two fill regions.

        Args:
            model: The curve to sample.
            mapper: Mapper to sample through; the model's own by default.

        Returns:
            A fresh, immutable CurveGeometry.
        """
        return model.sampler.build(model, mapper if mapper is not None else model.mapper)
