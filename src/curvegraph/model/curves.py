"""
Curve Model
===========
Declarative description of one drawable curve.

Why is this file needed?
------------------------
1. State: a curve owns its evaluator, its domain bounds (with per-frame
   velocity), its sampling steps and its style. Nothing else about a curve is
   stored between frames.
2. Lifecycle: the model registers with the CoordinateMapper so bounds pinned
   to the canvas edges follow zoom and resize, and static curves know when to
   rebuild their cached geometry.
3. Queries: `position_of` answers on/above/below for a screen point.

Classes:
    CurveModel: One curve of any of the four families.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Callable, Mapping, Optional, Union, TYPE_CHECKING

from curvegraph import config
from curvegraph.model.cache import StaticPathCache
from curvegraph.model.curve_options import (
    Bounds,
    BoundsLike,
    CurveStyle,
    CurveType,
    Position,
    Velocity,
    bounds_from,
)
from curvegraph.model.geometry_primitives import Point, ViewSnapshot
from curvegraph.model.path_builder import CurveSampler, PathBuilder, sampler_for
from curvegraph.model.paths import CurveGeometry

if TYPE_CHECKING:
    from curvegraph.model.mapper import CoordinateMapper
    from curvegraph.model.surface import RenderSurface

logger = logging.getLogger(__name__)


def _check_step(value: float, name: str) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be positive and finite, got {value}")
    return value


def _on_edge(screen_value: float, edge: float) -> bool:
    return abs(screen_value - edge) <= config.EDGE_TOLERANCE_PX


class CurveModel:
    """
    One curve: y = f(x), x = f(y), r = f(theta) or (x, y) = f(t).

    Args:
        mapper: The plane's shared CoordinateMapper.
        evaluator: Pure function matching the curve type's signature.
        curve_type: CurveType or its string value.
        start, end: Domain bounds; missing fields default to the visible
            canvas (x, y), 0 (t, r) and [0, 2*pi] (theta).
        velocity: Per-frame change of the bounds.
        theta_step: Polar sampling step in radians.
        t_step: Parametric sampling step.
        style: Stroke and fill colors, line width.
        static: Build once and reuse until the canvas is resized.
        name: Optional label, used in log messages.
        on_update: Called with the frame count after every update.
        on_draw: Called with the surface after every draw.
    """

    def __init__(
        self,
        mapper: CoordinateMapper,
        evaluator: Callable[[float], Any],
        curve_type: Union[CurveType, str] = CurveType.EXPLICIT_Y,
        *,
        start: BoundsLike = None,
        end: BoundsLike = None,
        velocity: Union[Velocity, Mapping[str, Any], None] = None,
        theta_step: float = config.DEFAULT_THETA_STEP,
        t_step: float = config.DEFAULT_T_STEP,
        style: Optional[CurveStyle] = None,
        static: bool = False,
        name: Optional[str] = None,
        on_update: Optional[Callable[[int], None]] = None,
        on_draw: Optional[Callable[[RenderSurface], None]] = None,
    ) -> None:
        if not callable(evaluator):
            raise TypeError(f"evaluator must be callable, got {type(evaluator).__name__}")

        self.mapper = mapper
        self.evaluator = evaluator
        self.curve_type = CurveType(curve_type)
        self.sampler: CurveSampler = sampler_for(self.curve_type)
        self.name = name or self.curve_type.value

        x_min, x_max, y_min, y_max = mapper.visible_real_bounds()
        self.start: Bounds = bounds_from(Bounds(t=0.0, x=x_min, y=y_min, r=0.0, theta=0.0), start)
        self.end: Bounds = bounds_from(Bounds(t=0.0, x=x_max, y=y_max, r=0.0, theta=config.TAU), end)
        self.velocity = Velocity.from_options(velocity)
        self.animation_time: float = 0.0

        self.theta_step = _check_step(theta_step, "theta_step")
        self.t_step = _check_step(t_step, "t_step")
        self.style = style if style is not None else CurveStyle()

        self.on_update = on_update
        self.on_draw = on_draw

        self.static = static
        self.cache: Optional[StaticPathCache] = StaticPathCache() if static else None
        self._geometry: Optional[CurveGeometry] = None

        mapper.register(self)

        if static:
            if not self.velocity.end.is_zero():
                logger.warning(
                    f"Static curve '{self.name}' has a nonzero end-bound velocity; "
                    f"its cached geometry will not follow the moving bound."
                )
            self.build()

    def __repr__(self) -> str:
        return f"CurveModel(name={self.name!r}, type={self.curve_type.value}, static={self.static})"

    # ------------------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------------------

    def evaluate(self, value: float) -> Any:
        """The raw evaluator result, without any mapping."""
        return self.evaluator(value)

    def evaluate_screen(self, value: float) -> Point:
        """Screen point for one evaluator input (x, y, theta or t by type)."""
        return self.sampler.evaluate_screen(self, self.mapper, value)

    # ------------------------------------------------------------------------------
    # Frame cycle
    # ------------------------------------------------------------------------------

    def update(self, frame_count: int) -> None:
        """Advance the bounds by one frame of velocity. Unbounded."""
        self.start.advance(self.velocity.start)
        self.end.advance(self.velocity.end)
        self.animation_time += self.velocity.animation_time

        if self.on_update is not None:
            self.on_update(frame_count)

    def build(self) -> CurveGeometry:
        """Geometry for this frame; served from the cache for static curves."""
        if self.cache is not None:
            self._geometry = self.cache.get(lambda: PathBuilder.build(self, self.mapper))
        else:
            self._geometry = PathBuilder.build(self, self.mapper)
        return self._geometry

    def draw(self, surface: RenderSurface) -> CurveGeometry:
        """Fill below, fill above, then stroke the curve onto `surface`."""
        geometry = self.build()
        style = self.style

        if style.fills_below and geometry.fill_below is not None:
            surface.fill(geometry.fill_below, style.fill_below)
        if style.fills_above and geometry.fill_above is not None:
            surface.fill(geometry.fill_above, style.fill_above)

        surface.stroke(geometry.path, style.stroke_color, style.line_width)

        if self.on_draw is not None:
            self.on_draw(surface)
        return geometry

    @property
    def geometry(self) -> Optional[CurveGeometry]:
        """The most recently built geometry, if any."""
        return self._geometry

    @property
    def continuous(self) -> bool:
        geometry = self._geometry if self._geometry is not None else self.build()
        return geometry.continuous

    # ------------------------------------------------------------------------------
    # Mapper notifications
    # ------------------------------------------------------------------------------

    def update_bounds_on_resize(self, old_scale: float, previous: Optional[ViewSnapshot] = None) -> None:
        """
        Re-anchor bounds that sat exactly on a canvas edge before the scale
        (or canvas size) changed. Bounds set away from the edges are kept.
        Only explicit curves have canvas-anchored bounds.
        """
        if not self.curve_type.is_explicit:
            return

        mapper = self.mapper
        if previous is None:
            previous = ViewSnapshot(scale=old_scale, origin=mapper.origin, width=mapper.width, height=mapper.height)

        x_min, x_max, y_min, y_max = mapper.visible_real_bounds()

        if _on_edge(previous.x_to_screen(self.start.x), 0):
            self.start.x = x_min
        if _on_edge(previous.x_to_screen(self.end.x), previous.width):
            self.end.x = x_max
        if _on_edge(previous.y_to_screen(self.start.y), previous.height):
            self.start.y = y_min
        if _on_edge(previous.y_to_screen(self.end.y), 0):
            self.end.y = y_max

    def on_canvas_resize(self) -> None:
        if self.cache is not None:
            self.cache.invalidate()

    def detach(self) -> None:
        """Stop following the mapper."""
        self.mapper.unregister(self)

    # ------------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------------

    def position_of(self, point: Point, surface: Optional[RenderSurface] = None) -> Position:
        """
        Where a screen point sits relative to this curve.

        Continuous curves are classified with the stroke and the fill regions.
        Curves with breaks are classified by evaluating the curve at the
        point's real coordinate.

        Args:
            point: Screen point.
            surface: Surface to run the hit tests on; the model's own
                geometry is used if omitted.
        """
        geometry = self._geometry if self._geometry is not None else self.build()
        stroke_width = max(self.style.line_width, 2 * config.POSITION_TOLERANCE_PX)

        if surface is not None:
            on_stroke = surface.stroke_contains(geometry.path, point, stroke_width)
        else:
            on_stroke = geometry.path.stroke_contains(point, stroke_width / 2)
        if on_stroke:
            return Position.ON

        if not geometry.continuous:
            position = self.sampler.position_by_evaluation(self, self.mapper, point)
        else:
            position = self._position_by_regions(geometry, point, surface)

        if position is Position.UNKNOWN:
            logger.debug(f"Position of ({point.x}, {point.y}) relative to '{self.name}' is unknown")
        return position

    @staticmethod
    def _position_by_regions(geometry: CurveGeometry, point: Point,
                             surface: Optional[RenderSurface]) -> Position:
        def inside(region) -> bool:
            if region is None:
                return False
            return surface.contains(region, point) if surface is not None else region.contains(point)

        if inside(geometry.fill_above):
            return Position.ABOVE
        if inside(geometry.fill_below):
            return Position.BELOW
        return Position.UNKNOWN
