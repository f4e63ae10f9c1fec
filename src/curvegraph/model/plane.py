"""
Graph Plane
===========
The scene: one CoordinateMapper, the background styles and an ordered list
of curves.

Why is this file needed?
------------------------
1. Frame cycle: `update()` advances the frame counter and every curve,
   `draw(surface)` paints background then curves. Scheduling belongs to the
   caller (a QTimer in the view layer).
2. Isolation: one failing curve must not stop the others from drawing.
3. Zoom gate: the mapper may not change while a frame is being drawn.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Optional, Union

from curvegraph import config
from curvegraph.model.axes import BackgroundGeometry, build_background
from curvegraph.model.curve_options import CurveType
from curvegraph.model.curves import CurveModel
from curvegraph.model.mapper import CoordinateMapper, MapperConfig
from curvegraph.model.surface import RenderSurface

logger = logging.getLogger(__name__)


def _visible(color: Optional[str]) -> bool:
    return bool(color) and color.lower() != "transparent"


@dataclass
class PlaneStyle:
    """Background colors. None or "transparent" skips that layer."""
    background: Optional[str] = config.DEFAULT_BACKGROUND_COLOR
    grid: Optional[str] = config.DEFAULT_GRID_COLOR
    x_axis: Optional[str] = config.DEFAULT_AXIS_COLOR
    y_axis: Optional[str] = config.DEFAULT_AXIS_COLOR
    ticks: Optional[str] = config.DEFAULT_TICK_COLOR
    line_width: float = 1.0


class GraphPlane:
    def __init__(
        self,
        mapper: Optional[CoordinateMapper] = None,
        style: Optional[PlaneStyle] = None,
        frame_cap: int = config.DEFAULT_FRAME_CAP,
    ) -> None:
        self.mapper = mapper if mapper is not None else CoordinateMapper.from_config(MapperConfig())
        self.style = style if style is not None else PlaneStyle()
        self.frame_cap = frame_cap
        self.frame_count: int = 0
        self.curves: list[CurveModel] = []
        self._drawing = False

    @property
    def is_drawing(self) -> bool:
        return self._drawing

    # ------------------------------------------------------------------------------
    # Curves
    # ------------------------------------------------------------------------------

    def add_curve(self, curve: CurveModel) -> CurveModel:
        if curve.mapper is not self.mapper:
            raise ValueError(f"Curve '{curve.name}' belongs to a different mapper.")
        self.curves.append(curve)
        return curve

    def add_function(
        self,
        evaluator: Callable[[float], Any],
        curve_type: Union[CurveType, str] = CurveType.EXPLICIT_Y,
        **options: Any,
    ) -> CurveModel:
        """Create a CurveModel on this plane's mapper and add it."""
        return self.add_curve(CurveModel(self.mapper, evaluator, curve_type, **options))

    def remove_curve(self, curve: CurveModel) -> None:
        self.curves.remove(curve)
        curve.detach()

    # ------------------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------------------

    def set_zoom(self, level: float) -> bool:
        """Forward to the mapper, refused while a frame is being drawn."""
        if self._drawing:
            logger.error("Zoom requested during draw; ignored.")
            return False
        return self.mapper.set_zoom(level)

    def resize(self, width: float, height: float) -> None:
        self.mapper.resize(width, height)

    # ------------------------------------------------------------------------------
    # Frame cycle
    # ------------------------------------------------------------------------------

    def update(self) -> int:
        """Advance one frame. Returns the new frame count."""
        self.frame_count += 1
        if self.frame_count > self.frame_cap:
            self.frame_count = 0

        for curve in list(self.curves):
            curve.update(self.frame_count)
        return self.frame_count

    def draw(self, surface: RenderSurface) -> None:
        self._drawing = True
        try:
            surface.clear(self.style.background if _visible(self.style.background) else None)
            self.draw_background(surface)

            for curve in list(self.curves):
                try:
                    curve.draw(surface)
                except Exception:
                    logger.exception(f"Drawing curve '{curve.name}' failed; skipped this frame.")
        finally:
            self._drawing = False

    def draw_background(self, surface: RenderSurface) -> BackgroundGeometry:
        background = build_background(self.mapper)
        style = self.style
        width = style.line_width

        if _visible(style.grid):
            surface.stroke(background.grid, style.grid, width)
        if _visible(style.x_axis):
            surface.stroke(background.x_axis, style.x_axis, width)
        if _visible(style.y_axis):
            surface.stroke(background.y_axis, style.y_axis, width)
        if _visible(style.ticks):
            surface.stroke(background.ticks, style.ticks, width)
        return background
