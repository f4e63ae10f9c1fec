"""
Coordinate Mapper
=================
Converts between real (mathematical) coordinates and screen pixels and owns
the zoom state of the coordinate plane.

Why is this file needed?
------------------------
1. Single source of truth: every curve reads the same (scale, origin) pair
   each frame, so all curves line up with each other and with the grid.
2. Zoom bookkeeping: the unzoomed scale/origin are stored so that returning
   to zoom level 1 restores the exact original view.
3. Notification: bounds anchored to the canvas edges must follow the edges
   when the scale or the canvas size changes. Registered listeners (curve
   models) are updated synchronously before a mutating call returns.

Classes:
    MapperConfig: Caller-supplied canvas geometry.
    ZoomState: Zoom level plus the unzoomed reference values.
    CoordinateMapper: The mapper itself.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Optional, Protocol, Union, TYPE_CHECKING

import numpy as np

from curvegraph import config
from curvegraph.model.geometry_primitives import Point, ViewSnapshot

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

Number = Union[float, "npt.NDArray[np.float64]"]


class InvalidZoomError(ValueError):
    """Zoom level is not a positive finite number."""


class InvalidScaleError(ValueError):
    """Scale (pixels per real unit) is not a positive finite number."""


class BoundsListener(Protocol):
    """Anything that must follow scale and canvas-size changes."""

    def update_bounds_on_resize(self, old_scale: float, previous: Optional[ViewSnapshot] = None) -> None: ...

    def on_canvas_resize(self) -> None: ...


@dataclass
class MapperConfig:
    """
    Canvas geometry supplied by the caller.

    If `origin` is None the origin is placed at `origin_by_ratio`
    of the canvas (the center by default).
    """
    width: float = config.DEFAULT_CANVAS_WIDTH
    height: float = config.DEFAULT_CANVAS_HEIGHT
    scale: Optional[float] = None
    tick_spacing: float = config.DEFAULT_TICK_SPACING
    origin: Optional[Point] = None
    origin_by_ratio: tuple[float, float] = config.DEFAULT_ORIGIN_BY_RATIO


@dataclass
class ZoomState:
    level: float
    unzoomed_scale: float
    unzoomed_tick_spacing: float
    unzoomed_origin: Point


def _check_positive_finite(value: object, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.floating, np.integer)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    value = float(value)
    if math.isnan(value) or not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be positive and finite, got {value}")
    return value


class CoordinateMapper:
    """
    Real space <-> screen space conversion for a canvas of width x height pixels.

    Screen y grows downward, so real y is reflected about the origin.
    """

    def __init__(
        self,
        width: float = config.DEFAULT_CANVAS_WIDTH,
        height: float = config.DEFAULT_CANVAS_HEIGHT,
        scale: Optional[float] = None,
        tick_spacing: float = config.DEFAULT_TICK_SPACING,
        origin: Optional[Point] = None,
    ) -> None:
        self._width = _check_positive_finite(width, "width")
        self._height = _check_positive_finite(height, "height")

        self.tick_spacing: float = _check_positive_finite(tick_spacing, "tick_spacing")
        try:
            self._scale: float = _check_positive_finite(
                scale if scale is not None else self.tick_spacing, "scale"
            )
        except (TypeError, ValueError) as e:
            raise InvalidScaleError(str(e)) from e

        self.origin: Point = origin if origin is not None else self.center

        self.zoom = ZoomState(
            level=1.0,
            unzoomed_scale=self._scale,
            unzoomed_tick_spacing=self.tick_spacing,
            unzoomed_origin=Point(self.origin.x, self.origin.y),
        )
        self._listeners: list[BoundsListener] = []

    @classmethod
    def from_config(cls, cfg: MapperConfig) -> CoordinateMapper:
        origin = cfg.origin
        if origin is None:
            rx, ry = cfg.origin_by_ratio
            origin = Point(rx * cfg.width, ry * cfg.height)
        return cls(
            width=cfg.width,
            height=cfg.height,
            scale=cfg.scale,
            tick_spacing=cfg.tick_spacing,
            origin=origin,
        )

    # ------------------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------------------

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def center(self) -> Point:
        return Point(self._width / 2, self._height / 2)

    @property
    def zoom_level(self) -> float:
        return self.zoom.level

    @property
    def scale(self) -> float:
        """Pixels per real unit."""
        return self._scale

    @scale.setter
    def scale(self, value: float) -> None:
        try:
            value = _check_positive_finite(value, "scale")
        except (TypeError, ValueError) as e:
            raise InvalidScaleError(str(e)) from e

        previous = self.snapshot()
        self._scale = value
        logger.debug(f"Scale changed {previous.scale} -> {value}")
        self._notify_bounds(previous)

    @property
    def listeners(self) -> tuple[BoundsListener, ...]:
        return tuple(self._listeners)

    def snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(
            scale=self._scale,
            origin=self.origin,
            width=self._width,
            height=self._height,
        )

    # ------------------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------------------

    def x_to_screen(self, real_x: Number) -> Number:
        return self.origin.x + self._scale * real_x

    def x_to_real(self, screen_x: Number) -> Number:
        return (screen_x - self.origin.x) / self._scale

    def y_to_screen(self, real_y: Number) -> Number:
        return self.origin.y - self._scale * real_y

    def y_to_real(self, screen_y: Number) -> Number:
        return -(screen_y - self.origin.y) / self._scale

    def to_screen(self, real_point: Point) -> Point:
        return Point(self.x_to_screen(real_point.x), self.y_to_screen(real_point.y))

    def to_real(self, screen_point: Point) -> Point:
        return Point(self.x_to_real(screen_point.x), self.y_to_real(screen_point.y))

    def visible_real_bounds(self) -> tuple[float, float, float, float]:
        """(x_min, x_max, y_min, y_max) of the canvas in real coordinates."""
        return (
            -(self.origin.x / self._scale),
            (self._width - self.origin.x) / self._scale,
            -((self._height - self.origin.y) / self._scale),
            self.origin.y / self._scale,
        )

    # ------------------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------------------

    def set_zoom(self, level: float) -> bool:
        """
        Zoom the plane about the canvas center.

        Args:
            level: Fraction of the original picture (1 restores the original
                   view, 2 shows twice as much of the plane).

        Returns:
            True if the zoom was applied. An invalid level is logged and
            leaves the mapper untouched.
        """
        try:
            level = self._validate_zoom(level)
        except InvalidZoomError as e:
            logger.error(f"Zoom rejected, state unchanged: {e}")
            return False

        previous = self.snapshot()
        self.zoom.level = level

        self._scale = self.zoom.unzoomed_scale / level
        self.tick_spacing = self.zoom.unzoomed_tick_spacing / level

        if level == 1:
            self.origin = self.zoom.unzoomed_origin
        else:
            center = self.center
            self.origin = center + (self.zoom.unzoomed_origin - center) / level

        logger.debug(f"Zoom level {level}: scale={self._scale}, origin=({self.origin.x}, {self.origin.y})")
        self._notify_bounds(previous)
        return True

    def resize(self, width: float, height: float) -> None:
        """
        Canvas resize notification. Edge-anchored bounds follow the new
        edges and static geometry caches are invalidated.
        """
        width = _check_positive_finite(width, "width")
        height = _check_positive_finite(height, "height")

        previous = self.snapshot()
        self._width = width
        self._height = height
        logger.info(f"Canvas resized to {width:g}x{height:g}")

        self._notify_bounds(previous)
        for listener in list(self._listeners):
            listener.on_canvas_resize()

    def register(self, listener: BoundsListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister(self, listener: BoundsListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    @staticmethod
    def _validate_zoom(level: object) -> float:
        try:
            return _check_positive_finite(level, "zoom level")
        except (TypeError, ValueError) as e:
            raise InvalidZoomError(str(e)) from e

    def _notify_bounds(self, previous: ViewSnapshot) -> None:
        for listener in list(self._listeners):
            listener.update_bounds_on_resize(previous.scale, previous)
