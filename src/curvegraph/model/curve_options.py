"""Option types a CurveModel is constructed from."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import StrEnum
from typing import Any, Mapping, Optional, Union

from curvegraph import config


# ------------------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------------------
class CurveType(StrEnum):
    """The four curve families and their evaluator signatures."""
    EXPLICIT_Y = "explicit_y"  # y = f(x)
    EXPLICIT_X = "explicit_x"  # x = f(y)
    POLAR = "polar"  # r = f(theta)
    PARAMETRIC = "parametric"  # (x, y) = f(t)

    @property
    def is_explicit(self) -> bool:
        return self in (CurveType.EXPLICIT_Y, CurveType.EXPLICIT_X)


class Position(StrEnum):
    """Where a screen point sits relative to a curve, as seen on screen."""
    ON = "on"
    ABOVE = "above"
    BELOW = "below"
    UNKNOWN = "unknown"


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass
class Bounds:
    """One end (start or end) of a curve's domain, per axis."""
    t: float = 0.0
    x: float = 0.0
    y: float = 0.0
    r: float = 0.0
    theta: float = 0.0

    def advance(self, delta: Bounds) -> None:
        """Add each field of `delta` into this bound."""
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(delta, f.name))

    def is_zero(self) -> bool:
        return all(getattr(self, f.name) == 0 for f in fields(self))

    def copy(self) -> Bounds:
        return replace(self)


BoundsLike = Union[Bounds, Mapping[str, float], None]


def bounds_from(defaults: Bounds, overrides: BoundsLike) -> Bounds:
    """Defaults with any keys the caller supplied replaced."""
    if overrides is None:
        return defaults.copy()
    if isinstance(overrides, Bounds):
        return overrides.copy()
    return replace(defaults, **dict(overrides))


@dataclass
class Velocity:
    """
    Per-frame additive change of the domain bounds. Unbounded: a curve
    animated this way keeps growing until the caller resets it.
    """
    start: Bounds = field(default_factory=Bounds)
    end: Bounds = field(default_factory=Bounds)
    animation_time: float = 0.0

    @classmethod
    def from_options(cls, options: Union[Velocity, Mapping[str, Any], None]) -> Velocity:
        if options is None:
            return cls()
        if isinstance(options, Velocity):
            return options
        return cls(
            start=bounds_from(Bounds(), options.get("start")),
            end=bounds_from(Bounds(), options.get("end")),
            animation_time=float(options.get("animation_time", 0.0)),
        )


@dataclass
class CurveStyle:
    stroke_color: str = config.DEFAULT_STROKE_COLOR
    fill_above: Optional[str] = None
    fill_below: Optional[str] = None
    line_width: float = config.DEFAULT_LINE_WIDTH

    @staticmethod
    def _visible(color: Optional[str]) -> bool:
        return bool(color) and color.lower() != "transparent"

    @property
    def fills_above(self) -> bool:
        return self._visible(self.fill_above)

    @property
    def fills_below(self) -> bool:
        return self._visible(self.fill_below)
