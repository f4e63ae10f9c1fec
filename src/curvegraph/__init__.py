"""
Curve Graph
===========
Zoomable coordinate plane that samples explicit, polar and parametric curves
into screen-space paths and fill regions.

The `model` subpackage is pure numpy/matplotlib; `view` adds PySide6.
"""
from curvegraph.model.cache import StaticPathCache
from curvegraph.model.curve_options import Bounds, CurveStyle, CurveType, Position, Velocity
from curvegraph.model.curves import CurveModel
from curvegraph.model.geometry_primitives import Point
from curvegraph.model.mapper import CoordinateMapper, InvalidScaleError, InvalidZoomError, MapperConfig
from curvegraph.model.path_builder import PathBuilder
from curvegraph.model.paths import CurveGeometry, FillKind, FillRegion, Path
from curvegraph.model.plane import GraphPlane, PlaneStyle
from curvegraph.model.polar import PolarPoint, from_polar, to_polar
from curvegraph.model.surface import RecordingSurface, RenderSurface

__all__ = [
    "Bounds",
    "CoordinateMapper",
    "CurveGeometry",
    "CurveModel",
    "CurveStyle",
    "CurveType",
    "FillKind",
    "FillRegion",
    "GraphPlane",
    "InvalidScaleError",
    "InvalidZoomError",
    "MapperConfig",
    "Path",
    "PathBuilder",
    "PlaneStyle",
    "Point",
    "PolarPoint",
    "Position",
    "RecordingSurface",
    "RenderSurface",
    "StaticPathCache",
    "Velocity",
    "from_polar",
    "to_polar",
]
