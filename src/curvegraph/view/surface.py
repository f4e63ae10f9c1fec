"""
QPainter implementation of the model's RenderSurface protocol.
"""
from __future__ import annotations

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QPainter, QPainterPath, QPainterPathStroker, QPen, QPolygonF

from curvegraph.model.geometry_primitives import Point
from curvegraph.model.paths import FillRegion, Path


def to_qpainter_path(path: Path) -> QPainterPath:
    """One QPainterPath with a moveTo per subpath."""
    qpath = QPainterPath()
    for subpath in path.subpaths:
        x0, y0 = subpath[0]
        qpath.moveTo(float(x0), float(y0))
        for x, y in subpath[1:]:
            qpath.lineTo(float(x), float(y))
    return qpath


def region_to_qpainter_path(region: FillRegion) -> QPainterPath:
    """Closed rings combined with the odd-even rule, like FillRegion.contains."""
    qpath = QPainterPath()
    qpath.setFillRule(Qt.FillRule.OddEvenFill)
    for ring in region.rings:
        qpath.addPolygon(QPolygonF([QPointF(float(x), float(y)) for x, y in ring]))
        qpath.closeSubpath()
    return qpath


class QPainterSurface:
    """Adapter from the RenderSurface calls to an active QPainter."""

    def __init__(self, painter: QPainter, width: float, height: float) -> None:
        self._painter = painter
        self._width = float(width)
        self._height = float(height)

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @staticmethod
    def _color(value: str | None) -> QColor:
        return QColor(value) if value else QColor(Qt.GlobalColor.transparent)

    def clear(self, color: str | None = None) -> None:
        self._painter.save()
        self._painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Source)
        self._painter.fillRect(QRectF(0.0, 0.0, self._width, self._height), self._color(color))
        self._painter.restore()

    def stroke(self, path: Path, color: str, width: float) -> None:
        if path.is_empty:
            return
        self._painter.save()
        self._painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        pen = QPen(self._color(color))
        pen.setWidthF(float(width))
        self._painter.setPen(pen)
        self._painter.setBrush(Qt.BrushStyle.NoBrush)
        self._painter.drawPath(to_qpainter_path(path))
        self._painter.restore()

    def fill(self, region: FillRegion, color: str) -> None:
        if not region.rings:
            return
        self._painter.save()
        self._painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        self._painter.fillPath(region_to_qpainter_path(region), QBrush(self._color(color)))
        self._painter.restore()

    def contains(self, region: FillRegion, point: Point) -> bool:
        return region_to_qpainter_path(region).contains(QPointF(point.x, point.y))

    def stroke_contains(self, path: Path, point: Point, width: float) -> bool:
        stroker = QPainterPathStroker()
        stroker.setWidth(float(width))
        stroker.setCapStyle(Qt.PenCapStyle.RoundCap)
        return stroker.createStroke(to_qpainter_path(path)).contains(QPointF(point.x, point.y))
