"""
Graph Canvas
============
QWidget that hosts a GraphPlane.

Why is this file needed?
------------------------
1. Frame driver: a QTimer calls `plane.update()` and schedules a repaint,
   so update and draw run once per tick on the GUI thread.
2. Resize: the widget size is the canvas size; the mapper is told whenever
   it changes.
3. Offscreen: `render_to_image` draws one frame into a QImage, no window.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QTimer, QSize
from PySide6.QtGui import QImage, QPainter, QPaintEvent, QResizeEvent
from PySide6.QtWidgets import QWidget

from curvegraph import config
from curvegraph.model.plane import GraphPlane
from curvegraph.view.surface import QPainterSurface

logger = logging.getLogger(__name__)


class GraphCanvas(QWidget):
    def __init__(
        self,
        plane: GraphPlane,
        interval_ms: int = config.DEFAULT_FRAME_INTERVAL_MS,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.plane = plane
        self.resize(int(plane.mapper.width), int(plane.mapper.height))
        self.setMinimumSize(QSize(50, 50))

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_tick)

    # --- Frame driver ---

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    def _on_tick(self) -> None:
        self.plane.update()
        self.update()

    # --- Qt events ---

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            self.plane.draw(QPainterSurface(painter, self.width(), self.height()))
        finally:
            painter.end()

    def resizeEvent(self, event: QResizeEvent) -> None:
        size = event.size()
        if size.width() > 0 and size.height() > 0:
            self.plane.resize(size.width(), size.height())
        super().resizeEvent(event)


def render_to_image(plane: GraphPlane, filename: Optional[str] = None) -> QImage:
    """
    Draw one frame of `plane` into an image of the mapper's size.

    Args:
        plane: Scene to render. Its frame counter is not advanced.
        filename: If given, the image is also saved there (format from the
                  file extension).

    Returns:
        The rendered QImage.
    """
    width, height = int(round(plane.mapper.width)), int(round(plane.mapper.height))
    image = QImage(width, height, QImage.Format.Format_ARGB32_Premultiplied)

    painter = QPainter(image)
    try:
        plane.draw(QPainterSurface(painter, width, height))
    finally:
        painter.end()

    if filename is not None:
        if not image.save(filename):
            raise OSError(f"Could not write image to {filename}")
        logger.info(f"Rendered {width}x{height} frame to {filename}")
    return image
