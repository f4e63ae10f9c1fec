"""Shared fixtures for the curvegraph test suite.

Qt tests run headless: the offscreen platform plugin is selected before any
PySide6 import.
"""
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from curvegraph.model.mapper import CoordinateMapper
from curvegraph.model.plane import GraphPlane
from curvegraph.model.surface import RecordingSurface


# ---------------------------------------------------------------------------
# Mapper fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mapper() -> CoordinateMapper:
    """640x480 canvas, origin at the center, 20 px per unit."""
    return CoordinateMapper(width=640, height=480, scale=20, tick_spacing=20)


@pytest.fixture
def offset_mapper() -> CoordinateMapper:
    """Origin away from the center, scale different from tick spacing."""
    from curvegraph.model.geometry_primitives import Point

    return CoordinateMapper(width=400, height=300, scale=25, tick_spacing=10, origin=Point(100, 200))


# ---------------------------------------------------------------------------
# Scene fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plane(mapper) -> GraphPlane:
    return GraphPlane(mapper)


@pytest.fixture
def surface(mapper) -> RecordingSurface:
    return RecordingSurface(width=mapper.width, height=mapper.height)


@pytest.fixture(scope="session")
def qt_app():
    """A QApplication for widgets and painting; skips when PySide6 is unavailable."""
    pytest.importorskip("PySide6")
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
