"""Tests for CoordinateMapper: conversions, zoom, scale and resize."""
import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from curvegraph.model.geometry_primitives import Point
from curvegraph.model.mapper import (
    CoordinateMapper,
    InvalidScaleError,
    MapperConfig,
)


class _Listener:
    def __init__(self, mapper=None):
        self.mapper = mapper
        self.calls = []
        self.resizes = 0

    def update_bounds_on_resize(self, old_scale, previous=None):
        # state must already be final when listeners run
        self.calls.append((old_scale, previous, self.mapper.scale if self.mapper else None))

    def on_canvas_resize(self):
        self.resizes += 1


# ===========================================================================
# Construction
# ===========================================================================


class TestConstruction:
    def test_defaults(self):
        m = CoordinateMapper()
        assert m.width == 640
        assert m.height == 480
        assert m.scale == m.tick_spacing == 20
        assert m.origin == Point(320, 240)
        assert m.zoom_level == 1

    def test_from_config_origin_by_ratio(self):
        m = CoordinateMapper.from_config(MapperConfig(width=200, height=100, origin_by_ratio=(0.25, 1.0)))
        assert m.origin == Point(50, 100)

    @pytest.mark.parametrize("scale", [0, -1, math.inf, math.nan])
    def test_invalid_scale_rejected(self, scale):
        with pytest.raises(InvalidScaleError):
            CoordinateMapper(scale=scale)

    @pytest.mark.parametrize("width", [0, -10, math.nan])
    def test_invalid_size_rejected(self, width):
        with pytest.raises(ValueError):
            CoordinateMapper(width=width)


# ===========================================================================
# Conversions
# ===========================================================================


class TestConversions:
    def test_x_y_formulas(self, mapper):
        assert mapper.x_to_screen(2) == 320 + 40
        assert mapper.y_to_screen(2) == 240 - 40
        assert mapper.x_to_real(360) == 2
        assert mapper.y_to_real(200) == 2

    def test_round_trip(self, offset_mapper):
        xs = np.linspace(-1e3, 1e3, 101)
        assert_allclose(offset_mapper.x_to_real(offset_mapper.x_to_screen(xs)), xs, rtol=1e-12, atol=1e-9)
        assert_allclose(offset_mapper.y_to_real(offset_mapper.y_to_screen(xs)), xs, rtol=1e-12, atol=1e-9)

    def test_point_conversions(self, mapper):
        p = mapper.to_screen(Point(1, -1))
        assert p == Point(340, 260)
        assert mapper.to_real(p) == Point(1, -1)

    def test_visible_real_bounds(self, mapper):
        assert mapper.visible_real_bounds() == (-16, 16, -12, 12)


# ===========================================================================
# Zoom
# ===========================================================================


class TestZoom:
    @pytest.mark.parametrize("level", [0.5, 2, 3.7])
    def test_scale_and_tick_spacing(self, offset_mapper, level):
        assert offset_mapper.set_zoom(level)
        assert offset_mapper.scale == pytest.approx(25 / level)
        assert offset_mapper.tick_spacing == pytest.approx(10 / level)

    def test_origin_moves_toward_center(self, offset_mapper):
        offset_mapper.set_zoom(2)
        center = offset_mapper.center
        assert offset_mapper.origin.x == pytest.approx(center.x + (100 - center.x) / 2)
        assert offset_mapper.origin.y == pytest.approx(center.y + (200 - center.y) / 2)

    def test_zoom_one_restores_exact_origin(self, offset_mapper):
        original = offset_mapper.origin
        for level in (3, 0.7, 1.9):
            offset_mapper.set_zoom(level)
        offset_mapper.set_zoom(1)
        assert offset_mapper.origin.x == original.x
        assert offset_mapper.origin.y == original.y
        assert offset_mapper.scale == 25

    @pytest.mark.parametrize("level", [0, -2, math.inf, -math.inf, math.nan, "2", None])
    def test_invalid_zoom_leaves_state(self, offset_mapper, level, caplog):
        before = offset_mapper.snapshot()
        assert offset_mapper.set_zoom(level) is False
        assert offset_mapper.snapshot() == before
        assert offset_mapper.zoom_level == 1
        assert "Zoom rejected" in caplog.text

    def test_listeners_run_after_mutation(self, offset_mapper):
        listener = _Listener(offset_mapper)
        offset_mapper.register(listener)
        offset_mapper.set_zoom(2)

        (old_scale, previous, seen_scale), = listener.calls
        assert old_scale == 25
        assert previous.origin == Point(100, 200)
        assert seen_scale == 12.5


# ===========================================================================
# Scale setter and resize
# ===========================================================================


class TestScaleAndResize:
    def test_scale_setter_notifies(self, mapper):
        listener = _Listener(mapper)
        mapper.register(listener)
        mapper.scale = 40
        assert listener.calls[0][0] == 20
        assert listener.resizes == 0

    def test_scale_setter_validates(self, mapper):
        with pytest.raises(InvalidScaleError):
            mapper.scale = -3
        assert mapper.scale == 20

    def test_resize_notifies_both(self, mapper, caplog):
        listener = _Listener(mapper)
        mapper.register(listener)
        with caplog.at_level("INFO", logger="curvegraph"):
            mapper.resize(800, 600)
        assert (mapper.width, mapper.height) == (800, 600)
        assert mapper.center == Point(400, 300)
        assert listener.calls[0][1].width == 640
        assert listener.resizes == 1
        assert "Canvas resized to 800x600" in caplog.text

    def test_unregister(self, mapper):
        listener = _Listener(mapper)
        mapper.register(listener)
        mapper.register(listener)
        assert mapper.listeners == (listener,)
        mapper.unregister(listener)
        mapper.scale = 10
        assert listener.calls == []
