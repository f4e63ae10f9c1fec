"""Tests for CurveModel: options, frame updates, bound re-anchoring, drawing and position queries."""
import logging
import math

import pytest

from curvegraph.config import TAU
from curvegraph.model.curve_options import Bounds, CurveStyle, CurveType, Position, Velocity
from curvegraph.model.curves import CurveModel
from curvegraph.model.geometry_primitives import Point
from curvegraph.model.paths import FillKind


# ===========================================================================
# Construction
# ===========================================================================


class TestConstruction:
    def test_default_bounds_follow_canvas(self, mapper):
        curve = CurveModel(mapper, math.sin)
        assert (curve.start.x, curve.end.x) == (-16, 16)
        assert (curve.start.y, curve.end.y) == (-12, 12)
        assert (curve.start.t, curve.end.t) == (0, 0)
        assert (curve.start.theta, curve.end.theta) == (0, TAU)
        assert curve.theta_step == pytest.approx(TAU / 360)
        assert curve.t_step == pytest.approx(0.1)
        assert curve.style.line_width == 1

    def test_partial_bounds_override(self, mapper):
        curve = CurveModel(mapper, math.sin, start={"x": -2}, end=Bounds(x=2, y=3))
        assert curve.start.x == -2
        assert curve.start.y == -12
        assert curve.end.theta == 0

    def test_registers_with_mapper(self, mapper):
        curve = CurveModel(mapper, math.sin)
        assert curve in mapper.listeners
        curve.detach()
        assert curve not in mapper.listeners

    def test_unknown_type(self, mapper):
        with pytest.raises(ValueError):
            CurveModel(mapper, math.sin, "implicit")

    @pytest.mark.parametrize("option", ["theta_step", "t_step"])
    @pytest.mark.parametrize("value", [0, -0.1, math.nan])
    def test_bad_step(self, mapper, option, value):
        with pytest.raises(ValueError):
            CurveModel(mapper, math.sin, **{option: value})

    def test_evaluator_must_be_callable(self, mapper):
        with pytest.raises(TypeError):
            CurveModel(mapper, 42)

    def test_evaluate_is_raw(self, mapper):
        curve = CurveModel(mapper, lambda x: x * 3)
        assert curve.evaluate(2) == 6
        assert curve.evaluate_screen(2) == Point(360, 120)


# ===========================================================================
# Frame updates
# ===========================================================================


class TestUpdate:
    def test_velocity_is_additive(self, mapper):
        frames = []
        curve = CurveModel(
            mapper,
            math.sin,
            velocity={"start": {"x": 1}, "end": {"x": 2, "t": 0.5}, "animation_time": 1},
            on_update=frames.append,
        )
        for frame in (1, 2, 3):
            curve.update(frame)

        assert curve.start.x == -13
        assert curve.end.x == 22
        assert curve.end.t == 1.5
        assert curve.animation_time == 3
        assert frames == [1, 2, 3]

    def test_velocity_object(self, mapper):
        curve = CurveModel(mapper, math.cos, CurveType.POLAR, velocity=Velocity(end=Bounds(theta=-0.5)))
        curve.update(1)
        assert curve.end.theta == pytest.approx(TAU - 0.5)
        assert curve.start.theta == 0

    def test_animated_parametric_grows(self, mapper):
        curve = CurveModel(mapper, lambda t: (t, 0), CurveType.PARAMETRIC, velocity={"end": {"t": 1}}, t_step=1)
        assert curve.build().path.n_points == 1
        for frame in range(3):
            curve.update(frame)
        assert curve.build().path.n_points == 4


# ===========================================================================
# Re-anchoring on zoom / scale / resize
# ===========================================================================


class TestBoundsFollowEdges:
    def test_zoom_reanchors_edge_bounds(self, mapper):
        curve = CurveModel(mapper, math.sin)
        mapper.set_zoom(2)
        assert (curve.start.x, curve.end.x) == pytest.approx((-32, 32))
        assert (curve.start.y, curve.end.y) == pytest.approx((-24, 24))

    def test_inner_bounds_untouched(self, mapper):
        curve = CurveModel(mapper, math.sin, start={"x": -5}, end={"y": 3})
        mapper.set_zoom(2)
        assert curve.start.x == -5
        assert curve.end.y == 3
        assert curve.end.x == pytest.approx(32)

    def test_scale_setter_reanchors(self, mapper):
        curve = CurveModel(mapper, math.sin)
        mapper.scale = 40
        assert (curve.start.x, curve.end.x) == pytest.approx((-8, 8))

    def test_round_trip_zoom(self, mapper):
        curve = CurveModel(mapper, math.sin, CurveType.EXPLICIT_X)
        mapper.set_zoom(4)
        mapper.set_zoom(1)
        assert (curve.start.y, curve.end.y) == pytest.approx((-12, 12))

    def test_resize_reanchors(self, mapper):
        curve = CurveModel(mapper, math.sin)
        mapper.resize(800, 600)
        assert curve.start.x == pytest.approx(-16)
        assert curve.end.x == pytest.approx(24)
        assert curve.start.y == pytest.approx(-18)
        assert curve.end.y == pytest.approx(12)

    @pytest.mark.parametrize("curve_type", [CurveType.POLAR, CurveType.PARAMETRIC])
    def test_closed_curves_ignore_scale(self, mapper, curve_type):
        curve = CurveModel(mapper, math.cos, curve_type)
        mapper.set_zoom(2)
        assert curve.start.x == -16
        assert curve.end.x == 16


# ===========================================================================
# Static curves
# ===========================================================================


class TestStatic:
    def test_cached_geometry_survives_scale_change(self, mapper):
        curve = CurveModel(mapper, lambda x: x * x, static=True)
        first = curve.geometry
        assert first is not None

        mapper.scale = 35
        assert curve.build() is first
        assert curve.cache.generation == 0

    def test_rebuilt_after_resize(self, mapper):
        curve = CurveModel(mapper, lambda x: x, static=True)
        first = curve.build()
        mapper.resize(300, 300)
        second = curve.build()
        assert second is not first
        assert second.path.points[:, 0].max() == 300

    def test_end_velocity_warning(self, mapper, caplog):
        with caplog.at_level(logging.WARNING, logger="curvegraph"):
            CurveModel(mapper, math.cos, CurveType.POLAR, static=True, velocity={"end": {"theta": 0.1}})
        assert "nonzero end-bound velocity" in caplog.text

    def test_dynamic_curves_have_no_cache(self, mapper):
        assert CurveModel(mapper, math.sin).cache is None


# ===========================================================================
# Drawing
# ===========================================================================


class TestDraw:
    def test_order_fill_below_fill_above_stroke_hook(self, mapper, surface):
        drawn = []
        curve = CurveModel(
            mapper,
            math.sin,
            style=CurveStyle(stroke_color="black", fill_above="red", fill_below="blue", line_width=3),
            on_draw=drawn.append,
        )
        curve.draw(surface)

        assert surface.ops() == ["fill", "fill", "stroke"]
        below, above, stroke = surface.calls
        assert below.args[0].kind is FillKind.BELOW and below.args[1] == "blue"
        assert above.args[0].kind is FillKind.ABOVE and above.args[1] == "red"
        assert stroke.args[1:] == ("black", 3)
        assert drawn == [surface]

    @pytest.mark.parametrize("color", [None, "", "transparent", "TRANSPARENT"])
    def test_no_fill_without_color(self, mapper, surface, color):
        CurveModel(mapper, math.sin, style=CurveStyle(fill_below=color)).draw(surface)
        assert surface.ops() == ["stroke"]


# ===========================================================================
# Position queries
# ===========================================================================


class TestPositionOf:
    def test_continuous_explicit(self, mapper):
        curve = CurveModel(mapper, lambda x: x * x, start={"x": -5}, end={"x": 5})
        assert curve.continuous
        assert curve.position_of(Point(320, 240)) is Position.ON
        assert curve.position_of(Point(320, 100)) is Position.ABOVE
        assert curve.position_of(Point(400, 400)) is Position.BELOW

    def test_outside_domain_is_unknown(self, mapper):
        curve = CurveModel(mapper, lambda x: x * x, start={"x": -5}, end={"x": 5})
        assert curve.position_of(Point(10, 240)) is Position.UNKNOWN

    def test_discontinuous_explicit_by_evaluation(self, mapper):
        curve = CurveModel(mapper, lambda x: 1 / x)
        assert not curve.continuous
        assert curve.position_of(Point(400, 100)) is Position.ABOVE
        assert curve.position_of(Point(400, 400)) is Position.BELOW
        assert curve.position_of(Point(400, 235)) is Position.ON

    @pytest.mark.parametrize("evaluator, curve_type", [
        (math.sin, CurveType.EXPLICIT_Y),
        (lambda y: y * y / 4 - 6, CurveType.EXPLICIT_X),
    ], ids=["sine", "sideways-parabola"])
    def test_full_canvas_curve_classifies_every_point(self, mapper, evaluator, curve_type):
        curve = CurveModel(mapper, evaluator, curve_type)
        assert curve.continuous
        unknown = [
            (x, y)
            for x in range(0, 641, 7)
            for y in range(0, 481, 7)
            if curve.position_of(Point(x, y)) is Position.UNKNOWN
        ]
        assert unknown == []

    def test_explicit_x_right_counts_as_above(self, mapper):
        curve = CurveModel(mapper, lambda y: 1 / y, CurveType.EXPLICIT_X)
        assert curve.position_of(Point(600, 100)) is Position.ABOVE
        assert curve.position_of(Point(20, 100)) is Position.BELOW

    def test_continuous_polar(self, mapper):
        curve = CurveModel(mapper, lambda t: 2.0, CurveType.POLAR)
        assert curve.position_of(Point(320, 240)) is Position.BELOW
        assert curve.position_of(Point(10, 10)) is Position.ABOVE
        assert curve.position_of(Point(360, 240)) is Position.ON

    def test_discontinuous_polar_by_radius(self, mapper):
        def half_circle(theta):
            if theta > math.pi:
                raise ValueError
            return 2.0

        curve = CurveModel(mapper, half_circle, CurveType.POLAR)
        assert not curve.continuous
        assert curve.position_of(Point(320, 220)) is Position.BELOW
        assert curve.position_of(Point(320, 180)) is Position.ABOVE

    def test_discontinuous_parametric_unknown(self, mapper, caplog):
        def f(t):
            if 4 < t < 6:
                raise ValueError
            return (t, 0)

        curve = CurveModel(mapper, f, CurveType.PARAMETRIC, end={"t": 10}, t_step=1)
        with caplog.at_level(logging.DEBUG, logger="curvegraph"):
            assert curve.position_of(Point(100, 100)) is Position.UNKNOWN
        assert "unknown" in caplog.text

    def test_surface_hit_tests(self, mapper, surface):
        curve = CurveModel(mapper, lambda x: x * x, start={"x": -5}, end={"x": 5})
        assert curve.position_of(Point(320, 100), surface) is Position.ABOVE
