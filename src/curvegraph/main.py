"""
Application Initialization
==========================
Builds a demo GraphPlane and either shows it in a window or renders a single
frame to an image file.

Why is this file needed?
------------------------
It is the composition root. It:
1. Configures logging.
2. Builds the model (mapper, plane, curves), which knows nothing about Qt.
3. Hands the plane to the view (GraphCanvas) and starts the Qt event loop.
"""
import math
import sys
from argparse import ArgumentParser
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from curvegraph import config
from curvegraph.logging_config import setup_logging
from curvegraph.model.curve_options import Bounds, CurveStyle, CurveType
from curvegraph.model.mapper import CoordinateMapper
from curvegraph.model.plane import GraphPlane
from curvegraph.view.canvas import GraphCanvas, render_to_image


def build_demo_plane(width: int = config.DEFAULT_CANVAS_WIDTH, height: int = config.DEFAULT_CANVAS_HEIGHT) -> GraphPlane:
    """One curve of every family; the parametric one draws itself over time."""
    plane = GraphPlane(CoordinateMapper(width, height))

    plane.add_function(
        math.sin,
        name="sine",
        style=CurveStyle(stroke_color="#1f77b4", fill_below="#401f77b4", line_width=2),
    )
    plane.add_function(
        lambda x: 1 / x,
        name="hyperbola",
        style=CurveStyle(stroke_color="#d62728", line_width=2),
    )
    plane.add_function(
        lambda y: y * y / 4 - 6,
        CurveType.EXPLICIT_X,
        name="sideways parabola",
        style=CurveStyle(stroke_color="#2ca02c"),
    )
    plane.add_function(
        lambda theta: 4 * math.cos(3 * theta),
        CurveType.POLAR,
        name="rose",
        static=True,
        style=CurveStyle(stroke_color="#9467bd", fill_below="#309467bd"),
    )
    eight = plane.add_function(
        lambda t: (6 * math.cos(t) + 4, 3 * math.sin(2 * t) - 4),
        CurveType.PARAMETRIC,
        name="figure eight",
        end=Bounds(t=0.0),
        velocity={"end": {"t": 0.05}},
        style=CurveStyle(stroke_color="#ff7f0e", line_width=2),
    )

    def restart(frame_count: int) -> None:
        if eight.end.t > config.TAU:
            eight.end.t = 0.0

    eight.on_update = restart
    return plane


def _parse_args(argv: Optional[Sequence[str]]):
    parser = ArgumentParser(description='Interactive plane of explicit, polar and parametric curves.')
    parser.add_argument('--width', type=int, default=config.DEFAULT_CANVAS_WIDTH,
                        help='canvas width in pixels', metavar='WIDTH')
    parser.add_argument('--height', type=int, default=config.DEFAULT_CANVAS_HEIGHT,
                        help='canvas height in pixels', metavar='HEIGHT')
    parser.add_argument('--zoom', type=float, default=1.0,
                        help='initial zoom level (2 shows twice as much of the plane)', metavar='LEVEL')
    parser.add_argument('--output', default=None, metavar='FILE',
                        help='render a single frame to FILE instead of opening a window')
    parser.add_argument('--frames', type=int, default=0, metavar='N',
                        help='with --output, advance N frames before rendering')
    parser.add_argument('--log-level', dest='log_level', default='info', metavar='LEVEL',
                        choices=['debug', 'info', 'warning', 'error'], help='logging verbosity')
    parser.add_argument('--log-file', dest='log_file', default=None, metavar='LOG_FILE')
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    # 1. Logging
    setup_logging(level=args.log_level, log_file=args.log_file)

    # 2. Qt application (needed for painting, even offscreen)
    app = QApplication.instance() or QApplication(sys.argv[:1])
    app.setApplicationName("Curve Graph")

    # 3. Model
    plane = build_demo_plane(args.width, args.height)
    if args.zoom != 1.0 and not plane.set_zoom(args.zoom):
        return 2

    # 4a. Offscreen render
    if args.output:
        for _ in range(args.frames):
            plane.update()
        render_to_image(plane, args.output)
        return 0

    # 4b. Window + event loop
    canvas = GraphCanvas(plane)
    canvas.setWindowTitle("Curve Graph")
    canvas.show()
    canvas.start()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
