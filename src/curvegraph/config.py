"""
Configuration & Global Constants
================================
This module serves as the central registry for default values shared by the
model and view layers.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (canvas size, step sizes, colors)
   from being scattered throughout the code.
2. Consistency: The mapper, the curve models and the Qt canvas all agree on
   the same defaults without importing each other.

Exports:
    DEFAULT_CANVAS_WIDTH (int): Canvas width in pixels.
    DEFAULT_CANVAS_HEIGHT (int): Canvas height in pixels.
    DEFAULT_TICK_SPACING (float): Pixels between grid lines at zoom level 1.
    DEFAULT_THETA_STEP (float): Polar sampling step in radians.
    DEFAULT_T_STEP (float): Parametric sampling step.
"""
import math

TAU: float = 2.0 * math.pi

# Canvas / mapper
DEFAULT_CANVAS_WIDTH: int = 640
DEFAULT_CANVAS_HEIGHT: int = 480
DEFAULT_TICK_SPACING: float = 20.0
DEFAULT_SCALE: float = DEFAULT_TICK_SPACING  # pixels per real unit
DEFAULT_ORIGIN_BY_RATIO: tuple[float, float] = (0.5, 0.5)

# Sampling
DEFAULT_THETA_STEP: float = TAU / 360
DEFAULT_T_STEP: float = 0.1

# Screen positions closer than this to a canvas edge count as "on" the edge
EDGE_TOLERANCE_PX: float = 1e-9

# Minimum half-width used when testing a point against a stroked curve
POSITION_TOLERANCE_PX: float = 0.5

# Frame driver
DEFAULT_FRAME_CAP: int = 1000
DEFAULT_FRAME_INTERVAL_MS: int = 16

# Series evaluation (utils.summation)
SERIES_MAX_TERMS: int = 100_000
# consecutive insignificant summands before an infinite series counts as settled
SERIES_SETTLE_TERMS: int = 10

# Styles
DEFAULT_STROKE_COLOR: str = "#555555"
DEFAULT_LINE_WIDTH: float = 1.0
DEFAULT_GRID_COLOR: str = "#E0E0E0"
DEFAULT_AXIS_COLOR: str = "#333333"
DEFAULT_TICK_COLOR: str = "#333333"
DEFAULT_BACKGROUND_COLOR: str = "white"
