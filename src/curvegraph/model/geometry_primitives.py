"""
Geometric Primitives shared by the mapper and the path builder.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import math

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Point:
    """A simple geometric point. Value type: compare by coordinates."""
    x: float
    y: float
    z: float = 0.0

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Point:
        return Point(self.x * scalar, self.y * scalar, self.z * scalar)

    def __truediv__(self, scalar: float) -> Point:
        if scalar == 0.0: raise ZeroDivisionError
        return Point(self.x / scalar, self.y / scalar, self.z / scalar)

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y, self.z - other.z)

    def to_array(self) -> npt.NDArray[np.float64]:
        """Returns the (x, y) pair; screen geometry is planar."""
        return np.array([self.x, self.y], dtype=np.float64)


@dataclass(frozen=True)
class ViewSnapshot:
    """
    The mapper state a model needs to decide whether a bound sat on a
    canvas edge before a scale/size change.
    """
    scale: float
    origin: Point
    width: float
    height: float

    def x_to_screen(self, real_x: float) -> float:
        return self.origin.x + self.scale * real_x

    def y_to_screen(self, real_y: float) -> float:
        return self.origin.y - self.scale * real_y
