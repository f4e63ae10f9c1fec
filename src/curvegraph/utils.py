"""Small numeric helpers shared across the package."""
from __future__ import annotations

import itertools
import logging
import math
import sys
from typing import Callable, Optional

from curvegraph import config
from curvegraph.model.geometry_primitives import Point

logger = logging.getLogger(__name__)


def to_degrees(radians: float) -> float:
    """Convert radians to degrees."""
    return 180 * radians / math.pi

def to_radians(degrees: float) -> float:
    """Convert degrees to radians."""
    return math.pi * degrees / 180


def mean(*values: float) -> float:
    """Arithmetic mean of the given numbers."""
    if not values:
        raise ValueError("mean() requires at least one value.")
    return math.fsum(values) / len(values)


def midpoint(p1: Point, p2: Point) -> Point:
    """The point halfway along the segment p1-p2."""
    return Point(mean(p1.x, p2.x), mean(p1.y, p2.y), mean(p1.z, p2.z))


class SeriesDepthError(ArithmeticError):
    """A series did not settle within the configured number of terms."""


def summation(
    func: Callable[[int], float],
    k: int = 0,
    n: float = 0,
    *,
    max_terms: int = config.SERIES_MAX_TERMS
) -> Optional[float]:
    """
    Sigma sum of func(i) for i = k..n.

    Args:
        func: The summand formula.
        k: First index (inclusive).
        n: Last index (inclusive). ``math.inf`` sums the series until the
           summands become insignificant compared to the partial sum
           for several terms in a row.
        max_terms: Upper bound on the number of terms of an infinite series.

    Returns:
        The (partial) sum, or None when an infinite series is indeterminate
        (diverges, oscillates, or its summand blows the recursion limit).
    """
    if not math.isinf(n):
        return math.fsum(func(i) for i in range(int(k), int(n) + 1))

    if n < 0:
        return 0.0

    partial = 0.0
    quiet = 0
    try:
        for count, i in enumerate(itertools.count(int(k))):
            if count >= max_terms:
                raise SeriesDepthError(f"series did not settle after {max_terms} terms")
            summand = func(i)
            if not math.isfinite(summand):
                raise SeriesDepthError(f"non-finite summand at index {i}")
            partial += summand
            if abs(summand) < sys.float_info.epsilon * max(1.0, abs(partial)):
                quiet += 1
                if quiet >= config.SERIES_SETTLE_TERMS:
                    return partial
            else:
                quiet = 0
    except (SeriesDepthError, RecursionError, OverflowError) as e:
        logger.warning(f"Series starting at k={k} is indeterminate: {e}")
        return None
