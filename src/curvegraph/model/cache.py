"""
Static path cache.

Holds the last CurveGeometry built for a curve marked `static`. The stored
value is replaced only after `invalidate()` bumps the generation counter,
which happens on an explicit canvas resize and nowhere else.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from curvegraph.model.paths import CurveGeometry

logger = logging.getLogger(__name__)


class StaticPathCache:
    def __init__(self) -> None:
        self._geometry: Optional[CurveGeometry] = None
        self._generation: int = 0
        self._built_generation: int = -1

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_valid(self) -> bool:
        return self._geometry is not None and self._built_generation == self._generation

    def peek(self) -> Optional[CurveGeometry]:
        """The stored geometry, valid or not, without building."""
        return self._geometry

    def get(self, build: Callable[[], CurveGeometry]) -> CurveGeometry:
        """
        Return the stored geometry, calling `build` first if the cache is
        empty or has been invalidated since the last build.
        """
        if not self.is_valid:
            self._geometry = build()
            self._built_generation = self._generation
            logger.debug(f"Static geometry rebuilt (generation {self._generation})")
        return self._geometry

    def invalidate(self) -> None:
        self._generation += 1
