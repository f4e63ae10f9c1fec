"""
Render surface contract.

The model layer only ever talks to this protocol. The Qt implementation lives
in `curvegraph.view.surface`; `RecordingSurface` is the headless one.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from curvegraph.model.geometry_primitives import Point
from curvegraph.model.paths import FillRegion, Path


@runtime_checkable
class RenderSurface(Protocol):
    """Stroke/fill/hit-test capabilities the curves need from a canvas."""

    @property
    def width(self) -> float: ...

    @property
    def height(self) -> float: ...

    def clear(self, color: str | None = None) -> None: ...

    def stroke(self, path: Path, color: str, width: float) -> None: ...

    def fill(self, region: FillRegion, color: str) -> None: ...

    def contains(self, region: FillRegion, point: Point) -> bool: ...

    def stroke_contains(self, path: Path, point: Point, width: float) -> bool: ...


@dataclass
class DrawCall:
    op: str
    args: tuple[Any, ...]


@dataclass
class RecordingSurface:
    """
    In-memory surface. Keeps every draw call in order and answers hit tests
    with the model's own geometry.
    """
    width: float
    height: float
    calls: list[DrawCall] = field(default_factory=list)

    def clear(self, color: str | None = None) -> None:
        self.calls.clear()
        if color is not None:
            self.calls.append(DrawCall("clear", (color,)))

    def stroke(self, path: Path, color: str, width: float) -> None:
        self.calls.append(DrawCall("stroke", (path, color, width)))

    def fill(self, region: FillRegion, color: str) -> None:
        self.calls.append(DrawCall("fill", (region, color)))

    def contains(self, region: FillRegion, point: Point) -> bool:
        return region.contains(point)

    def stroke_contains(self, path: Path, point: Point, width: float) -> bool:
        return path.stroke_contains(point, width / 2)

    def ops(self) -> list[str]:
        return [c.op for c in self.calls]
