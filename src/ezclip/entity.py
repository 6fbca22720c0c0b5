from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Union

from .geometry import Point3D, Vector3D, length

ENTITY_KINDS = ("polyline", "line", "mtext", "circle", "solid", "arc", "ellipse")


class AttachmentPoint(IntEnum):
    TopLeft = 1
    TopCenter = 2
    TopRight = 3
    MiddleLeft = 4
    MiddleCenter = 5
    MiddleRight = 6
    BottomLeft = 7
    BottomCenter = 8
    BottomRight = 9


def _check_non_negative(kind: str, name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0.0:
        raise ValueError(f"{kind}.{name} must be finite and non-negative, got {value!r}")


@dataclass(frozen=True)
class PolylineVertex:
    point: Point3D
    bulge: float = 0.0


@dataclass(frozen=True)
class Polyline:
    kind: ClassVar[str] = "polyline"

    layer: str
    vertices: tuple[PolylineVertex, ...]
    closed: bool = False
    linetype: str | None = None

    def __post_init__(self) -> None:
        if len(self.vertices) < 2:
            raise ValueError(f"polyline needs at least 2 vertices, got {len(self.vertices)}")

    def to_points(self) -> list[Point3D]:
        return [vertex.point for vertex in self.vertices]


@dataclass(frozen=True)
class Line:
    kind: ClassVar[str] = "line"

    layer: str
    start: Point3D
    end: Point3D
    linetype: str | None = None

    def to_points(self) -> list[Point3D]:
        return [self.start, self.end]


@dataclass(frozen=True)
class TextBlock:
    kind: ClassVar[str] = "mtext"

    layer: str
    style: str
    justification: AttachmentPoint
    text: str
    height: float
    line_spacing: float
    location: Point3D

    def __post_init__(self) -> None:
        _check_non_negative(self.kind, "height", self.height)
        _check_non_negative(self.kind, "line_spacing", self.line_spacing)

    def to_points(self) -> list[Point3D]:
        return [self.location]


@dataclass(frozen=True)
class Circle:
    kind: ClassVar[str] = "circle"

    layer: str
    center: Point3D
    radius: float

    def __post_init__(self) -> None:
        _check_non_negative(self.kind, "radius", self.radius)

    def to_points(self) -> list[Point3D]:
        return [self.center]


@dataclass(frozen=True)
class Arc:
    """Circular arc; angles in radians, counter-clockwise from +X."""

    kind: ClassVar[str] = "arc"

    layer: str
    center: Point3D
    radius: float
    start_angle: float
    end_angle: float

    def __post_init__(self) -> None:
        _check_non_negative(self.kind, "radius", self.radius)

    @property
    def start_point(self) -> Point3D:
        return (
            self.center[0] + self.radius * math.cos(self.start_angle),
            self.center[1] + self.radius * math.sin(self.start_angle),
            self.center[2],
        )

    @property
    def end_point(self) -> Point3D:
        return (
            self.center[0] + self.radius * math.cos(self.end_angle),
            self.center[1] + self.radius * math.sin(self.end_angle),
            self.center[2],
        )

    def to_points(self) -> list[Point3D]:
        return [self.start_point, self.end_point]


@dataclass(frozen=True)
class Ellipse:
    kind: ClassVar[str] = "ellipse"

    layer: str
    center: Point3D
    major_axis: Vector3D
    major_radius: float
    minor_radius: float
    start_angle: float = 0.0
    end_angle: float = math.tau

    def __post_init__(self) -> None:
        if not self.major_radius > 0.0:
            raise ValueError(f"ellipse.major_radius must be positive, got {self.major_radius!r}")
        _check_non_negative(self.kind, "minor_radius", self.minor_radius)
        if self.minor_radius > self.major_radius:
            raise ValueError("ellipse.minor_radius must not exceed major_radius")
        if length(self.major_axis) == 0.0:
            raise ValueError("ellipse.major_axis must not be zero-length")

    @property
    def ratio(self) -> float:
        return self.minor_radius / self.major_radius

    def to_points(self) -> list[Point3D]:
        return [self.center]


@dataclass(frozen=True)
class Solid:
    kind: ClassVar[str] = "solid"

    layer: str
    vertices: tuple[Point3D, Point3D, Point3D, Point3D]

    def __post_init__(self) -> None:
        if len(self.vertices) != 4:
            raise ValueError(f"solid needs exactly 4 vertices, got {len(self.vertices)}")

    def to_points(self) -> list[Point3D]:
        return list(self.vertices)


Entity = Union[Polyline, Line, TextBlock, Circle, Arc, Ellipse, Solid]
