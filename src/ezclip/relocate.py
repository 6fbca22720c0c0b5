from __future__ import annotations

from dataclasses import replace
from typing import Callable

from .entity import Arc, Circle, Ellipse, Entity, Line, Polyline, Solid, TextBlock
from .geometry import Point3D, Vector3D, add, subtract

COORDINATE_FIELDS = {
    "polyline": ("vertices",),
    "line": ("start", "end"),
    "mtext": ("location",),
    "circle": ("center",),
    "arc": ("center",),
    "ellipse": ("center",),
    "solid": ("vertices",),
}


def coordinate_fields(kind: str) -> tuple[str, ...]:
    return COORDINATE_FIELDS[kind]


def translate(entity: Entity, offset: Vector3D) -> Entity:
    """Move every coordinate-bearing field of ``entity`` by ``offset``."""
    return _map_points(entity, lambda point: add(point, offset))


def rebase(entity: Entity, origin: Point3D) -> Entity:
    """Express ``entity`` relative to ``origin``; the inverse of :func:`translate`."""
    return _map_points(entity, lambda point: subtract(point, origin))


def _map_points(entity: Entity, move: Callable[[Point3D], Point3D]) -> Entity:
    if isinstance(entity, Polyline):
        vertices = tuple(replace(vertex, point=move(vertex.point)) for vertex in entity.vertices)
        return replace(entity, vertices=vertices)
    if isinstance(entity, Line):
        return replace(entity, start=move(entity.start), end=move(entity.end))
    if isinstance(entity, TextBlock):
        return replace(entity, location=move(entity.location))
    if isinstance(entity, (Circle, Arc, Ellipse)):
        # major_axis is a direction, not a position
        return replace(entity, center=move(entity.center))
    if isinstance(entity, Solid):
        return replace(entity, vertices=tuple(move(vertex) for vertex in entity.vertices))
    raise TypeError(f"unsupported entity: {type(entity).__name__}")
