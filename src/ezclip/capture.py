from __future__ import annotations

import logging
import math
from typing import Any, Callable, Iterable

from .entity import (
    Arc,
    AttachmentPoint,
    Circle,
    Ellipse,
    Entity,
    Line,
    Polyline,
    PolylineVertex,
    Solid,
    TextBlock,
)
from .geometry import Point3D, length, point3
from .host import line_spacing_distance
from .record import Record, encode

logger = logging.getLogger(__name__)


def handle_line(entity: Any) -> Line:
    return Line(
        layer=entity.dxf.layer,
        start=point3(entity.dxf.start),
        end=point3(entity.dxf.end),
        linetype=entity.dxf.linetype,
    )


def handle_polyline(entity: Any) -> Polyline:
    elevation = float(entity.dxf.elevation)
    vertices = tuple(
        PolylineVertex(point=(float(x), float(y), elevation), bulge=float(bulge))
        for x, y, bulge in entity.get_points("xyb")
    )
    return Polyline(
        layer=entity.dxf.layer,
        vertices=vertices,
        closed=bool(entity.closed),
        linetype=entity.dxf.linetype,
    )


def handle_mtext(entity: Any) -> TextBlock:
    height = float(entity.dxf.char_height)
    return TextBlock(
        layer=entity.dxf.layer,
        style=entity.dxf.style,
        justification=AttachmentPoint(int(entity.dxf.attachment_point)),
        text=entity.text,
        height=height,
        line_spacing=line_spacing_distance(float(entity.dxf.line_spacing_factor), height),
        location=point3(entity.dxf.insert),
    )


def handle_circle(entity: Any) -> Circle:
    return Circle(
        layer=entity.dxf.layer,
        center=point3(entity.dxf.center),
        radius=float(entity.dxf.radius),
    )


def handle_arc(entity: Any) -> Arc:
    return Arc(
        layer=entity.dxf.layer,
        center=point3(entity.dxf.center),
        radius=float(entity.dxf.radius),
        start_angle=math.radians(entity.dxf.start_angle),
        end_angle=math.radians(entity.dxf.end_angle),
    )


def handle_ellipse(entity: Any) -> Ellipse:
    major_axis = point3(entity.dxf.major_axis)
    major_radius = length(major_axis)
    return Ellipse(
        layer=entity.dxf.layer,
        center=point3(entity.dxf.center),
        major_axis=major_axis,
        major_radius=major_radius,
        minor_radius=major_radius * float(entity.dxf.ratio),
        start_angle=float(entity.dxf.start_param),
        end_angle=float(entity.dxf.end_param),
    )


def handle_solid(entity: Any) -> Solid:
    vtx2 = point3(entity.dxf.vtx2)
    vertices: tuple[Point3D, Point3D, Point3D, Point3D] = (
        point3(entity.dxf.vtx0),
        point3(entity.dxf.vtx1),
        vtx2,
        point3(entity.dxf.get("vtx3", vtx2)),
    )
    return Solid(layer=entity.dxf.layer, vertices=vertices)


HANDLERS: dict[str, Callable[[Any], Entity]] = {
    "LINE": handle_line,
    "LWPOLYLINE": handle_polyline,
    "MTEXT": handle_mtext,
    "CIRCLE": handle_circle,
    "ARC": handle_arc,
    "ELLIPSE": handle_ellipse,
    "SOLID": handle_solid,
}

CAPTURE_TYPES = tuple(HANDLERS)


def capture_entity(entity: Any) -> Entity | None:
    handler = HANDLERS.get(entity.dxftype())
    if handler is None:
        return None
    return handler(entity)


def capture_selection(entities: Iterable[Any], origin: Any) -> list[Record]:
    """Encode host entities as records relative to ``origin``.

    Entities of unsupported types are left out of the payload.
    """
    base = point3(origin)
    payload: list[Record] = []
    for entity in entities:
        captured = capture_entity(entity)
        if captured is None:
            logger.debug("skipping unsupported entity type %s", entity.dxftype())
            continue
        payload.append(encode(captured, base))
    return payload
