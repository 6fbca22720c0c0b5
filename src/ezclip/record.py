"""Conversion between typed entities and generic tagged records.

A record is a JSON object with exactly one key naming the entity kind; the
value holds the kind's fields with coordinates relative to the capture
origin::

    {"circle": {"layer": "E-SYM", "center": {"x": 1.0, "y": 2.0, "z": 0.0}, "radius": 0.5}}

Records of unknown kinds decode to ``None`` so that newer payloads can be
replayed by older readers.
"""

from __future__ import annotations

import math
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from .entity import (
    ENTITY_KINDS,
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
from .errors import MalformedRecord
from .geometry import ORIGIN, Point3D, point3
from .relocate import rebase

Record = dict[str, dict[str, Any]]

_NUMBER = {"type": "number"}
_NON_NEGATIVE = {"type": "number", "minimum": 0}
_POINT = {
    "type": "object",
    "required": ["x", "y"],
    "properties": {"x": _NUMBER, "y": _NUMBER, "z": _NUMBER},
}
_VERTEX = {
    "type": "object",
    "required": ["x", "y"],
    "properties": {"x": _NUMBER, "y": _NUMBER, "z": _NUMBER, "bulge": _NUMBER},
}
_LAYER = {"type": "string"}
_LINETYPE = {"type": ["string", "null"]}

RECORD_SCHEMAS: dict[str, dict[str, Any]] = {
    "polyline": {
        "type": "object",
        "required": ["layer", "vertices", "isClosed"],
        "properties": {
            "layer": _LAYER,
            "linetype": _LINETYPE,
            "vertices": {"type": "array", "items": _VERTEX, "minItems": 2},
            "isClosed": {"type": "boolean"},
        },
    },
    "line": {
        "type": "object",
        "required": ["layer", "startPoint", "endPoint"],
        "properties": {
            "layer": _LAYER,
            "linetype": _LINETYPE,
            "startPoint": _POINT,
            "endPoint": _POINT,
        },
    },
    "mtext": {
        "type": "object",
        "required": [
            "layer",
            "style",
            "justification",
            "text",
            "height",
            "lineSpaceDistance",
            "location",
        ],
        "properties": {
            "layer": _LAYER,
            "style": {"type": "string"},
            "justification": {"enum": [member.name for member in AttachmentPoint]},
            "text": {"type": "string"},
            "height": _NON_NEGATIVE,
            "lineSpaceDistance": _NON_NEGATIVE,
            "location": _POINT,
        },
    },
    "circle": {
        "type": "object",
        "required": ["layer", "center", "radius"],
        "properties": {"layer": _LAYER, "center": _POINT, "radius": _NON_NEGATIVE},
    },
    "solid": {
        "type": "object",
        "required": ["layer", "vertices"],
        "properties": {
            "layer": _LAYER,
            "vertices": {"type": "array", "items": _POINT, "minItems": 4, "maxItems": 4},
        },
    },
    "arc": {
        "type": "object",
        "required": ["layer", "center", "radius", "startAngle", "endAngle"],
        "properties": {
            "layer": _LAYER,
            "center": _POINT,
            "radius": _NON_NEGATIVE,
            "startAngle": _NUMBER,
            "endAngle": _NUMBER,
        },
    },
    "ellipse": {
        "type": "object",
        "required": ["layer", "center", "majorAxis", "majorRadius", "minorRadius"],
        "properties": {
            "layer": _LAYER,
            "center": _POINT,
            "majorAxis": _POINT,
            "majorRadius": _NON_NEGATIVE,
            "minorRadius": _NON_NEGATIVE,
            "startAngle": _NUMBER,
            "endAngle": _NUMBER,
        },
    },
}

_VALIDATORS = {kind: Draft7Validator(schema) for kind, schema in RECORD_SCHEMAS.items()}


def record_kind(record: Any) -> str:
    """Return the kind key of ``record`` (known or not)."""
    if not isinstance(record, dict) or not record:
        raise MalformedRecord("record", f"expected a single-key object, got {record!r}")
    return str(next(iter(record)))


def validate(kind: str, fields: Any) -> None:
    error = best_match(_VALIDATORS[kind].iter_errors(fields))
    if error is None:
        return
    location = "/".join(str(part) for part in error.absolute_path)
    if location:
        raise MalformedRecord(kind, f"{location}: {error.message}")
    raise MalformedRecord(kind, error.message)


def decode(record: Any) -> Entity | None:
    """Decode ``record`` into an entity in record-relative coordinates.

    Returns ``None`` for kinds this module does not know.
    """
    kind = record_kind(record)
    if kind not in ENTITY_KINDS:
        return None
    fields = record[kind]
    validate(kind, fields)
    try:
        return _decode_fields(kind, fields)
    except (TypeError, ValueError) as exc:
        raise MalformedRecord(kind, str(exc)) from exc


def _decode_fields(kind: str, fields: dict[str, Any]) -> Entity:
    layer = fields["layer"]

    if kind == "polyline":
        return Polyline(
            layer=layer,
            vertices=tuple(
                PolylineVertex(point=point3(vertex), bulge=float(vertex.get("bulge", 0.0)))
                for vertex in fields["vertices"]
            ),
            closed=bool(fields["isClosed"]),
            linetype=fields.get("linetype"),
        )

    if kind == "line":
        return Line(
            layer=layer,
            start=point3(fields["startPoint"]),
            end=point3(fields["endPoint"]),
            linetype=fields.get("linetype"),
        )

    if kind == "mtext":
        return TextBlock(
            layer=layer,
            style=fields["style"],
            justification=AttachmentPoint[fields["justification"]],
            text=fields["text"],
            height=float(fields["height"]),
            line_spacing=float(fields["lineSpaceDistance"]),
            location=point3(fields["location"]),
        )

    if kind == "circle":
        return Circle(layer=layer, center=point3(fields["center"]), radius=float(fields["radius"]))

    if kind == "arc":
        return Arc(
            layer=layer,
            center=point3(fields["center"]),
            radius=float(fields["radius"]),
            start_angle=float(fields["startAngle"]),
            end_angle=float(fields["endAngle"]),
        )

    if kind == "ellipse":
        return Ellipse(
            layer=layer,
            center=point3(fields["center"]),
            major_axis=point3(fields["majorAxis"]),
            major_radius=float(fields["majorRadius"]),
            minor_radius=float(fields["minorRadius"]),
            start_angle=float(fields.get("startAngle", 0.0)),
            end_angle=float(fields.get("endAngle", math.tau)),
        )

    if kind == "solid":
        vertices = tuple(point3(vertex) for vertex in fields["vertices"])
        return Solid(layer=layer, vertices=vertices)

    raise AssertionError(f"unhandled kind: {kind}")


def encode(entity: Entity, origin: Point3D = ORIGIN) -> Record:
    """Encode ``entity`` (absolute coordinates) as a record relative to ``origin``."""
    local = rebase(entity, origin)
    return {entity.kind: _encode_fields(local)}


def _encode_fields(entity: Entity) -> dict[str, Any]:
    if isinstance(entity, Polyline):
        fields: dict[str, Any] = {"layer": entity.layer}
        vertices = []
        for vertex in entity.vertices:
            item = _xyz(vertex.point)
            if vertex.bulge != 0.0:
                item["bulge"] = float(vertex.bulge)
            vertices.append(item)
        fields["vertices"] = vertices
        if entity.linetype is not None:
            fields["linetype"] = entity.linetype
        fields["isClosed"] = bool(entity.closed)
        return fields

    if isinstance(entity, Line):
        fields = {
            "layer": entity.layer,
            "startPoint": _xyz(entity.start),
            "endPoint": _xyz(entity.end),
        }
        if entity.linetype is not None:
            fields["linetype"] = entity.linetype
        return fields

    if isinstance(entity, TextBlock):
        return {
            "layer": entity.layer,
            "style": entity.style,
            "justification": entity.justification.name,
            "text": entity.text,
            "height": float(entity.height),
            "lineSpaceDistance": float(entity.line_spacing),
            "location": _xyz(entity.location),
        }

    if isinstance(entity, Circle):
        return {"layer": entity.layer, "center": _xyz(entity.center), "radius": float(entity.radius)}

    if isinstance(entity, Arc):
        return {
            "layer": entity.layer,
            "center": _xyz(entity.center),
            "radius": float(entity.radius),
            "startAngle": float(entity.start_angle),
            "endAngle": float(entity.end_angle),
            "startPoint": _xyz(entity.start_point),
            "endPoint": _xyz(entity.end_point),
        }

    if isinstance(entity, Ellipse):
        return {
            "layer": entity.layer,
            "center": _xyz(entity.center),
            "majorAxis": _xyz(entity.major_axis),
            "majorRadius": float(entity.major_radius),
            "minorRadius": float(entity.minor_radius),
            "startAngle": float(entity.start_angle),
            "endAngle": float(entity.end_angle),
        }

    if isinstance(entity, Solid):
        return {"layer": entity.layer, "vertices": [_xyz(vertex) for vertex in entity.vertices]}

    raise TypeError(f"unsupported entity: {type(entity).__name__}")


def _xyz(point: Point3D) -> dict[str, float]:
    return {"x": float(point[0]), "y": float(point[1]), "z": float(point[2])}
