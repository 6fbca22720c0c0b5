from __future__ import annotations

import math

import pytest

from ezclip.batch import apply
from ezclip.capture import capture_entity, capture_selection
from ezclip.entity import AttachmentPoint, Polyline, TextBlock
from tests._dxf_helpers import entities_of_type, new_store, triplet_close

pytest.importorskip("ezdxf")


def _populated_store():
    store = new_store()
    psp = store.layout("paperspace")
    store.doc.layers.new("E-SYM", dxfattribs={"color": 6})
    psp.add_line((10.0, 10.0), (12.0, 10.0), dxfattribs={"layer": "E-SYM"})
    psp.add_circle((11.0, 12.0), 0.5, dxfattribs={"layer": "E-SYM"})
    psp.add_arc((10.0, 10.0), 2.0, 0.0, 180.0, dxfattribs={"layer": "E-SYM"})
    psp.add_lwpolyline(
        [(10.0, 10.0, 0.0, 0.0, 0.0), (14.0, 10.0, 0.0, 0.0, 0.5), (14.0, 13.0, 0.0, 0.0, 0.0)],
        format="xyseb",
        close=True,
        dxfattribs={"layer": "E-CONDUIT"},
    )
    psp.add_mtext(
        "MPPT 2",
        dxfattribs={
            "layer": "E-TEXT",
            "char_height": 0.2,
            "attachment_point": 5,
            "insert": (15.0, 15.0, 0.0),
        },
    )
    psp.add_ellipse((20.0, 10.0), major_axis=(0.0, 3.0, 0.0), ratio=0.5)
    psp.add_solid([(10.0, 10.0), (11.0, 10.0), (10.0, 11.0), (11.0, 11.0)], dxfattribs={"layer": "Inverter"})
    psp.add_point((0.0, 0.0))
    return store


def test_capture_selection_encodes_supported_types_in_order() -> None:
    store = _populated_store()

    payload = capture_selection(store.selection("paperspace"), (10.0, 10.0, 0.0))

    assert [next(iter(record)) for record in payload] == [
        "line",
        "circle",
        "arc",
        "polyline",
        "mtext",
        "ellipse",
        "solid",
    ]
    line = payload[0]["line"]
    assert line["startPoint"] == {"x": 0.0, "y": 0.0, "z": 0.0}
    assert line["endPoint"] == {"x": 2.0, "y": 0.0, "z": 0.0}
    assert line["linetype"] == "BYLAYER"
    assert payload[1]["circle"]["center"] == {"x": 1.0, "y": 2.0, "z": 0.0}
    assert abs(payload[2]["arc"]["endAngle"] - math.pi) < 1e-12
    assert payload[3]["polyline"]["isClosed"] is True
    assert payload[3]["polyline"]["vertices"][1]["bulge"] == 0.5
    assert payload[4]["mtext"]["justification"] == "MiddleCenter"
    assert payload[4]["mtext"]["style"] == "Standard"
    assert payload[5]["ellipse"]["majorRadius"] == 3.0
    assert payload[5]["ellipse"]["minorRadius"] == 1.5
    assert payload[6]["solid"]["vertices"][3] == {"x": 1.0, "y": 1.0, "z": 0.0}


def test_capture_selection_honours_type_filter() -> None:
    store = _populated_store()

    payload = capture_selection(store.selection("paperspace", ["CIRCLE", "arc"]), (0.0, 0.0, 0.0))

    assert [next(iter(record)) for record in payload] == ["circle", "arc"]


def test_capture_entity_returns_none_for_unsupported_type() -> None:
    store = _populated_store()
    point = entities_of_type(store, "POINT")[0]

    assert capture_entity(point) is None


def test_capture_mtext_line_spacing_distance() -> None:
    store = new_store()
    mtext = store.layout("paperspace").add_mtext(
        "A",
        dxfattribs={"char_height": 0.3, "line_spacing_factor": 2.0, "attachment_point": 1},
    )

    captured = capture_entity(mtext)

    assert isinstance(captured, TextBlock)
    assert captured.justification is AttachmentPoint.TopLeft
    assert abs(captured.line_spacing - 2.0 * 0.3 * 5.0 / 3.0) < 1e-12


def test_capture_polyline_uses_elevation() -> None:
    store = new_store()
    lwpolyline = store.layout("paperspace").add_lwpolyline(
        [(0.0, 0.0), (1.0, 0.0)],
        dxfattribs={"elevation": 4.0},
    )

    captured = capture_entity(lwpolyline)

    assert isinstance(captured, Polyline)
    assert captured.vertices[0].point == (0.0, 0.0, 4.0)
    assert captured.vertices[1].point == (1.0, 0.0, 4.0)


def test_capture_then_replay_relocates_entities() -> None:
    source = _populated_store()
    payload = capture_selection(source.selection("paperspace"), (10.0, 10.0, 0.0))

    target = new_store()
    result = apply(payload, (100.0, 50.0, 0.0), target)

    assert result.created_entities == 7
    assert result.failures == ()
    line = entities_of_type(target, "LINE")[0]
    assert triplet_close(line.dxf.start, (100.0, 50.0, 0.0))
    assert triplet_close(line.dxf.end, (102.0, 50.0, 0.0))
    arc = entities_of_type(target, "ARC")[0]
    assert triplet_close(arc.dxf.center, (100.0, 50.0, 0.0))
    assert abs(arc.dxf.end_angle - 180.0) < 1e-9
    mtext = entities_of_type(target, "MTEXT")[0]
    assert mtext.dxf.char_height == 0.075
    assert triplet_close(mtext.dxf.insert, (105.0, 55.0, 0.0))
    solid = entities_of_type(target, "SOLID")[0]
    assert triplet_close(solid.dxf.vtx3, (101.0, 51.0, 0.0))
    assert target.get("layer", "E-SYM").dxf.color == 6
    assert target.get("layer", "Inverter").dxf.color == 2
    assert target.get("layer", "E-TEXT").dxf.color == 2
