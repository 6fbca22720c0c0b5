from typing import Sequence

from .batch import (
    BatchResult,
    apply,
    arc_through_two_points,
    create_arc_through_two_points,
    create_filled_circle,
)
from .capture import capture_selection
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
from .errors import DegenerateArcError, MalformedRecord, ResourceResolutionError
from .host import DxfHostStore, HostStore
from .payload import read_payload, write_payload, write_payload_unique
from .policy import ClipSettings
from .record import decode, encode
from .relocate import rebase, translate
from .resources import ResourceResolver

__all__ = [
    "encode",
    "decode",
    "translate",
    "rebase",
    "apply",
    "BatchResult",
    "capture_selection",
    "arc_through_two_points",
    "create_arc_through_two_points",
    "create_filled_circle",
    "ResourceResolver",
    "HostStore",
    "DxfHostStore",
    "ClipSettings",
    "read_payload",
    "write_payload",
    "write_payload_unique",
    "Entity",
    "Polyline",
    "PolylineVertex",
    "Line",
    "TextBlock",
    "AttachmentPoint",
    "Circle",
    "Arc",
    "Ellipse",
    "Solid",
    "MalformedRecord",
    "ResourceResolutionError",
    "DegenerateArcError",
]


def main(argv: Sequence[str] | None = None) -> int:
    from ezclip.cli import main as cli_main

    return cli_main(argv)
