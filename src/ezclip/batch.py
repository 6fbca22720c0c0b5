from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Iterable

from .entity import Arc, Circle, Entity, Line, Polyline, TextBlock
from .errors import DegenerateArcError, MalformedRecord, ResourceResolutionError
from .geometry import Point3D, angle_on_ccw_sweep, circle_from_points, normalize_angle, point3
from .host import HostStore
from .policy import DEFAULT_SETTINGS, ClipSettings, effective_text_height
from .record import decode, record_kind
from .relocate import translate
from .resources import ResourceResolver

logger = logging.getLogger(__name__)

ARC_SIDES = ("left", "right")
FILLED_CIRCLE_LAYER = "E-CONDUIT"


@dataclass(frozen=True)
class RecordFailure:
    index: int
    kind: str
    message: str


@dataclass(frozen=True)
class BatchResult:
    total_records: int
    created_entities: int
    skipped_records: int
    skipped_by_kind: dict[str, int]
    failures: tuple[RecordFailure, ...]

    @property
    def failed_records(self) -> int:
        return len(self.failures)


def apply(
    records: Iterable[Any],
    reference_point: Any,
    store: HostStore,
    *,
    settings: ClipSettings = DEFAULT_SETTINGS,
    strict: bool = False,
) -> BatchResult:
    """Instantiate ``records`` in ``store``, offset by ``reference_point``.

    Records are processed strictly in order. Unknown kinds are skipped; a
    malformed record or an unresolvable linetype aborts only that record.
    Any other error propagates and stops the batch.
    """
    offset = point3(reference_point)
    resolver = ResourceResolver(store, settings)

    total = 0
    created = 0
    skipped_by_kind: dict[str, int] = {}
    failures: list[RecordFailure] = []

    for index, record in enumerate(records):
        total += 1
        kind = "record"
        try:
            kind = record_kind(record)
            entity = decode(record)
            if entity is None:
                logger.debug("record %d: skipping unknown kind %r", index, kind)
                skipped_by_kind[kind] = skipped_by_kind.get(kind, 0) + 1
                continue
            instantiate(entity, offset, store, resolver=resolver, settings=settings)
        except (MalformedRecord, ResourceResolutionError) as exc:
            logger.warning("record %d (%s) skipped: %s", index, kind, exc)
            failures.append(RecordFailure(index=index, kind=kind, message=str(exc)))
            continue
        created += 1

    if strict and failures:
        summary = ", ".join(f"#{failure.index}:{failure.kind}" for failure in failures)
        raise ValueError(f"failed to create {len(failures)} entities ({summary})")

    return BatchResult(
        total_records=total,
        created_entities=created,
        skipped_records=sum(skipped_by_kind.values()),
        skipped_by_kind=dict(sorted(skipped_by_kind.items())),
        failures=tuple(failures),
    )


def instantiate(
    entity: Entity,
    offset: Point3D,
    store: HostStore,
    *,
    resolver: ResourceResolver | None = None,
    settings: ClipSettings = DEFAULT_SETTINGS,
) -> Any:
    """Resolve the resources ``entity`` refers to, move it by ``offset`` and append it."""
    if resolver is None:
        resolver = ResourceResolver(store, settings)

    resolver.ensure_layer(entity.layer, settings.default_color_for(entity.kind))
    if isinstance(entity, (Line, Polyline)) and entity.linetype:
        resolver.ensure_linetype(entity.linetype)
    if isinstance(entity, TextBlock):
        entity = _prepare_text(entity, resolver, settings)

    placed = translate(entity, offset)
    with store.transaction():
        return store.append_entity(placed, settings.target_space)


def _prepare_text(entity: TextBlock, resolver: ResourceResolver, settings: ClipSettings) -> TextBlock:
    style = entity.style
    if resolver.ensure_text_style(style) is None:
        style = ""
    height = effective_text_height(entity.text, entity.height, rules=settings.text_height_rules)
    return replace(entity, style=style, height=height)


def arc_through_two_points(start: Any, end: Any, side: str, *, layer: str = "0") -> Arc:
    """Fit an arc from ``start`` to ``end`` bulging a quarter chord off the chord.

    ``side`` names the side of the chord (walking from start to end) that
    the arc's center falls on; the arc bulges towards the other side.
    """
    if side not in ARC_SIDES:
        raise ValueError(f"side must be one of {ARC_SIDES}, got {side!r}")
    start = point3(start)
    end = point3(end)
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    chord = math.hypot(dx, dy)
    if chord == 0.0:
        raise DegenerateArcError(f"start and end coincide: {start!r}")

    sign = 1.0 if side == "right" else -1.0
    bulge = sign * chord / 4.0
    mid = ((start[0] + end[0]) / 2.0, (start[1] + end[1]) / 2.0)
    through = (mid[0] - dy / chord * bulge, mid[1] + dx / chord * bulge)

    center, radius = circle_from_points(start[:2], through, end[:2])
    start_angle = normalize_angle(math.atan2(start[1] - center[1], start[0] - center[0]))
    end_angle = normalize_angle(math.atan2(end[1] - center[1], end[0] - center[0]))
    mid_angle = normalize_angle(math.atan2(through[1] - center[1], through[0] - center[0]))
    if not angle_on_ccw_sweep(mid_angle, start_angle, end_angle):
        start_angle, end_angle = end_angle, start_angle

    return Arc(
        layer=layer,
        center=(center[0], center[1], start[2]),
        radius=radius,
        start_angle=start_angle,
        end_angle=end_angle,
    )


def create_arc_through_two_points(
    store: HostStore,
    start: Any,
    end: Any,
    side: str,
    *,
    layer: str = "0",
    settings: ClipSettings = DEFAULT_SETTINGS,
) -> Any:
    arc = arc_through_two_points(start, end, side, layer=layer)
    return instantiate(arc, (0.0, 0.0, 0.0), store, settings=settings)


def create_filled_circle(
    store: HostStore,
    center: Any,
    radius: float,
    *,
    layer: str = FILLED_CIRCLE_LAYER,
    settings: ClipSettings = DEFAULT_SETTINGS,
) -> tuple[Any, Any]:
    """Append a circle and a solid fill bounded by it, in one transaction."""
    circle = Circle(layer=layer, center=point3(center), radius=float(radius))
    ResourceResolver(store, settings).ensure_layer(layer, settings.default_layer_color)
    with store.transaction():
        outline = store.append_entity(circle, settings.target_space)
        fill = store.append_solid_fill(circle, settings.target_space)
    return outline, fill
