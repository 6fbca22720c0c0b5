"""Host drawing store capabilities and the ezdxf-backed implementation.

The codec and the batch orchestrator only talk to a :class:`HostStore`:
table lookups (``has``/``create``), the standard linetype library, entity
append, and scoped transactions. :class:`DxfHostStore` implements these on
top of an in-memory ezdxf document.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Protocol

from .entity import Arc, Circle, Ellipse, Entity, Line, Polyline, Solid, TextBlock
from .geometry import normalize, scale

logger = logging.getLogger(__name__)

TABLE_KINDS = ("layer", "linetype", "style")

# Always present in a DXF linetype table and never loaded from the library.
BUILTIN_LINETYPES = {"BYLAYER", "BYBLOCK", "CONTINUOUS"}

_BYLAYER = 256
_MTEXT_LINE_SPACING_BASE = 5.0 / 3.0
_MTEXT_LINE_SPACING_RANGE = (0.25, 4.0)


class HostStore(Protocol):
    def has(self, table: str, name: str) -> bool: ...

    def get(self, table: str, name: str) -> Any: ...

    def create(self, table: str, name: str, attributes: dict[str, Any]) -> Any: ...

    def standard_linetype(self, name: str) -> dict[str, Any] | None: ...

    def append_entity(self, entity: Entity, target_space: str) -> Any: ...

    def append_solid_fill(self, boundary: Circle, target_space: str) -> Any: ...

    def transaction(self) -> Any: ...


def _require_ezdxf():
    try:
        import ezdxf
    except Exception as exc:
        raise ImportError(
            "ezdxf is required as the drawing backend. "
            "Install it with `pip install ezdxf`."
        ) from exc
    return ezdxf


class DxfHostStore:
    """:class:`HostStore` over an ezdxf ``Drawing``.

    Mutations made inside :meth:`transaction` are journaled and undone in
    reverse order if the block raises. Mutations outside a transaction are
    applied immediately.
    """

    def __init__(self, doc: Any) -> None:
        self.doc = doc
        self._journals: list[list[tuple[str, Any, Any]]] = []

    @classmethod
    def new(cls, dxf_version: str = "R2010") -> "DxfHostStore":
        ezdxf = _require_ezdxf()
        return cls(ezdxf.new(dxfversion=dxf_version))

    @classmethod
    def read(cls, path: str) -> "DxfHostStore":
        ezdxf = _require_ezdxf()
        return cls(ezdxf.readfile(path))

    def save(self, path: str) -> str:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        self.doc.saveas(str(out_path))
        return str(out_path)

    def layout(self, target_space: str) -> Any:
        if target_space == "paperspace":
            return self.doc.paperspace()
        if target_space == "modelspace":
            return self.doc.modelspace()
        raise ValueError(f"unsupported target space: {target_space}")

    def _table(self, table: str) -> Any:
        if table == "layer":
            return self.doc.layers
        if table == "linetype":
            return self.doc.linetypes
        if table == "style":
            return self.doc.styles
        raise ValueError(f"unsupported table kind: {table}")

    def has(self, table: str, name: str) -> bool:
        if table == "linetype" and name.upper() in BUILTIN_LINETYPES:
            return True
        return name in self._table(table)

    def get(self, table: str, name: str) -> Any:
        return self._table(table).get(name)

    def create(self, table: str, name: str, attributes: dict[str, Any]) -> Any:
        entry = self._table(table).new(name, dxfattribs=dict(attributes))
        self._record("table", table, name)
        return entry

    def standard_linetype(self, name: str) -> dict[str, Any] | None:
        from ezdxf.tools.standards import linetypes

        wanted = name.upper()
        for ltype_name, description, pattern in linetypes():
            if ltype_name.upper() == wanted:
                return {"name": ltype_name, "description": description, "pattern": pattern}
        return None

    def append_entity(self, entity: Entity, target_space: str) -> Any:
        layout = self.layout(target_space)
        dxf_entity = _write_entity(layout, entity)
        self._record("entity", layout, dxf_entity)
        return dxf_entity

    def append_solid_fill(self, boundary: Circle, target_space: str) -> Any:
        layout = self.layout(target_space)
        hatch = layout.add_hatch(color=_BYLAYER, dxfattribs={"layer": boundary.layer})
        hatch.set_solid_fill(color=_BYLAYER)
        hatch.dxf.elevation = (0.0, 0.0, boundary.center[2])
        path = hatch.paths.add_edge_path()
        path.add_arc(boundary.center[:2], boundary.radius, 0.0, 360.0)
        self._record("entity", layout, hatch)
        return hatch

    def selection(self, target_space: str, types: str | Iterable[str] | None = None) -> list[Any]:
        layout = self.layout(target_space)
        if types is None:
            return list(layout)
        if not isinstance(types, str):
            types = " ".join(types)
        return list(layout.query(types.upper()))

    @contextmanager
    def transaction(self) -> Iterator[None]:
        journal: list[tuple[str, Any, Any]] = []
        self._journals.append(journal)
        try:
            yield
        except BaseException:
            self._journals.pop()
            self._rollback(journal)
            raise
        self._journals.pop()
        if self._journals:
            # nested: the outer transaction owns these mutations now
            self._journals[-1].extend(journal)

    def _record(self, kind: str, owner: Any, item: Any) -> None:
        if self._journals:
            self._journals[-1].append((kind, owner, item))

    def _rollback(self, journal: list[tuple[str, Any, Any]]) -> None:
        for kind, owner, item in reversed(journal):
            if kind == "entity":
                owner.delete_entity(item)
            else:
                self._table(owner).remove(item)
        if journal:
            logger.debug("rolled back %d mutation(s)", len(journal))


def _entity_dxfattribs(entity: Entity) -> dict[str, Any]:
    attribs: dict[str, Any] = {"layer": entity.layer}
    linetype = getattr(entity, "linetype", None)
    if linetype:
        attribs["linetype"] = linetype
    return attribs


def _write_entity(layout: Any, entity: Entity) -> Any:
    dxfattribs = _entity_dxfattribs(entity)

    if isinstance(entity, Polyline):
        dxfattribs["elevation"] = entity.vertices[0].point[2]
        vertices = [
            (vertex.point[0], vertex.point[1], 0.0, 0.0, vertex.bulge) for vertex in entity.vertices
        ]
        return layout.add_lwpolyline(
            vertices,
            format="xyseb",
            close=entity.closed,
            dxfattribs=dxfattribs,
        )

    if isinstance(entity, Line):
        return layout.add_line(entity.start, entity.end, dxfattribs=dxfattribs)

    if isinstance(entity, TextBlock):
        dxfattribs["char_height"] = entity.height
        dxfattribs["attachment_point"] = int(entity.justification)
        dxfattribs["insert"] = entity.location
        if entity.style:
            dxfattribs["style"] = entity.style
        factor = _line_spacing_factor(entity.line_spacing, entity.height)
        if factor is not None:
            dxfattribs["line_spacing_factor"] = factor
        return layout.add_mtext(entity.text, dxfattribs=dxfattribs)

    if isinstance(entity, Circle):
        return layout.add_circle(entity.center, entity.radius, dxfattribs=dxfattribs)

    if isinstance(entity, Arc):
        return layout.add_arc(
            entity.center,
            entity.radius,
            math.degrees(entity.start_angle),
            math.degrees(entity.end_angle),
            dxfattribs=dxfattribs,
        )

    if isinstance(entity, Ellipse):
        return layout.add_ellipse(
            entity.center,
            major_axis=scale(normalize(entity.major_axis), entity.major_radius),
            ratio=entity.ratio,
            start_param=entity.start_angle,
            end_param=entity.end_angle,
            dxfattribs=dxfattribs,
        )

    if isinstance(entity, Solid):
        return layout.add_solid(entity.vertices, dxfattribs=dxfattribs)

    raise TypeError(f"unsupported entity: {type(entity).__name__}")


def _line_spacing_factor(distance: float, height: float) -> float | None:
    if distance <= 0.0 or height <= 0.0:
        return None
    low, high = _MTEXT_LINE_SPACING_RANGE
    return min(max(distance / (height * _MTEXT_LINE_SPACING_BASE), low), high)


def line_spacing_distance(factor: float, height: float) -> float:
    return factor * height * _MTEXT_LINE_SPACING_BASE
