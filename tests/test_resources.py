from __future__ import annotations

import pytest

from ezclip.errors import ResourceResolutionError
from ezclip.policy import ClipSettings
from ezclip.resources import ResourceResolver
from tests._dxf_helpers import new_store

pytest.importorskip("ezdxf")


def test_ensure_layer_creates_layer_with_defaults() -> None:
    store = new_store()
    resolver = ResourceResolver(store)

    resolver.ensure_layer("E-CONDUIT")

    layer = store.get("layer", "E-CONDUIT")
    assert layer.dxf.color == 4
    assert layer.dxf.lineweight == 50
    assert layer.dxf.plot == 1


def test_ensure_layer_is_idempotent_and_keeps_first_attributes() -> None:
    store = new_store()
    resolver = ResourceResolver(store)

    resolver.ensure_layer("E-TEXT", 2)
    resolver.ensure_layer("E-TEXT", 4)

    assert len([layer for layer in store.doc.layers if layer.dxf.name == "E-TEXT"]) == 1
    assert store.get("layer", "E-TEXT").dxf.color == 2


def test_ensure_layer_leaves_existing_layer_untouched() -> None:
    store = new_store()
    store.doc.layers.new("E-SYM", dxfattribs={"color": 1})

    ResourceResolver(store).ensure_layer("E-SYM")

    assert store.get("layer", "E-SYM").dxf.color == 1


@pytest.mark.parametrize(
    ("name", "default", "expected"),
    [
        ("E-SYM", 4, 6),
        ("Inverter", 4, 2),
        ("SYM-Inverter-1", 4, 2),
        ("E-TEXT", 2, 2),
    ],
)
def test_ensure_layer_color_rules(name: str, default: int, expected: int) -> None:
    store = new_store()

    ResourceResolver(store).ensure_layer(name, default)

    assert store.get("layer", name).dxf.color == expected


def test_ensure_layer_honours_settings() -> None:
    store = new_store()
    settings = ClipSettings(default_layer_color=3, layer_lineweight=25, layer_plottable=False)

    ResourceResolver(store, settings).ensure_layer("A")

    layer = store.get("layer", "A")
    assert layer.dxf.color == 3
    assert layer.dxf.lineweight == 25
    assert layer.dxf.plot == 0


@pytest.mark.parametrize("name", ["E/SYM", "A;B", "A=B", "A*"])
def test_ensure_layer_invalid_name_raises(name: str) -> None:
    store = new_store()

    with pytest.raises(ResourceResolutionError) as info:
        ResourceResolver(store).ensure_layer(name)

    assert info.value.table == "layer"
    assert info.value.name == name
    assert not store.has("layer", name)


def test_ensure_linetype_loads_from_standard_library() -> None:
    store = new_store()
    assert not store.has("linetype", "DASHED")

    ResourceResolver(store).ensure_linetype("DASHED")

    assert store.has("linetype", "DASHED")


def test_ensure_linetype_accepts_builtin_names() -> None:
    store = new_store()
    resolver = ResourceResolver(store)

    resolver.ensure_linetype("ByLayer")
    resolver.ensure_linetype("Continuous")


def test_ensure_linetype_unknown_name_raises() -> None:
    store = new_store()

    with pytest.raises(ResourceResolutionError) as info:
        ResourceResolver(store).ensure_linetype("NO_SUCH_LINETYPE")

    assert info.value.table == "linetype"
    assert info.value.name == "NO_SUCH_LINETYPE"
    assert not store.has("linetype", "NO_SUCH_LINETYPE")


def test_ensure_text_style_looks_up_only() -> None:
    store = new_store()
    resolver = ResourceResolver(store)

    assert resolver.ensure_text_style("Standard") is not None
    assert resolver.ensure_text_style("ROMANS") is None
    assert not store.has("style", "ROMANS")
