from __future__ import annotations

from pathlib import Path

import pytest

from ezclip.payload import (
    dumps,
    loads,
    post_to_command_line,
    read_payload,
    unique_path,
    write_payload,
    write_payload_unique,
)

PAYLOAD = [{"circle": {"layer": "A", "center": {"x": 1.0, "y": 2.0, "z": 0.0}, "radius": 3.0}}]


def test_write_payload_overwrites(tmp_path: Path) -> None:
    target = tmp_path / "clip.json"
    target.write_text("[]", encoding="utf-8")

    written = write_payload(target, PAYLOAD)

    assert written == target
    assert read_payload(target) == PAYLOAD


def test_write_payload_writes_indented_json(tmp_path: Path) -> None:
    written = write_payload(tmp_path / "nested" / "clip.json", PAYLOAD)

    text = written.read_text(encoding="utf-8")
    assert text.startswith("[\n  {\n")


def test_write_payload_unique_renames_on_collision(tmp_path: Path) -> None:
    target = tmp_path / "clip.json"

    first = write_payload_unique(target, PAYLOAD)
    second = write_payload_unique(target, [])
    third = write_payload_unique(target, [])

    assert first == target
    assert second == tmp_path / "clip_1.json"
    assert third == tmp_path / "clip_2.json"
    assert read_payload(target) == PAYLOAD


def test_unique_path_skips_taken_suffixes(tmp_path: Path) -> None:
    (tmp_path / "clip.json").write_text("[]", encoding="utf-8")
    (tmp_path / "clip_1.json").write_text("[]", encoding="utf-8")

    assert unique_path(tmp_path / "clip.json") == tmp_path / "clip_2.json"


def test_loads_rejects_non_array() -> None:
    with pytest.raises(ValueError, match="JSON array"):
        loads('{"circle": {}}')


def test_loads_round_trips_dumps() -> None:
    assert loads(dumps(PAYLOAD)) == PAYLOAD


def test_post_to_command_line(capsys) -> None:
    post_to_command_line({"layer": "A"})

    captured = capsys.readouterr()
    assert '"layer": "A"' in captured.out
