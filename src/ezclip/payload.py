from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, TextIO

from .record import Record

PAYLOAD_INDENT = 2


def loads(text: str) -> list[Record]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError(f"payload must be a JSON array, got {type(data).__name__}")
    return data


def dumps(payload: Any) -> str:
    return json.dumps(payload, indent=PAYLOAD_INDENT)


def read_payload(path: str | Path) -> list[Record]:
    return loads(Path(path).read_text(encoding="utf-8"))


def write_payload(path: str | Path, payload: Any) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(dumps(payload), encoding="utf-8")
    return out_path


def unique_path(path: str | Path) -> Path:
    """Return ``path`` or the first free ``<stem>_N<suffix>`` sibling."""
    candidate = Path(path)
    if not candidate.exists():
        return candidate
    counter = 1
    while True:
        renamed = candidate.with_name(f"{candidate.stem}_{counter}{candidate.suffix}")
        if not renamed.exists():
            return renamed
        counter += 1


def write_payload_unique(path: str | Path, payload: Any) -> Path:
    return write_payload(unique_path(path), payload)


def post_to_command_line(data: Any, stream: TextIO | None = None) -> None:
    print(dumps(data), file=stream or sys.stdout)
