from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .batch import apply
from .capture import CAPTURE_TYPES, capture_selection
from .entity import ENTITY_KINDS
from .geometry import Point3D
from .host import DxfHostStore
from .payload import read_payload, write_payload, write_payload_unique
from .policy import TARGET_SPACES, ClipSettings
from .record import record_kind


def _package_version() -> str:
    try:
        return version("ezclip")
    except PackageNotFoundError:
        return "0.0.0"


def _parse_point(text: str) -> Point3D:
    parts = [part.strip() for part in text.split(",")]
    if len(parts) not in (2, 3):
        raise argparse.ArgumentTypeError(f"expected X,Y or X,Y,Z, got {text!r}")
    try:
        values = [float(part) for part in parts]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid point: {text!r}") from exc
    if len(values) == 2:
        values.append(0.0)
    return (values[0], values[1], values[2])


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ezclip",
        description="Capture drawing entities to a JSON payload and replay them elsewhere.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    parser.add_argument("--verbose", action="store_true", help="Log per-record diagnostics.")
    subparsers = parser.add_subparsers(dest="command")

    capture_parser = subparsers.add_parser(
        "capture",
        help="Encode DXF entities relative to an origin and write a JSON payload.",
    )
    capture_parser.add_argument("input_path", help="Path to DXF file.")
    capture_parser.add_argument("output_path", help="Path to output JSON payload.")
    capture_parser.add_argument(
        "--origin",
        type=_parse_point,
        default=(0.0, 0.0, 0.0),
        help="Capture origin as X,Y or X,Y,Z (default: 0,0,0).",
    )
    capture_parser.add_argument(
        "--types",
        default=None,
        help=f'Entity filter, e.g. "LINE ARC". Supported: {" ".join(CAPTURE_TYPES)}.',
    )
    capture_parser.add_argument(
        "--space",
        choices=TARGET_SPACES,
        default="paperspace",
        help="Layout to read entities from (default: paperspace).",
    )
    capture_parser.add_argument(
        "--no-overwrite",
        action="store_true",
        help="Append _1, _2, ... to the output name instead of overwriting.",
    )

    replay_parser = subparsers.add_parser(
        "replay",
        help="Instantiate a JSON payload at a reference point and save as DXF.",
    )
    replay_parser.add_argument("payload_path", help="Path to JSON payload.")
    replay_parser.add_argument("output_path", help="Path to output DXF file.")
    replay_parser.add_argument(
        "--at",
        type=_parse_point,
        required=True,
        help="Reference point as X,Y or X,Y,Z.",
    )
    replay_parser.add_argument(
        "--into",
        default=None,
        help="Existing DXF file to add the entities to (default: a new drawing).",
    )
    replay_parser.add_argument(
        "--space",
        choices=TARGET_SPACES,
        default="paperspace",
        help="Layout to append entities to (default: paperspace).",
    )
    replay_parser.add_argument(
        "--dxf-version",
        default="R2010",
        help="DXF version for new drawings, e.g. R2000/R2010/R2018.",
    )
    replay_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if any record cannot be instantiated.",
    )

    inspect_parser = subparsers.add_parser("inspect", help="Count records in a JSON payload.")
    inspect_parser.add_argument("payload_path", help="Path to JSON payload.")
    return parser


def _run_capture(
    input_path: str,
    output_path: str,
    *,
    origin: Point3D = (0.0, 0.0, 0.0),
    types: str | None = None,
    space: str = "paperspace",
    overwrite: bool = True,
) -> int:
    dxf_path = Path(input_path)
    if not dxf_path.exists():
        print(f"error: file not found: {dxf_path}", file=sys.stderr)
        return 2

    try:
        store = DxfHostStore.read(str(dxf_path))
        payload = capture_selection(store.selection(space, types), origin)
        if overwrite:
            written = write_payload(output_path, payload)
        else:
            written = write_payload_unique(output_path, payload)
    except Exception as exc:
        print(f"error: failed to capture entities: {exc}", file=sys.stderr)
        return 2

    print(f"input: {dxf_path}")
    print(f"output: {written}")
    print(f"records: {len(payload)}")
    for kind, count in sorted(Counter(record_kind(record) for record in payload).items()):
        print(f"{kind}: {count}")
    return 0


def _run_replay(
    payload_path: str,
    output_path: str,
    *,
    at: Point3D,
    into: str | None = None,
    space: str = "paperspace",
    dxf_version: str = "R2010",
    strict: bool = False,
) -> int:
    json_path = Path(payload_path)
    if not json_path.exists():
        print(f"error: file not found: {json_path}", file=sys.stderr)
        return 2

    try:
        records = read_payload(json_path)
        if into is not None:
            store = DxfHostStore.read(into)
        else:
            store = DxfHostStore.new(dxf_version)
        result = apply(records, at, store, settings=ClipSettings(target_space=space), strict=strict)
        written = store.save(output_path)
    except Exception as exc:
        print(f"error: failed to replay payload: {exc}", file=sys.stderr)
        return 2

    print(f"input: {json_path}")
    print(f"output: {written}")
    print(f"total_records: {result.total_records}")
    print(f"created_entities: {result.created_entities}")
    print(f"skipped_records: {result.skipped_records}")
    for kind, count in result.skipped_by_kind.items():
        print(f"skipped[{kind}]: {count}")
    print(f"failed_records: {result.failed_records}")
    for failure in result.failures:
        print(f"failed[{failure.index}]: {failure.message}")
    return 0


def _run_inspect(payload_path: str) -> int:
    json_path = Path(payload_path)
    if not json_path.exists():
        print(f"error: file not found: {json_path}", file=sys.stderr)
        return 2

    try:
        records = read_payload(json_path)
    except Exception as exc:
        print(f"error: failed to read payload: {exc}", file=sys.stderr)
        return 2

    counts: Counter[str] = Counter()
    unknown: Counter[str] = Counter()
    invalid = 0
    for record in records:
        try:
            kind = record_kind(record)
        except ValueError:
            invalid += 1
            continue
        if kind in ENTITY_KINDS:
            counts[kind] += 1
        else:
            unknown[kind] += 1

    print(f"file: {json_path}")
    print(f"total_records: {len(records)}")
    for kind in ENTITY_KINDS:
        if counts.get(kind, 0) > 0:
            print(f"{kind}: {counts[kind]}")
    for kind, count in sorted(unknown.items()):
        print(f"unknown[{kind}]: {count}")
    if invalid:
        print(f"invalid_records: {invalid}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "capture":
        return _run_capture(
            args.input_path,
            args.output_path,
            origin=args.origin,
            types=args.types,
            space=args.space,
            overwrite=not bool(args.no_overwrite),
        )
    if args.command == "replay":
        return _run_replay(
            args.payload_path,
            args.output_path,
            at=args.at,
            into=args.into,
            space=args.space,
            dxf_version=args.dxf_version,
            strict=bool(args.strict),
        )
    if args.command == "inspect":
        return _run_inspect(args.payload_path)

    parser.print_help()
    return 0
