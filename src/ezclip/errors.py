from __future__ import annotations


class MalformedRecord(ValueError):
    """A record of a known kind is missing a required field or has the wrong shape."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"malformed {kind} record: {message}")
        self.kind = kind
        self.detail = message


class ResourceResolutionError(ValueError):
    """A named drawing resource could not be found or created."""

    def __init__(self, table: str, name: str, message: str | None = None) -> None:
        super().__init__(message or f"{table} not found: {name!r}")
        self.table = table
        self.name = name


class DegenerateArcError(ValueError):
    """Points do not define a circle: coincident endpoints or a collinear triple."""
