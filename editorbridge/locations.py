"""Parsing of ``path:line:column`` reports emitted by the query tool."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import MalformedLocation


@dataclass(slots=True, frozen=True)
class SourceLocation:
    path: str
    line: int
    column: int

    def as_usage(self) -> dict[str, object]:
        """Return the usage record shape the editor expects."""
        return {"path": self.path, "line": self.line, "ch": self.column, "contents": [""]}


def _coordinate(field: str, name: str, raw: str) -> int:
    if not field or not (field.isascii() and field.isdigit()):
        raise MalformedLocation(f"{name} is not an integer in {raw!r}")
    return int(field)


def parse_location(line: str) -> SourceLocation:
    """Parse one report line, taking the two rightmost fields as coordinates.

    Paths may contain colons (``C:\\src\\main.go:3:1``), so splitting happens
    from the right.
    """
    raw = line.strip()
    parts = raw.rsplit(":", 2)
    if len(parts) != 3:
        raise MalformedLocation(f"expected <path>:<line>:<column>, got {raw!r}")
    path, line_field, column_field = parts
    if not path:
        raise MalformedLocation(f"empty path in {raw!r}")
    return SourceLocation(
        path=path,
        line=_coordinate(line_field, "line", raw),
        column=_coordinate(column_field, "column", raw),
    )


def parse_locations(blob: str) -> list[SourceLocation] | None:
    """Parse a newline separated report.

    Returns ``None`` when the report is empty (tool ran, found nothing). The
    first malformed line raises instead of being skipped.
    """
    report = blob.strip()
    if not report:
        return None
    return [parse_location(entry) for entry in report.split("\n")]


__all__ = ["SourceLocation", "parse_location", "parse_locations"]
