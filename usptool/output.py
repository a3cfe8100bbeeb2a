"""Result rendering: JSON envelope, NDJSON, CSV and plain-text tables."""

from __future__ import annotations

import csv
import dataclasses
import json
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence, TextIO

EXIT_GENERAL_ERROR = 1


@dataclass
class OutputOptions:
    """Resolved output flags for one invocation."""

    format: str = "table"
    quiet: bool = False
    minify: bool = False
    no_color: bool = False


@dataclass
class PaginationMeta:
    """Paging information attached to a result list."""

    offset: int = 0
    limit: int = 0
    total: int = 0
    has_more: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "limit": self.limit,
            "total": self.total,
            "hasMore": self.has_more,
        }


@dataclass
class FacetValue:
    """One bucket of a faceted search result."""

    value: str = ""
    count: int = 0


@dataclass
class CLIError:
    """Structured error reported in the JSON envelope."""

    code: int = 0
    type: str = ""
    message: str = ""
    hint: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code, "type": self.type, "message": self.message}
        if self.hint:
            out["hint"] = self.hint
        return out


@dataclass
class CLIResponse:
    """The standard JSON envelope wrapping every result."""

    ok: bool = True
    command: str = ""
    pagination: PaginationMeta | None = None
    results: Any = None
    facets: dict[str, list[FacetValue]] | None = None
    version: str = ""
    error: CLIError | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"ok": self.ok}
        if self.command:
            out["command"] = self.command
        if self.pagination is not None:
            out["pagination"] = self.pagination.to_dict()
        if self.ok or self.results is not None:
            out["results"] = _plain(self.results)
        if self.facets:
            out["facets"] = {name: [_plain(v) for v in values] for name, values in self.facets.items()}
        out["version"] = self.version
        if self.error is not None:
            out["error"] = self.error.to_dict()
        return out


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------


def _plain(value: Any) -> Any:
    """Convert dataclasses and objects with to_dict into JSON-ready values."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict) and not isinstance(value, type):
        return _plain(to_dict())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def _json_text(value: Any, minify: bool = False) -> str:
    if minify:
        return json.dumps(_plain(value), ensure_ascii=False, separators=(",", ":"))
    return json.dumps(_plain(value), ensure_ascii=False, indent=2)


def _format_float(value: float) -> str:
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


def to_slice(data: Any) -> list[Any] | None:
    """Return data as a list: sequences are copied, single items are wrapped."""
    if data is None:
        return None
    if isinstance(data, (list, tuple)):
        return list(data)
    return [data]


def flatten_map(mapping: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested mappings into dot-separated keys with string values."""
    out: dict[str, str] = {}
    for key, value in mapping.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            out.update(flatten_map(value, full_key))
        elif isinstance(value, (list, tuple)):
            out[full_key] = _json_text(value, minify=True)
        elif value is None:
            out[full_key] = ""
        else:
            out[full_key] = _scalar_text(value)
    return out


def flatten_to_map(value: Any) -> dict[str, str]:
    """Flatten any JSON-representable value; non-objects land under "value"."""
    if value is None:
        return {}
    try:
        text = _json_text(value, minify=True)
    except (TypeError, ValueError):
        return {"value": str(value)}
    raw = json.loads(text)
    if isinstance(raw, dict):
        return flatten_map(raw)
    return {"value": text.strip()}


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

_ASCII_STYLE = {
    "top": ("+", "-", "+", "+"),
    "mid": ("+", "-", "+", "+"),
    "bottom": ("+", "-", "+", "+"),
    "vertical": "|",
}
_LIGHT_STYLE = {
    "top": ("┌", "─", "┬", "┐"),
    "mid": ("├", "─", "┼", "┤"),
    "bottom": ("└", "─", "┴", "┘"),
    "vertical": "│",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return _scalar_text(value)


def render_table(
    header: Sequence[Any],
    rows: Iterable[Sequence[Any]],
    light: bool = False,
    separator_before: Iterable[int] = (),
) -> str:
    """Render a boxed text table; headers are upper-cased, numbers right-aligned."""
    style = _LIGHT_STYLE if light else _ASCII_STYLE
    raw_rows = [list(row) for row in rows]
    columns = max([len(header), *(len(r) for r in raw_rows)]) if (header or raw_rows) else 0
    head = [str(h).upper() for h in header] + [""] * (columns - len(header))
    raw_rows = [row + [""] * (columns - len(row)) for row in raw_rows]
    text_rows = [[_cell_text(c) for c in row] for row in raw_rows]

    numeric_cols = [bool(raw_rows) and all(_is_number(row[i]) for row in raw_rows) for i in range(columns)]
    widths = [max([len(head[i]), *(len(r[i]) for r in text_rows)]) for i in range(columns)]
    breaks = set(separator_before)
    vertical = style["vertical"]

    def rule(kind: str) -> str:
        left, fill, junction, right = style[kind]
        return left + junction.join(fill * (w + 2) for w in widths) + right

    def line(cells: list[str], numeric: list[bool]) -> str:
        parts = [
            " " + (cell.rjust(w) if is_num else cell.ljust(w)) + " "
            for cell, w, is_num in zip(cells, widths, numeric)
        ]
        return vertical + vertical.join(parts) + vertical

    lines = [rule("top"), line(head, numeric_cols), rule("mid")]
    for index, (raw, cells) in enumerate(zip(raw_rows, text_rows)):
        if index in breaks:
            lines.append(rule("mid"))
        lines.append(line(cells, [_is_number(c) for c in raw]))
    lines.append(rule("bottom"))
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------


@dataclass
class Console:
    """Writes results to stdout and progress messages to stderr."""

    options: OutputOptions = field(default_factory=OutputOptions)
    stdout: TextIO | None = None
    stderr: TextIO | None = None
    version: str = "dev"

    def __init__(
        self,
        options: OutputOptions | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        version: str = "dev",
    ) -> None:
        self.options = options if options is not None else OutputOptions()
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.version = version

    def info(self, message: str) -> None:
        """Write a progress message unless quiet."""
        if not self.options.quiet:
            print(message, file=self.stderr)

    def warn(self, message: str) -> None:
        """Write a message to stderr regardless of quiet."""
        print(message, file=self.stderr)

    def result(
        self,
        command: str,
        data: Any,
        pagination: PaginationMeta | None = None,
        facets: dict[str, list[FacetValue]] | None = None,
    ) -> None:
        """Write data in the configured format."""
        fmt = self.options.format
        if fmt == "json":
            self.write_json(command, data, pagination, facets)
        elif fmt == "ndjson":
            self.write_ndjson(data)
        elif fmt == "csv":
            self.write_csv(data)
        else:
            self.write_table(data)
            if facets:
                self.write_facets(facets)

    def write_json(
        self,
        command: str,
        data: Any,
        pagination: PaginationMeta | None = None,
        facets: dict[str, list[FacetValue]] | None = None,
    ) -> None:
        envelope = CLIResponse(
            ok=True,
            command=command,
            pagination=pagination,
            results=data,
            facets=facets,
            version=self.version,
        )
        print(_json_text(envelope.to_dict(), self.options.minify), file=self.stdout)

    def write_ndjson(self, data: Any) -> None:
        for item in to_slice(data) or []:
            try:
                text = _json_text(item, minify=True)
            except (TypeError, ValueError) as exc:
                print(f"Error marshalling NDJSON line: {exc}", file=self.stderr)
                continue
            print(text, file=self.stdout)

    def _flatten_items(self, data: Any) -> tuple[list[str], list[dict[str, str]]]:
        rows = [flatten_to_map(item) for item in to_slice(data) or []]
        headers = sorted({key for row in rows for key in row})
        return headers, rows

    def write_csv(self, data: Any) -> None:
        headers, rows = self._flatten_items(data)
        if not rows:
            return
        writer = csv.writer(self.stdout, lineterminator="\n")
        writer.writerow(headers)
        for row in rows:
            writer.writerow([row.get(h, "") for h in headers])

    def write_table(self, data: Any) -> None:
        headers, rows = self._flatten_items(data)
        if not rows:
            self.info("No results.")
            return
        table = render_table(headers, [[row.get(h, "") for h in headers] for row in rows])
        self.stdout.write(table)

    def write_facets(self, facets: dict[str, list[FacetValue]] | None) -> None:
        print(file=self.stdout)
        for name, values in (facets or {}).items():
            print(f"Facet: {name}", file=self.stdout)
            self.stdout.write(render_table(["VALUE", "COUNT"], [[v.value, v.count] for v in values]))
            print(file=self.stdout)

    def error_json(self, error: CLIError) -> None:
        envelope = CLIResponse(ok=False, version=self.version, error=error)
        try:
            text = _json_text(envelope.to_dict(), self.options.minify)
        except (TypeError, ValueError) as exc:
            print(f"Error marshalling error JSON: {exc}", file=self.stderr)
            return
        print(text, file=self.stdout)