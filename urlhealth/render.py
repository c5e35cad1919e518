"""Renderers for a computed list of Results: table, JSON, CSV, simple."""

from __future__ import annotations

import csv
import json
from collections.abc import Callable, Sequence
from datetime import UTC
from typing import TextIO

from urlhealth.check_result import Result
from urlhealth.stats import compute_stats

_GREEN = "\033[32m"
_RED = "\033[31m"
_YELLOW = "\033[33m"
_HEADER = "\033[4;32m"
_RESET = "\033[0m"

TABLE_COLUMNS = ("URL", "Status", "Code", "Duration", "Retries")
CSV_HEADER = ("URL", "Status", "StatusCode", "Duration", "Timestamp", "Retries")

ICON_SUCCESS = "✓"
ICON_ERROR = "✗"


def format_duration(seconds: float) -> str:
    """Format seconds rounded to the millisecond: ``87ms``, ``1.204s``."""
    millis = round(seconds * 1000)
    if millis < 1000:
        return f"{millis}ms"
    return f"{millis / 1000:.3f}".rstrip("0").rstrip(".") + "s"


def format_timestamp(result: Result) -> str:
    """Return completed_at as an RFC 3339 UTC timestamp."""
    return result.completed_at.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def _paint(text: str, code: str, color: bool) -> str:
    return f"{code}{text}{_RESET}" if color else text


def render_table(results: Sequence[Result], out: TextIO, *, color: bool = True) -> None:
    """Aligned table with colored status; prints nothing for an empty list."""
    if not results:
        return

    rows: list[tuple[str, ...]] = []
    for r in results:
        status = r.status
        if r.status_code:
            status = f"{status} ({r.status_code})"
        duration = format_duration(r.duration)
        rows.append((r.endpoint, status, str(r.status_code), duration, str(r.attempts - 1)))

    widths = [len(col) for col in TABLE_COLUMNS]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row, strict=True)]

    header = [
        _paint(col.ljust(w), _HEADER, color) for col, w in zip(TABLE_COLUMNS, widths, strict=True)
    ]
    out.write("  ".join(header).rstrip() + "\n")

    for r, row in zip(results, rows, strict=True):
        cells = [cell.ljust(w) for cell, w in zip(row, widths, strict=True)]
        cells[0] = _paint(cells[0], _YELLOW, color)
        cells[1] = _paint(cells[1], _GREEN if r.ok else _RED, color)
        out.write("  ".join(cells).rstrip() + "\n")


def render_json(results: Sequence[Result], out: TextIO) -> None:
    """Pretty-printed JSON array."""
    json.dump([r.to_dict() for r in results], out, indent=2, ensure_ascii=False)
    out.write("\n")


def render_csv(results: Sequence[Result], out: TextIO) -> None:
    """Header row plus one row per Result."""
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in results:
        writer.writerow(
            (
                r.endpoint,
                r.status,
                r.status_code,
                format_duration(r.duration),
                format_timestamp(r),
                r.attempts - 1,
            )
        )


def render_simple(results: Sequence[Result], out: TextIO) -> None:
    """One icon line per Result, plus an error line when there is one."""
    for r in results:
        icon = ICON_SUCCESS if r.ok else ICON_ERROR
        out.write(f"{icon} {r.endpoint} - {r.status} (took {format_duration(r.duration)})\n")
        if r.error:
            out.write(f"  Error: {r.error}\n")


def render_stats(results: Sequence[Result], out: TextIO) -> None:
    """Summary block; prints nothing for an empty list."""
    if not results:
        return

    stats = compute_stats(results)
    out.write("\n" + "=" * 50 + "\n")
    out.write("Statistics:\n")
    out.write(f"  Total checks: {stats.total}\n")
    out.write(f"  Successful: {stats.success_count}\n")
    out.write(f"  Errors: {stats.error_count}\n")
    out.write(f"  Average time: {format_duration(stats.average)}\n")
    out.write(f"  Total time: {format_duration(stats.total_duration)}\n")
    out.write(f"  Success rate: {stats.success_rate:.1f}%\n")


Renderer = Callable[[Sequence[Result], TextIO], None]

FORMATS = ("table", "json", "csv", "simple")


def get_renderer(fmt: str, *, color: bool = True) -> Renderer:
    """Return the renderer for ``fmt``; unknown names fall back to the table."""
    fmt = fmt.lower()
    if fmt == "json":
        return render_json
    if fmt == "csv":
        return render_csv
    if fmt == "simple":
        return render_simple
    return lambda results, out: render_table(results, out, color=color)
