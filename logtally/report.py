"""Render and export aggregation results.

Everything here is presentational: it consumes an
:class:`~logtally.aggregate.AggregationResult` and produces text or files.
"""

from __future__ import annotations

import json
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional, Union

from logtally.aggregate import AggregationResult
from logtally.logging import get_logger

logger = get_logger(__name__)

TABLE_HEADERS = ["type", "instances", "total byte size"]


def clip_cell(value: Any, max_width: Optional[int] = None) -> str:
    """Return ``value`` as text, cut to ``max_width`` characters ending in "..."."""
    s = str(value)
    if max_width is not None and len(s) > max_width:
        return s[: max_width - 3] + "..."
    return s


def format_table(
    headers: List[str], rows: List[List[Any]], min_width: int = 4
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string. Headers are rendered even when ``rows`` is empty.
    """
    all_data = [[str(h) for h in headers]]
    all_data.extend([str(item) for item in row] for row in rows)
    col_widths = []
    for col_idx in range(len(headers)):
        max_width = max(len(row[col_idx]) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return " | ".join(
            f"{item:<{col_widths[i]}}" for i, item in enumerate(row_data)
        ).rstrip()

    lines = [format_row(all_data[0])]
    lines.append("-+-".join("-" * width for width in col_widths))
    for row in all_data[1:]:
        lines.append(format_row(row))

    return "\n".join(lines)


def render_table(
    result: AggregationResult,
    sort_by: str = "type",
    max_type_width: Optional[int] = None,
) -> str:
    """Render the per-type table: type, instance count, total byte size.

    Type names longer than ``max_type_width`` are clipped; counters never are.
    """
    rows = [
        [
            clip_cell(name, max_type_width),
            summary.instance_count,
            summary.total_byte_size,
        ]
        for name, summary in result.sorted_types(sort_by)
    ]
    return format_table(TABLE_HEADERS, rows)


def render_exclusions(result: AggregationResult) -> str:
    """Render the excluded-lines listing, or an empty string if there is none."""
    if not result.exclusions:
        return ""
    lines = ["The following lines were excluded because of errors:"]
    lines.extend(
        f"- line {rec.line_number}: {rec.error_description}"
        for rec in result.exclusions
    )
    return "\n".join(lines)


def elapsed_microseconds(start: float, end: Optional[float] = None) -> int:
    """Whole microseconds between two ``time.perf_counter()`` readings.

    Args:
        start: Reading taken by the caller before the work began.
        end: Reading after the work; defaults to now.
    """
    if end is None:
        end = perf_counter()
    return int((end - start) * 1_000_000)


def format_completion(elapsed_us: int) -> str:
    return f"Task successfully completed in {elapsed_us} microseconds"


def render_report(
    result: AggregationResult,
    sort_by: str = "type",
    max_type_width: Optional[int] = None,
) -> str:
    """Table followed by the exclusion listing when it is non-empty."""
    parts = [render_table(result, sort_by=sort_by, max_type_width=max_type_width)]
    exclusions = render_exclusions(result)
    if exclusions:
        parts.append(exclusions)
    return "\n".join(parts)


def to_json(result: AggregationResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def write_json(result: AggregationResult, path: Union[str, Path]) -> Path:
    """Write the JSON form of ``result`` to ``path``, creating parent dirs."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Writing results to: {path}")
    path.write_text(to_json(result), encoding="utf-8")
    return path


def write_csv(
    result: AggregationResult, path: Union[str, Path], sort_by: str = "type"
) -> Path:
    """Write the type table as CSV (columns: type, instances, total_byte_size)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Writing type table CSV to: {path}")
    result.to_dataframe(sort_by=sort_by).to_csv(path, index=False)
    return path
