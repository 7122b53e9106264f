"""logtally: per-type statistics for newline-delimited JSON logs.

Primary API:
    aggregate_file() - Read a log file and aggregate it by ``type``
    aggregate_lines() - Aggregate an iterable of RawLine values
    AggregationResult, TypeSummary, ExclusionRecord - Result model
    AggregatorConfig - Reading and parallelism settings

Example:
    from logtally import aggregate_file

    result = aggregate_file("events.ndjson")
    for name, summary in result.sorted_types():
        print(name, summary.instance_count, summary.total_byte_size)
"""

from __future__ import annotations

from logtally import cli, logging
from logtally.aggregate import (
    AggregationResult,
    ExclusionRecord,
    TypeSummary,
    TypeTableBuilder,
    aggregate_file,
    aggregate_lines,
    merge_results,
)
from logtally.config import DEFAULT_CONFIG, AggregatorConfig, load_config
from logtally.decode import DecodedRecord, DecodeFailure, decode_line
from logtally.exceptions import ConfigError, LogTallyError, SourceError
from logtally.source import RawLine, read_lines

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Aggregation (primary API)
    "aggregate_file",
    "aggregate_lines",
    "merge_results",
    "TypeTableBuilder",
    # Results
    "AggregationResult",
    "TypeSummary",
    "ExclusionRecord",
    # Input
    "RawLine",
    "read_lines",
    "decode_line",
    "DecodedRecord",
    "DecodeFailure",
    # Configuration
    "AggregatorConfig",
    "DEFAULT_CONFIG",
    "load_config",
    # Errors
    "LogTallyError",
    "SourceError",
    "ConfigError",
    # Utilities
    "cli",
    "logging",
]
