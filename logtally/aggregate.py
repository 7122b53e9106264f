"""Classify log lines by type and aggregate per-type statistics.

A single pass folds each :class:`~logtally.source.RawLine` into either a
per-type :class:`TypeSummary` or an :class:`ExclusionRecord`. Every line ends
up in exactly one of the two. The pass can optionally be split into contiguous
chunks aggregated by a thread pool and merged afterwards; the merged result is
identical to the serial one.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from logtally.config import DEFAULT_CONFIG, AggregatorConfig
from logtally.decode import DecodedRecord, decode_line
from logtally.logging import get_logger
from logtally.source import RawLine, chunk_lines, read_lines

if TYPE_CHECKING:
    import pandas as pd

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TypeSummary:
    """Counters for one type key.

    Args:
        instance_count: Number of lines classified under the type.
        total_byte_size: Sum of the raw byte sizes of those lines.
    """

    instance_count: int
    total_byte_size: int

    def add(self, byte_size: int) -> TypeSummary:
        """Return the summary with one more line of ``byte_size`` bytes."""
        return TypeSummary(self.instance_count + 1, self.total_byte_size + byte_size)

    def merge(self, other: TypeSummary) -> TypeSummary:
        """Return the sum of two summaries for the same type."""
        return TypeSummary(
            self.instance_count + other.instance_count,
            self.total_byte_size + other.total_byte_size,
        )


@dataclass(frozen=True, slots=True)
class ExclusionRecord:
    """A line left out of the summary because it could not be decoded."""

    line_index: int
    error_description: str

    @property
    def line_number(self) -> int:
        """1-based line number for display."""
        return self.line_index + 1


@dataclass(frozen=True)
class AggregationResult:
    """Outcome of one aggregation pass.

    Attributes:
        types: Read-only mapping from type key to its summary.
        exclusions: Excluded lines ordered by ``line_index``.
    """

    types: Mapping[str, TypeSummary] = field(
        default_factory=lambda: MappingProxyType({})
    )
    exclusions: Tuple[ExclusionRecord, ...] = ()

    @property
    def total_instances(self) -> int:
        return sum(s.instance_count for s in self.types.values())

    @property
    def total_byte_size(self) -> int:
        return sum(s.total_byte_size for s in self.types.values())

    @property
    def total_lines(self) -> int:
        """Number of lines that went through the pass."""
        return self.total_instances + len(self.exclusions)

    def sorted_types(self, sort_by: str = "type") -> List[Tuple[str, TypeSummary]]:
        """Return ``(type, summary)`` pairs in a deterministic order.

        Args:
            sort_by: ``"type"`` for ascending type name, ``"instances"`` or
                ``"bytes"`` for descending counters with ties broken by name.
        """
        items = list(self.types.items())
        if sort_by == "type":
            return sorted(items, key=lambda kv: kv[0])
        if sort_by == "instances":
            return sorted(items, key=lambda kv: (-kv[1].instance_count, kv[0]))
        if sort_by == "bytes":
            return sorted(items, key=lambda kv: (-kv[1].total_byte_size, kv[0]))
        raise ValueError(f"Unknown sort key: {sort_by!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-safe dictionary representation.

        Types are emitted sorted by name so repeated runs serialize identically.
        """
        return {
            "types": {
                name: {
                    "instances": summary.instance_count,
                    "total_byte_size": summary.total_byte_size,
                }
                for name, summary in self.sorted_types("type")
            },
            "excluded_lines": [
                {"line": rec.line_number, "error": rec.error_description}
                for rec in self.exclusions
            ],
            "summary": {
                "lines": self.total_lines,
                "classified": self.total_instances,
                "excluded": len(self.exclusions),
                "types": len(self.types),
            },
        }

    def to_dataframe(self, sort_by: str = "type") -> "pd.DataFrame":
        """Return the type table as a pandas DataFrame.

        Columns: ``type``, ``instances``, ``total_byte_size``.
        """
        import pandas as pd

        rows = [
            {
                "type": name,
                "instances": summary.instance_count,
                "total_byte_size": summary.total_byte_size,
            }
            for name, summary in self.sorted_types(sort_by)
        ]
        return pd.DataFrame(rows, columns=["type", "instances", "total_byte_size"])


class TypeTableBuilder:
    """Accumulates lines into a type table and an exclusion list."""

    def __init__(self) -> None:
        self._types: Dict[str, TypeSummary] = {}
        self._exclusions: List[ExclusionRecord] = []
        self._built = False

    def add(self, line: RawLine) -> None:
        """Classify one line and fold it into the running state."""
        if self._built:
            raise RuntimeError("TypeTableBuilder.add() called after build()")

        outcome = decode_line(line.content)
        if isinstance(outcome, DecodedRecord):
            summary = self._types.get(outcome.type)
            if summary is None:
                self._types[outcome.type] = TypeSummary(1, line.byte_size)
            else:
                self._types[outcome.type] = summary.add(line.byte_size)
        else:
            logger.debug(f"Excluding line {line.index + 1}: {outcome.description}")
            self._exclusions.append(ExclusionRecord(line.index, outcome.description))

    def extend(self, lines: Iterable[RawLine]) -> None:
        for line in lines:
            self.add(line)

    def build(self) -> AggregationResult:
        """Freeze the accumulated state into an :class:`AggregationResult`."""
        self._built = True
        return AggregationResult(
            types=MappingProxyType(dict(self._types)),
            exclusions=tuple(self._exclusions),
        )


def aggregate_lines(lines: Iterable[RawLine]) -> AggregationResult:
    """Aggregate ``lines`` in a single serial pass."""
    builder = TypeTableBuilder()
    builder.extend(lines)
    return builder.build()


def merge_results(parts: Iterable[AggregationResult]) -> AggregationResult:
    """Merge partial results of disjoint line ranges.

    Counters are summed per shared type key; exclusions are concatenated and
    re-sorted by line index.
    """
    types: Dict[str, TypeSummary] = {}
    exclusions: List[ExclusionRecord] = []
    for part in parts:
        for name, summary in part.types.items():
            existing = types.get(name)
            types[name] = summary if existing is None else existing.merge(summary)
        exclusions.extend(part.exclusions)
    exclusions.sort(key=lambda rec: rec.line_index)
    return AggregationResult(
        types=MappingProxyType(types), exclusions=tuple(exclusions)
    )


def _aggregate_parallel(
    lines: Iterable[RawLine], workers: int, chunk_size: int
) -> AggregationResult:
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(aggregate_lines, chunk)
            for chunk in chunk_lines(lines, chunk_size)
        ]
        # Submission order is chunk order
        parts = [future.result() for future in futures]
    logger.debug(f"Merging {len(parts)} partial results")
    return merge_results(parts)


def aggregate_file(
    path: Union[str, Path], config: Optional[AggregatorConfig] = None
) -> AggregationResult:
    """Read the file at ``path`` and aggregate its lines.

    Args:
        path: Newline-delimited JSON log file.
        config: Reading and parallelism settings; defaults to ``DEFAULT_CONFIG``.

    Returns:
        The complete aggregation result.

    Raises:
        SourceError: When the file cannot be opened or read to the end.
    """
    config = config or DEFAULT_CONFIG
    lines = read_lines(path, encoding=config.encoding)

    if config.workers > 1:
        logger.info(
            f"Aggregating {path} with {config.workers} workers "
            f"({config.chunk_lines} lines per chunk)"
        )
        result = _aggregate_parallel(lines, config.workers, config.chunk_lines)
    else:
        logger.info(f"Aggregating {path}")
        result = aggregate_lines(lines)

    logger.info(
        f"Processed {result.total_lines} lines: {len(result.types)} types, "
        f"{len(result.exclusions)} excluded"
    )
    return result
