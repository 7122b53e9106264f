"""Line source: enumerate the raw lines of a newline-delimited log file."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Union

from logtally.exceptions import SourceError
from logtally.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RawLine:
    """One line of the input, terminator removed.

    Args:
        index: 0-based position in the source.
        content: Decoded text of the line.
        byte_size: Length of the line in the file's bytes, terminator excluded.
    """

    index: int
    content: str
    byte_size: int

    @classmethod
    def from_text(
        cls, index: int, content: str, encoding: str = "utf-8"
    ) -> "RawLine":
        """Build a line from text, measuring its size in ``encoding``."""
        return cls(
            index=index, content=content, byte_size=len(content.encode(encoding))
        )


def _strip_terminator(raw: bytes) -> bytes:
    # Accept both "\n" and "\r\n" endings
    if raw.endswith(b"\n"):
        raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
    return raw


def iter_raw_lines(stream: BinaryIO, encoding: str = "utf-8") -> Iterator[RawLine]:
    """Yield lines of a binary stream as :class:`RawLine` values.

    A final line without a terminator is still yielded; a trailing terminator
    does not produce an extra empty line.

    Raises:
        UnicodeDecodeError: When a line is not valid text in ``encoding``.
    """
    for index, raw in enumerate(stream):
        data = _strip_terminator(raw)
        yield RawLine(index=index, content=data.decode(encoding), byte_size=len(data))


def read_lines(path: Union[str, Path], encoding: str = "utf-8") -> Iterator[RawLine]:
    """Yield the lines of the file at ``path``.

    The file is opened lazily on first iteration and closed when the iterator
    is exhausted or discarded.

    Raises:
        SourceError: When the file cannot be opened, a read fails mid-stream,
            or a line is not valid text in ``encoding``.
    """
    logger.debug(f"Opening line source: {path}")
    try:
        with open(path, "rb") as stream:
            yield from iter_raw_lines(stream, encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceError(path, exc) from exc


def chunk_lines(lines: Iterable[RawLine], size: int) -> Iterator[List[RawLine]]:
    """Split ``lines`` into contiguous chunks of at most ``size`` lines."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    iterator = iter(lines)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk
