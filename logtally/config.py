"""Configuration for the aggregation pass and the report."""

from __future__ import annotations

import codecs
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from logtally.exceptions import ConfigError
from logtally.logging import get_logger

logger = get_logger(__name__)

SORT_KEYS = ("type", "instances", "bytes")

# Room for one character plus the "..." marker
MIN_TYPE_WIDTH = 4


@dataclass(frozen=True)
class AggregatorConfig:
    """Settings for reading, aggregating and reporting a log file."""

    # Number of worker threads; 1 means a plain serial pass
    workers: int = 1

    # Lines per chunk when workers > 1
    chunk_lines: int = 10_000

    # Text encoding of the input file
    encoding: str = "utf-8"

    # Row order of the rendered table
    sort_by: str = "type"

    # Clip type names longer than this in the table; None keeps them whole
    max_type_width: Optional[int] = None

    def __post_init__(self) -> None:
        if (
            isinstance(self.workers, bool)
            or not isinstance(self.workers, int)
            or self.workers < 1
        ):
            raise ValueError(f"workers must be a positive integer, got {self.workers!r}")
        if (
            isinstance(self.chunk_lines, bool)
            or not isinstance(self.chunk_lines, int)
            or self.chunk_lines < 1
        ):
            raise ValueError(
                f"chunk_lines must be a positive integer, got {self.chunk_lines!r}"
            )
        if not isinstance(self.encoding, str) or not self.encoding:
            raise ValueError("encoding must be a non-empty string")
        try:
            codecs.lookup(self.encoding)
            newline = "\n".encode(self.encoding)
        except LookupError as exc:
            raise ValueError(f"unknown encoding {self.encoding!r}") from exc
        # Lines are split on the raw b"\n" byte before decoding
        if newline != b"\n":
            raise ValueError(
                f"encoding {self.encoding!r} is not ASCII-compatible; "
                "use a byte-oriented encoding such as utf-8 or latin-1"
            )
        if self.sort_by not in SORT_KEYS:
            raise ValueError(
                f"sort_by must be one of {', '.join(SORT_KEYS)}, got {self.sort_by!r}"
            )
        if self.max_type_width is not None and (
            isinstance(self.max_type_width, bool)
            or not isinstance(self.max_type_width, int)
            or self.max_type_width < MIN_TYPE_WIDTH
        ):
            raise ValueError(
                f"max_type_width must be an integer >= {MIN_TYPE_WIDTH}, "
                f"got {self.max_type_width!r}"
            )

    def with_overrides(self, **overrides: Any) -> "AggregatorConfig":
        """Return a copy with every non-``None`` override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def config_from_dict(data: Dict[str, Any]) -> AggregatorConfig:
    """Build a config from a plain mapping, rejecting unknown keys.

    Raises:
        ConfigError: On unknown keys or invalid values.
    """
    allowed = {f.name for f in fields(AggregatorConfig)}
    for key in data:
        if str(key) not in allowed:
            raise ConfigError(
                f"Unrecognized config key '{key}'. Allowed: {', '.join(sorted(allowed))}"
            )
    try:
        return AggregatorConfig(**{str(k): v for k, v in data.items()})
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def load_config(
    path: Union[str, Path], base: Optional[AggregatorConfig] = None
) -> AggregatorConfig:
    """Load settings from a YAML file.

    The file must hold a mapping at top level. Keys missing from the file keep
    the values from ``base`` (or the defaults).

    Raises:
        ConfigError: When the file cannot be read, is not valid YAML, or holds
            invalid settings.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("The provided YAML must map to a dictionary at top-level.")

    merged = dict(vars(base or DEFAULT_CONFIG))
    merged.update(data)
    config = config_from_dict(merged)
    logger.debug(f"Loaded config from {path}: {config}")
    return config


# Global default instance
DEFAULT_CONFIG = AggregatorConfig()
