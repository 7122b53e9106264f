"""Global pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Union

import pytest

SCENARIO_LOG = '{"type":"A"}\n{"type":"B"}\n{"type":"A"}\nnot json\n{"type":"A"}'


@pytest.fixture
def write_log(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes log content to a file under ``tmp_path``."""

    def _write(content: Union[str, bytes], name: str = "input.ndjson") -> Path:
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def scenario_log(write_log) -> Path:
    """Five-line log: three A records, one B, one malformed line at index 3."""
    return write_log(SCENARIO_LOG)
