"""Tests for running logtally as a module (`python -m logtally`)."""

from __future__ import annotations

import runpy
from unittest.mock import patch

import pytest


def test_module_help_exits_zero() -> None:
    """Running with --help should exit cleanly with code 0."""
    with patch("sys.argv", ["logtally", "--help"]):
        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("logtally", run_name="__main__")
    assert exc_info.value.code == 0


def test_module_without_arguments_prints_usage(capsys) -> None:
    """No input path: usage message, no exception."""
    with patch("sys.argv", ["logtally"]):
        runpy.run_module("logtally", run_name="__main__")
    assert 'Expected usage is: "logtally [filename]"' in capsys.readouterr().out


def test_module_runs_on_file(scenario_log, capsys) -> None:
    with patch("sys.argv", ["logtally", str(scenario_log)]):
        runpy.run_module("logtally", run_name="__main__")
    out = capsys.readouterr().out
    assert "- line 4:" in out
