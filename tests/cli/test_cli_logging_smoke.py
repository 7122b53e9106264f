from __future__ import annotations

import logging

from logtally import cli


def test_cli_verbose_and_quiet_switch_levels(caplog, scenario_log) -> None:
    # verbose enables debug, including per-line exclusions
    with caplog.at_level(logging.DEBUG, logger="logtally"):
        cli.main(["--verbose", str(scenario_log)])
    assert any("Debug logging enabled" in r.message for r in caplog.records)
    assert any("Excluding line 4" in r.message for r in caplog.records)

    # quiet suppresses info
    caplog.clear()
    with caplog.at_level(logging.INFO, logger="logtally"):
        cli.main(["--quiet", str(scenario_log)])
    assert not any(r.levelno == logging.INFO for r in caplog.records)


def test_cli_logs_summary_at_info(caplog, scenario_log) -> None:
    with caplog.at_level(logging.INFO, logger="logtally"):
        cli.main([str(scenario_log)])
    assert any(
        "Processed 5 lines: 2 types, 1 excluded" in r.message for r in caplog.records
    )


def test_cli_logs_read_failure(caplog, tmp_path) -> None:
    missing = tmp_path / "gone.ndjson"
    with caplog.at_level(logging.INFO, logger="logtally"):
        try:
            cli.main([str(missing)])
        except SystemExit:
            pass
    assert any(
        r.levelno == logging.ERROR and str(missing) in r.message
        for r in caplog.records
    )
