from __future__ import annotations

import json
from pathlib import Path
from unittest import mock

import pytest
from jsonschema import ValidationError, validate

from unitrun.core import TestCase, TestRunner, equals
from unitrun.core.results import CaseResult, SuiteReport
from unitrun.reporting import JsonReporter, ReportManager, Reporter, TerminalReporter
from unitrun.reporting.json_reporter import build_payload
from unitrun.reporting.schema import JSON_SCHEMA_V1


def _run_sample() -> tuple[list[TestCase], SuiteReport]:
    def passes() -> None:
        equals(2, 2)

    def fails() -> None:
        equals(0.5, 0.25)

    def crashes() -> None:
        raise ZeroDivisionError("division by zero")

    cases = [
        TestCase(name="test_passes", body=passes, group="sample"),
        TestCase(name="test_fails", body=fails, group="sample"),
        TestCase(name="test_crashes", body=crashes, group="sample"),
    ]
    return cases, TestRunner().run(cases)


def _replay(reporter, cases, report) -> None:
    manager = ReportManager([reporter])
    manager.start(cases)
    for index, result in enumerate(report.results, start=1):
        manager.handle_result(result, index, report.total)
    manager.complete(report)


def test_terminal_reporter_renders_outcomes_and_summary(capsys) -> None:
    cases, report = _run_sample()
    _replay(TerminalReporter(use_color=False), cases, report)
    output = capsys.readouterr().out
    assert "Starting run: 3 case(s)" in output
    assert "[1/3] sample::test_passes -> PASSED" in output
    assert "[2/3] sample::test_fails -> FAILED" in output
    assert "[3/3] sample::test_crashes -> ERRORED" in output
    assert "failure: equals: actual 0.5, expected 0.25" in output
    assert "error: ZeroDivisionError: division by zero" in output
    assert "Summary: total=3 passed=1 failed=1 errored=1" in output
    assert "Failure details:" in output
    assert output.rstrip().splitlines()[-1].strip().startswith("defined at <memory>")


def test_json_reporter_writes_schema_valid_file(tmp_path: Path, capsys) -> None:
    cases, report = _run_sample()
    output_path = tmp_path / "reports" / "run.json"
    _replay(JsonReporter(path=str(output_path)), cases, report)
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    validate(instance=payload, schema=JSON_SCHEMA_V1)
    assert payload["summary"]["total"] == 3
    assert payload["summary"]["success"] is False
    assert payload["generated_at"].endswith("Z")
    statuses = {case["id"]: case["status"] for case in payload["cases"]}
    assert statuses == {
        "sample::test_passes": "passed",
        "sample::test_fails": "failed",
        "sample::test_crashes": "errored",
    }
    assert payload["cases"][1]["assertion"]["check"] == "equals"
    assert "JSON report written to" in capsys.readouterr().out


def test_json_reporter_does_not_touch_disk_until_complete(tmp_path: Path) -> None:
    cases, report = _run_sample()
    reporter = JsonReporter(path=str(tmp_path / "late.json"))
    reporter.on_start(cases)
    reporter.on_case_result(report.results[0], index=1, total=3)
    with mock.patch("pathlib.Path.write_text") as mock_write:
        reporter.on_complete(report)
        mock_write.assert_called_once()
        written = json.loads(mock_write.call_args.args[0])
        assert len(written["cases"]) == 1


def test_schema_rejects_unknown_status() -> None:
    _, report = _run_sample()
    payload = build_payload(report)
    payload["cases"][0]["status"] = "skipped"
    with pytest.raises(ValidationError):
        validate(instance=payload, schema=JSON_SCHEMA_V1)


def test_suite_report_counts_sum_to_total() -> None:
    case = TestCase(name="x", body=lambda: None)
    report = SuiteReport(
        results=[
            CaseResult(case=case, status="passed", duration_s=0.0),
            CaseResult(case=case, status="errored", duration_s=0.0),
        ]
    )
    assert report.passed + report.failed + report.errored == report.total
    assert report.outcomes() == [("x", "passed"), ("x", "errored")]


def test_reporter_hooks_default_to_no_op() -> None:
    completed = []

    class SummaryOnly(Reporter):
        def on_complete(self, report: SuiteReport) -> None:
            completed.append((report.total, report.failed))

    cases, report = _run_sample()
    _replay(SummaryOnly(), cases, report)
    assert completed == [(3, 1)]
