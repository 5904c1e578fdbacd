"""JSON reporter emitting structured execution results."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
from typing import Any, Dict, Sequence

import click
from jsonschema import validate

from unitrun.core.models import TestCase
from unitrun.core.results import CaseResult, SuiteReport

from .base import Reporter
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION


class JsonReporter(Reporter):
    """Writes results to a JSON file validated against the schema."""

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)
        self._records: list[Dict[str, Any]] = []

    def on_start(self, cases: Sequence[TestCase]) -> None:
        self._records.clear()

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        self._records.append(_case_to_dict(result))

    def on_complete(self, report: SuiteReport) -> None:
        payload = build_payload(report, self._records)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem protection
            raise RuntimeError(f"Failed to write JSON report to {self._path}: {exc}") from exc
        click.echo(f"JSON report written to {self._path}")


def build_payload(report: SuiteReport, records: Sequence[Dict[str, Any]] | None = None) -> Dict[str, Any]:
    """Return the schema-validated JSON document for ``report``."""

    if records is None:
        records = [_case_to_dict(result) for result in report.results]
    payload = {
        "schema_version": SCHEMA_VERSION,
        "generated_at": dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "summary": _build_summary(report),
        "cases": list(records),
    }
    validate(instance=payload, schema=JSON_SCHEMA_V1)
    return payload


def _build_summary(report: SuiteReport) -> Dict[str, Any]:
    return {
        "total": report.total,
        "passed": report.passed,
        "failed": report.failed,
        "errored": report.errored,
        "success": report.success,
        "duration_s": report.duration_s,
    }


def _case_to_dict(result: CaseResult) -> Dict[str, Any]:
    case = result.case
    record: Dict[str, Any] = {
        "id": case.identifier(),
        "name": case.name,
        "source": str(case.source) if case.source else None,
        "line": case.lineno,
        "status": result.status,
        "duration_ms": result.duration_s * 1000,
        "checks": result.checks,
        "warnings": list(result.warnings),
    }
    if result.assertion:
        record["assertion"] = {
            "kind": result.assertion.kind,
            "message": result.assertion.message,
            "check": result.assertion.check,
            "location": result.assertion.location,
        }
    return record
