"""Terminal reporter rendering progress and summaries."""
from __future__ import annotations

from typing import Sequence

import click

from unitrun.core.models import FAILED, TestCase
from unitrun.core.results import CaseResult, SuiteReport

from .base import Reporter


STATUS_COLORS = {
    "passed": "green",
    "failed": "red",
    "errored": "yellow",
}


class TerminalReporter(Reporter):
    """Human-readable reporter that streams to stdout."""

    def __init__(self, *, use_color: bool = True, verbose: bool = False) -> None:
        self._use_color = use_color
        self._verbose = verbose
        self._failures: list[tuple[int, CaseResult]] = []

    def on_start(self, cases: Sequence[TestCase]) -> None:
        self._failures.clear()
        click.echo(self._styled(f"Starting run: {len(cases)} case(s)", force_color="cyan"))

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        ms = result.duration_s * 1000
        status_text = self._styled(result.status.upper())
        click.echo(f"[{index}/{total}] {result.case.identifier()} -> {status_text} ({ms:.2f} ms)")
        if self._verbose and result.warnings:
            for message in result.warnings:
                click.echo(f"    warning: {message}")
        if not result.passed:
            self._failures.append((index, result))
            self._print_failure_details(result)

    def on_complete(self, report: SuiteReport) -> None:
        click.echo(
            self._styled(
                f"Summary: total={report.total} passed={report.passed} failed={report.failed} "
                f"errored={report.errored} duration={report.duration_s:.2f}s",
                force_color="cyan" if report.success else "red",
            )
        )
        if self._failures:
            click.echo(self._styled("Failure details:", force_color="red"))
            for index, result in self._failures:
                click.echo(f"  [{index}] {result.case.identifier()} -> {result.status}")
                self._print_failure_details(result, indent="    ")

    def _styled(self, text: str, *, force_color: str | None = None) -> str:
        if not self._use_color:
            return text
        color = force_color or STATUS_COLORS.get(text.lower(), None)
        if color:
            return click.style(text, fg=color)
        return text

    def _print_failure_details(self, result: CaseResult, *, indent: str = "    ") -> None:
        assertion = result.assertion
        if assertion is None:
            click.echo(f"{indent}no details recorded")
            return
        label = "failure" if result.status == FAILED else "error"
        click.echo(f"{indent}{label}: {assertion.message}")
        if assertion.location:
            click.echo(f"{indent}at {assertion.location}")
        click.echo(f"{indent}defined at {result.case.location()} ({result.checks} check(s) held)")
