"""Reporter interface definitions."""
from __future__ import annotations

from typing import List, Sequence

from unitrun.core.models import TestCase
from unitrun.core.results import CaseResult, SuiteReport


class Reporter:
    """Receives run lifecycle events in order.

    ``on_start`` once with the discovered cases, ``on_case_result`` once per
    case as soon as it finishes, and ``on_complete`` once with the final
    report. Every hook defaults to doing nothing, so a reporter overrides
    only the events it renders.
    """

    def on_start(self, cases: Sequence[TestCase]) -> None:
        return None

    def on_case_result(self, result: CaseResult, index: int, total: int) -> None:
        return None

    def on_complete(self, report: SuiteReport) -> None:
        return None


class ReportManager:
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)

    def start(self, cases: Sequence[TestCase]) -> None:
        for reporter in self._reporters:
            reporter.on_start(cases)

    def handle_result(self, result: CaseResult, index: int, total: int) -> None:
        for reporter in self._reporters:
            reporter.on_case_result(result, index, total)

    def complete(self, report: SuiteReport) -> None:
        for reporter in self._reporters:
            reporter.on_complete(report)

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)
