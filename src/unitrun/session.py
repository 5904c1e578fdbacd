"""Discovery, execution and reporting wired together for one run."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from unitrun.config import RunConfig
from unitrun.core.discovery import discover
from unitrun.core.results import SuiteReport
from unitrun.core.runner import TestRunner
from unitrun.reporting import JsonReporter, ReportManager, Reporter, TerminalReporter

logger = logging.getLogger(__name__)


def run(
    path: str | Path,
    config: Optional[RunConfig] = None,
    *,
    reporters: Optional[Sequence[Reporter]] = None,
) -> SuiteReport:
    """Discover the cases under ``path``, run them and report.

    Discovery errors propagate before any case executes. When ``reporters`` is
    omitted they are built from ``config``.
    """

    config = config or RunConfig()
    cases = discover(path, config.discovery)
    manager = ReportManager(reporters if reporters is not None else build_reporters(config))
    manager.start(cases)
    runner = TestRunner(tolerance=config.tolerance)
    report = runner.run(cases, on_result=manager.handle_result)
    manager.complete(report)
    logger.info(
        "Run finished: %d passed, %d failed, %d errored",
        report.passed,
        report.failed,
        report.errored,
    )
    return report


def build_reporters(config: RunConfig, *, verbose: bool = False) -> List[Reporter]:
    reporters: List[Reporter] = [TerminalReporter(use_color=config.color, verbose=verbose)]
    if config.report_format == "json":
        reporters.append(JsonReporter(path=config.report_path or "unitrun-report.json"))
    return reporters


def list_cases(path: str | Path, config: Optional[RunConfig] = None) -> List[str]:
    config = config or RunConfig()
    return [case.identifier() for case in discover(path, config.discovery)]
