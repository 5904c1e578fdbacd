"""Test runner executing discovered cases one at a time."""
from __future__ import annotations

import logging
import time
import traceback
import warnings
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .assertions import AssertionFailure, record_checks, tolerance_scope
from .models import ERRORED, FAILED, PASSED, Procedure, TestCase, Tolerance
from .results import ERROR, FAILURE, AssertionResult, CaseResult, SuiteReport

logger = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).resolve().parents[1]

Verdict = Tuple[str, AssertionResult]


class TestRunner:
    """Executes a collection of test cases sequentially.

    Each case runs setup, body and teardown. Teardown always runs once, even
    when setup or the body raised. A failing or erroring case never stops the
    remaining cases.
    """

    __test__ = False

    def __init__(self, *, tolerance: Optional[Tolerance] = None) -> None:
        self._tolerance = tolerance or Tolerance()

    def run(
        self,
        cases: Sequence[TestCase],
        *,
        on_result: Optional[Callable[[CaseResult, int, int], None]] = None,
    ) -> SuiteReport:
        results: List[CaseResult] = []
        total = len(cases)
        start = time.perf_counter()
        with tolerance_scope(self._tolerance):
            for index, case in enumerate(cases, start=1):
                result = self._execute_case(case)
                results.append(result)
                logger.debug("[%d/%d] %s -> %s", index, total, case.identifier(), result.status)
                if on_result:
                    on_result(result, index, total)
        return SuiteReport(results=results, duration_s=time.perf_counter() - start)

    def _execute_case(self, case: TestCase) -> CaseResult:
        start = time.perf_counter()
        verdict: Optional[Verdict] = None
        checks: List[str] = []
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                if case.setup is not None:
                    verdict = _invoke(case.setup, "setup")
                if verdict is None:
                    with record_checks() as checks:
                        verdict = _invoke(case.body, "body")
            finally:
                if case.teardown is not None:
                    teardown_verdict = _invoke(case.teardown, "teardown")
                    if teardown_verdict is not None:
                        if verdict is None:
                            verdict = teardown_verdict
                        else:
                            logger.warning(
                                "Teardown of %s also failed: %s",
                                case.identifier(),
                                teardown_verdict[1].message,
                            )
        duration = time.perf_counter() - start
        status, assertion = verdict if verdict is not None else (PASSED, None)
        return CaseResult(
            case=case,
            status=status,
            duration_s=duration,
            assertion=assertion,
            checks=len(checks),
            warnings=[str(item.message) for item in caught],
        )


def _invoke(func: Procedure, stage: str) -> Optional[Verdict]:
    """Call one stage of a case and convert what it raised into a verdict."""

    try:
        func()
    except AssertionError as exc:
        if stage != "body":
            return ERRORED, _error_result(exc, stage)
        return FAILED, _failure_result(exc)
    except (Exception, SystemExit) as exc:
        return ERRORED, _error_result(exc, stage)
    return None


def _failure_result(exc: AssertionError) -> AssertionResult:
    if isinstance(exc, AssertionFailure):
        check = exc.check
        message = str(exc)
    else:
        check = "assert"
        message = str(exc) or "assertion failed"
    return AssertionResult(kind=FAILURE, message=message, check=check, location=_location(exc))


def _error_result(exc: BaseException, stage: str) -> AssertionResult:
    message = f"{type(exc).__name__}: {exc}"
    if stage != "body":
        message = f"{stage} raised {message}"
    return AssertionResult(
        kind=ERROR,
        message=message,
        check=type(exc).__name__,
        location=_location(exc),
    )


def _location(exc: BaseException) -> Optional[str]:
    """Innermost traceback frame outside of unitrun itself."""

    frames = traceback.extract_tb(exc.__traceback__)
    for frame in reversed(frames):
        if _PACKAGE_DIR not in Path(frame.filename).resolve().parents:
            return f"{frame.filename}:{frame.lineno}"
    return None
