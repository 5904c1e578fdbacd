"""Result data structures produced by the test runner."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .models import ERRORED, FAILED, PASSED, TestCase

PASS = "pass"
FAILURE = "failure"
ERROR = "error"


@dataclass(frozen=True)
class AssertionResult:
    """Outcome of the check or exception that ended a test case."""

    kind: str
    message: str
    check: Optional[str] = None
    location: Optional[str] = None

    def describe(self) -> str:
        if self.location:
            return f"{self.message} [{self.location}]"
        return self.message


@dataclass
class CaseResult:
    """Outcome of executing a single test case."""

    case: TestCase
    status: str
    duration_s: float
    assertion: Optional[AssertionResult] = None
    checks: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == PASSED

    @property
    def message(self) -> Optional[str]:
        return self.assertion.message if self.assertion else None


@dataclass
class SuiteReport:
    """Ordered results of a single run plus aggregate counts."""

    results: List[CaseResult] = field(default_factory=list)
    duration_s: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return self._count(PASSED)

    @property
    def failed(self) -> int:
        return self._count(FAILED)

    @property
    def errored(self) -> int:
        return self._count(ERRORED)

    @property
    def success(self) -> bool:
        return self.passed == self.total

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def outcomes(self) -> List[tuple[str, str]]:
        return [(result.case.identifier(), result.status) for result in self.results]

    def _count(self, status: str) -> int:
        return sum(1 for result in self.results if result.status == status)
