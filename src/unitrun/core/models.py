"""Core dataclasses shared across unitrun subsystems."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional


Procedure = Callable[[], Any]

PASSED = "passed"
FAILED = "failed"
ERRORED = "errored"
OUTCOMES = (PASSED, FAILED, ERRORED)

# Attribute names used by the ``fixture`` decorator.
SETUP_ATTR = "__unitrun_setup__"
TEARDOWN_ATTR = "__unitrun_teardown__"

DEFAULT_ABSOLUTE = 1.5e-8
DEFAULT_RELATIVE = 1.5e-8


@dataclass(frozen=True)
class Tolerance:
    """Numerical tolerance used by ``equals``."""

    absolute: float = DEFAULT_ABSOLUTE
    relative: float = DEFAULT_RELATIVE

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "Tolerance":
        if not data:
            return cls()
        return cls(
            absolute=float(data.get("abs", data.get("absolute", DEFAULT_ABSOLUTE))),
            relative=float(data.get("rel", data.get("relative", DEFAULT_RELATIVE))),
        )

    @classmethod
    def uniform(cls, epsilon: float) -> "Tolerance":
        return cls(absolute=epsilon, relative=epsilon)


@dataclass
class TestCase:
    """A named, zero-argument unit of verification."""

    __test__ = False  # keep pytest from collecting this class

    name: str
    body: Procedure
    setup: Optional[Procedure] = None
    teardown: Optional[Procedure] = None
    source: Optional[Path] = None
    lineno: int = 0
    group: Optional[str] = None

    def identifier(self) -> str:
        if self.group is None:
            return self.name
        return f"{self.group}::{self.name}"

    def location(self) -> str:
        if self.source is None:
            return "<memory>"
        return f"{self.source}:{self.lineno}"


def fixture(
    setup: Optional[Procedure] = None,
    teardown: Optional[Procedure] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Attach a setup/teardown pair to a single test function.

    The pair overrides any module level ``setup``/``teardown`` for that test.
    """

    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, SETUP_ATTR, setup)
        setattr(func, TEARDOWN_ATTR, teardown)
        return func

    return decorate
