"""unitrun package initialization."""
from __future__ import annotations

from .core import (
    AssertionFailure,
    SuiteReport,
    TestCase,
    TestRunner,
    Tolerance,
    collect,
    discover,
    equals,
    fail,
    fixture,
    gives_warning,
    identical,
    is_a,
    is_false,
    is_true,
    matches,
    raises,
    takes_less_than,
)
from .errors import ConfigError, DiscoveryError, NotFoundError, UnitrunError
from .session import run
from .version import __version__

__all__ = [
    "__version__",
    "AssertionFailure",
    "ConfigError",
    "DiscoveryError",
    "NotFoundError",
    "SuiteReport",
    "TestCase",
    "TestRunner",
    "Tolerance",
    "UnitrunError",
    "collect",
    "discover",
    "equals",
    "fail",
    "fixture",
    "gives_warning",
    "identical",
    "is_a",
    "is_false",
    "is_true",
    "matches",
    "raises",
    "run",
    "takes_less_than",
]
