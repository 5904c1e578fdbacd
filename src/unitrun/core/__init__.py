"""Core models and helpers exposed at the package level."""
from .assertions import (
    AssertionFailure,
    equals,
    fail,
    gives_warning,
    identical,
    is_a,
    is_false,
    is_true,
    matches,
    raises,
    takes_less_than,
)
from .discovery import DiscoveryOptions, collect, discover
from .models import ERRORED, FAILED, PASSED, TestCase, Tolerance, fixture
from .results import AssertionResult, CaseResult, SuiteReport
from .runner import TestRunner

__all__ = [
    "AssertionFailure",
    "AssertionResult",
    "CaseResult",
    "DiscoveryOptions",
    "ERRORED",
    "FAILED",
    "PASSED",
    "SuiteReport",
    "TestCase",
    "TestRunner",
    "Tolerance",
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
    "takes_less_than",
]
