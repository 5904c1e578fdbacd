"""Check vocabulary available to test bodies.

Every check returns normally when its condition holds and raises
:class:`AssertionFailure` otherwise. The failure carries the check name, the
actual value, the expected value or condition, and a rendered message built
from all three.
"""
from __future__ import annotations

import contextlib
import contextvars
import re
import time
import warnings
from fractions import Fraction
from typing import Any, Callable, Iterator, List, Mapping, Optional

import numpy as np

from . import kinds
from .models import Tolerance

_MAX_REPR = 200
_UNSET: Any = object()

_tolerance: contextvars.ContextVar[Tolerance] = contextvars.ContextVar(
    "unitrun_tolerance", default=Tolerance()
)
_checks: contextvars.ContextVar[Optional[List[str]]] = contextvars.ContextVar(
    "unitrun_checks", default=None
)


class AssertionFailure(AssertionError):
    """A check did not hold."""

    def __init__(self, check: str, actual: Any = _UNSET, expected: Any = _UNSET, detail: str = "") -> None:
        self.check = check
        self._compared = actual is not _UNSET or expected is not _UNSET
        self.actual = None if actual is _UNSET else actual
        self.expected = None if expected is _UNSET else expected
        self.detail = detail
        super().__init__(self.render())

    def render(self) -> str:
        if not self._compared:
            return f"{self.check}: {self.detail}"
        message = f"{self.check}: actual {_render(self.actual)}, expected {_render(self.expected)}"
        if self.detail:
            message += f" ({self.detail})"
        return message


@contextlib.contextmanager
def tolerance_scope(tolerance: Tolerance) -> Iterator[Tolerance]:
    """Use ``tolerance`` as the default for ``equals`` inside the block."""

    token = _tolerance.set(tolerance)
    try:
        yield tolerance
    finally:
        _tolerance.reset(token)


def current_tolerance() -> Tolerance:
    return _tolerance.get()


@contextlib.contextmanager
def record_checks() -> Iterator[List[str]]:
    """Collect the names of checks that held inside the block."""

    log: List[str] = []
    token = _checks.set(log)
    try:
        yield log
    finally:
        _checks.reset(token)


def _held(check: str) -> None:
    log = _checks.get()
    if log is not None:
        log.append(check)


def equals(actual: Any, expected: Any, tolerance: Optional[Tolerance] = None) -> None:
    """Value equality, tolerant of floating point representation."""

    tol = tolerance or current_tolerance()
    mismatch = _compare_equal(actual, expected, tol, "")
    if mismatch:
        raise AssertionFailure("equals", actual, expected, mismatch)
    _held("equals")


def identical(actual: Any, expected: Any) -> None:
    """Strict structural identity with no tolerance."""

    mismatch = _compare_identical(actual, expected, "")
    if mismatch:
        raise AssertionFailure("identical", actual, expected, mismatch)
    _held("identical")


def is_true(value: Any) -> None:
    if not (isinstance(value, (bool, np.bool_)) and bool(value)):
        raise AssertionFailure("is_true", value, True)
    _held("is_true")


def is_false(value: Any) -> None:
    if not (isinstance(value, (bool, np.bool_)) and not bool(value)):
        raise AssertionFailure("is_false", value, False)
    _held("is_false")


def is_a(value: Any, kind: str) -> None:
    """Value belongs to ``kind`` (see :mod:`unitrun.core.kinds`)."""

    if not kinds.is_kind(value, kind):
        raise AssertionFailure("is_a", value, f"kind {kind!r}", f"value is of kind {kinds.kind_of(value)!r}")
    _held("is_a")


def matches(text: Any, pattern: str) -> None:
    if not isinstance(text, str):
        raise AssertionFailure("matches", text, f"text matching {pattern!r}", "value is not a string")
    if re.search(pattern, text) is None:
        raise AssertionFailure("matches", text, f"text matching {pattern!r}")
    _held("matches")


def gives_warning(
    func: Callable[..., Any], *args: Any, pattern: Optional[str] = None, **kwargs: Any
) -> Any:
    """Calling ``func`` emits a warning; errors raised by ``func`` propagate.

    Returns the value produced by ``func``.
    """

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        value = func(*args, **kwargs)
    messages = [str(item.message) for item in caught]
    condition = "a warning" if pattern is None else f"a warning matching {pattern!r}"
    if not messages:
        raise AssertionFailure("gives_warning", "no warning", condition, _callable_name(func))
    if pattern is not None and not any(re.search(pattern, message) for message in messages):
        raise AssertionFailure("gives_warning", messages, condition, _callable_name(func))
    _held("gives_warning")
    return value


def takes_less_than(func: Callable[..., Any], bound: float, *args: Any, **kwargs: Any) -> float:
    """Wall-clock time of ``func(*args, **kwargs)`` is strictly below ``bound`` seconds.

    Returns the measured duration.
    """

    if bound <= 0:
        raise ValueError(f"takes_less_than bound must be positive, got {bound}")
    start = time.perf_counter()
    func(*args, **kwargs)
    elapsed = time.perf_counter() - start
    if not elapsed < bound:
        raise AssertionFailure(
            "takes_less_than",
            f"{elapsed:.6f}s",
            f"less than {bound}s",
            _callable_name(func),
        )
    _held("takes_less_than")
    return elapsed


def raises(
    func: Callable[..., Any],
    *args: Any,
    exception: type[BaseException] = Exception,
    pattern: Optional[str] = None,
    **kwargs: Any,
) -> BaseException:
    """Calling ``func`` raises ``exception``; other exception types propagate."""

    condition = f"{exception.__name__} raised"
    if pattern is not None:
        condition += f" with message matching {pattern!r}"
    try:
        func(*args, **kwargs)
    except exception as exc:
        if pattern is not None and re.search(pattern, str(exc)) is None:
            raise AssertionFailure("raises", f"{type(exc).__name__}: {exc}", condition) from exc
        _held("raises")
        return exc
    raise AssertionFailure("raises", "no exception", condition, _callable_name(func))


def fail(message: str = "explicit failure") -> None:
    raise AssertionFailure("fail", detail=message)


def _compare_equal(actual: Any, expected: Any, tol: Tolerance, path: str) -> str | None:
    if isinstance(actual, np.ndarray) or isinstance(expected, np.ndarray):
        return _compare_arrays(np.asarray(actual), np.asarray(expected), tol, path)
    if _is_number(actual) and _is_number(expected):
        if not _numbers_close(actual, expected, tol):
            return f"{_at(path)}difference {_format_difference(actual, expected)} exceeds tolerance"
        return None
    if _is_sequence(actual) and _is_sequence(expected):
        if len(actual) != len(expected):
            return _length_mismatch(path, len(actual), len(expected))
        for index, (act, exp) in enumerate(zip(actual, expected)):
            mismatch = _compare_equal(act, exp, tol, f"{path}[{index}]")
            if mismatch:
                return mismatch
        return None
    if isinstance(actual, Mapping) and isinstance(expected, Mapping):
        if set(actual) != set(expected):
            return f"{_at(path)}keys differ: {sorted(map(str, actual))} vs {sorted(map(str, expected))}"
        for key in expected:
            mismatch = _compare_equal(actual[key], expected[key], tol, f"{path}[{key!r}]")
            if mismatch:
                return mismatch
        return None
    if not _plain_equal(actual, expected):
        return f"{_at(path)}{_render(actual)} != {_render(expected)}"
    return None


def _compare_arrays(actual: np.ndarray, expected: np.ndarray, tol: Tolerance, path: str) -> str | None:
    if actual.shape != expected.shape:
        return f"{_at(path)}shape mismatch: actual {actual.shape}, expected {expected.shape}"
    if actual.dtype.kind in "iufcb" and expected.dtype.kind in "iufcb":
        close = np.isclose(actual, expected, atol=tol.absolute, rtol=tol.relative, equal_nan=True)
        mismatched = int(close.size - np.count_nonzero(close))
        if mismatched:
            first = tuple(int(i) for i in np.argwhere(~close)[0])
            return f"{_at(path)}{mismatched}/{close.size} element(s) differ, first at index {first}"
        return None
    if not np.array_equal(actual, expected):
        return f"{_at(path)}array contents differ"
    return None


def _compare_identical(actual: Any, expected: Any, path: str) -> str | None:
    if type(actual) is not type(expected):
        return f"{_at(path)}type mismatch: {type(actual).__name__} vs {type(expected).__name__}"
    if isinstance(actual, np.ndarray):
        if actual.dtype != expected.dtype:
            return f"{_at(path)}dtype mismatch: {actual.dtype} vs {expected.dtype}"
        if actual.shape != expected.shape:
            return f"{_at(path)}shape mismatch: actual {actual.shape}, expected {expected.shape}"
        equal_nan = actual.dtype.kind in "fc"
        if not np.array_equal(actual, expected, equal_nan=equal_nan):
            return f"{_at(path)}array contents differ"
        return None
    if kinds.kind_of(actual) in (kinds.NUMERIC, kinds.COMPLEX) and np.isnan(actual) and np.isnan(expected):
        return None
    if isinstance(actual, (list, tuple)):
        if len(actual) != len(expected):
            return _length_mismatch(path, len(actual), len(expected))
        for index, (act, exp) in enumerate(zip(actual, expected)):
            mismatch = _compare_identical(act, exp, f"{path}[{index}]")
            if mismatch:
                return mismatch
        return None
    if isinstance(actual, dict):
        if list(actual) != list(expected):
            return f"{_at(path)}keys differ: {list(actual)} vs {list(expected)}"
        for key in actual:
            mismatch = _compare_identical(actual[key], expected[key], f"{path}[{key!r}]")
            if mismatch:
                return mismatch
        return None
    if not _plain_equal(actual, expected):
        return f"{_at(path)}{_render(actual)} != {_render(expected)}"
    return None


def _numbers_close(actual: Any, expected: Any, tol: Tolerance) -> bool:
    if kinds.kind_of(actual) == kinds.INTEGER and kinds.kind_of(expected) == kinds.INTEGER:
        # same bound as numpy.isclose, exact for ints wider than int64
        difference = abs(int(actual) - int(expected))
        return difference <= Fraction(tol.absolute) + Fraction(tol.relative) * abs(int(expected))
    try:
        return bool(np.isclose(actual, expected, atol=tol.absolute, rtol=tol.relative, equal_nan=True))
    except (TypeError, OverflowError):
        return _plain_equal(actual, expected)


def _format_difference(actual: Any, expected: Any) -> str:
    difference = abs(actual - expected)
    try:
        return f"{difference:.3e}"
    except OverflowError:
        return str(difference)


def _plain_equal(actual: Any, expected: Any) -> bool:
    result = actual == expected
    if isinstance(result, np.ndarray):
        return bool(result.all())
    return bool(result)


def _is_number(value: Any) -> bool:
    return kinds.kind_of(value) in (kinds.INTEGER, kinds.NUMERIC, kinds.COMPLEX)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _length_mismatch(path: str, actual: int, expected: int) -> str:
    return f"{_at(path)}length mismatch: actual has {actual} element(s), expected {expected}"


def _at(path: str) -> str:
    return f"at {path}: " if path else ""


def _render(value: Any) -> str:
    text = repr(value)
    if len(text) > _MAX_REPR:
        text = text[: _MAX_REPR - 3] + "..."
    return text


def _callable_name(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", None) or repr(func)

