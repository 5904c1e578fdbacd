from __future__ import annotations

import time
import warnings

import numpy as np
import pytest

from unitrun.core import assertions
from unitrun.core.assertions import (
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
    record_checks,
    takes_less_than,
    tolerance_scope,
)
from unitrun.core.models import Tolerance


def test_equals_is_tolerant_where_identical_is_strict() -> None:
    equals(0.1 + 0.2, 0.3)
    with pytest.raises(AssertionFailure) as excinfo:
        identical(0.1 + 0.2, 0.3)
    assert excinfo.value.check == "identical"
    assert "0.30000000000000004" in str(excinfo.value)


def test_equals_compares_arrays_with_lists() -> None:
    equals(np.sqrt(np.array([1.0, 4.0])), [1.0, 2.0])
    with pytest.raises(AssertionFailure) as excinfo:
        equals(np.array([1.0, 2.0, 3.0]), [1.0, 2.5, 3.0])
    assert "1/3 element(s) differ, first at index (1,)" in str(excinfo.value)


def test_equals_reports_shape_mismatch() -> None:
    with pytest.raises(AssertionFailure, match="shape mismatch"):
        equals(np.zeros((2, 2)), np.zeros(4))


def test_equals_treats_nan_as_equal() -> None:
    equals(float("nan"), float("nan"))
    equals(np.array([np.nan, 1.0]), np.array([np.nan, 1.0]))


def test_equals_compares_wide_integers_exactly() -> None:
    equals(10**20, 10**20)
    equals(10**20, 10**20 + 10**11)
    with pytest.raises(AssertionFailure) as excinfo:
        equals(10**20, 10**20 + 10**15)
    assert str(excinfo.value).startswith("equals: actual 100000000000000000000, expected 100001000000000000000")
    equals(np.int64(7), 7)


def test_equals_recurses_into_containers() -> None:
    equals({"a": [1.0, 2.0], "b": "x"}, {"b": "x", "a": [1.0, 2.0 + 1e-12]})
    with pytest.raises(AssertionFailure, match=r"at \['a'\]\[1\]"):
        equals({"a": [1.0, 2.0]}, {"a": [1.0, 3.0]})
    with pytest.raises(AssertionFailure, match="keys differ"):
        equals({"a": 1}, {"b": 1})


def test_equals_honours_explicit_and_scoped_tolerance() -> None:
    with pytest.raises(AssertionFailure):
        equals(1.0, 1.01)
    equals(1.0, 1.01, tolerance=Tolerance(absolute=0.1, relative=0.0))
    with tolerance_scope(Tolerance.uniform(0.05)):
        equals(1.0, 1.01)
    assert assertions.current_tolerance() == Tolerance()


def test_identical_checks_type_and_dtype() -> None:
    identical([1, "a", None], [1, "a", None])
    identical(np.array([1, 2]), np.array([1, 2]))
    with pytest.raises(AssertionFailure, match="type mismatch: int vs float"):
        identical(1, 1.0)
    with pytest.raises(AssertionFailure, match="dtype mismatch"):
        identical(np.array([1, 2], dtype=np.int32), np.array([1, 2], dtype=np.int64))
    identical(float("nan"), float("nan"))
    identical(np.float32("nan"), np.float32("nan"))
    identical(np.float16("nan"), np.float16("nan"))
    identical(complex("nan"), complex("nan"))
    with pytest.raises(AssertionFailure, match="type mismatch: float32 vs float64"):
        identical(np.float32("nan"), np.float64("nan"))


def test_identical_names_length_mismatch_of_leaky_filter() -> None:
    alphabet = [chr(code) for code in range(ord("A"), ord("Z") + 1)]
    leaky = [alphabet[alphabet.index(item)] if item in alphabet else None for item in ["A", "B", "Z", "a"]]
    with pytest.raises(AssertionFailure) as excinfo:
        identical(leaky, ["A", "B", "Z"])
    message = str(excinfo.value)
    assert message.startswith("identical: actual ['A', 'B', 'Z', None], expected ['A', 'B', 'Z']")
    assert "length mismatch: actual has 4 element(s), expected 3" in message


def test_is_true_requires_an_exact_boolean() -> None:
    is_true(True)
    is_true(np.bool_(True))
    is_false(False)
    for value in (1, "yes", [True], np.array([True])):
        with pytest.raises(AssertionFailure):
            is_true(value)
    with pytest.raises(AssertionFailure):
        is_false(0)


def test_is_a_uses_value_kinds() -> None:
    is_a(3, "integer")
    is_a(3, "numeric")
    is_a(3.5, "numeric")
    is_a("abc", "character")
    is_a(np.arange(3), "array")
    with pytest.raises(AssertionFailure, match="value is of kind 'numeric'"):
        is_a(3.5, "integer")
    with pytest.raises(ValueError, match="Unknown kind"):
        is_a(3, "float")


def test_matches_searches_text() -> None:
    matches("distance = 5.0", r"\d+\.\d")
    with pytest.raises(AssertionFailure):
        matches("no digits", r"\d")
    with pytest.raises(AssertionFailure, match="value is not a string"):
        matches(42, r"\d")


def test_gives_warning_detects_recoverable_signals() -> None:
    def noisy(value: float) -> float:
        warnings.warn(f"clamping {value}", RuntimeWarning)
        return 0.0

    assert gives_warning(noisy, -1.0) == 0.0
    gives_warning(noisy, -1.0, pattern="clamping")
    with pytest.raises(AssertionFailure):
        gives_warning(noisy, -1.0, pattern="overflow")
    with pytest.raises(AssertionFailure, match="no warning"):
        gives_warning(lambda: None)


def test_gives_warning_lets_errors_propagate() -> None:
    def broken() -> None:
        raise ValueError("math domain error")

    with pytest.raises(ValueError):
        gives_warning(broken)


def test_takes_less_than_measures_wall_clock() -> None:
    elapsed = takes_less_than(sum, 1.0, range(100))
    assert elapsed < 1.0
    with pytest.raises(AssertionFailure) as excinfo:
        takes_less_than(time.sleep, 0.01, 0.05)
    assert excinfo.value.check == "takes_less_than"
    with pytest.raises(ValueError):
        takes_less_than(sum, 0, [])


def test_raises_checks_exception_type_and_message() -> None:
    def broken() -> None:
        raise KeyError("missing column")

    exc = raises(broken, exception=KeyError, pattern="column")
    assert isinstance(exc, KeyError)
    with pytest.raises(AssertionFailure, match="no exception"):
        raises(lambda: None)
    with pytest.raises(KeyError):
        raises(broken, exception=ValueError)


def test_fail_always_raises() -> None:
    with pytest.raises(AssertionFailure) as excinfo:
        fail("not implemented")
    assert str(excinfo.value) == "fail: not implemented"


def test_record_checks_counts_held_checks_only() -> None:
    with record_checks() as log:
        equals(1, 1)
        is_true(True)
        with pytest.raises(AssertionFailure):
            identical(1, 2)
    assert log == ["equals", "is_true"]
