"""Closed set of runtime value categories used by ``is_a``."""
from __future__ import annotations

from typing import Any, Mapping

import numpy as np

NULL = "null"
LOGICAL = "logical"
INTEGER = "integer"
NUMERIC = "numeric"
COMPLEX = "complex"
CHARACTER = "character"
ARRAY = "array"
LIST = "list"
MAPPING = "mapping"
FUNCTION = "function"
OTHER = "other"

KINDS = (NULL, LOGICAL, INTEGER, NUMERIC, COMPLEX, CHARACTER, ARRAY, LIST, MAPPING, FUNCTION, OTHER)

# child kind -> parent kind; an integer is also numeric.
_PARENTS: Mapping[str, str] = {
    INTEGER: NUMERIC,
}


def kind_of(value: Any) -> str:
    """Return the category tag of ``value``."""

    if value is None:
        return NULL
    # bool is a subclass of int, so it must be tested first.
    if isinstance(value, (bool, np.bool_)):
        return LOGICAL
    if isinstance(value, (int, np.integer)):
        return INTEGER
    if isinstance(value, (float, np.floating)):
        return NUMERIC
    if isinstance(value, (complex, np.complexfloating)):
        return COMPLEX
    if isinstance(value, str):
        return CHARACTER
    if isinstance(value, np.ndarray):
        return ARRAY
    if isinstance(value, (list, tuple)):
        return LIST
    if isinstance(value, Mapping):
        return MAPPING
    if callable(value):
        return FUNCTION
    return OTHER


def is_kind(value: Any, kind: str) -> bool:
    if kind not in KINDS:
        supported = ", ".join(KINDS)
        raise ValueError(f"Unknown kind '{kind}'. Supported kinds: {supported}")
    current: str | None = kind_of(value)
    while current is not None:
        if current == kind:
            return True
        current = _PARENTS.get(current)
    return False
