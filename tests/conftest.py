from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

EXAMPLES_DIR = Path(__file__).resolve().parents[1] / "examples" / "tutorial"


@pytest.fixture
def write_suite(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a dedented test module under ``tmp_path`` and return its path."""

    def _write(relative: str, source: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def tutorial_dir() -> Path:
    return EXAMPLES_DIR
