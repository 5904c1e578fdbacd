"""Discovery of test cases from files, directories and namespaces."""
from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, List, Mapping, Optional, Sequence

from unitrun.errors import DiscoveryError, NotFoundError

from .models import SETUP_ATTR, TEARDOWN_ATTR, Procedure, TestCase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryOptions:
    """Naming conventions recognised during discovery."""

    file_pattern: str = "test_*.py"
    test_prefix: str = "test_"
    setup_name: str = "setup"
    teardown_name: str = "teardown"


def discover(path: str | Path, options: Optional[DiscoveryOptions] = None) -> List[TestCase]:
    """Return the test cases found at ``path`` (a directory or a single file).

    Files are visited in lexical order of their path relative to ``path`` and
    cases within a file in declaration order. Nothing but module top level
    code is executed.
    """

    options = options or DiscoveryOptions()
    root = Path(path).expanduser()
    if not root.exists():
        raise NotFoundError(str(path))
    root = root.resolve()
    files = _candidate_files(root, options.file_pattern)
    cases: List[TestCase] = []
    for file_path in files:
        found = discover_file(file_path, options, group=_group_name(root, file_path))
        logger.debug("Discovered %d case(s) in %s", len(found), file_path)
        cases.extend(found)
    if not cases:
        raise DiscoveryError(
            f"No test cases found in {root} "
            f"(files matching '{options.file_pattern}', functions prefixed '{options.test_prefix}')"
        )
    _ensure_unique(cases)
    logger.info("Discovered %d case(s) in %d file(s)", len(cases), len(files))
    return cases


def discover_file(
    path: Path,
    options: Optional[DiscoveryOptions] = None,
    *,
    group: Optional[str] = None,
) -> List[TestCase]:
    options = options or DiscoveryOptions()
    module = _load_module(path)
    namespace = vars(module)
    cases = collect(
        {name: value for name, value in namespace.items() if _defined_in(value, module)},
        prefix=options.test_prefix,
        source=path,
        group=group or path.stem,
        setup=_module_hook(namespace, options.setup_name),
        teardown=_module_hook(namespace, options.teardown_name),
    )
    return sorted(cases, key=lambda case: case.lineno)


def collect(
    namespace: Mapping[str, Any],
    *,
    prefix: str = "test_",
    source: Optional[Path] = None,
    group: Optional[str] = None,
    setup: Optional[Procedure] = None,
    teardown: Optional[Procedure] = None,
) -> List[TestCase]:
    """Scan ``namespace`` and keep the zero-argument callables named ``prefix*``.

    Entries are returned in the mapping's order. ``setup``/``teardown`` apply
    to every case unless the function carries its own ``fixture``.
    """

    cases: List[TestCase] = []
    for name, value in namespace.items():
        if not name.startswith(prefix) or not callable(value) or inspect.isclass(value):
            continue
        if not _takes_no_arguments(value):
            logger.debug("Ignoring %s: requires arguments", name)
            continue
        cases.append(
            TestCase(
                name=name,
                body=value,
                setup=getattr(value, SETUP_ATTR, setup),
                teardown=getattr(value, TEARDOWN_ATTR, teardown),
                source=source,
                lineno=_line_of(value),
                group=group,
            )
        )
    return cases


def _candidate_files(root: Path, pattern: str) -> Sequence[Path]:
    if root.is_file():
        return [root]
    files = [
        path
        for path in root.rglob(pattern)
        if path.is_file() and not _is_hidden(path.relative_to(root))
    ]
    return sorted(files, key=lambda p: p.relative_to(root).as_posix())


def _group_name(root: Path, file_path: Path) -> str:
    if root.is_file():
        return file_path.stem
    return file_path.relative_to(root).with_suffix("").as_posix()


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") or part == "__pycache__" for part in relative.parts)


def _load_module(path: Path) -> ModuleType:
    module_name = f"unitrun_suite_{path.stem}_{hash(str(path)) & 0xFFFF:x}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise DiscoveryError(f"Unable to load module from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise DiscoveryError(f"Failed to import {path}: {type(exc).__name__}: {exc}") from exc
    return module


def _defined_in(value: Any, module: ModuleType) -> bool:
    return getattr(value, "__module__", None) == module.__name__


def _module_hook(namespace: Mapping[str, Any], name: str) -> Optional[Procedure]:
    hook = namespace.get(name)
    if hook is None:
        return None
    if not callable(hook):
        raise DiscoveryError(f"'{name}' must be callable, got {type(hook).__name__}")
    return hook


def _takes_no_arguments(func: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue
        if parameter.default is parameter.empty:
            return False
    return True


def _line_of(func: Callable[..., Any]) -> int:
    code = getattr(inspect.unwrap(func), "__code__", None)
    return code.co_firstlineno if code is not None else 0


def _ensure_unique(cases: Sequence[TestCase]) -> None:
    seen: dict[str, Path | None] = {}
    for case in cases:
        identifier = case.identifier()
        if identifier in seen:
            raise DiscoveryError(
                f"Duplicate test case '{identifier}' in {case.source} and {seen[identifier]}"
            )
        seen[identifier] = case.source
