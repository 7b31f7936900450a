"""Resolution of command line test specifications."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from fnmatch import fnmatchcase

from shunittest.script_loading import ScriptTestCase

from .case_registry import TESTCASE_PREFIX, ScriptTestRegistry

_INDEX_PATTERN = re.compile(r"^\d+$")

logger = logging.getLogger(__name__)


class SelectionError(Exception):
    """Raised when a test specification matches no discovered test."""


@dataclass(frozen=True)
class SelectionCriteria:
    """Raw test specifications given on the command line."""

    specs: tuple[str, ...] = ()

    @property
    def selects_all(self) -> bool:
        return not self.specs


def resolve_selection(
    registry: ScriptTestRegistry, criteria: SelectionCriteria | Sequence[str] = ()
) -> tuple[ScriptTestCase, ...]:
    """Resolve specifications into the tests to run, in discovery order.

    A purely numeric token is an index into the registry, a token starting
    with `testcase_` is a case-sensitive identifier pattern, anything else
    is a case-insensitive description pattern. Patterns accept shell
    wildcards.
    """
    if not isinstance(criteria, SelectionCriteria):
        criteria = SelectionCriteria(specs=tuple(criteria))
    if criteria.selects_all:
        return registry.testcases

    selected: set[str] = set()
    for spec in criteria.specs:
        matches = _resolve_spec(registry, spec)
        logger.debug("Specification %r selected %s", spec, ", ".join(matches))
        selected.update(matches)
    return tuple(testcase for testcase in registry if testcase.identifier in selected)


def _resolve_spec(registry: ScriptTestRegistry, spec: str) -> tuple[str, ...]:
    if _INDEX_PATTERN.match(spec):
        return (_resolve_index(registry, int(spec)),)
    if spec.startswith(TESTCASE_PREFIX):
        matches = tuple(
            testcase.identifier
            for testcase in registry
            if fnmatchcase(testcase.identifier, spec)
        )
        if not matches:
            raise SelectionError(f"No test function matches '{spec}'.")
        return matches
    pattern = spec.lower()
    matches = tuple(
        testcase.identifier
        for testcase in registry
        if fnmatchcase(testcase.description.lower(), pattern)
    )
    if not matches:
        raise SelectionError(f"No test description matches '{spec}'.")
    return matches


def _resolve_index(registry: ScriptTestRegistry, index: int) -> str:
    if not registry.testcases:
        raise SelectionError(f"Test index {index} is out of range: no tests were discovered.")
    if index >= len(registry):
        raise SelectionError(
            f"Test index {index} is out of range: choose between 0 and {len(registry) - 1}."
        )
    return registry.testcases[index].identifier
