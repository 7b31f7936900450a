"""Test discovery and selection exports."""

from .selection_resolver import SelectionCriteria, SelectionError, resolve_selection
from .case_registry import (
    TESTCASE_PREFIX,
    DiscoveryError,
    DuplicateDefinition,
    ScriptTestRegistry,
    discover_testcases,
    find_duplicate_definitions,
)

__all__ = [
    "TESTCASE_PREFIX",
    "DiscoveryError",
    "DuplicateDefinition",
    "ScriptTestRegistry",
    "discover_testcases",
    "find_duplicate_definitions",
    "SelectionCriteria",
    "SelectionError",
    "resolve_selection",
]
