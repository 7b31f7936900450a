"""Test discovery service."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from shunittest.configuration.runtime_settings import DiscoveryOrder, DiscoverySettings
from shunittest.script_loading import ScriptTestCase, ShellFunction, ShellScript, extract_description

TESTCASE_PREFIX = "testcase_"

logger = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """Raised when the test functions of a script cannot be registered."""


@dataclass(frozen=True)
class DuplicateDefinition:
    """A test identifier defined more than once."""

    identifier: str
    locations: tuple[str, ...]


@dataclass(frozen=True)
class ScriptTestRegistry:
    """Discovered tests of one script in their execution order."""

    script: ShellScript
    testcases: tuple[ScriptTestCase, ...]

    def __len__(self) -> int:
        return len(self.testcases)

    def __iter__(self) -> Iterator[ScriptTestCase]:
        return iter(self.testcases)

    @property
    def identifiers(self) -> tuple[str, ...]:
        return tuple(testcase.identifier for testcase in self.testcases)


def discover_testcases(
    script: ShellScript, settings: DiscoverySettings | None = None
) -> ScriptTestRegistry:
    """Collect `testcase_` functions with their descriptions."""
    resolved_settings = settings or DiscoverySettings()
    if resolved_settings.check_duplicates:
        duplicates = find_duplicate_definitions(script)
        if duplicates:
            raise DiscoveryError(_format_duplicates(duplicates))

    # bash keeps the last definition of a name, the first one fixes its position
    definitions: dict[str, ShellFunction] = {}
    for function in script.functions:
        if function.name.startswith(TESTCASE_PREFIX):
            definitions[function.name] = function
    identifiers = list(definitions)
    if resolved_settings.order is DiscoveryOrder.ALPHABETICAL:
        identifiers.sort()

    testcases = tuple(
        ScriptTestCase(
            identifier=identifier,
            description=extract_description(identifier, definitions[identifier].steps),
            source_path=script.display_path,
            line=definitions[identifier].start_line,
            position=position,
            definition=definitions[identifier],
        )
        for position, identifier in enumerate(identifiers)
    )
    logger.debug(
        "Discovered %d tests in %s (%s order)",
        len(testcases),
        script.display_path,
        resolved_settings.order.value,
    )
    return ScriptTestRegistry(script=script, testcases=testcases)


def find_duplicate_definitions(script: ShellScript) -> tuple[DuplicateDefinition, ...]:
    """Return every test identifier that is defined more than once, with its locations."""
    locations: dict[str, list[str]] = {}
    for function in script.functions:
        if function.name.startswith(TESTCASE_PREFIX):
            locations.setdefault(function.name, []).append(
                f"{script.display_path}:{function.start_line}"
            )
    return tuple(
        DuplicateDefinition(identifier=identifier, locations=tuple(found))
        for identifier, found in locations.items()
        if len(found) > 1
    )


def _format_duplicates(duplicates: tuple[DuplicateDefinition, ...]) -> str:
    lines = ["Duplicate test functions found:"]
    lines.extend(
        f"  {duplicate.identifier}: {', '.join(duplicate.locations)}" for duplicate in duplicates
    )
    return "\n".join(lines)
