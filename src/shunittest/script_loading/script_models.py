"""Script loading domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class StepKind(str, Enum):
    """Classification of one logical statement inside a test body."""

    DESCRIBE = "describe"
    SKIP = "skip"
    COMMAND = "command"


@dataclass(frozen=True)
class CaseStep:
    """One logical statement of a function body with its static source span."""

    kind: StepKind
    first_line: int
    last_line: int
    text: str


@dataclass(frozen=True)
class ShellFunction:  # pylint: disable=too-many-instance-attributes
    """A brace-bodied function definition found in a script.

    Line numbers are 1-based, columns are 0-based offsets into the line.
    """

    name: str
    start_line: int
    open_line: int
    open_column: int
    close_line: int
    close_column: int
    code_lines: frozenset[int]
    steps: tuple[CaseStep, ...]


@dataclass(frozen=True)
class ShellScript:
    """A parsed test script."""

    path: Path
    display_path: str
    lines: tuple[str, ...]
    functions: tuple[ShellFunction, ...]

    def line_text(self, number: int) -> str:
        """Return the physical line with the given 1-based number, or an empty string."""
        if 1 <= number <= len(self.lines):
            return self.lines[number - 1]
        return ""


@dataclass(frozen=True)
class ScriptTestCase:
    """A discovered test function."""

    identifier: str
    description: str
    source_path: str
    line: int
    position: int
    definition: ShellFunction

    @property
    def steps(self) -> tuple[CaseStep, ...]:
        return self.definition.steps
