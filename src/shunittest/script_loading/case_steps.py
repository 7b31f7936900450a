"""Splitting function bodies into logical statements."""

from __future__ import annotations

import re
from collections.abc import Collection, Sequence

from .script_models import CaseStep, StepKind

DESCRIBE_DIRECTIVES = ("it", "describe", "this_test")
SKIP_DIRECTIVE = "skip"

_LEADING_WORD = re.compile(r"^\s*(?P<word>[^\s;&|()<>]+)(?=[\s;&|()<>]|$)")


def classify_step(text: str) -> StepKind:
    """Classify a logical statement by the command word it starts with."""
    match = _LEADING_WORD.match(text)
    if match is None:
        return StepKind.COMMAND
    word = match.group("word")
    if word in DESCRIBE_DIRECTIVES:
        return StepKind.DESCRIBE
    if word == SKIP_DIRECTIVE:
        return StepKind.SKIP
    return StepKind.COMMAND


def build_steps(
    lines: Sequence[str],
    code_lines: Collection[int],
    *,
    open_line: int,
    open_column: int,
    close_line: int,
    close_column: int,
) -> tuple[CaseStep, ...]:
    """Split the text between an opening and a closing brace into logical statements.

    A statement spans several physical lines when a line ends with a
    continuation (backslash, pipe, `&&`, `||`) or when the following lines
    start inside a quoted string, a command substitution or a heredoc body.
    """
    steps: list[CaseStep] = []
    segments: list[str] = []
    first_line = last_line = 0

    def flush() -> None:
        if segments:
            text = _join_segments(segments)
            steps.append(
                CaseStep(
                    kind=classify_step(text),
                    first_line=first_line,
                    last_line=last_line,
                    text=text,
                )
            )
            segments.clear()

    for number in range(open_line, close_line + 1):
        segment = _body_segment(
            lines[number - 1],
            number,
            open_line=open_line,
            open_column=open_column,
            close_line=close_line,
            close_column=close_column,
        )
        starts_in_code = number in code_lines or number == open_line
        if segments and (not starts_in_code or _continues(segments[-1])):
            segments.append(segment)
            last_line = number
            continue
        flush()
        stripped = segment.strip()
        if not starts_in_code or not stripped or stripped.startswith("#"):
            continue
        segments.append(segment)
        first_line = last_line = number
    flush()
    return tuple(steps)


def _body_segment(
    text: str,
    number: int,
    *,
    open_line: int,
    open_column: int,
    close_line: int,
    close_column: int,
) -> str:
    end = close_column if number == close_line else len(text)
    start = open_column + 1 if number == open_line else 0
    return text[start:end]


def _continues(segment: str) -> bool:
    stripped = segment.rstrip()
    if stripped.endswith("\\"):
        trailing = len(stripped) - len(stripped.rstrip("\\"))
        return trailing % 2 == 1
    return stripped.endswith(("|", "&&"))


def _join_segments(segments: Sequence[str]) -> str:
    parts: list[str] = []
    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1
        stripped = segment.rstrip()
        if not is_last and stripped.endswith("\\") and _continues(segment):
            parts.append(stripped[:-1])
        else:
            parts.append(segment if is_last else segment + "\n")
    return "".join(parts).strip()
