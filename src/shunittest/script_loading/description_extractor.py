"""Extraction of human readable test descriptions."""

from __future__ import annotations

import shlex
from collections.abc import Sequence

from .script_models import CaseStep, StepKind

_OPERATOR_CHARS = frozenset(";&|()<>")


def extract_description(identifier: str, steps: Sequence[CaseStep]) -> str:
    """Return the description declared in a test body.

    The last `it`/`describe`/`this_test` statement wins. Its arguments are
    unquoted and joined with single spaces. A directive without arguments,
    or no directive at all, falls back to the identifier; an explicit empty
    string stays empty.
    """
    arguments: list[str] | None = None
    for step in steps:
        if step.kind is StepKind.DESCRIBE:
            arguments = directive_arguments(step.text)
    if not arguments:
        return identifier
    return " ".join(arguments)


def directive_arguments(text: str) -> list[str]:
    """Return the unquoted words passed to the command a statement starts with.

    Words stop at the first control operator, so `it "adds"; false` yields
    `["adds"]`. Unbalanced quoting falls back to plain whitespace splitting.
    """
    lexer = shlex.shlex(text, posix=True, punctuation_chars=True)
    lexer.whitespace_split = True
    try:
        tokens = list(lexer)
    except ValueError:
        tokens = text.split()
    arguments: list[str] = []
    for token in tokens[1:]:
        if token and set(token) <= _OPERATOR_CHARS:
            break
        arguments.append(token)
    return arguments
