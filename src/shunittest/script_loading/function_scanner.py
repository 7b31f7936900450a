"""Lexical scanning of shell sources for function definitions."""

from __future__ import annotations

import bisect
import re
from collections.abc import Sequence
from dataclasses import dataclass

from .case_steps import build_steps
from .script_models import ShellFunction

_FUNCTION_HEADER = re.compile(
    r"^\s*(?:function\s+(?P<keyword_name>[^\s(){}<>;&|]+)(?:\s*\(\s*\))?"
    r"|(?P<name>[A-Za-z_][A-Za-z0-9_:.-]*)\s*\(\s*\))\s*"
)
_HEREDOC = re.compile(r"<<(-?)[ \t]*(?:'([^'\n]*)'|\"([^\"\n]*)\"|\\?([^\s;&|<>()]+))")
_WORD_BREAKS = " \t;&|()"
_OPEN_BRACE_FOLLOWERS = " \t"
_CLOSE_BRACE_FOLLOWERS = " \t;)&|<>#"


@dataclass(frozen=True)
class BraceToken:
    """A reserved-word brace outside quotes, substitutions and comments."""

    line: int
    column: int
    char: str


@dataclass(frozen=True)
class CodeLayout:
    """Lexical facts about a script needed to locate function bodies."""

    code_lines: frozenset[int]
    braces: tuple[BraceToken, ...]


def scan_layout(lines: Sequence[str]) -> CodeLayout:
    """Return which lines start in plain code and where the reserved braces are."""
    return _LayoutScanner(lines).scan()


def scan_functions(lines: Sequence[str]) -> tuple[ShellFunction, ...]:
    """Find every `name() { ... }` and `function name { ... }` definition, in source order."""
    layout = scan_layout(lines)
    positions = [(token.line, token.column) for token in layout.braces]
    functions: list[ShellFunction] = []
    for number in sorted(layout.code_lines):
        match = _FUNCTION_HEADER.match(lines[number - 1])
        if match is None:
            continue
        opening_index = _find_opening_brace(layout, positions, lines, number, match.end())
        if opening_index is None:
            continue
        closing = _find_closing_brace(layout.braces, opening_index)
        if closing is None:
            continue
        opening = layout.braces[opening_index]
        functions.append(
            ShellFunction(
                name=match.group("keyword_name") or match.group("name"),
                start_line=number,
                open_line=opening.line,
                open_column=opening.column,
                close_line=closing.line,
                close_column=closing.column,
                code_lines=frozenset(
                    line for line in layout.code_lines if opening.line <= line <= closing.line
                ),
                steps=build_steps(
                    lines,
                    layout.code_lines,
                    open_line=opening.line,
                    open_column=opening.column,
                    close_line=closing.line,
                    close_column=closing.column,
                ),
            )
        )
    return tuple(functions)


def _find_opening_brace(
    layout: CodeLayout,
    positions: list[tuple[int, int]],
    lines: Sequence[str],
    header_line: int,
    header_end: int,
) -> int | None:
    index = bisect.bisect_left(positions, (header_line, header_end))
    if index >= len(layout.braces):
        return None
    token = layout.braces[index]
    if token.char != "{":
        return None
    header_text = lines[header_line - 1]
    if token.line == header_line:
        return index if not header_text[header_end : token.column].strip() else None
    if header_text[header_end:].strip():
        return None
    if any(lines[number - 1].strip() for number in range(header_line + 1, token.line)):
        return None
    if lines[token.line - 1][: token.column].strip():
        return None
    return index


def _find_closing_brace(braces: Sequence[BraceToken], opening_index: int) -> BraceToken | None:
    depth = 0
    for token in braces[opening_index:]:
        depth += 1 if token.char == "{" else -1
        if depth == 0:
            return token
    return None


class _LayoutScanner:
    """Single pass over the script tracking quoting and substitution contexts.

    The context stack holds `[kind, depth]` pairs; an empty stack means
    plain code at the top level of the script.
    """

    def __init__(self, lines: Sequence[str]) -> None:
        self._lines = lines
        self._stack: list[list] = []
        self._code_lines: set[int] = set()
        self._braces: list[BraceToken] = []
        self._pending_heredocs: list[tuple[str, bool]] = []

    def scan(self) -> CodeLayout:
        index = 0
        while index < len(self._lines):
            number = index + 1
            if not self._stack:
                self._code_lines.add(number)
            self._scan_line(number, self._lines[index])
            index += 1
            if self._pending_heredocs:
                index = self._skip_heredoc_bodies(index)
        return CodeLayout(code_lines=frozenset(self._code_lines), braces=tuple(self._braces))

    def _skip_heredoc_bodies(self, index: int) -> int:
        for delimiter, strip_tabs in self._pending_heredocs:
            while index < len(self._lines):
                candidate = self._lines[index]
                index += 1
                if (candidate.lstrip("\t") if strip_tabs else candidate) == delimiter:
                    break
        self._pending_heredocs.clear()
        return index

    def _kind(self) -> str:
        return self._stack[-1][0] if self._stack else "code"

    def _scan_line(self, number: int, text: str) -> None:  # noqa: C901
        column = 0
        length = len(text)
        while column < length:
            char = text[column]
            kind = self._kind()
            if kind in ("sq", "ansi", "backtick"):
                column = self._scan_opaque(kind, text, column)
                continue
            if kind == "dq":
                column = self._scan_double_quoted(text, column)
                continue
            if char == "\\":
                column += 2
                continue
            if text.startswith("$'", column):
                self._stack.append(["ansi", 0])
                column += 2
                continue
            if text.startswith("$((", column):
                self._stack.append(["arith", 1])
                column += 3
                continue
            if text.startswith("$(", column):
                self._stack.append(["subst", 0])
                column += 2
                continue
            if text.startswith("${", column):
                self._stack.append(["param", 0])
                column += 2
                continue
            if char == "'":
                self._stack.append(["sq", 0])
            elif char == '"':
                self._stack.append(["dq", 0])
            elif char == "`":
                self._stack.append(["backtick", 0])
            elif kind in ("code", "subst") and char == "#" and _at_word_start(text, column):
                return
            elif kind in ("code", "subst") and text.startswith("<<", column):
                column = self._register_heredoc(text, column)
                continue
            elif kind == "code" and text.startswith("((", column) and _at_word_start(text, column):
                self._stack.append(["arith", 1])
                column += 2
                continue
            elif kind in ("subst", "arith"):
                self._track_parentheses(char)
            elif kind == "param":
                self._track_parameter_braces(char)
            elif kind == "code" and char in "{}" and _is_reserved_brace(text, column):
                self._braces.append(BraceToken(line=number, column=column, char=char))
            column += 1

    def _scan_opaque(self, kind: str, text: str, column: int) -> int:
        char = text[column]
        if char == "\\" and kind != "sq":
            return column + 2
        closer = "`" if kind == "backtick" else "'"
        if char == closer:
            self._stack.pop()
        return column + 1

    def _scan_double_quoted(self, text: str, column: int) -> int:
        char = text[column]
        if char == "\\":
            return column + 2
        if char == '"':
            self._stack.pop()
        elif char == "`":
            self._stack.append(["backtick", 0])
        elif text.startswith("$((", column):
            self._stack.append(["arith", 1])
            return column + 3
        elif text.startswith("$(", column):
            self._stack.append(["subst", 0])
            return column + 2
        elif text.startswith("${", column):
            self._stack.append(["param", 0])
            return column + 2
        return column + 1

    def _register_heredoc(self, text: str, column: int) -> int:
        if text.startswith("<<<", column):
            return column + 3
        match = _HEREDOC.match(text, column)
        if match is None:
            return column + 2
        delimiter = match.group(2) or match.group(3) or match.group(4) or ""
        self._pending_heredocs.append((delimiter, match.group(1) == "-"))
        return match.end()

    def _track_parentheses(self, char: str) -> None:
        frame = self._stack[-1]
        if char == "(":
            frame[1] += 1
        elif char == ")":
            if frame[1] == 0:
                self._stack.pop()
            else:
                frame[1] -= 1

    def _track_parameter_braces(self, char: str) -> None:
        frame = self._stack[-1]
        if char == "{":
            frame[1] += 1
        elif char == "}":
            if frame[1] == 0:
                self._stack.pop()
            else:
                frame[1] -= 1


def _at_word_start(text: str, column: int) -> bool:
    return column == 0 or text[column - 1] in _WORD_BREAKS


def _is_reserved_brace(text: str, column: int) -> bool:
    following = text[column + 1] if column + 1 < len(text) else " "
    if text[column] == "{":
        return _at_word_start(text, column) and following in _OPEN_BRACE_FOLLOWERS
    preceding = text[column - 1] if column > 0 else " "
    return preceding in " \t;&" and following in _CLOSE_BRACE_FOLLOWERS
