"""Test script ingestion service."""

from __future__ import annotations

import logging
from pathlib import Path

from .function_scanner import scan_functions
from .script_models import ShellScript

logger = logging.getLogger(__name__)


class ScriptLoadError(Exception):
    """Raised when a test script cannot be read."""


def read_script(script_path: Path | str) -> ShellScript:
    """Read a test script from disk and scan its function definitions."""
    path = Path(script_path)
    if not path.is_file():
        raise ScriptLoadError(f"Test script not found: {path}")
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ScriptLoadError(f"Failed to read test script {path}: {exc}") from exc
    return parse_script(text, path=path.resolve(), display_path=str(script_path))


def parse_script(text: str, *, path: Path, display_path: str | None = None) -> ShellScript:
    """Scan script text that is already in memory."""
    lines = tuple(text.splitlines())
    functions = scan_functions(lines)
    logger.debug("Scanned %s: %d lines, %d functions", path, len(lines), len(functions))
    return ShellScript(
        path=path,
        display_path=display_path if display_path is not None else str(path),
        lines=lines,
        functions=functions,
    )
