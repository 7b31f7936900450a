"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

from .loader import DEFAULT_CONFIG_FILENAME

_CONFIG_SCAFFOLD_TEMPLATE = """# Runner configuration for shunittest.
# Every key is optional; delete the ones you do not need.
# Place this file next to a test script, or pass it with --config.

runner:
  # Interpreter used to execute each test process.
  shell: bash
  # Kill a test and mark it failed after this many seconds (no limit when null).
  timeout_seconds: null
  # Run the remainder of tests that call skip (same as -f/--force-run).
  force_run: false

discovery:
  # Choose declaration (source order) or alphabetical ordering.
  # Numeric test selections index into this order.
  order: declaration
  # Abort when two testcase_ functions share a name.
  check_duplicates: true

report:
  # Choose auto, always or never.
  color: auto
"""


def build_placeholder_configuration() -> str:
    """Build a YAML runner configuration template with inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str = DEFAULT_CONFIG_FILENAME) -> Path:
    """Write the configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
