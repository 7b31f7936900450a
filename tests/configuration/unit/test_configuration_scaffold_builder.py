"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from shunittest.configuration.config_scaffold_builder import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from shunittest.configuration.loader import load_configuration
from shunittest.configuration.runtime_settings import Configuration


def test_build_placeholder_configuration_contains_all_supported_sections() -> None:
    scaffold = build_placeholder_configuration()

    assert "# Runner configuration for shunittest." in scaffold
    assert "runner:" in scaffold
    assert "discovery:" in scaffold
    assert "report:" in scaffold
    assert "timeout_seconds:" in scaffold
    assert "check_duplicates:" in scaffold


def test_written_scaffold_loads_as_the_default_configuration(tmp_path: Path) -> None:
    output_path = tmp_path / "shunittest.yaml"

    written_path = write_placeholder_configuration(output_path)

    assert written_path == output_path.resolve()
    loaded = load_configuration(written_path)
    defaults = Configuration()
    assert loaded.runner == defaults.runner
    assert loaded.discovery == defaults.discovery
    assert loaded.report == defaults.report


def test_write_placeholder_configuration_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "shunittest.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_configuration(output_path)
