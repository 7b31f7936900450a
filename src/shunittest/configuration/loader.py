"""Configuration loader service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    ColorMode,
    Configuration,
    DiscoveryOrder,
    DiscoverySettings,
    ReportSettings,
    RunnerSettings,
)

DEFAULT_CONFIG_FILENAME = "shunittest.yaml"

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def resolve_configuration(
    config_path: Path | str | None, script_path: Path | str
) -> Configuration:
    """Load an explicit configuration file, or the default one next to the script.

    Defaults apply when no explicit path is given and the script directory
    has no `shunittest.yaml`.
    """
    if config_path is not None:
        return load_configuration(config_path)
    candidate = Path(script_path).resolve().parent / DEFAULT_CONFIG_FILENAME
    if candidate.is_file():
        return load_configuration(candidate)
    logger.debug("No configuration file found next to %s, using defaults", script_path)
    return Configuration()


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Failed to read configuration file {path}: {exc}") from exc
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    unknown_sections = sorted(set(parsed) - {"runner", "discovery", "report"})
    if unknown_sections:
        raise ConfigurationError(f"Unknown configuration sections: {', '.join(unknown_sections)}")

    configuration = Configuration(
        path=path.resolve(),
        runner=_parse_runner_section(parsed.get("runner")),
        discovery=_parse_discovery_section(parsed.get("discovery")),
        report=_parse_report_section(parsed.get("report")),
    )
    logger.debug("Loaded configuration from %s: %s", path, configuration)
    return configuration


def _parse_runner_section(value: Any) -> RunnerSettings:
    section = _optional_mapping(value, "runner")
    shell = _require_non_empty_string(section.get("shell", "bash"), "runner.shell")
    timeout_seconds = _optional_positive_number(
        section.get("timeout_seconds"), "runner.timeout_seconds"
    )
    force_run = _require_bool(section.get("force_run", False), "runner.force_run")
    return RunnerSettings(shell=shell, timeout_seconds=timeout_seconds, force_run=force_run)


def _parse_discovery_section(value: Any) -> DiscoverySettings:
    section = _optional_mapping(value, "discovery")
    order_raw = _require_non_empty_string(section.get("order", "declaration"), "discovery.order")
    try:
        order = DiscoveryOrder(order_raw.lower())
    except ValueError as exc:
        allowed = ", ".join(item.value for item in DiscoveryOrder)
        raise ConfigurationError(f"discovery.order must be one of: {allowed}.") from exc
    check_duplicates = _require_bool(
        section.get("check_duplicates", True), "discovery.check_duplicates"
    )
    return DiscoverySettings(order=order, check_duplicates=check_duplicates)


def _parse_report_section(value: Any) -> ReportSettings:
    section = _optional_mapping(value, "report")
    color_raw = section.get("color", "auto")
    # YAML reads bare yes/no/true/false as booleans.
    if isinstance(color_raw, bool):
        return ReportSettings(color=ColorMode.ALWAYS if color_raw else ColorMode.NEVER)
    color_text = _require_non_empty_string(color_raw, "report.color")
    try:
        color = ColorMode(color_text.lower())
    except ValueError as exc:
        allowed = ", ".join(item.value for item in ColorMode)
        raise ConfigurationError(f"report.color must be one of: {allowed}.") from exc
    return ReportSettings(color=color)


def _optional_mapping(value: Any, label: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Section '{label}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{label} must be a non-empty string.")
    return value.strip()


def _require_bool(value: Any, label: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{label} must be true or false.")
    return value


def _optional_positive_number(value: Any, label: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigurationError(f"{label} must be a positive number.")
    if value <= 0:
        raise ConfigurationError(f"{label} must be a positive number.")
    return float(value)
