"""Configuration domain exports."""

from .config_scaffold_builder import build_placeholder_configuration, write_placeholder_configuration
from .loader import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    resolve_configuration,
)
from .runtime_settings import (
    ColorMode,
    Configuration,
    DiscoveryOrder,
    DiscoverySettings,
    ReportSettings,
    RunnerSettings,
)

__all__ = [
    "ColorMode",
    "Configuration",
    "DiscoveryOrder",
    "DiscoverySettings",
    "ReportSettings",
    "RunnerSettings",
    "ConfigurationError",
    "load_configuration",
    "resolve_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
