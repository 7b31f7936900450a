"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


class DiscoveryOrder(str, Enum):
    """Ordering policy applied to discovered tests."""

    DECLARATION = "declaration"
    ALPHABETICAL = "alphabetical"


class ColorMode(str, Enum):
    """When the console report uses ANSI colors."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


@dataclass(frozen=True)
class RunnerSettings:
    """How each test process is launched."""

    shell: str = "bash"
    timeout_seconds: float | None = None
    force_run: bool = False


@dataclass(frozen=True)
class DiscoverySettings:
    """How test functions are collected from a script."""

    order: DiscoveryOrder = DiscoveryOrder.DECLARATION
    check_duplicates: bool = True


@dataclass(frozen=True)
class ReportSettings:
    """Console report preferences."""

    color: ColorMode = ColorMode.AUTO


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path | None = None
    runner: RunnerSettings = field(default_factory=RunnerSettings)
    discovery: DiscoverySettings = field(default_factory=DiscoverySettings)
    report: ReportSettings = field(default_factory=ReportSettings)

    def with_force_run(self, force_run: bool) -> Configuration:
        """Return a copy with force-run enabled when requested on the command line."""
        if not force_run:
            return self
        return replace(self, runner=replace(self.runner, force_run=True))
