"""Run execution use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable

from shunittest.configuration import ConfigurationError, resolve_configuration
from shunittest.configuration.runtime_settings import Configuration, RunnerSettings
from shunittest.discovery import (
    DiscoveryError,
    SelectionCriteria,
    SelectionError,
    discover_testcases,
    resolve_selection,
)
from shunittest.script_loading import ScriptLoadError, read_script

from .lifecycle_orchestrator import LifecycleOrchestrator, RunReporter
from .run_contracts import RunArtifacts, RunOutcome, RunRequest
from .shell_session import ShellSession, ShellSessionError

logger = logging.getLogger(__name__)


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


def load_run_artifacts(request: RunRequest) -> RunArtifacts:
    """Load configuration and script, discover tests and resolve the selection.

    Every error raised here is fatal before any test runs.
    """
    try:
        configuration = resolve_configuration(
            request.config_path, request.script_path
        ).with_force_run(request.force_run)
        script = read_script(request.script_path)
        registry = discover_testcases(script, configuration.discovery)
        selected = resolve_selection(registry, SelectionCriteria(specs=request.specs))
    except (
        ConfigurationError,
        ScriptLoadError,
        DiscoveryError,
        SelectionError,
        OSError,
        ValueError,
    ) as exc:
        raise RunExecutionError(str(exc)) from exc
    logger.debug("Selected %d of %d tests", len(selected), len(registry))
    return RunArtifacts(configuration=configuration, registry=registry, selected=selected)


def execute_script_test_run(
    request: RunRequest,
    *,
    reporter_factory: Callable[[Configuration], RunReporter] | None = None,
    session_factory: Callable[[RunnerSettings], ShellSession] | None = None,
) -> RunOutcome:
    """Execute the selected tests of one script and return the run outcome."""
    resolved_session_factory = session_factory or ShellSession
    artifacts = load_run_artifacts(request)
    configuration = artifacts.configuration
    orchestrator = LifecycleOrchestrator(
        artifacts.registry.script,
        settings=configuration.runner,
        session=resolved_session_factory(configuration.runner),
        reporter=reporter_factory(configuration) if reporter_factory else None,
    )
    try:
        results = orchestrator.run_all(artifacts.selected)
    except ShellSessionError as exc:
        raise RunExecutionError(str(exc)) from exc
    return RunOutcome(results=results, configuration=configuration)
