"""Run execution domain exports."""

from .lifecycle_orchestrator import LifecycleOrchestrator, RunReporter
from .run_contracts import (
    MAX_EXIT_STATUS,
    Outcome,
    ResultSet,
    RunArtifacts,
    RunOutcome,
    RunRequest,
    ScriptTestRun,
)
from .shell_session import (
    RUNTIME_PATH,
    TIMEOUT_STATUS,
    ProcessResult,
    ShellExecution,
    ShellInvocation,
    ShellSession,
    ShellSessionError,
)
from .suite_run_use_case import RunExecutionError, execute_script_test_run, load_run_artifacts

__all__ = [
    "LifecycleOrchestrator",
    "RunReporter",
    "MAX_EXIT_STATUS",
    "Outcome",
    "ResultSet",
    "RunArtifacts",
    "RunOutcome",
    "RunRequest",
    "ScriptTestRun",
    "RUNTIME_PATH",
    "TIMEOUT_STATUS",
    "ProcessResult",
    "ShellExecution",
    "ShellInvocation",
    "ShellSession",
    "ShellSessionError",
    "RunExecutionError",
    "execute_script_test_run",
    "load_run_artifacts",
]
