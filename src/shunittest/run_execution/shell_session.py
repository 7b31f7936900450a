"""Per-test shell process management."""

from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from shunittest.configuration.runtime_settings import RunnerSettings
from shunittest.failure_interception import LifecycleEvent, parse_events
from shunittest.script_loading import ShellScript

RUNTIME_PATH = Path(__file__).resolve().with_name("runtime.bash")
TIMEOUT_STATUS = 124

# $0 of the test process is the script path as given on the command line.
_DRIVER = """\
source "$SHUNITTEST_RUNTIME" || exit 70
__shunittest_driving=1
source "$SHUNITTEST_SCRIPT"
if [[ -z ${__shunittest_started:-} ]]; then
  __shunittest_execute "$SHUNITTEST_TESTCASE"
fi
"""

logger = logging.getLogger(__name__)


class ShellSessionError(Exception):
    """Raised when a test process cannot be started."""


@dataclass(frozen=True)
class ProcessResult:
    """Raw result of one finished (or killed) process."""

    returncode: int
    output: str
    timed_out: bool = False


ProcessRunner = Callable[[Sequence[str], Mapping[str, str], float | None], ProcessResult]


@dataclass(frozen=True)
class ShellInvocation:
    """Everything needed to run one test case in a fresh shell."""

    script: ShellScript
    identifier: str
    events_path: Path
    overlay_path: Path | None = None


@dataclass(frozen=True)
class ShellExecution:
    """Observed result of one test process."""

    returncode: int
    output: str
    events: tuple[LifecycleEvent, ...]
    timed_out: bool


class ShellSession:
    """Launch test processes with the bundled runtime loaded."""

    def __init__(
        self, settings: RunnerSettings | None = None, *, run_process: ProcessRunner | None = None
    ) -> None:
        self._settings = settings or RunnerSettings()
        self._run_process = run_process or _run_process_group

    def command_for(self, invocation: ShellInvocation) -> tuple[str, ...]:
        return (self._settings.shell, "-c", _DRIVER, invocation.script.display_path)

    def environment_for(self, invocation: ShellInvocation) -> dict[str, str]:
        environment = dict(os.environ)
        environment.update(
            SHUNITTEST_RUNTIME=str(RUNTIME_PATH),
            SHUNITTEST_SCRIPT=str(invocation.script.path),
            SHUNITTEST_TESTCASE=invocation.identifier,
            SHUNITTEST_EVENTS=str(invocation.events_path),
        )
        if invocation.overlay_path is not None:
            environment["SHUNITTEST_OVERLAY"] = str(invocation.overlay_path)
        else:
            environment.pop("SHUNITTEST_OVERLAY", None)
        return environment

    def execute(self, invocation: ShellInvocation) -> ShellExecution:
        """Run one test case and collect its output and lifecycle events."""
        command = self.command_for(invocation)
        logger.debug(
            "Running %s from %s with %s",
            invocation.identifier,
            invocation.script.display_path,
            shlex.join(command[:2]),
        )
        result = self._run_process(
            command, self.environment_for(invocation), self._settings.timeout_seconds
        )
        events_text = (
            invocation.events_path.read_text(encoding="utf-8", errors="replace")
            if invocation.events_path.exists()
            else ""
        )
        return ShellExecution(
            returncode=result.returncode,
            output=result.output,
            events=parse_events(events_text),
            timed_out=result.timed_out,
        )


def _run_process_group(
    command: Sequence[str], environment: Mapping[str, str], timeout: float | None
) -> ProcessResult:
    """Run a command in its own session and kill the whole group on timeout."""
    try:
        process = subprocess.Popen(  # pylint: disable=consider-using-with
            list(command),
            env=dict(environment),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            start_new_session=True,
        )
    except OSError as exc:
        raise ShellSessionError(f"Failed to start {command[0]}: {exc}") from exc

    with process:
        try:
            output, _ = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill_group(process.pid)
            output, _ = process.communicate()
            return ProcessResult(
                returncode=TIMEOUT_STATUS,
                output=_decode(output),
                timed_out=True,
            )
    return ProcessResult(returncode=process.returncode, output=_decode(output))


def _kill_group(pid: int) -> None:
    try:
        os.killpg(pid, signal.SIGKILL)
    except ProcessLookupError:
        logger.debug("Process group %d already gone", pid)


def _decode(output: bytes | None) -> str:
    return (output or b"").decode("utf-8", errors="replace")
