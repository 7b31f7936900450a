"""Attribution of failing commands to test script locations."""

from __future__ import annotations

import logging
import signal
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from shunittest.script_loading import ScriptTestCase, ShellScript

from .lifecycle_events import (
    CaseFunctionMissing,
    CommandFailed,
    LifecycleCompleted,
    LifecycleEvent,
    LifecyclePhase,
    PhaseStarted,
    ProcessExited,
    SkipRequested,
)

COMMAND_NOT_FOUND_STATUS = 127

logger = logging.getLogger(__name__)


class InterceptorState(str, Enum):
    """Interceptor lifecycle for one test run."""

    RESET = "reset"
    ARMED = "armed"
    TRIGGERED = "triggered"


@dataclass(frozen=True)
class FailureRecord:
    """One failing command with its static source location."""

    source_path: str
    line: int
    status: int
    phase: LifecyclePhase
    command: str


@dataclass(frozen=True)
class InterceptedRun:
    """What the interceptor learned from one test process."""

    failures: tuple[FailureRecord, ...]
    skip_requested: bool
    skip_note: str | None
    completed: bool


class FailureInterceptor:
    """Turn the lifecycle events of one test process into failure records.

    Only failures raised by commands in the test script itself, or in its
    skip overlay, count. Failures inside the runtime plumbing or sourced
    helper libraries are ignored, as are commands wrapped by `run`. A
    command failing in a subshell is recorded once, when the enclosing
    shell reports it.
    """

    def __init__(self, script: ShellScript) -> None:
        self._script = script
        self._state = InterceptorState.RESET
        self._sources: dict[str, str] = {}
        self._failures: list[FailureRecord] = []
        self._skip_note: str | None = None
        self._skip_requested = False
        self._completed = False
        self._phase = LifecyclePhase.SETUP
        self.reset()

    @property
    def state(self) -> InterceptorState:
        return self._state

    @property
    def failures(self) -> tuple[FailureRecord, ...]:
        return tuple(self._failures)

    def reset(self, overlay_path: Path | None = None) -> None:
        """Clear everything recorded for the previous test."""
        self._state = InterceptorState.RESET
        self._sources = {str(self._script.path): self._script.display_path}
        if overlay_path is not None:
            self._sources[str(overlay_path)] = self._script.display_path
        self._failures = []
        self._skip_note = None
        self._skip_requested = False
        self._completed = False
        self._phase = LifecyclePhase.SETUP

    def observe(
        self, testcase: ScriptTestCase, events: Iterable[LifecycleEvent], *, force_run: bool = False
    ) -> InterceptedRun:
        """Feed the events of one test process, in the order they were written."""
        for event in events:
            self._observe_event(testcase, event, force_run=force_run)
        return InterceptedRun(
            failures=self.failures,
            skip_requested=self._skip_requested,
            skip_note=self._skip_note,
            completed=self._completed,
        )

    def record_abnormal_end(
        self, testcase: ScriptTestCase, status: int, reason: str
    ) -> FailureRecord:
        """Record a test process that was killed or ended before its lifecycle completed."""
        if status < 0:
            status = 128 + abs(status)
        logger.debug("%s ended abnormally (%s) with status %d", testcase.identifier, reason, status)
        return self._append(
            line=testcase.line,
            status=status,
            command=reason,
        )

    def _observe_event(
        self, testcase: ScriptTestCase, event: LifecycleEvent, *, force_run: bool
    ) -> None:
        if isinstance(event, PhaseStarted):
            self._phase = event.phase
            if self._state is InterceptorState.RESET:
                self._state = InterceptorState.ARMED
        elif isinstance(event, CommandFailed):
            self._observe_failure(event)
        elif isinstance(event, SkipRequested):
            if force_run:
                logger.debug("Ignoring skip in %s under force-run", testcase.identifier)
            else:
                self._skip_requested = True
                self._skip_note = event.note or None
        elif isinstance(event, CaseFunctionMissing):
            self._append(
                line=testcase.line,
                status=COMMAND_NOT_FOUND_STATUS,
                command=f"{event.identifier} is not defined",
            )
        elif isinstance(event, ProcessExited):
            self._append(
                line=testcase.line,
                status=event.status,
                command=f"exit {event.status}",
            )
        elif isinstance(event, LifecycleCompleted):
            self._completed = True

    def _observe_failure(self, event: CommandFailed) -> None:
        if self._state is InterceptorState.RESET or self._completed:
            logger.debug("Ignoring failure outside the test lifecycle: %s", event)
            return
        if event.in_run:
            logger.debug("Ignoring failure inside run: %s:%d", event.source, event.line)
            return
        if event.depth > 0:
            logger.debug("Ignoring failure inside a subshell: %s:%d", event.source, event.line)
            return
        display_path = self._sources.get(event.source)
        if display_path is None:
            logger.debug("Ignoring failure outside the test script: %s:%d", event.source, event.line)
            return
        self._append(
            line=event.line,
            status=event.status,
            command=self._script.line_text(event.line).strip(),
        )

    def _append(self, *, line: int, status: int, command: str) -> FailureRecord:
        record = FailureRecord(
            source_path=self._script.display_path,
            line=line,
            status=status,
            phase=self._phase,
            command=command,
        )
        self._failures.append(record)
        self._state = InterceptorState.TRIGGERED
        return record


def describe_signal_status(status: int) -> str:
    """Name the signal behind a negative subprocess return code."""
    try:
        return signal.Signals(-status).name
    except ValueError:
        return f"signal {-status}"
