"""Lifecycle events reported by a test process.

The bash runtime appends one tab-separated record per line to the file
named by `SHUNITTEST_EVENTS`:

    phase<TAB>setup|test|teardown
    error<TAB><source><TAB><line><TAB><status><TAB><in-run flag><TAB><subshell depth>
    skip<TAB><note>
    missing<TAB><function name>
    exit<TAB><status>
    done
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class LifecyclePhase(str, Enum):
    """Phases of one test process."""

    SETUP = "setup"
    TEST = "test"
    TEARDOWN = "teardown"


@dataclass(frozen=True)
class PhaseStarted:
    phase: LifecyclePhase


@dataclass(frozen=True)
class CommandFailed:
    """One firing of the ERR trap.

    `depth` counts the subshells between the failing command and the test
    function; a failure at depth > 0 fires again in the enclosing shell.
    """

    source: str
    line: int
    status: int
    in_run: bool
    depth: int = 0


@dataclass(frozen=True)
class SkipRequested:
    note: str


@dataclass(frozen=True)
class CaseFunctionMissing:
    identifier: str


@dataclass(frozen=True)
class ProcessExited:
    """The test process called `exit` with a non-zero status."""

    status: int


@dataclass(frozen=True)
class LifecycleCompleted:
    pass


LifecycleEvent = (
    PhaseStarted
    | CommandFailed
    | SkipRequested
    | CaseFunctionMissing
    | ProcessExited
    | LifecycleCompleted
)


def parse_events(text: str) -> tuple[LifecycleEvent, ...]:
    """Parse the event channel contents, dropping malformed records."""
    events: list[LifecycleEvent] = []
    for raw_line in text.splitlines():
        if not raw_line:
            continue
        event = parse_event(raw_line)
        if event is None:
            logger.debug("Ignoring malformed lifecycle event %r", raw_line)
            continue
        events.append(event)
    return tuple(events)


def parse_event(raw_line: str) -> LifecycleEvent | None:  # noqa: PLR0911
    """Parse one event record."""
    kind, *fields = raw_line.split("\t")
    try:
        if kind == "phase" and len(fields) == 1:
            return PhaseStarted(phase=LifecyclePhase(fields[0]))
        if kind == "error" and len(fields) in (4, 5):
            return CommandFailed(
                source=fields[0],
                line=int(fields[1]),
                status=int(fields[2]),
                in_run=fields[3] not in ("", "0"),
                depth=int(fields[4]) if len(fields) == 5 else 0,
            )
        if kind == "skip":
            return SkipRequested(note="\t".join(fields).strip())
        if kind == "missing" and len(fields) == 1:
            return CaseFunctionMissing(identifier=fields[0])
        if kind == "exit" and len(fields) == 1:
            return ProcessExited(status=int(fields[0]))
        if kind == "done" and not fields:
            return LifecycleCompleted()
    except ValueError:
        return None
    return None
