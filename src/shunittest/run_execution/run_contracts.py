"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from shunittest.configuration.runtime_settings import Configuration
from shunittest.discovery import ScriptTestRegistry
from shunittest.failure_interception import FailureRecord
from shunittest.script_loading import ScriptTestCase

MAX_EXIT_STATUS = 255


class Outcome(str, Enum):
    """Categorized result of one test run."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ScriptTestRun:
    """Mutable state of one execution of a test case.

    Created fresh right before the test runs and finalized once its
    teardown has finished. Never reused for another test.
    """

    testcase: ScriptTestCase
    failures: list[FailureRecord] = field(default_factory=list)
    skipped: bool = False
    skip_note: str | None = None
    output: str = ""
    outcome: Outcome | None = None

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def record_failure(self, record: FailureRecord) -> None:
        self._ensure_open()
        self.failures.append(record)

    def request_skip(self, note: str | None = None) -> None:
        self._ensure_open()
        self.skipped = True
        self.skip_note = note or None

    def finalize(self) -> Outcome:
        """Categorize the run: skipped beats failed, failed beats passed."""
        self._ensure_open()
        if self.skipped:
            self.outcome = Outcome.SKIPPED
        elif self.failed:
            self.outcome = Outcome.FAILED
        else:
            self.outcome = Outcome.PASSED
        return self.outcome

    def _ensure_open(self) -> None:
        if self.outcome is not None:
            raise RuntimeError(f"Run of {self.testcase.identifier} is already finalized.")


@dataclass(frozen=True)
class ResultSet:
    """Finalized runs of one invocation, in execution order."""

    runs: tuple[ScriptTestRun, ...] = ()

    @classmethod
    def from_runs(cls, runs: list[ScriptTestRun] | tuple[ScriptTestRun, ...]) -> ResultSet:
        unfinished = [run.testcase.identifier for run in runs if run.outcome is None]
        if unfinished:
            raise ValueError(f"Runs are not finalized: {', '.join(unfinished)}")
        return cls(runs=tuple(runs))

    @property
    def executed(self) -> tuple[ScriptTestCase, ...]:
        return tuple(run.testcase for run in self.runs)

    @property
    def passed(self) -> tuple[ScriptTestCase, ...]:
        return self._with_outcome(Outcome.PASSED)

    @property
    def failed(self) -> tuple[ScriptTestCase, ...]:
        return self._with_outcome(Outcome.FAILED)

    @property
    def skipped(self) -> tuple[ScriptTestCase, ...]:
        return self._with_outcome(Outcome.SKIPPED)

    @property
    def exit_status(self) -> int:
        """Number of failed tests, capped so it never wraps around to success."""
        return min(len(self.failed), MAX_EXIT_STATUS)

    def _with_outcome(self, outcome: Outcome) -> tuple[ScriptTestCase, ...]:
        return tuple(run.testcase for run in self.runs if run.outcome is outcome)


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one run."""

    script_path: str
    specs: tuple[str, ...] = ()
    config_path: str | None = None
    force_run: bool = False


@dataclass(frozen=True)
class RunArtifacts:
    """Loaded domain artifacts required during run execution."""

    configuration: Configuration
    registry: ScriptTestRegistry
    selected: tuple[ScriptTestCase, ...]


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    results: ResultSet
    configuration: Configuration

    @property
    def exit_status(self) -> int:
        return self.results.exit_status
