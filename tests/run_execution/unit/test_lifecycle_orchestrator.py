"""Lifecycle orchestrator tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from shunittest.configuration.runtime_settings import RunnerSettings
from shunittest.discovery.case_registry import discover_testcases
from shunittest.failure_interception.lifecycle_events import (
    CommandFailed,
    LifecycleCompleted,
    LifecyclePhase,
    PhaseStarted,
    SkipRequested,
)
from shunittest.run_execution.lifecycle_orchestrator import LifecycleOrchestrator
from shunittest.run_execution.run_contracts import Outcome
from shunittest.run_execution.shell_session import ShellExecution
from shunittest.script_loading.script_reader import parse_script

SCRIPT_PATH = Path("/work/test_orchestrated.sh")
SCRIPT = """\
testcase_pass() {
  true
}

testcase_fail() {
  false
}

testcase_skip() {
  skip "not ready"
  false
}
"""


def _lifecycle(*test_events):
    return (
        PhaseStarted(LifecyclePhase.SETUP),
        PhaseStarted(LifecyclePhase.TEST),
        *test_events,
        PhaseStarted(LifecyclePhase.TEARDOWN),
        LifecycleCompleted(),
    )


class FakeSession:
    def __init__(self, events_by_identifier, *, returncode=0, timed_out=False) -> None:
        self._events_by_identifier = events_by_identifier
        self._returncode = returncode
        self._timed_out = timed_out
        self.invocations = []
        self.overlays = {}

    def execute(self, invocation):
        self.invocations.append(invocation)
        if invocation.overlay_path is not None:
            self.overlays[invocation.identifier] = invocation.overlay_path.read_text(
                encoding="utf-8"
            )
        return ShellExecution(
            returncode=self._returncode,
            output=f"output of {invocation.identifier}\n",
            events=self._events_by_identifier.get(invocation.identifier, ()),
            timed_out=self._timed_out,
        )


class RecordingReporter:
    def __init__(self) -> None:
        self.finished = []
        self.results = []

    def test_finished(self, run) -> None:
        self.finished.append(run)

    def run_finished(self, results) -> None:
        self.results.append(results)


@pytest.fixture(name="script")
def script_fixture():
    return parse_script(SCRIPT, path=SCRIPT_PATH, display_path="test_orchestrated.sh")


def _default_events():
    return {
        "testcase_pass": _lifecycle(),
        "testcase_fail": _lifecycle(
            CommandFailed(source=str(SCRIPT_PATH), line=6, status=1, in_run=False)
        ),
        "testcase_skip": _lifecycle(
            SkipRequested(note="not ready"),
        ),
    }


def test_run_all_categorizes_every_test_and_reports_in_order(script) -> None:
    reporter = RecordingReporter()
    session = FakeSession(_default_events())
    orchestrator = LifecycleOrchestrator(script, session=session, reporter=reporter)

    results = orchestrator.run_all(discover_testcases(script).testcases)

    assert [run.outcome for run in results.runs] == [
        Outcome.PASSED,
        Outcome.FAILED,
        Outcome.SKIPPED,
    ]
    assert [run.testcase.identifier for run in reporter.finished] == [
        "testcase_pass",
        "testcase_fail",
        "testcase_skip",
    ]
    assert reporter.results == [results]
    assert results.runs[1].failures[0].command == "false"
    assert results.runs[2].skip_note == "not ready"
    assert results.runs[0].output == "output of testcase_pass\n"


def test_only_tests_with_skip_get_an_overlay(script) -> None:
    session = FakeSession(_default_events())

    LifecycleOrchestrator(script, session=session).run_all(discover_testcases(script).testcases)

    assert [invocation.overlay_path is None for invocation in session.invocations] == [
        True,
        True,
        False,
    ]
    overlay_lines = session.overlays["testcase_skip"].splitlines()
    assert overlay_lines[10] == "return 0;   false"


def test_force_run_runs_skipping_tests_in_full(script) -> None:
    events = _default_events()
    events["testcase_skip"] = _lifecycle(
        SkipRequested(note="not ready"),
        CommandFailed(source=str(SCRIPT_PATH), line=11, status=1, in_run=False),
    )
    session = FakeSession(events)
    orchestrator = LifecycleOrchestrator(
        script, settings=RunnerSettings(force_run=True), session=session
    )

    results = orchestrator.run_all(discover_testcases(script).testcases)

    assert session.overlays == {}
    assert results.runs[2].outcome is Outcome.FAILED
    assert results.skipped == ()


def test_one_failing_test_does_not_stop_the_rest(script) -> None:
    failing = _lifecycle(CommandFailed(source=str(SCRIPT_PATH), line=2, status=1, in_run=False))
    session = FakeSession(
        {"testcase_pass": failing, "testcase_fail": failing, "testcase_skip": failing}
    )

    results = LifecycleOrchestrator(script, session=session).run_all(
        discover_testcases(script).testcases
    )

    assert len(results.executed) == 3
    assert results.exit_status == 3


def test_timed_out_test_fails_with_status_124(script) -> None:
    session = FakeSession({}, returncode=124, timed_out=True)
    orchestrator = LifecycleOrchestrator(
        script, settings=RunnerSettings(timeout_seconds=2.0), session=session
    )

    run = orchestrator.run_all(discover_testcases(script).testcases[:1]).runs[0]

    assert run.outcome is Outcome.FAILED
    assert [(record.status, record.command) for record in run.failures] == [
        (124, "timed out after 2 seconds")
    ]


def test_killed_test_process_fails_with_signal_status(script) -> None:
    session = FakeSession({"testcase_pass": (PhaseStarted(LifecyclePhase.SETUP),)}, returncode=-15)

    run = LifecycleOrchestrator(script, session=session).run_all(
        discover_testcases(script).testcases[:1]
    ).runs[0]

    assert run.outcome is Outcome.FAILED
    assert [(record.status, record.command, record.line) for record in run.failures] == [
        (143, "killed by SIGTERM", 1)
    ]
