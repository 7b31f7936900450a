"""Integration tests running real bash processes through the bundled runtime."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from shunittest.configuration.runtime_settings import RunnerSettings
from shunittest.discovery.case_registry import discover_testcases
from shunittest.failure_interception.lifecycle_events import LifecyclePhase
from shunittest.run_execution.lifecycle_orchestrator import LifecycleOrchestrator
from shunittest.run_execution.run_contracts import Outcome
from shunittest.script_loading.script_reader import read_script

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(shutil.which("bash") is None, reason="bash is not available"),
]


def _run(tmp_path: Path, text: str, **settings):
    script_path = tmp_path / "test_subject.sh"
    script_path.write_text(text, encoding="utf-8")
    script = read_script(script_path)
    orchestrator = LifecycleOrchestrator(script, settings=RunnerSettings(**settings))
    return orchestrator.run_all(discover_testcases(script).testcases)


def _by_identifier(results):
    return {run.testcase.identifier: run for run in results.runs}


def test_failing_command_is_attributed_to_its_line(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "testcase_pass() {\n"
        '  it "passes"\n'
        "  true\n"
        "}\n"
        "\n"
        "testcase_fail() {\n"
        '  it "fails"\n'
        "  false\n"
        '  echo "kept running"\n'
        "}\n"
        "\n"
        'unittest_run "$@"\n',
    )

    runs = _by_identifier(results)
    assert runs["testcase_pass"].outcome is Outcome.PASSED
    assert runs["testcase_fail"].outcome is Outcome.FAILED
    failures = runs["testcase_fail"].failures
    assert [(record.line, record.status, record.command) for record in failures] == [
        (8, 1, "false")
    ]
    assert "kept running" in runs["testcase_fail"].output


def test_script_without_entry_call_still_runs(tmp_path: Path) -> None:
    results = _run(tmp_path, "testcase_plain() {\n  [ 1 -eq 1 ]\n}\n")

    assert [run.outcome for run in results.runs] == [Outcome.PASSED]


def test_skip_stops_the_body_and_reports_the_note(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "testcase_pending() {\n"
        '  it "is pending"\n'
        '  skip "not ready"\n'
        '  echo "should not run"\n'
        "  false\n"
        "}\n",
    )

    run = results.runs[0]
    assert run.outcome is Outcome.SKIPPED
    assert run.skip_note == "not ready"
    assert run.failures == []
    assert "should not run" not in run.output


def test_force_run_executes_the_body_after_skip(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "testcase_pending() {\n"
        '  skip "not ready"\n'
        "  false\n"
        "}\n",
        force_run=True,
    )

    run = results.runs[0]
    assert run.outcome is Outcome.FAILED
    assert [record.line for record in run.failures] == [3]


def test_failure_before_skip_is_reported_skipped_with_correct_line(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "testcase_broken_then_skipped() {\n"
        "  false\n"
        "  skip\n"
        "  false\n"
        "}\n",
    )

    run = results.runs[0]
    assert run.outcome is Outcome.SKIPPED
    assert run.skip_note is None
    assert [record.line for record in run.failures] == [2]


def test_run_helper_captures_status_output_and_lines(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "testcase_run_helper() {\n"
        "  run sh -c 'echo out; echo err >&2; echo out2'\n"
        '  [ "$status" -eq 0 ]\n'
        '  [ "${#lines[@]}" -eq 3 ]\n'
        '  [ "${lines[1]}" = err ]\n'
        "  run false\n"
        '  [ "$status" -eq 1 ]\n'
        "  run no_such_command_for_shunittest\n"
        '  [ "$status" -ne 0 ]\n'
        '  [ -z "$output" ]\n'
        '  [ "${#lines[@]}" -eq 0 ]\n'
        "  run\n"
        '  [ "$status" -eq 127 ]\n'
        "}\n",
    )

    run = results.runs[0]
    assert run.failures == []
    assert run.outcome is Outcome.PASSED
    assert "no_such_command_for_shunittest: command not found" in run.output


def test_run_without_arguments_leaves_fresh_status_untouched(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "testcase_bare_run() {\n"
        "  run\n"
        '  [ "$status" -eq 0 ]\n'
        '  [ -z "$output" ]\n'
        '  [ "${#lines[@]}" -eq 0 ]\n'
        "}\n",
    )

    run = results.runs[0]
    assert run.failures == []
    assert run.outcome is Outcome.PASSED


def test_failures_in_subshells_are_recorded_once(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "testcase_subshells() {\n"
        "  x=$(false)\n"
        "  (false)\n"
        '  echo "done $x"\n'
        "}\n",
    )

    run = results.runs[0]
    assert [(record.line, record.status, record.command) for record in run.failures] == [
        (2, 1, "x=$(false)"),
        (3, 1, "(false)"),
    ]


def test_failures_inside_sourced_helpers_are_attributed_to_the_call_site(tmp_path: Path) -> None:
    (tmp_path / "helpers.bash").write_text("check_even() {\n  false\n}\n", encoding="utf-8")
    results = _run(
        tmp_path,
        'source "$(dirname "$SHUNITTEST_SCRIPT")/helpers.bash"\n'
        "\n"
        "testcase_uses_helper() {\n"
        "  check_even 3\n"
        "}\n",
    )

    run = results.runs[0]
    assert [(record.line, record.command) for record in run.failures] == [(4, "check_even 3")]


def test_fixtures_run_around_each_test_and_state_does_not_leak(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "setup() {\n"
        '  echo "setup ran"\n'
        "}\n"
        "\n"
        "teardown() {\n"
        '  echo "teardown ran"\n'
        "}\n"
        "\n"
        "testcase_sets_state() {\n"
        "  leaked=yes\n"
        "}\n"
        "\n"
        "testcase_sees_clean_state() {\n"
        '  [ -z "${leaked:-}" ]\n'
        "}\n",
    )

    assert [run.outcome for run in results.runs] == [Outcome.PASSED, Outcome.PASSED]
    for run in results.runs:
        assert run.output == "setup ran\nteardown ran\n"


def test_teardown_runs_when_the_body_exits(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "teardown() {\n"
        '  echo "teardown ran"\n'
        "}\n"
        "\n"
        "testcase_exits() {\n"
        "  exit 3\n"
        "}\n",
    )

    run = results.runs[0]
    assert run.outcome is Outcome.FAILED
    assert [(record.line, record.status) for record in run.failures] == [(5, 3)]
    assert "teardown ran" in run.output


def test_setup_failure_fails_the_test(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "setup() {\n"
        "  false\n"
        "}\n"
        "\n"
        "testcase_after_setup() {\n"
        "  true\n"
        "}\n",
    )

    run = results.runs[0]
    assert run.outcome is Outcome.FAILED
    assert [(record.line, record.phase) for record in run.failures] == [
        (2, LifecyclePhase.SETUP)
    ]


def test_errexit_in_the_script_does_not_abort_the_test(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "set -e\n"
        "\n"
        "testcase_keeps_going() {\n"
        "  false\n"
        '  echo "still running"\n'
        "}\n",
    )

    run = results.runs[0]
    assert [record.line for record in run.failures] == [4]
    assert "still running" in run.output


def test_test_that_is_never_defined_fails(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "if false; then\n"
        "testcase_ghost() {\n"
        "  true\n"
        "}\n"
        "fi\n",
    )

    run = results.runs[0]
    assert run.outcome is Outcome.FAILED
    assert [record.status for record in run.failures] == [127]


def test_hung_test_is_killed_after_timeout(tmp_path: Path) -> None:
    results = _run(
        tmp_path,
        "testcase_hangs() {\n  sleep 30\n}\n",
        timeout_seconds=0.5,
    )

    run = results.runs[0]
    assert run.outcome is Outcome.FAILED
    assert [record.status for record in run.failures] == [124]
