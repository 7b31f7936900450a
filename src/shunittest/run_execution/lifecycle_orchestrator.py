"""Sequential execution of selected test cases."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from shunittest.configuration.runtime_settings import RunnerSettings
from shunittest.failure_interception import FailureInterceptor, describe_signal_status
from shunittest.script_loading import ScriptTestCase, ShellScript
from shunittest.skip_rewriting import rewrite_for_skip

from .run_contracts import ResultSet, ScriptTestRun
from .shell_session import TIMEOUT_STATUS, ShellExecution, ShellInvocation, ShellSession

logger = logging.getLogger(__name__)


class RunReporter(Protocol):
    """Receives results while a run progresses."""

    def test_finished(self, run: ScriptTestRun) -> None: ...

    def run_finished(self, results: ResultSet) -> None: ...


class _SilentReporter:
    def test_finished(self, run: ScriptTestRun) -> None:
        return None

    def run_finished(self, results: ResultSet) -> None:
        return None


class LifecycleOrchestrator:
    """Drive pre-process, setup, test, teardown and post-process for each test.

    Tests run one after another, each in a fresh shell process. A failing
    test never stops the tests after it.
    """

    def __init__(
        self,
        script: ShellScript,
        *,
        settings: RunnerSettings | None = None,
        session: ShellSession | None = None,
        reporter: RunReporter | None = None,
    ) -> None:
        self._script = script
        self._settings = settings or RunnerSettings()
        self._session = session or ShellSession(self._settings)
        self._reporter = reporter or _SilentReporter()
        self._interceptor = FailureInterceptor(script)

    def run_all(self, testcases: Sequence[ScriptTestCase]) -> ResultSet:
        runs: list[ScriptTestRun] = []
        with tempfile.TemporaryDirectory(prefix="shunittest-") as workspace:
            for testcase in testcases:
                run = self.run_one(testcase, Path(workspace))
                runs.append(run)
                self._reporter.test_finished(run)
        results = ResultSet.from_runs(runs)
        self._reporter.run_finished(results)
        return results

    def run_one(self, testcase: ScriptTestCase, workspace: Path) -> ScriptTestRun:
        """Execute one test case and return its finalized run."""
        run = ScriptTestRun(testcase=testcase)
        invocation = self._prepare(testcase, workspace)
        execution = self._session.execute(invocation)
        self._collect(run, testcase, execution)
        outcome = run.finalize()
        logger.debug(
            "%s %s with %d recorded failures", testcase.identifier, outcome.value, len(run.failures)
        )
        return run

    def _prepare(self, testcase: ScriptTestCase, workspace: Path) -> ShellInvocation:
        events_path = workspace / f"{testcase.position}.events"
        events_path.unlink(missing_ok=True)
        rewrite = rewrite_for_skip(testcase, self._script, force_run=self._settings.force_run)
        overlay_path = None
        if rewrite is not None:
            overlay_path = workspace / f"{testcase.position}.overlay.bash"
            overlay_path.write_text(rewrite.overlay_text, encoding="utf-8")
        self._interceptor.reset(overlay_path)
        return ShellInvocation(
            script=self._script,
            identifier=testcase.identifier,
            events_path=events_path,
            overlay_path=overlay_path,
        )

    def _collect(
        self, run: ScriptTestRun, testcase: ScriptTestCase, execution: ShellExecution
    ) -> None:
        intercepted = self._interceptor.observe(
            testcase, execution.events, force_run=self._settings.force_run
        )
        if execution.timed_out:
            self._interceptor.record_abnormal_end(
                testcase,
                TIMEOUT_STATUS,
                f"timed out after {self._settings.timeout_seconds:g} seconds",
            )
        elif not intercepted.completed:
            if execution.returncode < 0:
                reason = f"killed by {describe_signal_status(execution.returncode)}"
            else:
                reason = "test process ended before teardown finished"
            self._interceptor.record_abnormal_end(testcase, execution.returncode, reason)

        for record in self._interceptor.failures:
            run.record_failure(record)
        if intercepted.skip_requested:
            run.request_skip(intercepted.skip_note)
        run.output = execution.output
