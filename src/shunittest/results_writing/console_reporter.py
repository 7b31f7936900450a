"""Console result reporter."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import click

from shunittest.configuration.runtime_settings import ColorMode
from shunittest.failure_interception import FailureRecord
from shunittest.run_execution.run_contracts import Outcome, ResultSet, ScriptTestRun
from shunittest.script_loading import ScriptTestCase

from .pluralization import count_noun
from .report_models import LineStyle, ReportLine, ResultMarker

_CLICK_COLOR = {
    ColorMode.AUTO: None,
    ColorMode.ALWAYS: True,
    ColorMode.NEVER: False,
}


def format_run(run: ScriptTestRun) -> tuple[ReportLine, ...]:
    """Render the result line of a finalized run, plus one block per failure."""
    description = run.testcase.description
    if run.outcome is Outcome.SKIPPED:
        suffix = f"skipped: {run.skip_note}" if run.skip_note else "skipped"
        return (ReportLine(f" {ResultMarker.SKIP.value} {description} ({suffix})"),)
    if run.outcome is Outcome.FAILED:
        lines = [ReportLine(f" {ResultMarker.FAIL.value} {description}", LineStyle.FAILURE)]
        for record in run.failures:
            lines.extend(format_failure(record))
        return tuple(lines)
    if run.outcome is Outcome.PASSED:
        return (ReportLine(f" {ResultMarker.PASS.value} {description}"),)
    raise ValueError(f"Run of {run.testcase.identifier} is not finalized.")


def format_failure(record: FailureRecord) -> tuple[ReportLine, ReportLine]:
    return (
        ReportLine(
            f"   (in test file {record.source_path}, line {record.line})", LineStyle.LOCATION
        ),
        ReportLine(f"     `{record.command}' failed with {record.status}", LineStyle.LOCATION),
    )


def format_summary(results: ResultSet) -> str:
    """Render `N tests, M failures` with a skipped clause when anything was skipped."""
    summary = (
        f"{count_noun(len(results.executed), 'test')}, "
        f"{count_noun(len(results.failed), 'failure')}"
    )
    if results.skipped:
        summary += f", {len(results.skipped)} skipped"
    return summary


def format_listing(testcases: Sequence[ScriptTestCase]) -> tuple[str, ...]:
    """Render list mode: the test count, then `index:description:identifier` lines.

    The index is the discovery position, so it can be passed back as a
    selection.
    """
    lines = [count_noun(len(testcases), "test")]
    lines.extend(
        f"{testcase.position}:{testcase.description}:{testcase.identifier}"
        for testcase in testcases
    )
    return tuple(lines)


class ConsoleReporter:
    """Print results to stdout as tests finish."""

    def __init__(
        self,
        *,
        color: ColorMode = ColorMode.AUTO,
        echo: Callable[..., None] = click.echo,
    ) -> None:
        self._color = _CLICK_COLOR[color]
        self._echo = echo

    def test_finished(self, run: ScriptTestRun) -> None:
        if run.output:
            # Escape sequences printed by the test itself are kept.
            self._echo(run.output, nl=not run.output.endswith("\n"), color=True)
        for line in format_run(run):
            self._write(line)

    def run_finished(self, results: ResultSet) -> None:
        self._echo("", color=self._color)
        self._echo(format_summary(results), color=self._color)

    def _write(self, line: ReportLine) -> None:
        text = line.text
        if line.style is not LineStyle.PLAIN:
            text = click.style(text, fg=line.style.value)
        self._echo(text, color=self._color)
