"""Skip directive rewriting service."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from shunittest.script_loading import CaseStep, ScriptTestCase, ShellScript, StepKind

RETURN_STATEMENT = "return 0; "

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkipRewrite:
    """A test definition that returns successfully right after its skip directive.

    `overlay_text` redefines the test function with every line at its
    original line number, so sourcing it after the script keeps failure
    locations intact. `return_line` is None when the skip directive shares
    the closing brace line and nothing needed to change.
    """

    identifier: str
    skip_line: int
    return_line: int | None
    overlay_text: str


def find_skip_step(testcase: ScriptTestCase) -> CaseStep | None:
    """Return the first statement of a test body that invokes `skip`."""
    return next((step for step in testcase.steps if step.kind is StepKind.SKIP), None)


def rewrite_for_skip(
    testcase: ScriptTestCase, script: ShellScript, *, force_run: bool = False
) -> SkipRewrite | None:
    """Derive the skip-truncated definition of a test for one run.

    Returns None when the test has no skip directive or when force-run
    disables skipping. The result depends on the force-run flag and must
    not be cached across runs.
    """
    if force_run:
        return None
    skip_step = find_skip_step(testcase)
    if skip_step is None:
        return None

    definition = testcase.definition
    return_line = next(
        (
            number
            for number in range(skip_step.last_line + 1, definition.close_line + 1)
            if number in definition.code_lines
        ),
        None,
    )
    body = list(script.lines[definition.start_line - 1 : definition.close_line])
    if return_line is not None:
        offset = return_line - definition.start_line
        body[offset] = RETURN_STATEMENT + body[offset]
    overlay_text = "\n" * (definition.start_line - 1) + "\n".join(body) + "\n"
    logger.debug(
        "Rewrote %s: skip on line %d, return inserted on line %s",
        testcase.identifier,
        skip_step.first_line,
        return_line,
    )
    return SkipRewrite(
        identifier=testcase.identifier,
        skip_line=skip_step.first_line,
        return_line=return_line,
        overlay_text=overlay_text,
    )
