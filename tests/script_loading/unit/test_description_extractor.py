"""Description extraction tests."""

from __future__ import annotations

from pathlib import Path

from shunittest.script_loading.description_extractor import (
    directive_arguments,
    extract_description,
)
from shunittest.script_loading.script_reader import parse_script


def _description_of(body: str, identifier: str = "testcase_sample") -> str:
    script = parse_script(
        f"{identifier}() {{\n{body}\n}}\n", path=Path("/tmp/test_sample.sh")
    )
    return extract_description(identifier, script.functions[0].steps)


def test_quoted_description_is_unquoted() -> None:
    assert _description_of('  it "reads the config file"') == "reads the config file"


def test_later_directive_overrides_earlier_one() -> None:
    body = '  it "first"\n  true\n  describe "second"'

    assert _description_of(body) == "second"


def test_multiple_arguments_are_joined_with_a_space() -> None:
    assert _description_of("  this_test \"part one\" 'part two'") == "part one part two"


def test_missing_directive_falls_back_to_identifier() -> None:
    assert _description_of("  true") == "testcase_sample"


def test_directive_without_arguments_falls_back_to_identifier() -> None:
    assert _description_of("  it") == "testcase_sample"


def test_explicit_empty_description_stays_empty() -> None:
    assert _description_of('  it ""') == ""


def test_directive_inside_a_string_is_not_a_description() -> None:
    body = '  echo "\nit fake\n"\n  true'

    assert _description_of(body) == "testcase_sample"


def test_directive_arguments_stop_at_control_operators() -> None:
    assert directive_arguments('it "adds"; false') == ["adds"]
    assert directive_arguments('it "adds" && true') == ["adds"]


def test_directive_arguments_fall_back_to_whitespace_split_on_bad_quoting() -> None:
    assert directive_arguments('it "unbalanced words') == ['"unbalanced', "words"]
