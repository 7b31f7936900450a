"""Script reader tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from shunittest.script_loading.script_reader import ScriptLoadError, read_script


def test_read_script_keeps_the_given_path_for_display(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "test_math.sh").write_text(
        'testcase_add() {\n  it "adds"\n  true\n}\n', encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)

    script = read_script("test_math.sh")

    assert script.display_path == "test_math.sh"
    assert script.path == (tmp_path / "test_math.sh").resolve()
    assert script.line_text(2) == '  it "adds"'
    assert [function.name for function in script.functions] == ["testcase_add"]


def test_line_text_outside_the_script_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "test_empty.sh"
    path.write_text("true\n", encoding="utf-8")

    script = read_script(path)

    assert script.line_text(0) == ""
    assert script.line_text(2) == ""


def test_read_script_fails_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ScriptLoadError, match="Test script not found"):
        read_script(tmp_path / "missing.sh")
