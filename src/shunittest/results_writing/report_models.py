"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResultMarker(str, Enum):
    """Leading glyph of a per-test result line."""

    PASS = "✓"
    FAIL = "✗"
    SKIP = "-"


class LineStyle(str, Enum):
    """Console color applied to a report line."""

    PLAIN = "plain"
    FAILURE = "red"
    LOCATION = "bright_red"


@dataclass(frozen=True)
class ReportLine:
    """One rendered console line."""

    text: str
    style: LineStyle = LineStyle.PLAIN
