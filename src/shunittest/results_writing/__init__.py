"""Results writing domain exports."""

from .console_reporter import (
    ConsoleReporter,
    format_failure,
    format_listing,
    format_run,
    format_summary,
)
from .pluralization import count_noun, pluralize
from .report_models import LineStyle, ReportLine, ResultMarker

__all__ = [
    "ConsoleReporter",
    "format_failure",
    "format_listing",
    "format_run",
    "format_summary",
    "count_noun",
    "pluralize",
    "LineStyle",
    "ReportLine",
    "ResultMarker",
]
