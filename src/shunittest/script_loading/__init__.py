"""Script loading exports."""

from .case_steps import DESCRIBE_DIRECTIVES, SKIP_DIRECTIVE, build_steps, classify_step
from .description_extractor import directive_arguments, extract_description
from .function_scanner import scan_functions, scan_layout
from .script_models import CaseStep, ScriptTestCase, ShellFunction, ShellScript, StepKind
from .script_reader import ScriptLoadError, parse_script, read_script

__all__ = [
    "CaseStep",
    "ScriptTestCase",
    "ShellFunction",
    "ShellScript",
    "StepKind",
    "DESCRIBE_DIRECTIVES",
    "SKIP_DIRECTIVE",
    "build_steps",
    "classify_step",
    "directive_arguments",
    "extract_description",
    "scan_functions",
    "scan_layout",
    "ScriptLoadError",
    "parse_script",
    "read_script",
]
