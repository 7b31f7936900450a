"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from shunittest.configuration import DEFAULT_CONFIG_FILENAME, write_placeholder_configuration
from shunittest.run_execution import (
    RUNTIME_PATH,
    RunExecutionError,
    RunRequest,
    execute_script_test_run,
    load_run_artifacts,
)
from shunittest.results_writing import ConsoleReporter, format_listing

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="shunittest")
def cli() -> None:
    """Unit testing harness for bash scripts."""


@cli.command(name="run")
@click.argument("script_path", metavar="SCRIPT", type=click.Path(path_type=str))
@click.argument("specs", metavar="[SPEC]...", nargs=-1)
@click.option(
    "-l",
    "--list-tests",
    "list_tests",
    is_flag=True,
    default=False,
    help="Print the discovered tests as index:description:identifier and exit.",
)
@click.option(
    "-f",
    "--force-run",
    "force_run",
    is_flag=True,
    default=False,
    help="Ignore skip directives and run every test body in full.",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help=f"Path to a YAML runner configuration (default: {DEFAULT_CONFIG_FILENAME} next to SCRIPT)",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug details to stderr.")
@click.pass_context
def run_tests(  # pylint: disable=too-many-arguments
    ctx: click.Context,
    script_path: str,
    specs: tuple[str, ...],
    list_tests: bool,
    force_run: bool,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Run the testcase_ functions of SCRIPT.

    Each SPEC selects tests by index, by identifier (testcase_*) or by
    description; shell wildcards are accepted and matching descriptions
    ignores case. Without SPECs every test runs. The exit status is the
    number of failed tests.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=_LOG_FORMAT, stream=sys.stderr)
    request = RunRequest(
        script_path=script_path,
        specs=specs,
        config_path=config_path,
        force_run=force_run,
    )
    try:
        if list_tests:
            artifacts = load_run_artifacts(request)
            for line in format_listing(artifacts.selected):
                click.echo(line)
            return
        outcome = execute_script_test_run(
            request,
            reporter_factory=lambda configuration: ConsoleReporter(
                color=configuration.report.color
            ),
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    ctx.exit(outcome.exit_status)


@cli.command(name="runtime-path")
def runtime_path() -> None:
    """Print the location of the bash runtime that test scripts can source."""
    click.echo(str(RUNTIME_PATH))


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML runner configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML runner configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        result = cli.main(args=list(argv), prog_name="shunittest", standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
