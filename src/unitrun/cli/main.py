"""CLI entry point for unitrun."""
from __future__ import annotations

import sys
from typing import Optional

import click
from colorama import just_fix_windows_console

from unitrun import __version__
from unitrun.config import REPORT_FORMATS, RunConfig, load_config
from unitrun.core.models import Tolerance
from unitrun.errors import UnitrunError
from unitrun.logging import configure_logging
from unitrun.session import build_reporters, list_cases, run as run_suite


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"unitrun {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the unitrun version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Discover and run assertion-based test cases."""

    just_fix_windows_console()
    configure_logging(verbose=verbose)
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.argument("path", type=click.Path())
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file.",
)
@click.option("--pattern", "file_pattern", type=str, help="Glob selecting test files (default test_*.py).")
@click.option("--prefix", "test_prefix", type=str, help="Name prefix marking test functions (default test_).")
@click.option(
    "--tolerance",
    type=click.FloatRange(min=0.0, min_open=True),
    help="Absolute and relative tolerance used by equals.",
)
@click.option(
    "--report",
    "report_format",
    type=click.Choice(REPORT_FORMATS),
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def run(
    state: CliState,
    path: str,
    config_path: Optional[str],
    file_pattern: Optional[str],
    test_prefix: Optional[str],
    tolerance: Optional[float],
    report_format: Optional[str],
    report_path: Optional[str],
    no_color: bool,
) -> None:
    """Run the test cases found at PATH (a directory or a file)."""

    try:
        config = _build_config(
            config_path,
            file_pattern=file_pattern,
            test_prefix=test_prefix,
            tolerance=Tolerance.uniform(tolerance) if tolerance is not None else None,
            report_format=report_format,
            report_path=report_path,
            color=False if no_color else None,
        )
        report = run_suite(path, config, reporters=build_reporters(config, verbose=state.verbose))
    except UnitrunError as exc:
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(report.exit_code)


@cli.command(name="list")
@click.argument("path", type=click.Path())
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file.",
)
@click.option("--pattern", "file_pattern", type=str, help="Glob selecting test files.")
@click.option("--prefix", "test_prefix", type=str, help="Name prefix marking test functions.")
def list_command(
    path: str,
    config_path: Optional[str],
    file_pattern: Optional[str],
    test_prefix: Optional[str],
) -> None:
    """List the test cases found at PATH without running them."""

    try:
        config = _build_config(config_path, file_pattern=file_pattern, test_prefix=test_prefix)
        identifiers = list_cases(path, config)
    except UnitrunError as exc:
        raise click.ClickException(str(exc)) from exc
    for identifier in identifiers:
        click.echo(identifier)


def _build_config(config_path: Optional[str], **overrides: object) -> RunConfig:
    base = load_config(config_path) if config_path else RunConfig()
    return base.override(**overrides)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="unitrun", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
