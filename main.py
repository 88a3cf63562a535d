"""
    Main entry point for tuning-check.

    Checks whether sapconf or saptune is set up correctly on a SLES 12/15 host.

    Exit codes:
        0  everything is fine
        1  warnings were found
        2  errors were found, the tool is not installed, or the check is not possible
        3  wrong usage
"""
import logging
import sys
from typing import Optional

import click

from collectors.linux.linux_tuning import collect_snapshot
from core.checker import check, overview
from core.errors import CheckerError
from core.report import build_report, write_json_report
from reports.formatter import format_overview, format_result
from shared.config import load_config
from shared.hardware import get_cpu_info
from shared.system import get_os, get_system_info

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_WARN = 1
EXIT_FAIL = 2
EXIT_USAGE = 3

EXIT_CODES = {
    "ok": EXIT_OK,
    "warn": EXIT_WARN,
    "fail": EXIT_FAIL,
    "not-installed": EXIT_FAIL,
}


class Options:
    def __init__(self):
        self.config = None
        self.json_path = None
        self.show_non_ok = False


pass_options = click.make_pass_decorator(Options, ensure=True)


def _host_info() -> dict:
    host = get_system_info()
    host.update(get_cpu_info())
    return host


def _gather(options: Options):
    root = options.config.get("host", "root", "/")
    os_release = get_os(root)
    logger.debug("host is SLES %s", os_release)
    return collect_snapshot(os_release, root)


@click.group(invoke_without_command=True)
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Path to a TOML configuration file.")
@click.option("--json", "json_path", type=click.Path(dir_okay=False),
              help="Also write the check result as JSON to this file.")
@click.option("--show-non-ok", is_flag=True, help="Only show findings that are not OK.")
@click.option("-v", "--verbose", is_flag=True, help="Log what is collected and checked.")
@click.pass_context
def cli(ctx, config_path: Optional[str], json_path: Optional[str], show_non_ok: bool, verbose: bool):
    """Check the sapconf or saptune setup of this SLES host."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    options = ctx.ensure_object(Options)
    options.config = load_config(config_path)
    options.json_path = json_path or options.config.get("report", "json_path")
    options.show_non_ok = show_non_ok or options.config.get("output", "show_non_ok", False)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_usage(), err=True)
        ctx.exit(EXIT_USAGE)


@cli.command("overview")
@pass_options
@click.pass_context
def overview_cmd(ctx, options: Options):
    """Show the collected facts without checking them."""
    try:
        snapshot = _gather(options)
    except CheckerError as e:
        click.echo(f"ERROR: {e}", err=True)
        ctx.exit(EXIT_FAIL)
    for line in format_overview(overview(snapshot), _host_info()):
        click.echo(line)
    ctx.exit(EXIT_OK)


def _run_check(ctx, options: Options, subsystem: str):
    color = options.config.get("output", "color", True)
    try:
        result = check(subsystem, _gather(options))
    except CheckerError as e:
        logger.debug("%s check aborted", subsystem, exc_info=True)
        click.echo(f"ERROR: {e}", err=True)
        ctx.exit(EXIT_FAIL)

    for line in format_result(result, color=color, show_non_ok=options.show_non_ok):
        click.echo(line)

    if options.json_path:
        try:
            path = write_json_report(build_report(result, _host_info()), options.json_path)
        except OSError as e:
            click.echo(f"ERROR: could not write report: {e}", err=True)
            ctx.exit(EXIT_FAIL)
        logger.info("wrote %s", path)

    ctx.exit(EXIT_CODES[result.status])


@cli.command("sapconf")
@pass_options
@click.pass_context
def sapconf_cmd(ctx, options: Options):
    """Check the sapconf setup."""
    _run_check(ctx, options, "sapconf")


@cli.command("saptune")
@pass_options
@click.pass_context
def saptune_cmd(ctx, options: Options):
    """Check the saptune setup."""
    _run_check(ctx, options, "saptune")


def main(argv=None) -> int:
    """Run the CLI and return the exit code; usage errors map to EXIT_USAGE."""
    try:
        rv = cli.main(args=argv, prog_name="tuning-check", standalone_mode=False)
    except click.UsageError as e:
        e.show()
        return EXIT_USAGE
    except click.ClickException as e:
        e.show()
        return EXIT_FAIL
    except click.Abort:
        click.echo("Aborted!", err=True)
        return EXIT_FAIL
    return rv if isinstance(rv, int) else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
