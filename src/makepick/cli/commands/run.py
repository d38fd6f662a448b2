"""Run command for makepick CLI.

This module provides the `makepick run` command: find the Makefile, pick a
target and build it, streaming make's output.

Exit codes:
    make's own exit status once a build ran (128 + N when make was killed
    by signal N), otherwise:
    2: Invalid settings
    3: No Makefile found
    4: Makefile unreadable
    5: No targets in the Makefile
    6: Invalid or empty target
    7: make could not be launched
    130: Selection cancelled
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from makepick.cli.context import load_cli_settings, report_error
from makepick.errors import CANCELLED_EXIT_CODE, InvalidTargetError, MakePickError
from makepick.runner import MakeRunner
from makepick.selection import PromptChooser, StaticChooser


def run_command(
    path: Annotated[
        Path,
        typer.Argument(help="File being edited, or a directory to search from"),
    ] = Path("."),
    target: Annotated[
        str | None,
        typer.Argument(help="Target to build (prompted for when omitted)"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a settings file (default: search for .makepick.yml)",
        ),
    ] = None,
    makefile: Annotated[
        Path | None,
        typer.Option(
            "--makefile",
            "-f",
            help="Use this Makefile instead of searching parent directories",
        ),
    ] = None,
    exclude: Annotated[
        str | None,
        typer.Option(
            "--exclude",
            help="Regular expression for target names to hide",
        ),
    ] = None,
    make_command: Annotated[
        str | None,
        typer.Option(
            "--make-command",
            help="Path to the make binary",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Print the commands make would run without running them",
        ),
    ] = False,
) -> None:
    """Choose a Makefile target and build it.

    Searches upward from PATH for the nearest Makefile, offers its targets
    and runs make with the chosen one in the Makefile's directory.

    Examples:
        makepick run src/main.c           # prompt for a target
        makepick run src/main.c clean     # build 'clean' directly
        makepick run -f build/Makefile .  # skip the search
    """
    start = path.absolute()
    settings = load_cli_settings(
        config,
        start,
        makefile_override=str(makefile) if makefile is not None else None,
        exclusion_pattern=exclude,
        make_command=make_command,
    )

    if target is not None and not target.strip():
        report_error(InvalidTargetError("Empty target", target=target))

    chooser = StaticChooser(target) if target is not None else PromptChooser()
    runner = MakeRunner(settings)

    try:
        outcome = asyncio.run(
            runner.run(start, chooser, on_output=typer.echo, dry_run=dry_run)
        )
    except MakePickError as e:
        report_error(e)

    if outcome.cancelled:
        typer.echo("Cancelled.", err=True)
        raise typer.Exit(CANCELLED_EXIT_CODE)

    raise typer.Exit(_exit_status(outcome.exit_code or 0))


def _exit_status(returncode: int) -> int:
    """Map a subprocess return code to a process exit status.

    A build killed by signal N has returncode -N; shells report that as
    128 + N, and so does makepick.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode
