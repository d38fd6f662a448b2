"""Where command for makepick CLI.

This module provides the `makepick where` command that prints the Makefile
that `makepick run` would use for a path.
"""

from pathlib import Path
from typing import Annotated

import typer

from makepick.cli.context import load_cli_settings, report_error
from makepick.errors import MakePickError
from makepick.locator import resolve_makefile


def where_command(
    path: Annotated[
        Path,
        typer.Argument(help="File being edited, or a directory to search from"),
    ] = Path("."),
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a settings file (default: search for .makepick.yml)",
        ),
    ] = None,
    directory: Annotated[
        bool,
        typer.Option(
            "--dir",
            "-d",
            help="Print the Makefile's directory instead of its path",
        ),
    ] = False,
) -> None:
    """Print the path of the Makefile used for PATH."""
    start = path.absolute()
    settings = load_cli_settings(config, start)

    try:
        makefile_path = resolve_makefile(start, settings)
    except MakePickError as e:
        report_error(e)

    typer.echo(str(makefile_path.parent if directory else makefile_path))
