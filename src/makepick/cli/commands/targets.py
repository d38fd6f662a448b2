"""Targets command for makepick CLI.

This module provides the `makepick targets` command that prints the candidate
targets of the Makefile found for a path.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from makepick.cli.context import load_cli_settings, report_error
from makepick.errors import EmptyTargetListError, MakePickError
from makepick.extractor import read_makefile, scan_targets
from makepick.locator import resolve_makefile


def targets_command(
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
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Show line numbers and descriptions",
        ),
    ] = False,
) -> None:
    """List the targets of the nearest Makefile."""
    start = path.absolute()
    settings = load_cli_settings(
        config,
        start,
        makefile_override=str(makefile) if makefile is not None else None,
        exclusion_pattern=exclude,
    )

    try:
        makefile_path = resolve_makefile(start, settings)
        targets = scan_targets(read_makefile(makefile_path), settings.exclusion)
        if not targets:
            raise EmptyTargetListError(
                f"No targets found in {makefile_path}", path=makefile_path
            )
    except MakePickError as e:
        report_error(e)

    if json_output:
        data = {
            "makefile": str(makefile_path),
            "targets": [
                {
                    "name": t.name,
                    "line": t.line_number,
                    "description": t.description,
                }
                for t in targets
            ],
        }
        typer.echo(json.dumps(data, indent=2))
        return

    if not verbose:
        for t in targets:
            typer.echo(t.name)
        return

    typer.echo(f"Makefile: {makefile_path}\n")
    width = max(len(t.name) for t in targets)
    for t in targets:
        line = f"  {t.name:<{width}}  (line {t.line_number})"
        if t.description:
            line += f"  {t.description}"
        typer.echo(line)
