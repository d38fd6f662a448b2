"""Init command for makepick CLI.

This module provides the `makepick init` command that writes a .makepick.yml
holding the default settings.

Exit codes:
    0: Success
    1: Output file exists (without --force), or it could not be written
"""

from pathlib import Path
from typing import Annotated

import typer
import yaml

from makepick.config import SETTINGS_FILE_NAME, MakePickSettings
from makepick.locator import find_makefile


def init_command(
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help=f"Output path for {SETTINGS_FILE_NAME}",
        ),
    ] = Path(SETTINGS_FILE_NAME),
    makefile: Annotated[
        Path | None,
        typer.Option(
            "--makefile",
            "-f",
            help="Record this Makefile as makefile_override",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help=f"Overwrite an existing {SETTINGS_FILE_NAME}",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show what would be generated without writing",
        ),
    ] = False,
) -> None:
    """Write a settings file with the default configuration."""
    if output.exists() and not force and not dry_run:
        msg = f"Error: {output} already exists. Use --force to overwrite."
        typer.echo(msg, err=True)
        raise typer.Exit(1)

    settings = MakePickSettings(
        makefile_override=str(makefile) if makefile is not None else None,
    )
    yaml_content = yaml.dump(
        settings.model_dump(), default_flow_style=False, sort_keys=False
    )

    scan_dir = output.absolute().parent
    found = find_makefile(scan_dir)
    if makefile is None and found is not None:
        typer.echo(f"Makefile for {scan_dir}: {found}")

    if dry_run:
        typer.echo(f"\n--- Generated {SETTINGS_FILE_NAME} (dry run) ---")
        typer.echo(yaml_content)
        typer.echo("--- End ---")
        typer.echo(f"\nWould write to: {output}")
        return

    try:
        output.write_text(yaml_content)
    except OSError as e:
        typer.echo(f"Error: Failed to write {output}: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"Generated {output}")
    typer.echo("\nRun 'makepick doctor' to verify the configuration.")
