"""Version command for makepick CLI.

This module provides the `makepick version` command. With --verbose it also
reports the runtime and the make binary builds would use by default.
"""

import importlib.metadata
import shutil
import sys
from typing import Annotated

import typer

from makepick import __version__

# Distributions whose versions are reported with --verbose
REPORTED_DISTRIBUTIONS = ("pydantic", "pyyaml", "structlog", "typer")


def _distribution_version(name: str) -> str:
    try:
        return importlib.metadata.version(name)
    except importlib.metadata.PackageNotFoundError:
        return "not installed"


def version_command(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Also show Python, library and make details",
        ),
    ] = False,
) -> None:
    """Show makepick version information."""
    typer.echo(f"makepick {__version__}")
    if not verbose:
        return

    typer.echo(f"python {sys.version.split()[0]} ({sys.executable})")
    make_path = shutil.which("make")
    typer.echo(f"make {make_path or 'not found on PATH'}")

    typer.echo("\nLibraries:")
    for name in REPORTED_DISTRIBUTIONS:
        typer.echo(f"  {name} {_distribution_version(name)}")
