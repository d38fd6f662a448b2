"""makepick CLI entry point.

This module provides the main Typer application and entry point for the
`makepick` CLI.

Usage:
    makepick [-v] <command> ...    - -v enables debug logging
    makepick run [PATH] [TARGET]   - Choose a target and build it
    makepick targets [PATH]        - List candidate targets
    makepick where [PATH]          - Print the Makefile in use
    makepick doctor [PATH]         - Run diagnostics
    makepick init [options]        - Write a .makepick.yml
    makepick version [options]     - Show version information
"""

from typing import Annotated

import typer

from makepick.cli.commands import doctor, init, run, targets, version, where
from makepick.logconfig import configure_logging

app = typer.Typer(
    name="makepick",
    help="makepick - pick a Makefile target and build it",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging",
        ),
    ] = False,
) -> None:
    """makepick - pick a Makefile target and build it."""
    configure_logging(verbose)


app.command(name="run")(run.run_command)
app.command(name="targets")(targets.targets_command)
app.command(name="where")(where.where_command)
app.command(name="doctor")(doctor.doctor_command)
app.command(name="init")(init.init_command)
app.command(name="version")(version.version_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
