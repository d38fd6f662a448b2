"""Shared helpers for CLI commands.

Functions:
    load_cli_settings: Load settings and apply command-line overrides.
    report_error: Print a MakePickError and exit with its status.
"""

from pathlib import Path
from typing import Any, NoReturn

import typer
import yaml
from pydantic import ValidationError

from makepick.config import MakePickSettings, find_settings_path, load_settings
from makepick.errors import EmptyTargetListError, MakePickError, MakePickErrorCode


def load_cli_settings(
    config: Path | None,
    start: Path,
    **overrides: Any,
) -> MakePickSettings:
    """Load settings for a command and apply its option overrides.

    Args:
        config: Explicit settings file, or None to search from start.
        start: The path the command operates on.
        **overrides: Setting values given on the command line; None values
            are ignored.

    Returns:
        The validated settings.

    Raises:
        typer.Exit: With the CONFIG_INVALID status if loading fails.
    """
    exit_code = MakePickErrorCode.CONFIG_INVALID.exit_code

    if config is not None and not config.exists():
        typer.echo(f"Error: Settings file not found: {config}", err=True)
        raise typer.Exit(exit_code)

    settings_path = config if config is not None else find_settings_path(start)

    try:
        settings = (
            load_settings(settings_path)
            if settings_path is not None
            else MakePickSettings()
        )
        updates = {key: value for key, value in overrides.items() if value is not None}
        if updates:
            if "makefile_override" in updates:
                updates["makefile_override"] = str(
                    Path(updates["makefile_override"]).expanduser().absolute()
                )
            data = settings.model_dump()
            data.update(updates)
            settings = MakePickSettings.model_validate(data)
    except yaml.YAMLError as e:
        typer.echo(f"Error: Invalid YAML in {settings_path}: {e}", err=True)
        raise typer.Exit(exit_code) from e
    except (ValidationError, ValueError) as e:
        typer.echo(f"Error: Invalid settings: {e}", err=True)
        raise typer.Exit(exit_code) from e

    return settings


def report_error(error: MakePickError) -> NoReturn:
    """Print an error for the user and exit with its status.

    An empty target list is informational and is not prefixed with "Error".
    """
    if isinstance(error, EmptyTargetListError):
        typer.echo(error.message, err=True)
    else:
        typer.echo(f"Error: {error.message}", err=True)
    raise typer.Exit(error.exit_code)
