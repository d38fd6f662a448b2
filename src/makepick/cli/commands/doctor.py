"""Doctor command for makepick CLI.

This module provides the `makepick doctor` command that diagnoses common
issues and suggests fixes.

Checks performed:
    1. Settings file can be found and is valid
    2. A Makefile is found for the path
    3. The Makefile is readable and has targets
    4. The make command is on PATH
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError

from makepick.config import MakePickSettings, find_settings_path, load_settings
from makepick.errors import MakefileNotFoundError, MakefileReadError
from makepick.extractor import extract_targets, read_makefile
from makepick.locator import resolve_makefile


@dataclass
class CheckResult:
    """Result of a diagnostic check.

    Attributes:
        name: Short name of the check.
        passed: Whether the check passed.
        message: Descriptive message about the result.
        suggestion: Optional suggestion for fixing failures.
    """

    name: str
    passed: bool
    message: str
    suggestion: str | None = None


def doctor_command(
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
) -> None:
    """Diagnose common issues and suggest fixes.

    Runs a series of diagnostic checks on the settings and the Makefile
    found for PATH and reports the results.
    """
    typer.echo("Running diagnostics...\n")

    start = path.absolute()
    checks: list[CheckResult] = []

    settings_check, settings = _check_settings(config, start)
    checks.append(settings_check)

    if settings is not None:
        makefile_check, makefile_path = _check_makefile_located(start, settings)
        checks.append(makefile_check)

        if makefile_path is not None:
            checks.extend(_check_makefile_contents(makefile_path, settings))

        checks.append(_check_make_command(settings))

    _display_results(checks)

    has_failures = any(not check.passed for check in checks)
    if has_failures:
        raise typer.Exit(1)


def _check_settings(
    config: Path | None, start: Path
) -> tuple[CheckResult, MakePickSettings | None]:
    """Check that settings can be loaded.

    Args:
        config: Explicit settings path, or None to search.
        start: Directory the search begins from.

    Returns:
        Tuple of (CheckResult, settings or None).
    """
    settings_path = config if config is not None else find_settings_path(start)

    if settings_path is None:
        return (
            CheckResult(
                name="Settings",
                passed=True,
                message="No settings file found, using defaults",
            ),
            MakePickSettings(),
        )

    if not settings_path.exists():
        return (
            CheckResult(
                name="Settings",
                passed=False,
                message=f"Not found: {settings_path}",
                suggestion="Run 'makepick init' to create a settings file.",
            ),
            None,
        )

    try:
        settings = load_settings(settings_path)
    except yaml.YAMLError as e:
        return (
            CheckResult(
                name="Settings",
                passed=False,
                message=f"Invalid YAML in {settings_path}: {e}",
                suggestion="Check the YAML syntax and fix any formatting errors.",
            ),
            None,
        )
    except (ValidationError, ValueError) as e:
        return (
            CheckResult(
                name="Settings",
                passed=False,
                message=f"Invalid settings in {settings_path}: {e}",
                suggestion="Fix the reported fields in the settings file.",
            ),
            None,
        )

    return (
        CheckResult(
            name="Settings",
            passed=True,
            message=f"Loaded: {settings_path}",
        ),
        settings,
    )


def _check_makefile_located(
    start: Path, settings: MakePickSettings
) -> tuple[CheckResult, Path | None]:
    """Check that a Makefile is found for the start path."""
    try:
        makefile_path = resolve_makefile(start, settings)
    except MakefileNotFoundError as e:
        suggestion = (
            "Fix makefile_override in the settings file."
            if settings.makefile_override
            else f"Create a {settings.makefile_name} or pass --makefile."
        )
        return (
            CheckResult(
                name="Makefile",
                passed=False,
                message=e.message,
                suggestion=suggestion,
            ),
            None,
        )

    return (
        CheckResult(
            name="Makefile",
            passed=True,
            message=f"Found: {makefile_path}",
        ),
        makefile_path,
    )


def _check_makefile_contents(
    makefile_path: Path, settings: MakePickSettings
) -> list[CheckResult]:
    """Check that the Makefile is readable and offers targets."""
    try:
        contents = read_makefile(makefile_path)
    except MakefileReadError as e:
        return [
            CheckResult(
                name="Readable",
                passed=False,
                message=e.message,
                suggestion="Check the file permissions.",
            )
        ]

    results = [
        CheckResult(name="Readable", passed=True, message="Makefile is readable")
    ]

    targets = extract_targets(contents, settings.exclusion)
    if targets:
        preview = ", ".join(targets[:5])
        if len(targets) > 5:
            preview += ", ..."
        results.append(
            CheckResult(
                name="Targets",
                passed=True,
                message=f"{len(targets)} target(s): {preview}",
            )
        )
    else:
        results.append(
            CheckResult(
                name="Targets",
                passed=False,
                message="No targets survive the exclusion pattern",
                suggestion=(
                    f"Check exclusion_pattern ({settings.exclusion_pattern!r})."
                ),
            )
        )

    return results


def _check_make_command(settings: MakePickSettings) -> CheckResult:
    """Check that the make binary can be found."""
    make_path = shutil.which(settings.make_command)
    if make_path is None:
        return CheckResult(
            name="make command",
            passed=False,
            message=f"Not found on PATH: {settings.make_command}",
            suggestion="Install make or set make_command in the settings file.",
        )
    return CheckResult(
        name="make command",
        passed=True,
        message=f"Found: {make_path}",
    )


def _display_results(checks: list[CheckResult]) -> None:
    """Display check results in a human-readable format.

    Args:
        checks: List of CheckResults to display.
    """
    passed_count = 0
    failed_count = 0

    for check in checks:
        if check.passed:
            passed_count += 1
            prefix = "[PASS]"
        else:
            failed_count += 1
            prefix = "[FAIL]"

        typer.echo(f"{prefix} {check.name}: {check.message}")

        if check.suggestion:
            typer.echo(f"       Suggestion: {check.suggestion}")

    typer.echo()
    typer.echo(f"Summary: {passed_count} passed, {failed_count} errors")
