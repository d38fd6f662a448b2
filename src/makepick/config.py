"""Configuration models and utilities.

This module provides Pydantic models for validating and loading makepick
settings from YAML files, with support for environment variable expansion.

Models:
    - MakePickSettings: Root configuration model

Functions:
    - expand_env_vars: Expand ${VAR} patterns in strings
    - expand_env_vars_in_dict: Recursively expand env vars in nested dicts
    - find_settings_path: Locate a settings file for a start directory
    - load_settings: Load and validate settings from a YAML file
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, PrivateAttr, field_validator

# Names starting with ".", or containing "$" or "%"
DEFAULT_EXCLUSION_PATTERN = r"^\.|[$%]"

SETTINGS_ENV_VAR = "MAKEPICK_SETTINGS"
SETTINGS_FILE_NAME = ".makepick.yml"


class MakePickSettings(BaseModel):
    """Root configuration model for makepick.

    Attributes:
        version: Configuration schema version.
        makefile_override: Fixed Makefile path; skips the directory search.
        makefile_name: File name the directory search looks for.
        max_ascent: Maximum number of parent directories to climb (None for
            no limit other than the filesystem root).
        exclusion_pattern: Regular expression hiding internal and pattern-rule
            targets from the candidate list.
        make_command: Path to the make binary.
        environment: Additional environment variables for make execution.
        history_size: Number of previously chosen targets remembered.
        allow_unlisted_targets: Accept a chosen target that is not among the
            extracted candidates.
    """

    version: str = "1"

    makefile_override: str | None = Field(
        default=None,
        description="Use this Makefile instead of searching parent directories",
    )

    makefile_name: str = Field(
        default="Makefile",
        min_length=1,
        description="File name searched for in each ancestor directory",
    )

    max_ascent: int | None = Field(
        default=None,
        ge=0,
        description="Maximum number of parent directories to climb",
    )

    exclusion_pattern: str = Field(
        default=DEFAULT_EXCLUSION_PATTERN,
        description="Regular expression; matching target names are hidden",
    )

    make_command: str = Field(
        default="make",
        min_length=1,
        description="Path to the make binary",
    )

    environment: dict[str, str] = Field(
        default_factory=dict,
        description="Additional environment variables for make execution",
    )

    history_size: int = Field(
        default=20,
        ge=1,
        description="Number of previously chosen targets to remember",
    )

    allow_unlisted_targets: bool = Field(
        default=False,
        description="Accept targets that were not extracted from the Makefile",
    )

    _exclusion: re.Pattern[str] = PrivateAttr()

    @field_validator("exclusion_pattern")
    @classmethod
    def validate_exclusion_pattern(cls, v: str) -> str:
        """Reject malformed regular expressions at load time."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid exclusion pattern {v!r}: {e}") from e
        return v

    @field_validator("makefile_name")
    @classmethod
    def validate_makefile_name(cls, v: str) -> str:
        """Validate that the Makefile name is a bare file name."""
        if "/" in v or "\\" in v:
            raise ValueError(
                f"Invalid makefile_name: {v}. "
                "The name should not contain path separators."
            )
        return v

    def model_post_init(self, __context: Any) -> None:
        self._exclusion = re.compile(self.exclusion_pattern)

    @property
    def exclusion(self) -> re.Pattern[str]:
        """The compiled exclusion pattern."""
        return self._exclusion

    def override_path(self, base_directory: Path | None = None) -> Path | None:
        """Resolve makefile_override to an absolute path.

        Args:
            base_directory: Directory relative overrides are resolved against.
                Defaults to the current working directory.

        Returns:
            The absolute override path, or None when no override is set.
        """
        if not self.makefile_override:
            return None

        path = Path(self.makefile_override).expanduser()
        if not path.is_absolute():
            path = (base_directory or Path.cwd()) / path
        return path.absolute()


# Environment variable expansion pattern: ${VAR_NAME}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """Expand ${VAR} patterns with environment variables.

    Args:
        value: String potentially containing ${VAR} patterns.

    Returns:
        String with all ${VAR} patterns replaced with environment variable values.

    Raises:
        ValueError: If a referenced environment variable is not set.

    Example:
        >>> os.environ["PROJECT_ROOT"] = "/work/proj"
        >>> expand_env_vars("${PROJECT_ROOT}/Makefile")
        "/work/proj/Makefile"
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise ValueError(f"Environment variable '{var_name}' not set")
        return env_value

    return _ENV_VAR_PATTERN.sub(replacer, value)


def expand_env_vars_in_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand environment variables in a nested dictionary.

    The exclusion_pattern key is left untouched: "$" is meaningful regex
    syntax there.

    Args:
        data: Dictionary potentially containing ${VAR} patterns in string values.

    Returns:
        New dictionary with all ${VAR} patterns expanded.

    Raises:
        ValueError: If a referenced environment variable is not set.
    """
    result: dict[str, Any] = {}

    for key, value in data.items():
        if key == "exclusion_pattern":
            result[key] = value
        elif isinstance(value, str):
            result[key] = expand_env_vars(value)
        elif isinstance(value, dict):
            result[key] = expand_env_vars_in_dict(value)
        elif isinstance(value, list):
            result[key] = [
                expand_env_vars(item) if isinstance(item, str) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def find_settings_path(start: str | Path | None = None) -> Path | None:
    """Find the settings file for a start directory.

    Searches for settings in:
        1. MAKEPICK_SETTINGS environment variable (if set and existing)
        2. .makepick.yml in the start directory and each of its ancestors
        3. ~/.makepick/settings.yml

    Args:
        start: Directory (or file) the search begins from. Defaults to the
            current working directory.

    Returns:
        Path to the settings file if found, None otherwise.
    """
    env_path = os.environ.get(SETTINGS_ENV_VAR)
    if env_path:
        path = Path(env_path).expanduser()
        if path.is_file():
            return path

    directory = Path(start).absolute() if start is not None else Path.cwd()
    if not directory.is_dir():
        directory = directory.parent

    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / SETTINGS_FILE_NAME
        if candidate.is_file():
            return candidate

    home_settings = Path.home() / ".makepick" / "settings.yml"
    if home_settings.is_file():
        return home_settings

    return None


def load_settings(path: str | Path) -> MakePickSettings:
    """Load and validate settings from a YAML file.

    Performs environment variable expansion on string values before
    validation. A relative makefile_override is resolved against the
    directory containing the settings file.

    Args:
        path: Path to the settings file.

    Returns:
        Validated MakePickSettings instance.

    Raises:
        FileNotFoundError: If the settings file does not exist.
        yaml.YAMLError: If the file contains invalid YAML.
        pydantic.ValidationError: If the configuration is invalid.
        ValueError: If environment variable expansion fails.

    Example:
        >>> settings = load_settings("~/.makepick/settings.yml")
        >>> settings.exclusion.pattern
        '^\\.|[$%]'
    """
    path = Path(path).expanduser()

    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with path.open() as f:
        data = yaml.safe_load(f)

    # Handle empty file
    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")

    data = expand_env_vars_in_dict(data)

    settings = MakePickSettings.model_validate(data)
    if settings.makefile_override:
        resolved = settings.override_path(path.absolute().parent)
        settings = settings.model_copy(update={"makefile_override": str(resolved)})
    return settings
