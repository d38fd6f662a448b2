"""Error types and error codes.

This module defines the error hierarchy for makepick. Every failure the tool
reports to a user carries a MakePickErrorCode, which also decides the CLI exit
status.

Classes:
    - MakePickErrorCode: Enum of error codes for categorizing failures
    - MakePickError: Base exception for all makepick errors
    - MakefileNotFoundError: No Makefile in any ancestor directory
    - MakefileReadError: Makefile located but unreadable
    - EmptyTargetListError: No candidate target survived exclusion
    - InvalidTargetError: Chosen target is empty or not a candidate
    - InvocationError: The build command could not be launched
"""

from enum import Enum
from pathlib import Path


class MakePickErrorCode(str, Enum):
    """Error codes for makepick operations.

    Used to categorize errors for logging and to select the exit status of
    the command-line interface.
    """

    CONFIG_INVALID = "CONFIG_INVALID"
    NOT_FOUND = "NOT_FOUND"
    READ_ERROR = "READ_ERROR"
    EMPTY_TARGET_LIST = "EMPTY_TARGET_LIST"
    INVALID_TARGET = "INVALID_TARGET"
    INVOCATION_ERROR = "INVOCATION_ERROR"

    @property
    def exit_code(self) -> int:
        """Process exit status used by the CLI for this error."""
        return _EXIT_CODES[self]


_EXIT_CODES = {
    MakePickErrorCode.CONFIG_INVALID: 2,
    MakePickErrorCode.NOT_FOUND: 3,
    MakePickErrorCode.READ_ERROR: 4,
    MakePickErrorCode.EMPTY_TARGET_LIST: 5,
    MakePickErrorCode.INVALID_TARGET: 6,
    MakePickErrorCode.INVOCATION_ERROR: 7,
}

# Exit status when the user dismisses the target prompt
CANCELLED_EXIT_CODE = 130


class MakePickError(Exception):
    """Base exception for makepick errors.

    Attributes:
        code: The error code categorizing this error.
        message: Human-readable error message.
        path: The Makefile or start path involved (if applicable).
        cause: The underlying exception that caused this error (if any).

    Example:
        raise MakePickError(
            code=MakePickErrorCode.READ_ERROR,
            message="Cannot read Makefile",
            path=makefile_path,
            cause=original_exception,
        )
    """

    def __init__(
        self,
        code: MakePickErrorCode,
        message: str,
        path: str | Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: The error code for this error.
            message: Human-readable error message.
            path: Path involved in the failure (optional).
            cause: The underlying exception (optional).
        """
        self.code = code
        self.message = message
        self.path = str(path) if path is not None else None
        self.cause = cause

        super().__init__(f"[{code.value}] {message}")

    @property
    def exit_code(self) -> int:
        return self.code.exit_code


class MakefileNotFoundError(MakePickError):
    """Raised when no Makefile exists at the override path or up the ancestry."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(MakePickErrorCode.NOT_FOUND, message, path=path)


class MakefileReadError(MakePickError):
    """Raised when a located Makefile cannot be read."""

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(MakePickErrorCode.READ_ERROR, message, path=path, cause=cause)


class EmptyTargetListError(MakePickError):
    """Raised when a readable Makefile yields no candidate targets.

    This is informational: the Makefile is fine, it just has nothing to offer.
    """

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(MakePickErrorCode.EMPTY_TARGET_LIST, message, path=path)


class InvalidTargetError(MakePickError):
    """Raised when the chosen target is not one of the candidates."""

    def __init__(self, message: str, target: str | None = None) -> None:
        self.target = target
        super().__init__(MakePickErrorCode.INVALID_TARGET, message)


class InvocationError(MakePickError):
    """Raised when the build subprocess fails to launch.

    A build that launches and exits non-zero is not an InvocationError.
    """

    def __init__(
        self,
        message: str,
        path: str | Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            MakePickErrorCode.INVOCATION_ERROR, message, path=path, cause=cause
        )
