"""Makefile location.

Walks upward from the file being edited until a directory holding a Makefile
is found, or the filesystem root is reached. A configured override skips the
walk entirely.

Functions:
    - find_makefile: Ascend from a start path looking for a Makefile
    - resolve_makefile: Apply the override, else find_makefile, or raise
"""

import os
from pathlib import Path

import structlog

from makepick.config import MakePickSettings
from makepick.errors import MakefileNotFoundError

logger = structlog.get_logger()


def _start_directory(start_path: str | Path) -> Path | None:
    """Return the directory the ascent begins in.

    An existing directory is used as-is. Otherwise the path is treated as a
    file and its directory component is used; a bare name such as an unsaved
    buffer has no directory component and yields None.
    """
    raw = os.fspath(start_path)
    if not raw:
        return None

    path = Path(raw)
    if path.is_dir():
        return path.absolute()

    if not os.path.dirname(raw):
        return None

    return path.parent.absolute()


def find_makefile(
    start_path: str | Path,
    *,
    makefile_name: str = "Makefile",
    max_ascent: int | None = None,
) -> Path | None:
    """Find the nearest Makefile at or above start_path.

    Args:
        start_path: The file being edited, or a directory.
        makefile_name: File name to look for in each directory.
        max_ascent: Maximum number of parent directories to climb. None
            means climb until the filesystem root.

    Returns:
        Absolute path of the first Makefile found, or None if there is none
        anywhere up the chain (or start_path has no directory component).
    """
    directory = _start_directory(start_path)
    if directory is None:
        logger.debug("makefile_search_skipped", start_path=os.fspath(start_path))
        return None

    ascended = 0
    while True:
        candidate = directory / makefile_name
        if candidate.is_file():
            logger.debug("makefile_found", path=str(candidate), ascended=ascended)
            return candidate

        parent = directory.parent
        if parent == directory:
            break
        if max_ascent is not None and ascended >= max_ascent:
            break

        directory = parent
        ascended += 1

    logger.debug(
        "makefile_not_found",
        start_path=os.fspath(start_path),
        ascended=ascended,
    )
    return None


def resolve_makefile(start_path: str | Path, settings: MakePickSettings) -> Path:
    """Resolve the Makefile to use for start_path.

    When settings.makefile_override is set the search is bypassed and the
    override is used as given, provided it exists.

    Args:
        start_path: The file being edited, or a directory.
        settings: The active settings.

    Returns:
        Absolute path of the Makefile.

    Raises:
        MakefileNotFoundError: If the override does not exist, or no Makefile
            is found up the chain.
    """
    override = settings.override_path()
    if override is not None:
        if not override.is_file():
            raise MakefileNotFoundError(
                f"Configured Makefile does not exist: {override}",
                path=override,
            )
        logger.debug("makefile_override_used", path=str(override))
        return override

    makefile = find_makefile(
        start_path,
        makefile_name=settings.makefile_name,
        max_ascent=settings.max_ascent,
    )
    if makefile is None:
        raise MakefileNotFoundError(
            f"No {settings.makefile_name} found for {os.fspath(start_path) or '<unnamed>'}",
            path=start_path,
        )
    return makefile
