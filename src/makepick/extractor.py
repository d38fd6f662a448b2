"""Makefile target extraction.

Targets are found by a line-oriented regular expression, not by evaluating the
Makefile: variables, includes and pattern rules are never resolved. Any line
that begins with ``name:`` counts as a rule, including a column-zero line that
happens to sit inside a recipe.

Functions:
    - extract_targets: Candidate target names in file order
    - scan_targets: Same selection as MakeTarget records with descriptions
    - read_targets: Read a Makefile and extract its targets
    - aread_targets: read_targets without blocking the event loop
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from pathlib import Path

import structlog

from makepick.config import DEFAULT_EXCLUSION_PATTERN
from makepick.errors import MakefileReadError

logger = structlog.get_logger()

DEFAULT_EXCLUSION = re.compile(DEFAULT_EXCLUSION_PATTERN)

# "name:" at column zero; "name:=" and "name::=" are assignments, not rules
TARGET_PATTERN = re.compile(r"^([^\s:=#]+):(?!:?=)")


@dataclass
class MakeTarget:
    """A candidate target found in a Makefile.

    Attributes:
        name: The target name as written in the Makefile.
        line_number: 1-based line of the rule.
        description: Text of a ``##`` comment above or after the rule.
    """

    name: str
    line_number: int
    description: str | None = None


def scan_targets(
    contents: str,
    exclusion: re.Pattern[str] = DEFAULT_EXCLUSION,
    description_prefix: str = "##",
) -> list[MakeTarget]:
    """Scan Makefile text for candidate targets.

    Args:
        contents: The raw Makefile text.
        exclusion: Names for which ``exclusion.search`` matches are dropped.
        description_prefix: Comment prefix marking a target description.

    Returns:
        Targets in the order they appear in the file. Repeated rules for the
        same name are all kept.
    """
    prefix = re.escape(description_prefix)
    inline_desc = re.compile(rf"{prefix}\s*(.+)$")
    above_desc = re.compile(rf"^{prefix}\s*(.+)$")

    targets: list[MakeTarget] = []
    previous = ""

    for index, line in enumerate(contents.splitlines()):
        match = TARGET_PATTERN.match(line)
        if match is not None and not exclusion.search(match.group(1)):
            description = None
            inline = inline_desc.search(line, match.end())
            if inline is not None:
                description = inline.group(1).strip()
            else:
                above = above_desc.match(previous)
                if above is not None:
                    description = above.group(1).strip()

            targets.append(
                MakeTarget(
                    name=match.group(1),
                    line_number=index + 1,
                    description=description,
                )
            )
        previous = line

    return targets


def extract_targets(
    contents: str,
    exclusion: re.Pattern[str] = DEFAULT_EXCLUSION,
) -> list[str]:
    """Return candidate target names in file order.

    Args:
        contents: The raw Makefile text.
        exclusion: Names for which ``exclusion.search`` matches are dropped.

    Returns:
        Target names, possibly with duplicates. Empty when nothing matches.
    """
    names: list[str] = []
    for line in contents.splitlines():
        match = TARGET_PATTERN.match(line)
        if match is None:
            continue
        name = match.group(1)
        if exclusion.search(name):
            continue
        names.append(name)
    return names


def read_makefile(makefile_path: Path) -> str:
    """Read Makefile text.

    Raises:
        MakefileReadError: If the file cannot be read or decoded.
    """
    try:
        return makefile_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MakefileReadError(
            f"Could not read Makefile: {e}",
            path=makefile_path,
            cause=e,
        ) from e


def read_targets(
    makefile_path: Path,
    exclusion: re.Pattern[str] = DEFAULT_EXCLUSION,
) -> list[str]:
    """Read a Makefile and extract its candidate targets.

    Args:
        makefile_path: Path to the Makefile.
        exclusion: Names for which ``exclusion.search`` matches are dropped.

    Returns:
        Target names in file order.

    Raises:
        MakefileReadError: If the Makefile cannot be read.
    """
    contents = read_makefile(makefile_path)
    targets = extract_targets(contents, exclusion)
    logger.debug("targets_extracted", path=str(makefile_path), count=len(targets))
    return targets


async def aread_targets(
    makefile_path: Path,
    exclusion: re.Pattern[str] = DEFAULT_EXCLUSION,
) -> list[str]:
    """Async variant of read_targets.

    File I/O is wrapped with asyncio.to_thread() to avoid blocking.
    """
    return await asyncio.to_thread(read_targets, makefile_path, exclusion)
