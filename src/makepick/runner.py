"""Locate, extract, select and run in one cycle.

MakeRunner ties the locator, extractor, chooser and invoker together for one
invocation. Failures surface as MakePickError subclasses; none are retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from makepick.config import MakePickSettings
from makepick.errors import EmptyTargetListError, InvalidTargetError
from makepick.extractor import aread_targets, read_targets
from makepick.invoker import MakeInvoker, OutputCallback
from makepick.locator import resolve_makefile
from makepick.selection import Chooser, select_target
from makepick.session import SessionContext

logger = structlog.get_logger()


@dataclass
class RunOutcome:
    """Result of one run cycle.

    Attributes:
        makefile: The Makefile that was used.
        target: The chosen target (None when cancelled).
        exit_code: make's exit status (None when nothing ran).
        cancelled: Whether the user dismissed the selection.
        command: The argument vector executed (None when nothing ran).
    """

    makefile: Path
    target: str | None = None
    exit_code: int | None = None
    cancelled: bool = False
    command: list[str] | None = None


class MakeRunner:
    """Runs the locate -> extract -> select -> invoke cycle.

    Example:
        runner = MakeRunner(settings)
        outcome = await runner.run(Path("src/main.c"), StaticChooser("clean"))
    """

    def __init__(
        self,
        settings: MakePickSettings | None = None,
        session: SessionContext | None = None,
        invoker: MakeInvoker | None = None,
    ) -> None:
        self.settings = settings if settings is not None else MakePickSettings()
        self.session = (
            session
            if session is not None
            else SessionContext(history_size=self.settings.history_size)
        )
        self.invoker = (
            invoker
            if invoker is not None
            else MakeInvoker(
                make_command=self.settings.make_command,
                environment=self.settings.environment,
            )
        )

    def locate(self, start_path: str | Path) -> Path:
        """Resolve the Makefile for start_path.

        Raises:
            MakefileNotFoundError: If no Makefile can be used.
        """
        return resolve_makefile(start_path, self.settings)

    def targets(self, makefile_path: Path) -> list[str]:
        """Extract candidate targets from a Makefile.

        Raises:
            MakefileReadError: If the Makefile cannot be read.
            EmptyTargetListError: If no target survives exclusion.
        """
        return self._require_targets(
            makefile_path, read_targets(makefile_path, self.settings.exclusion)
        )

    async def atargets(self, makefile_path: Path) -> list[str]:
        """Like targets(), with the file read off the event loop."""
        return self._require_targets(
            makefile_path,
            await aread_targets(makefile_path, self.settings.exclusion),
        )

    def _require_targets(self, makefile_path: Path, targets: list[str]) -> list[str]:
        if not targets:
            raise EmptyTargetListError(
                f"No targets found in {makefile_path}",
                path=makefile_path,
            )
        return targets

    def validate(self, target: str, candidates: list[str]) -> str:
        """Check a chosen target against the candidates.

        Raises:
            InvalidTargetError: If the target is blank, or unlisted while
                allow_unlisted_targets is off.
        """
        target = target.strip()
        if not target:
            raise InvalidTargetError("Empty target", target=target)
        if any(c.isspace() for c in target):
            raise InvalidTargetError(
                f"Invalid target name: {target!r}", target=target
            )
        if target not in candidates and not self.settings.allow_unlisted_targets:
            raise InvalidTargetError(
                f"Unknown target: {target}. Available: {', '.join(candidates)}",
                target=target,
            )
        return target

    async def run(
        self,
        start_path: str | Path,
        chooser: Chooser,
        on_output: OutputCallback | None = None,
        dry_run: bool = False,
    ) -> RunOutcome:
        """Run one full cycle.

        Args:
            start_path: The file being edited, or a directory.
            chooser: Facility asked to pick among the candidates.
            on_output: Called with each build output line.
            dry_run: Pass -n to make (print commands without running them).

        Returns:
            RunOutcome describing what happened. A cancelled selection runs
            nothing and leaves the session unchanged.

        Raises:
            MakePickError: For any failure before or while launching make.
        """
        makefile = self.locate(start_path)
        candidates = await self.atargets(makefile)

        chosen = select_target(chooser, candidates, self.session)
        if chosen is None:
            logger.info("selection_cancelled", makefile=str(makefile))
            return RunOutcome(makefile=makefile, cancelled=True)

        target = self.validate(chosen, candidates)
        build = await self.invoker.run(
            makefile,
            target,
            self.session,
            on_output=on_output,
            extra_args=["-n"] if dry_run else (),
        )
        if build is None:
            return RunOutcome(makefile=makefile, cancelled=True)

        exit_code = await build.wait()
        return RunOutcome(
            makefile=makefile,
            target=target,
            exit_code=exit_code,
            command=build.command,
        )
