"""Build invocation.

Runs ``make <target>`` in the Makefile's directory as an asyncio subprocess
and hands back a BuildProcess whose output can be consumed line by line while
the build is still running.

The command is an argument vector with an explicit working directory; no shell
command line is ever assembled.

Classes:
    - BuildProcess: Handle to a running build
    - MakeInvoker: Launches builds and updates session memory

Functions:
    - build_command: Argument vector for a target
"""

from __future__ import annotations

import asyncio
import os
import signal
from collections.abc import AsyncIterator, Callable, Sequence
from pathlib import Path

import structlog

from makepick.errors import InvocationError
from makepick.session import SessionContext

logger = structlog.get_logger()

# File names GNU make reads without -f
DEFAULT_MAKEFILE_NAMES = ("GNUmakefile", "makefile", "Makefile")

# make and its recipe commands share a process group that terminate() signals
_NEW_PROCESS_GROUP = os.name == "posix"

OutputCallback = Callable[[str], None]


def build_command(
    makefile_path: Path,
    target: str,
    *,
    make_command: str = "make",
    extra_args: Sequence[str] = (),
) -> list[str]:
    """Build the make argument vector for a target.

    Args:
        makefile_path: Path to the Makefile; its directory is the cwd.
        target: The target to build.
        make_command: Path to the make binary.
        extra_args: Additional arguments placed before the target.

    Returns:
        The argument vector, e.g. ``["make", "clean"]``.
    """
    cmd = [make_command]
    if makefile_path.name not in DEFAULT_MAKEFILE_NAMES:
        cmd.extend(["-f", makefile_path.name])
    cmd.extend(extra_args)
    cmd.append(target)
    return cmd


class BuildProcess:
    """Handle to a launched build.

    Output is read incrementally: iterate ``lines()`` to receive each line as
    make prints it, or call ``wait()`` to drain the output and get the exit
    status. stderr is merged into stdout.

    Attributes:
        command: The argument vector that was executed.
        cwd: The working directory of the build.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        command: list[str],
        cwd: Path,
        on_output: OutputCallback | None = None,
    ) -> None:
        self._process = process
        self.command = command
        self.cwd = cwd
        self._on_output = on_output
        self._drained = False

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        """Exit status, or None while the build is running."""
        return self._process.returncode

    async def lines(self) -> AsyncIterator[str]:
        """Yield build output lines as they arrive.

        Each line is also passed to the on_output callback, if one was given.
        Output can only be consumed once.
        """
        stream = self._process.stdout
        if stream is None or self._drained:
            return

        while True:
            raw = await stream.readline()
            if not raw:
                break
            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            if self._on_output is not None:
                self._on_output(line)
            yield line

        self._drained = True

    async def wait(self) -> int:
        """Drain remaining output and return the build's exit status.

        Cancelling the wait terminates the build.
        """
        try:
            async for _ in self.lines():
                pass
            returncode = await self._process.wait()
        except asyncio.CancelledError:
            self.terminate()
            raise
        logger.info(
            "build_finished",
            command=self.command,
            cwd=str(self.cwd),
            exit_code=returncode,
        )
        return returncode

    def terminate(self) -> None:
        """Terminate the build. Does nothing once the build has exited.

        On POSIX the whole process group is signalled, so recipe commands
        that make spawned stop along with make itself.
        """
        if self._process.returncode is not None:
            return
        try:
            if _NEW_PROCESS_GROUP:
                os.killpg(self._process.pid, signal.SIGTERM)
            else:
                self._process.terminate()
        except ProcessLookupError:
            # Exited between the check and the signal
            return
        logger.info("build_terminated", pid=self.pid)


class MakeInvoker:
    """Launches make for a chosen target.

    Attributes:
        make_command: Path to the make binary.
        environment: Additional environment variables for make.
    """

    def __init__(
        self,
        make_command: str = "make",
        environment: dict[str, str] | None = None,
    ) -> None:
        self.make_command = make_command
        self.environment = dict(environment or {})

    async def run(
        self,
        makefile_path: Path,
        target: str | None,
        session: SessionContext,
        on_output: OutputCallback | None = None,
        extra_args: Sequence[str] = (),
    ) -> BuildProcess | None:
        """Launch ``make <target>`` in the Makefile's directory.

        Args:
            makefile_path: Path to the Makefile.
            target: The target to build. Empty or None launches nothing.
            session: Session memory; its last target is updated on launch.
            on_output: Called with each output line as it is read.
            extra_args: Additional make arguments placed before the target.

        Returns:
            The running build, or None if target was empty.

        Raises:
            InvocationError: If the subprocess cannot be launched.
        """
        if target is None or not target.strip():
            logger.debug("invocation_skipped", reason="empty_target")
            return None

        target = target.strip()
        cwd = makefile_path.parent
        cmd = build_command(
            makefile_path,
            target,
            make_command=self.make_command,
            extra_args=extra_args,
        )

        env = os.environ.copy()
        env.update(self.environment)

        group: dict[str, int] = {"process_group": 0} if _NEW_PROCESS_GROUP else {}
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=str(cwd),
                env=env,
                **group,
            )
        except FileNotFoundError as e:
            raise InvocationError(
                f"make command not found: {self.make_command}",
                path=makefile_path,
                cause=e,
            ) from e
        except OSError as e:
            raise InvocationError(
                f"Failed to execute make: {e}",
                path=makefile_path,
                cause=e,
            ) from e

        session.remember(target)
        logger.info("build_started", command=cmd, cwd=str(cwd), pid=process.pid)
        return BuildProcess(process, cmd, cwd, on_output=on_output)
