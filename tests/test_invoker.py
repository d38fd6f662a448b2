"""Tests for build invocation.

Tests cover:
    - Argument vector construction (TestBuildCommand)
    - Launching, streaming and session updates (TestMakeInvoker)
    - BuildProcess termination (TestBuildProcess)
    - A real make run when make is installed (TestRealMake)
"""

from __future__ import annotations

import asyncio
import os
import shutil
import stat
from pathlib import Path

import pytest

from makepick.errors import InvocationError, MakePickErrorCode
from makepick.invoker import MakeInvoker, build_command
from makepick.session import SessionContext


def _output_value(lines: list[str], key: str) -> str:
    prefix = f"{key}: "
    return next(line[len(prefix) :] for line in lines if line.startswith(prefix))


class TestBuildCommand:
    """Tests for build_command()."""

    def test_plain_makefile(self) -> None:
        """Verify a default-named Makefile needs no -f."""
        assert build_command(Path("/proj/Makefile"), "clean") == ["make", "clean"]

    @pytest.mark.parametrize("name", ["makefile", "GNUmakefile"])
    def test_other_default_names(self, name: str) -> None:
        """Verify every name make reads by default skips -f."""
        assert build_command(Path("/proj") / name, "all") == ["make", "all"]

    def test_custom_name_adds_file_flag(self) -> None:
        """Verify non-default names are passed with -f."""
        cmd = build_command(Path("/other/build.mk"), "all")

        assert cmd == ["make", "-f", "build.mk", "all"]

    def test_make_command_and_extra_args(self) -> None:
        """Verify make_command and extra_args placement."""
        cmd = build_command(
            Path("/proj/Makefile"),
            "test",
            make_command="/usr/bin/gmake",
            extra_args=["-n"],
        )

        assert cmd == ["/usr/bin/gmake", "-n", "test"]

    def test_target_with_shell_metacharacters_is_one_argument(self) -> None:
        """Verify no shell quoting is involved."""
        cmd = build_command(Path("/a dir/Makefile"), "weird;rm -rf")

        assert cmd == ["make", "weird;rm -rf"]


class TestMakeInvoker:
    """Tests for MakeInvoker.run()."""

    @pytest.mark.asyncio
    async def test_runs_in_makefile_directory(
        self, project: Path, fake_make: Path
    ) -> None:
        """Verify the build runs in the Makefile's directory with the target."""
        invoker = MakeInvoker(make_command=str(fake_make))
        session = SessionContext()

        build = await invoker.run(project / "Makefile", "clean", session)

        assert build is not None
        lines = [line async for line in build.lines()]
        exit_code = await build.wait()

        assert exit_code == 0
        assert build.returncode == 0
        assert _output_value(lines, "args") == "clean"
        assert Path(_output_value(lines, "cwd")).resolve() == project.resolve()
        assert build.command == [str(fake_make), "clean"]
        assert build.cwd == project

    @pytest.mark.asyncio
    async def test_stderr_is_merged(self, project: Path, fake_make: Path) -> None:
        """Verify stderr output is delivered with stdout."""
        invoker = MakeInvoker(make_command=str(fake_make))

        build = await invoker.run(project / "Makefile", "all", SessionContext())

        assert build is not None
        lines = [line async for line in build.lines()]
        assert "to stderr" in lines

    @pytest.mark.asyncio
    async def test_on_output_receives_each_line(
        self, project: Path, fake_make: Path
    ) -> None:
        """Verify the output callback sees every line."""
        seen: list[str] = []
        invoker = MakeInvoker(make_command=str(fake_make))

        build = await invoker.run(
            project / "Makefile", "all", SessionContext(), on_output=seen.append
        )

        assert build is not None
        await build.wait()
        assert seen[0] == "args: all"
        assert len(seen) == 3

    @pytest.mark.asyncio
    async def test_nonzero_exit_passed_through(
        self, project: Path, fake_make: Path
    ) -> None:
        """Verify a failing build is reported by exit code, not an exception."""
        invoker = MakeInvoker(
            make_command=str(fake_make), environment={"FAKE_MAKE_EXIT": "2"}
        )

        build = await invoker.run(project / "Makefile", "all", SessionContext())

        assert build is not None
        assert await build.wait() == 2

    @pytest.mark.asyncio
    async def test_dispatch_updates_session(
        self, project: Path, fake_make: Path
    ) -> None:
        """Verify last target is recorded once the build is launched."""
        session = SessionContext()
        invoker = MakeInvoker(make_command=str(fake_make))

        build = await invoker.run(project / "Makefile", "clean", session)

        assert build is not None
        await build.wait()
        assert session.last_target == "clean"
        assert session.history == ["clean"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("target", [None, "", "   "])
    async def test_empty_target_is_a_no_op(
        self, project: Path, fake_make: Path, target: str | None
    ) -> None:
        """Verify an empty target launches nothing and leaves the session alone."""
        session = SessionContext()
        session.remember("all")
        invoker = MakeInvoker(make_command=str(fake_make))

        build = await invoker.run(project / "Makefile", target, session)

        assert build is None
        assert session.last_target == "all"
        assert session.history == ["all"]

    @pytest.mark.asyncio
    async def test_missing_make_raises_invocation_error(self, project: Path) -> None:
        """Verify a launch failure is an InvocationError and not remembered."""
        session = SessionContext()
        invoker = MakeInvoker(make_command="/nonexistent/bin/make-xyz")

        with pytest.raises(InvocationError) as exc_info:
            await invoker.run(project / "Makefile", "all", session)

        assert exc_info.value.code == MakePickErrorCode.INVOCATION_ERROR
        assert "make-xyz" in exc_info.value.message
        assert session.last_target is None

    @pytest.mark.asyncio
    async def test_environment_is_passed(
        self, project: Path, tmp_path: Path
    ) -> None:
        """Verify configured environment variables reach make."""
        script = tmp_path / "env-make"
        script.write_text('#!/bin/sh\necho "value: $MAKEPICK_TEST_VALUE"\n')
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        invoker = MakeInvoker(
            make_command=str(script), environment={"MAKEPICK_TEST_VALUE": "42"}
        )

        build = await invoker.run(project / "Makefile", "all", SessionContext())

        assert build is not None
        lines = [line async for line in build.lines()]
        assert _output_value(lines, "value") == "42"


class TestBuildProcess:
    """Tests for BuildProcess.terminate()."""

    @pytest.fixture
    def slow_make(self, tmp_path: Path) -> Path:
        script = tmp_path / "slow-make"
        script.write_text("#!/bin/sh\necho started\nexec sleep 30\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        return script

    @pytest.mark.asyncio
    async def test_terminate_running_build(
        self, project: Path, slow_make: Path
    ) -> None:
        """Verify terminate() stops a running build."""
        invoker = MakeInvoker(make_command=str(slow_make))
        build = await invoker.run(project / "Makefile", "all", SessionContext())
        assert build is not None

        first = await anext(build.lines())
        build.terminate()
        exit_code = await build.wait()

        assert first == "started"
        assert exit_code != 0

    @pytest.fixture
    def forking_make(self, tmp_path: Path) -> Path:
        # sleep runs as a child of the shell and inherits its stdout
        script = tmp_path / "forking-make"
        script.write_text("#!/bin/sh\necho started\nsleep 30\necho done\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        return script

    @pytest.mark.skipif(os.name != "posix", reason="process groups are POSIX only")
    @pytest.mark.asyncio
    async def test_terminate_stops_recipe_children(
        self, project: Path, forking_make: Path
    ) -> None:
        """Verify terminate() also stops commands make has spawned."""
        invoker = MakeInvoker(make_command=str(forking_make))
        build = await invoker.run(project / "Makefile", "all", SessionContext())
        assert build is not None

        assert await anext(build.lines()) == "started"
        build.terminate()
        exit_code = await asyncio.wait_for(build.wait(), timeout=10)

        assert exit_code != 0

    @pytest.mark.asyncio
    async def test_cancelled_wait_terminates_build(
        self, project: Path, slow_make: Path
    ) -> None:
        """Verify cancelling wait() stops the build."""
        invoker = MakeInvoker(make_command=str(slow_make))
        build = await invoker.run(project / "Makefile", "all", SessionContext())
        assert build is not None

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(build.wait(), timeout=0.5)

        assert await asyncio.wait_for(build.wait(), timeout=10) != 0

    @pytest.mark.asyncio
    async def test_terminate_is_idempotent(
        self, project: Path, fake_make: Path
    ) -> None:
        """Verify terminating a finished build is a no-op."""
        invoker = MakeInvoker(make_command=str(fake_make))
        build = await invoker.run(project / "Makefile", "all", SessionContext())
        assert build is not None
        await build.wait()

        build.terminate()
        build.terminate()

        assert build.returncode == 0


@pytest.mark.skipif(shutil.which("make") is None, reason="make is not installed")
class TestRealMake:
    """Runs the real make binary."""

    @pytest.mark.asyncio
    async def test_make_all_in_project(self, project: Path) -> None:
        """Verify `cd <proj> && make all` prints the recipe output."""
        session = SessionContext()

        build = await MakeInvoker().run(project / "Makefile", "all", session)

        assert build is not None
        lines = [line async for line in build.lines()]
        assert await build.wait() == 0
        assert "hi" in lines
        assert session.last_target == "all"

    @pytest.mark.asyncio
    async def test_unknown_target_fails_with_make_exit_code(
        self, project: Path
    ) -> None:
        """Verify make's own failure is passed through."""
        build = await MakeInvoker().run(
            project / "Makefile", "no-such-target", SessionContext()
        )

        assert build is not None
        assert await build.wait() == 2
