"""Shared fixtures for makepick tests."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

# Stand-in for make: reports its arguments and working directory, and exits
# with FAKE_MAKE_EXIT (default 0).
FAKE_MAKE_SCRIPT = """#!/bin/sh
echo "args: $*"
echo "cwd: $(pwd)"
echo "to stderr" >&2
exit "${FAKE_MAKE_EXIT:-0}"
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A /proj-like tree: Makefile at the root, sources one level down."""
    root = tmp_path / "proj"
    src = root / "src"
    src.mkdir(parents=True)
    (root / "Makefile").write_text("all:\n\techo hi\n\nclean:\n\trm -f *.o\n")
    (src / "main.c").write_text("int main(void) { return 0; }\n")
    return root


@pytest.fixture
def fake_make(tmp_path: Path) -> Path:
    """Executable shell script used in place of make."""
    script = tmp_path / "bin" / "fake-make"
    script.parent.mkdir()
    script.write_text(FAKE_MAKE_SCRIPT)
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script
