"""Tests for session memory and target selection.

Tests cover:
    - SessionContext remembering and history bounds (TestSessionContext)
    - select_target() contract toward choosers (TestSelectTarget)
    - PromptChooser terminal interaction (TestPromptChooser)
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest
import typer

from makepick.selection import PromptChooser, StaticChooser, select_target
from makepick.session import SessionContext


class RecordingChooser:
    """Chooser that records what it was offered."""

    def __init__(self, answer: str | None) -> None:
        self.answer = answer
        self.calls: list[tuple[list[str], str | None, list[str]]] = []

    def choose(
        self,
        candidates: Sequence[str],
        default: str | None,
        history: Sequence[str],
    ) -> str | None:
        self.calls.append((list(candidates), default, list(history)))
        return self.answer


class TestSessionContext:
    """Tests for SessionContext."""

    def test_starts_empty(self) -> None:
        """Verify a new session remembers nothing."""
        session = SessionContext()

        assert session.last_target is None
        assert session.history == []

    def test_remember_sets_last_target(self) -> None:
        """Verify remember() updates last_target and history."""
        session = SessionContext()

        session.remember("build")
        session.remember("clean")

        assert session.last_target == "clean"
        assert session.history == ["clean", "build"]

    def test_remember_moves_repeat_to_front(self) -> None:
        """Verify a repeated target is not duplicated in history."""
        session = SessionContext()

        for target in ["build", "test", "build"]:
            session.remember(target)

        assert session.history == ["build", "test"]

    def test_history_is_bounded(self) -> None:
        """Verify history keeps at most history_size entries."""
        session = SessionContext(history_size=2)

        for target in ["a", "b", "c"]:
            session.remember(target)

        assert session.history == ["c", "b"]

    def test_clear(self) -> None:
        """Verify clear() forgets everything."""
        session = SessionContext()
        session.remember("build")

        session.clear()

        assert session.last_target is None
        assert session.history == []


class TestSelectTarget:
    """Tests for select_target()."""

    def test_passes_candidates_default_and_history(self) -> None:
        """Verify the chooser receives candidates, last target and history."""
        session = SessionContext()
        session.remember("test")
        session.remember("build")
        chooser = RecordingChooser("clean")

        chosen = select_target(chooser, ["build", "test", "clean"], session)

        assert chosen == "clean"
        assert chooser.calls == [
            (["build", "test", "clean"], "build", ["build", "test"])
        ]

    def test_duplicates_are_passed_through(self) -> None:
        """Verify duplicate candidates reach the chooser unchanged."""
        chooser = RecordingChooser("install")

        select_target(chooser, ["install", "install"], SessionContext())

        assert chooser.calls[0][0] == ["install", "install"]

    @pytest.mark.parametrize("answer", [None, "", "   "])
    def test_cancelled_selection(self, answer: str | None) -> None:
        """Verify None and blank answers mean cancelled."""
        session = SessionContext()

        assert select_target(StaticChooser(answer), ["build"], session) is None

    def test_answer_is_stripped(self) -> None:
        """Verify surrounding whitespace is removed."""
        chosen = select_target(StaticChooser("  build \n"), ["build"], SessionContext())

        assert chosen == "build"

    def test_session_not_modified(self) -> None:
        """Verify selection alone never touches session memory."""
        session = SessionContext()
        session.remember("test")

        select_target(StaticChooser("build"), ["build", "test"], session)
        select_target(StaticChooser(None), ["build", "test"], session)

        assert session.last_target == "test"
        assert session.history == ["test"]


class TestPromptChooser:
    """Tests for PromptChooser."""

    def test_accepts_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify a typed target name is returned."""
        monkeypatch.setattr(typer, "prompt", lambda *args, **kwargs: "clean")

        assert PromptChooser().choose(["all", "clean"], None, []) == "clean"

    def test_accepts_number(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify a 1-based number selects the listed candidate."""
        monkeypatch.setattr(typer, "prompt", lambda *args, **kwargs: "2")

        assert PromptChooser().choose(["all", "clean"], None, []) == "clean"

    def test_out_of_range_number_returned_verbatim(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Verify a number outside the list is returned as typed."""
        monkeypatch.setattr(typer, "prompt", lambda *args, **kwargs: "9")

        assert PromptChooser().choose(["all", "clean"], None, []) == "9"

    def test_default_offered(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify the last target is passed as the prompt default."""
        seen: dict[str, object] = {}

        def fake_prompt(text: str, **kwargs: object) -> str:
            seen.update(kwargs)
            return str(kwargs["default"])

        monkeypatch.setattr(typer, "prompt", fake_prompt)

        assert PromptChooser().choose(["all", "clean"], "clean", ["clean"]) == "clean"
        assert seen["default"] == "clean"
        assert seen["show_default"] is True

    def test_abort_cancels(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify Ctrl-C/Ctrl-D at the prompt cancels the selection."""

        def aborting_prompt(*args: object, **kwargs: object) -> str:
            raise typer.Abort()

        monkeypatch.setattr(typer, "prompt", aborting_prompt)

        assert PromptChooser().choose(["all"], None, []) is None

    def test_lists_candidates(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Verify candidates are printed with their numbers."""
        monkeypatch.setattr(typer, "prompt", lambda *args, **kwargs: "")

        PromptChooser().choose(["all", "clean"], None, ["all"])

        out = capsys.readouterr().out
        assert "1) all" in out
        assert "2) clean" in out
        assert "Recent: all" in out
