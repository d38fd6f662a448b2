"""Target selection.

The choice itself belongs to whatever interactive facility hosts makepick.
This module defines the contract toward it (Chooser) together with the two
choosers the CLI uses.

Classes:
    - Chooser: Protocol for presenting candidates and returning a choice
    - PromptChooser: Numbered list plus a typer prompt
    - StaticChooser: Returns a value fixed up front

Functions:
    - select_target: Ask a chooser, using session memory for defaults
"""

from collections.abc import Sequence
from typing import Protocol

import typer

from makepick.session import SessionContext


class Chooser(Protocol):
    """Presents candidate targets and returns the user's choice."""

    def choose(
        self,
        candidates: Sequence[str],
        default: str | None,
        history: Sequence[str],
    ) -> str | None:
        """Return the chosen target, or None (or "") when cancelled."""
        ...


class StaticChooser:
    """Chooser that always answers with a predetermined value."""

    def __init__(self, value: str | None) -> None:
        self.value = value

    def choose(
        self,
        candidates: Sequence[str],
        default: str | None,
        history: Sequence[str],
    ) -> str | None:
        return self.value


class PromptChooser:
    """Chooser that prints the candidates and prompts on the terminal.

    The answer may be a target name or the 1-based number printed next to it.
    Pressing enter accepts the default; with no default, or on Ctrl-C/Ctrl-D,
    the selection is cancelled.
    """

    def __init__(self, prompt_text: str = "Target") -> None:
        self.prompt_text = prompt_text

    def choose(
        self,
        candidates: Sequence[str],
        default: str | None,
        history: Sequence[str],
    ) -> str | None:
        for number, name in enumerate(candidates, start=1):
            typer.echo(f"  {number:>3}) {name}")

        if history:
            typer.echo(f"Recent: {', '.join(history[:5])}")

        try:
            answer = typer.prompt(
                self.prompt_text,
                default=default or "",
                show_default=bool(default),
            )
        except typer.Abort:
            return None

        answer = answer.strip()
        if answer.isdigit():
            index = int(answer) - 1
            if 0 <= index < len(candidates):
                return candidates[index]
        return answer


def select_target(
    chooser: Chooser,
    candidates: Sequence[str],
    session: SessionContext,
) -> str | None:
    """Ask the chooser for a target.

    The session's last target is offered as the default and its history is
    passed along. The session is never modified here.

    Args:
        chooser: The interactive facility to ask.
        candidates: Candidate targets in file order.
        session: Session memory supplying default and history.

    Returns:
        The chosen target, or None if the selection was cancelled or empty.
    """
    answer = chooser.choose(
        list(candidates),
        session.last_target,
        list(session.history),
    )
    if answer is None:
        return None
    answer = answer.strip()
    return answer or None
