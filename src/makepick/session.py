"""Per-process session memory.

SessionContext holds the last chosen target and the history of chosen
targets. It is passed explicitly into selection and invocation; nothing is
written to disk.
"""

from dataclasses import dataclass, field


@dataclass
class SessionContext:
    """Remembered choices for the lifetime of the host process.

    Attributes:
        last_target: The most recently dispatched target, if any.
        history: Previously dispatched targets, most recent first, without
            repeats.
        history_size: Maximum number of history entries kept.
    """

    last_target: str | None = None
    history: list[str] = field(default_factory=list)
    history_size: int = 20

    def remember(self, target: str) -> None:
        """Record a dispatched target as last target and in the history."""
        self.last_target = target
        if target in self.history:
            self.history.remove(target)
        self.history.insert(0, target)
        del self.history[self.history_size :]

    def clear(self) -> None:
        self.last_target = None
        self.history.clear()
