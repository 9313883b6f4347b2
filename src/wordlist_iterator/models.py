"""Data models for wordlist-iterator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class IteratorState(str, Enum):
    """Lifecycle of a WordlistIterator.

    INIT -> OPENING -> EMPTY_CHECK -> (CLOSED | STREAMING), then
    STREAMING <-> PAUSED until one of EXHAUSTED, CANCELLED or ERRORED.
    """

    INIT = "init"
    OPENING = "opening"
    EMPTY_CHECK = "empty_check"
    STREAMING = "streaming"
    PAUSED = "paused"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    ERRORED = "errored"
    CLOSED = "closed"

    @property
    def terminal(self) -> bool:
        """True once the underlying source is guaranteed released."""
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset(
    {
        IteratorState.EXHAUSTED,
        IteratorState.CANCELLED,
        IteratorState.ERRORED,
        IteratorState.CLOSED,
    }
)


@dataclass(frozen=True, slots=True)
class Batch:
    """Lines decoded between one resume and the next pause.

    Attributes:
        lines: Decoded lines, newline stripped, in file order
        first_index: Global 0-indexed line number of lines[0]; equals the
            number of lines delivered in all earlier batches
        final: True when the source reached end of input and no further
            batch will follow
    """

    lines: list[str] = field(default_factory=list)
    first_index: int = 0
    final: bool = False

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def last_index(self) -> int:
        """Global index of the last line (first_index - 1 when empty)."""
        return self.first_index + len(self.lines) - 1
