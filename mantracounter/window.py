"""
Fixed-size window over the most recent chant tokens.
"""

from collections import deque
from typing import Iterable, List

from .types import Token, EMPTY, NAMES_PER_MANTRA


WINDOW_SIZE = 2 * NAMES_PER_MANTRA  # two chant cycles


class WordWindow:
    """
    Right-aligned buffer of the last 32 tokens, head-padded with EMPTY.

    The recognizer resupplies its whole running transcript on every delta,
    so push() replaces the content rather than appending to it.

    Usage:
        window = WordWindow()
        window.push(tokens)
        find_missing(REFERENCE_PATTERN, window.first_cycle)
    """

    def __init__(self, size: int = WINDOW_SIZE):
        self.size = size
        self._slots: deque = deque([EMPTY] * size, maxlen=size)

    def push(self, tokens: Iterable[Token]) -> List[Token]:
        """Replace content with tokens, keeping the newest `size` of them."""
        slots = deque([EMPTY] * self.size, maxlen=self.size)
        slots.extend(tokens)  # maxlen evicts from the head
        self._slots = slots
        return self.tokens

    def reset(self) -> None:
        """Restore all-padding state (session restart)."""
        self._slots = deque([EMPTY] * self.size, maxlen=self.size)

    @property
    def tokens(self) -> List[Token]:
        return list(self._slots)

    @property
    def first_cycle(self) -> List[Token]:
        return self.tokens[:self.size // 2]

    @property
    def second_cycle(self) -> List[Token]:
        return self.tokens[self.size // 2:]

    def __len__(self) -> int:
        return len(self._slots)
