"""
Chant counter with speculative increment and correction.

Every transcript delta may contribute at most one name. The counter bumps
first, then takes the bump back if the delta carried words that did not
normalize to a chant token (a revised or retracted transcript).
"""

from typing import Literal

from .store import CountStore, COUNT_KEY
from .types import CounterState


ListenState = Literal["idle", "listening"]


class ChantCounter:
    """
    Owns total_matches and writes every change through to the store.

    Not thread-safe on its own: the engine serializes all calls.

    Usage:
        counter = ChantCounter(store)
        counter.record_delta(word_count=4, token_count=4)
        counter.state.mantra_count
    """

    def __init__(self, store: CountStore, key: str = COUNT_KEY):
        self.store = store
        self.key = key
        self.listen_state: ListenState = "idle"
        self._total = max(0, int(store.get(key)))

    @property
    def total_matches(self) -> int:
        return self._total

    @property
    def state(self) -> CounterState:
        return CounterState(total_matches=self._total)

    def _set_total(self, value: int) -> None:
        self._total = max(0, value)
        self.store.set(self.key, self._total)

    def record_delta(self, word_count: int, token_count: int) -> CounterState:
        """
        Apply one delta event.

        Args:
            word_count: words in the raw transcript
            token_count: words that normalized to a chant token

        Returns:
            Counter state after reconciliation
        """
        self._set_total(self._total + 1)

        # Empty deltas carry no name either
        if word_count == 0 or word_count - token_count > 0:
            self._set_total(self._total - 1)

        return self.state

    def reset(self) -> CounterState:
        """Zero the count. Idempotent."""
        self._set_total(0)
        print("[Counter] Count reset")
        return self.state

    def start_listening(self) -> None:
        self.listen_state = "listening"

    def stop_listening(self) -> None:
        self.listen_state = "idle"
