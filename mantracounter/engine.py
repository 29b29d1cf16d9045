"""
Reconciliation engine and recognition session control.

One ChantEngine owns the word window, the counter, the restart timer and the
highlight state. Every input (recognizer deltas, timer ticks, user and
lifecycle signals) is posted to a single queue and handled on one worker
thread, so alignment always sees a consistent window.
"""

import threading
import time
import traceback
from dataclasses import dataclass
from queue import Queue, Empty
from typing import Any, Callable, List, Literal, Optional, TYPE_CHECKING

from .align import find_missing
from .counter import ChantCounter
from .normalize import DISPLAY_LABELS, normalize_text, to_devanagari
from .recognizer import Recognizer, RecognizerUnavailable
from .store import CountStore
from .types import (
    ConfigSnapshot, CounterState, DisplayUpdate, TranscriptDelta,
    REFERENCE_PATTERN,
)
from .window import WordWindow

if TYPE_CHECKING:
    from .metrics import MetricsWriter


EngineState = Literal["stopped", "recording"]

LISTENING_PROMPT = "(Go ahead, I'm listening)"
TITLE_START = "Start Recording"
TITLE_STOP = "Stop Recording"
TITLE_UNAVAILABLE = "Recording Not Available"
TITLE_RECOGNITION_UNAVAILABLE = "Recognition Not Available"

# threading.Timer-compatible: factory(interval, function) -> .start() / .cancel()
TimerFactory = Callable[[float, Callable[[], None]], Any]


@dataclass(frozen=True)
class Event:
    """Message on the engine queue."""
    kind: str
    payload: Any = None
    session: int = 0


_SHUTDOWN = Event("shutdown")


def format_count(state: CounterState, mode: str = "mantras") -> str:
    """
    Primary counter line.

    Examples:
        format_count(CounterState(20)) -> "Correct Mantras: 1"
        format_count(CounterState(20), "detailed") -> "Names: 20 Mantras: 1 Rounds: 0"
    """
    if mode == "detailed":
        return (f"Names: {state.total_matches} Mantras: {state.mantra_count} "
                f"Rounds: {state.round_count}")
    return f"Correct Mantras: {state.mantra_count}"


class ChantEngine:
    """
    Serialized owner of all counting state.

    Public methods (start, stop, reset, ...) only post events and may be
    called from any thread. handle() does the work and must only run on the
    worker (or synchronously in tests via drain()).

    Usage:
        engine = ChantEngine(config.snapshot(), recognizer, store, display=sink.show)
        engine.start_worker()
        engine.start()
        ...
        engine.shutdown()
    """

    def __init__(
        self,
        config: ConfigSnapshot,
        recognizer: Recognizer,
        store: CountStore,
        display: Optional[Callable[[DisplayUpdate], None]] = None,
        metrics: Optional["MetricsWriter"] = None,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.config = config
        self.recognizer = recognizer
        self.display = display
        self.metrics = metrics
        self.timer_factory = timer_factory

        self.window = WordWindow()
        self.counter = ChantCounter(store)

        # Runtime state (worker thread only)
        self.state: EngineState = "stopped"
        self.show_devanagari: bool = config.show_devanagari
        self.result_words: List[str] = []
        self.missing_first: List[int] = []
        self.missing_second: List[int] = []
        self.control_title: str = TITLE_START
        self.control_enabled: bool = True
        self.display_text: str = format_count(self.counter.state, config.display_mode)
        self.last_update: Optional[DisplayUpdate] = None

        self._session = 0  # bumps on every recognizer start/cancel
        self._restart_timer = None
        self._grace_timer = None
        self._highlight_timer = None
        self._highlight_generation = 0
        self._first_run = True
        self._resume_on_foreground = False
        self._session_started_at = 0.0

        self._events: Queue[Event] = Queue()
        self._worker: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # Thread-safe API
    # ------------------------------------------------------------------

    def post(self, kind: str, payload: Any = None, session: int = 0) -> None:
        self._events.put(Event(kind, payload, session))

    def start(self) -> None:
        self.post("start")

    def stop(self) -> None:
        self.post("stop")

    def toggle(self) -> None:
        self.post("toggle")

    def reset(self) -> None:
        """Zero the count. Callers confirm with the user first."""
        self.post("reset")

    def toggle_script(self) -> None:
        self.post("toggle_script")

    def enter_background(self) -> None:
        self.post("background")

    def enter_foreground(self) -> None:
        self.post("foreground")

    def availability_changed(self, available: bool) -> None:
        self.post("availability", available)

    def start_worker(self) -> None:
        """Run the event loop on a background thread."""
        if self._worker is None:
            self._worker = threading.Thread(target=self.run, daemon=True, name="chant-engine")
            self._worker.start()

    def run(self) -> None:
        """Consume events until shutdown."""
        while True:
            event = self._events.get()
            if event is _SHUTDOWN:
                break
            self._dispatch(event)

    def drain(self) -> int:
        """Handle every queued event on the calling thread. Returns count."""
        handled = 0
        while True:
            try:
                event = self._events.get_nowait()
            except Empty:
                return handled
            if event is _SHUTDOWN:
                return handled
            self._dispatch(event)
            handled += 1

    def shutdown(self, timeout: float = 2.0) -> None:
        """Stop recording, close the queue and join the worker."""
        self.post("stop")
        self._events.put(_SHUTDOWN)
        if self._worker is not None:
            self._worker.join(timeout=timeout)
            self._worker = None
        self._cancel_timers()

    def _dispatch(self, event: Event) -> None:
        try:
            self.handle(event)
        except Exception as e:
            print(f"[Engine] Error handling {event.kind}: {e}")
            traceback.print_exc()

    # ------------------------------------------------------------------
    # Event handling (worker thread only)
    # ------------------------------------------------------------------

    def handle(self, event: Event) -> None:
        handler = getattr(self, f"_on_{event.kind}", None)
        if handler is None:
            print(f"[Engine] Unknown event: {event.kind}")
            return
        handler(event)

    def _on_start(self, event: Event) -> None:
        if self.state == "recording":
            return

        try:
            self._begin_recognition()
        except RecognizerUnavailable as e:
            print(f"[Engine] Recording not available: {e}")
            self._set_control(TITLE_UNAVAILABLE, enabled=False)
            self._publish()
            return

        self.state = "recording"
        self.counter.start_listening()
        self._session_started_at = time.time()
        self._set_control(TITLE_STOP)

        if self._first_run:
            self.display_text = LISTENING_PROMPT
            self._first_run = False

        print("[Engine] Recording started")
        if self.metrics:
            self.metrics.log(
                "session_start",
                locale=self.config.locale,
                total=self.counter.total_matches,
            )
        self._publish()

    def _on_stop(self, event: Event) -> None:
        if self.state != "recording":
            return
        self._finish_session("stopped")
        self._publish()

    def _on_toggle(self, event: Event) -> None:
        if self.state == "recording":
            self._on_stop(event)
        else:
            self._on_start(event)

    def _on_delta(self, event: Event) -> None:
        if event.session != self._session or self.state != "recording":
            return  # stale: from a cancelled recognition session

        delta: TranscriptDelta = event.payload
        if delta.error is None and delta.text.strip():
            self._apply_transcript(delta.text)

        if delta.error is not None or delta.is_final:
            reason = f"error: {delta.error}" if delta.error else "final"
            self._finish_session(reason)

        self._publish()

    def _on_restart(self, event: Event) -> None:
        """Restart timer fired: tear down recognition, resume after grace."""
        if event.session != self._session or self.state != "recording":
            return

        print("[Engine] Restarting recognition")
        self._end_recognition()
        self.window.reset()
        if self.metrics:
            self.metrics.log("restart", total=self.counter.total_matches)

        session = self._session
        self._grace_timer = self._schedule(
            self.config.restart_grace,
            lambda: self.post("resume", session=session),
        )

    def _on_resume(self, event: Event) -> None:
        if event.session != self._session or self.state != "recording":
            return

        self._grace_timer = None
        try:
            self._begin_recognition()
        except RecognizerUnavailable as e:
            print(f"[Engine] Restart failed: {e}")
            self.state = "stopped"
            self.counter.stop_listening()
            self._set_control(TITLE_UNAVAILABLE, enabled=False)
            self._publish()
            return

        self._set_control(TITLE_STOP)
        self._publish()

    def _on_reset(self, event: Event) -> None:
        self.counter.reset()
        self.result_words = []
        self.display_text = format_count(self.counter.state, self.config.display_mode)
        if self.metrics:
            self.metrics.log("count_reset")
        self._publish()

    def _on_toggle_script(self, event: Event) -> None:
        self.show_devanagari = not self.show_devanagari
        script = "Sanskrit" if self.show_devanagari else "Roman"
        print(f"[Engine] Characters are now {script}")
        self._publish()

    def _on_background(self, event: Event) -> None:
        self._resume_on_foreground = self.state == "recording"
        if self.state == "recording":
            self._finish_session("background")
            self._publish()

    def _on_foreground(self, event: Event) -> None:
        try:
            self.recognizer.configure_audio()
        except RecognizerUnavailable as e:
            print(f"[Engine] Audio input unavailable: {e}")
            self._set_control(TITLE_UNAVAILABLE, enabled=False)
            self._resume_on_foreground = False
            self._publish()
            return

        if self._resume_on_foreground:
            self._resume_on_foreground = False
            self._on_start(event)

    def _on_availability(self, event: Event) -> None:
        if event.payload:
            if self.state != "recording":
                self._set_control(TITLE_START)
        else:
            self._set_control(TITLE_RECOGNITION_UNAVAILABLE, enabled=False)
        self._publish()

    def _on_highlight_expired(self, event: Event) -> None:
        if event.payload != self._highlight_generation:
            return  # superseded by a newer highlight
        self._highlight_timer = None
        self.missing_first = []
        self.missing_second = []
        self._publish()

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _apply_transcript(self, text: str) -> None:
        """Normalize, window, align and count one running transcript."""
        words = text.split()
        normalized = normalize_text(text, self.config.locale)

        self.window.push(normalized.tokens)
        self.missing_first = find_missing(REFERENCE_PATTERN, self.window.first_cycle)
        self.missing_second = find_missing(REFERENCE_PATTERN, self.window.second_cycle)

        state = self.counter.record_delta(len(words), len(normalized.tokens))
        self.display_text = format_count(state, self.config.display_mode)
        self.result_words = [DISPLAY_LABELS[t] for t in self.window.tokens if t]

        if self.missing_first or self.missing_second:
            self._arm_highlight_expiry()

        if self.metrics:
            self.metrics.log(
                "transcript_delta",
                words=len(words),
                tokens=len(normalized.tokens),
                total=state.total_matches,
                missing_first=self.missing_first,
                missing_second=self.missing_second,
            )

    @property
    def result_text(self) -> str:
        roman = " ".join(self.result_words)
        return to_devanagari(roman) if self.show_devanagari else roman

    # ------------------------------------------------------------------
    # Recognition session plumbing
    # ------------------------------------------------------------------

    def _begin_recognition(self) -> None:
        """Start a recognizer session and arm the restart timer."""
        self._session += 1
        session = self._session
        self.recognizer.start(lambda delta: self.post("delta", delta, session=session))
        self._restart_timer = self._schedule(
            self.config.restart_interval,
            lambda: self.post("restart", session=session),
        )

    def _end_recognition(self) -> None:
        """Invalidate the timer and cancel the in-flight session."""
        self._session += 1
        if self._restart_timer is not None:
            self._restart_timer.cancel()
            self._restart_timer = None
        if self._grace_timer is not None:
            self._grace_timer.cancel()
            self._grace_timer = None
        self.recognizer.cancel()

    def _finish_session(self, reason: str) -> None:
        self._end_recognition()
        self.state = "stopped"
        self.counter.stop_listening()
        self._set_control(TITLE_START)

        elapsed = time.time() - self._session_started_at
        print(f"[Engine] Recording stopped ({reason}) after {elapsed:.1f}s")
        if self.metrics:
            self.metrics.log(
                "session_stop",
                reason=reason,
                duration_s=round(elapsed, 2),
                total=self.counter.total_matches,
            )

    def _arm_highlight_expiry(self) -> None:
        self._highlight_generation += 1
        generation = self._highlight_generation
        if self._highlight_timer is not None:
            self._highlight_timer.cancel()
        self._highlight_timer = self._schedule(
            self.config.highlight_seconds,
            lambda: self.post("highlight_expired", generation),
        )

    def _schedule(self, interval: float, fn: Callable[[], None]):
        timer = self.timer_factory(interval, fn)
        if isinstance(timer, threading.Timer):
            timer.daemon = True
        timer.start()
        return timer

    def _cancel_timers(self) -> None:
        for timer in (self._restart_timer, self._grace_timer, self._highlight_timer):
            if timer is not None:
                timer.cancel()
        self._restart_timer = None
        self._grace_timer = None
        self._highlight_timer = None

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def _set_control(self, title: str, enabled: bool = True) -> None:
        self.control_title = title
        self.control_enabled = enabled

    def _publish(self) -> None:
        update = DisplayUpdate(
            display_text=self.display_text,
            result_text=self.result_text,
            missing_first=list(self.missing_first),
            missing_second=list(self.missing_second),
            control_title=self.control_title,
            control_enabled=self.control_enabled,
            counter=self.counter.state,
        )
        self.last_update = update
        if self.display:
            self.display(update)
