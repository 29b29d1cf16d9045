"""
Transcription feeds driven by the engine.

A recognizer delivers TranscriptDelta events carrying its full running
transcript for the current utterance. The engine starts it, cancels it, and
restarts it every few seconds; everything else about speech-to-text lives
behind this interface.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO
import sys
import threading

from .types import TranscriptDelta


DeltaCallback = Callable[[TranscriptDelta], None]


class RecognizerUnavailable(Exception):
    """Audio input or speech engine could not be started."""


class Recognizer(ABC):
    """
    Base class for transcription feeds.

    Subclasses must implement:
    - start(): Begin a recognition session, delivering deltas to on_delta
    - cancel(): Abandon the current session; no further deltas for it
    """

    name: str = "base"

    @abstractmethod
    def start(self, on_delta: DeltaCallback) -> None:
        """
        Start a new recognition session.

        Raises:
            RecognizerUnavailable: if audio input cannot be configured
        """
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the in-flight session. Safe to call when idle."""
        pass

    def configure_audio(self) -> None:
        """Re-acquire audio input after returning to the foreground."""
        pass


class LineFeedRecognizer(Recognizer):
    """
    Reads recognized words from a text stream, one or more words per line.

    Each line extends the running transcript of the current session and is
    delivered as a delta with the whole transcript so far, the way a live
    speech engine revises its best transcription. cancel() drops the running
    transcript. End of stream delivers a final delta.

    Usage:
        recognizer = LineFeedRecognizer(sys.stdin)
        engine = ChantEngine(snapshot, recognizer, store)
    """

    name = "lines"

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdin
        self._lock = threading.Lock()
        self._on_delta: Optional[DeltaCallback] = None
        self._words: list[str] = []
        self._reader: Optional[threading.Thread] = None
        self._eof = False
        self.finished = threading.Event()  # set once the stream is exhausted

    def start(self, on_delta: DeltaCallback) -> None:
        if self._eof:
            raise RecognizerUnavailable("input stream closed")

        with self._lock:
            self._on_delta = on_delta
            self._words = []

        # One reader for the lifetime of the stream; sessions just rebind
        # the callback.
        if self._reader is None:
            self._reader = threading.Thread(target=self._read_loop, daemon=True)
            self._reader.start()

    def cancel(self) -> None:
        with self._lock:
            self._on_delta = None
            self._words = []

    def _read_loop(self) -> None:
        for line in self.stream:
            words = line.split()
            if not words:
                continue
            with self._lock:
                callback = self._on_delta
                if callback is None:
                    continue  # between sessions, speech is lost
                self._words.extend(words)
                text = " ".join(self._words)
            callback(TranscriptDelta(text=text))

        # Nothing new was said; the final delta only ends the session
        self._eof = True
        with self._lock:
            callback = self._on_delta
            self._on_delta = None
        if callback is not None:
            callback(TranscriptDelta(text="", is_final=True))
        self.finished.set()
