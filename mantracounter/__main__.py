"""
Main entry point for Mantra Counter.

Run with: python -m mantracounter

Recognized words are read from stdin, one or more per line, e.g. piped
from a speech recognizer. Flags:
    --hindi        match Devanagari transcripts
    --detailed     show names, mantras and rounds
    --no-keyboard  don't install the global hotkey listener
    --ephemeral    keep the count in memory only
"""

import signal
import sys
from typing import List, Optional

from .config import Config
from .display import ConsoleDisplay
from .engine import ChantEngine
from .input import InputController
from .metrics import MetricsWriter
from .recognizer import LineFeedRecognizer
from .store import JsonCountStore, MemoryCountStore


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    argv = sys.argv[1:] if argv is None else argv

    print("Mantra Counter starting...")

    config = Config.load()
    if "--hindi" in argv:
        config.locale = "hi"
    if "--detailed" in argv:
        config.display_mode = "detailed"
    snapshot = config.snapshot()
    print(f"  Locale: {snapshot.locale}")
    print(f"  Restart every {snapshot.restart_interval:.0f}s")

    if "--ephemeral" in argv:
        store = MemoryCountStore()
    else:
        store = JsonCountStore(config.state_file)
        print(f"  Count file: {config.state_file}")

    metrics = MetricsWriter(config.metrics_file)
    display = ConsoleDisplay()

    feed = LineFeedRecognizer(sys.stdin)
    engine = ChantEngine(
        snapshot,
        feed,
        store,
        display=display.show,
        metrics=metrics,
    )
    engine.start_worker()

    listener = None
    if "--no-keyboard" not in argv:
        listener = _start_keyboard(snapshot, engine)

    def close():
        if listener:
            listener.stop()
        engine.shutdown()
        metrics.shutdown()
        print(f"Stopped at {engine.counter.total_matches} names")

    def on_signal(signum, frame):
        print("\nInterrupted")
        close()
        sys.exit(0)

    signal.signal(signal.SIGINT, on_signal)
    signal.signal(signal.SIGTERM, on_signal)

    engine.start()
    print("Ready! Chant away. Press Ctrl+C to quit.")

    # Wait in short slices so signals still reach the main thread
    while not feed.finished.wait(timeout=0.5):
        pass

    close()
    return 0


def _start_keyboard(snapshot, engine: ChantEngine):
    """Start the global hotkey listener, or None if unavailable."""
    try:
        from pynput import keyboard
    except Exception as e:
        print(f"  Keyboard listener unavailable: {e}")
        return None

    controller = InputController(snapshot)
    controller.on_toggle_recording = engine.toggle
    controller.on_toggle_script = engine.toggle_script
    controller.on_reset = engine.reset

    listener = keyboard.Listener(
        on_press=controller.on_key_press,
        on_release=controller.on_key_release,
    )
    listener.start()
    print(f"  Keyboard listener started ({snapshot.trigger_key} toggles recording, Shift+Esc twice resets)")
    return listener


if __name__ == "__main__":
    sys.exit(main())
