"""
Keyboard shortcuts for the counter.

The trigger key (config.trigger_key) starts and stops listening, Shift+Tab
flips the result text between scripts, and Shift+Esc resets the count after
a second confirming press.
"""

import threading
import time
from typing import Callable, Optional

from .types import ConfigSnapshot


Callback = Optional[Callable[[], None]]


class InputController:
    """
    Turns pynput key events into engine calls.

    Wiring:
        controller = InputController(config.snapshot())
        controller.on_toggle_recording = engine.toggle
        controller.on_toggle_script = engine.toggle_script
        controller.on_reset = engine.reset
        keyboard.Listener(on_press=controller.on_key_press,
                          on_release=controller.on_key_release).start()

    pynput is imported on first key event so the controller can be built
    (and its reset logic tested) on machines without a display.
    """

    def __init__(self, config: ConfigSnapshot):
        self.config = config
        self.on_toggle_recording: Callback = None
        self.on_toggle_script: Callback = None
        self.on_reset: Callback = None
        self.on_reset_requested: Callback = None

        self._state_lock = threading.Lock()
        self._held_shift: set = set()
        self._trigger_down = False
        self._pending_reset: Optional[float] = None

    def on_key_press(self, key) -> None:
        from pynput.keyboard import Key

        if key in (Key.shift, Key.shift_l, Key.shift_r):
            self._held_shift.add(key)
            return

        if self._held_shift:
            if key == Key.esc:
                self._request_reset()
                return
            if key == Key.tab:
                _call(self.on_toggle_script)
                return

        if self._is_trigger_key(key) and self._latch_trigger():
            _call(self.on_toggle_recording)

    def on_key_release(self, key) -> None:
        from pynput.keyboard import Key

        if key in (Key.shift, Key.shift_l, Key.shift_r):
            self._held_shift.discard(key)
        elif self._is_trigger_key(key):
            with self._state_lock:
                self._trigger_down = False

    def _latch_trigger(self) -> bool:
        # Auto-repeat sends presses without releases; only the first counts.
        with self._state_lock:
            if self._trigger_down:
                return False
            self._trigger_down = True
            return True

    def _is_trigger_key(self, key) -> bool:
        from pynput.keyboard import Key, KeyCode

        name = self.config.trigger_key
        special = getattr(Key, name, None)
        if special is not None:
            return key == special
        return len(name) == 1 and isinstance(key, KeyCode) and key.char == name

    def _request_reset(self) -> None:
        """Arm a reset, or perform it if one was armed recently enough."""
        now = time.time()
        with self._state_lock:
            armed_at, self._pending_reset = self._pending_reset, now
            confirmed = armed_at is not None and now - armed_at <= self.config.reset_confirm_seconds
            if confirmed:
                self._pending_reset = None

        if confirmed:
            print("[Input] Count reset confirmed")
            _call(self.on_reset)
        else:
            print("[Input] Press Shift+Esc again to reset the count")
            _call(self.on_reset_requested)


def _call(callback: Callback) -> None:
    if callback:
        callback()
