"""
Tests for the hotkey input controller.
"""

from unittest.mock import Mock, patch

import pytest


def make_controller(**config):
    from mantracounter.input import InputController
    from mantracounter.types import ConfigSnapshot

    controller = InputController(ConfigSnapshot(**config))
    controller.on_toggle_recording = Mock()
    controller.on_toggle_script = Mock()
    controller.on_reset = Mock()
    controller.on_reset_requested = Mock()
    return controller


class TestResetConfirmation:
    """Tests for the two-press reset confirmation."""

    def test_single_request_does_not_reset(self):
        controller = make_controller()

        controller._request_reset()

        controller.on_reset.assert_not_called()
        controller.on_reset_requested.assert_called_once()

    def test_second_request_within_window_resets(self):
        controller = make_controller(reset_confirm_seconds=3.0)

        with patch("mantracounter.input.time.time", side_effect=[100.0, 101.5]):
            controller._request_reset()
            controller._request_reset()

        controller.on_reset.assert_called_once()

    def test_second_request_after_window_asks_again(self):
        controller = make_controller(reset_confirm_seconds=3.0)

        with patch("mantracounter.input.time.time", side_effect=[100.0, 110.0, 111.0]):
            controller._request_reset()
            controller._request_reset()
            controller.on_reset.assert_not_called()

            controller._request_reset()

        controller.on_reset.assert_called_once()

    def test_confirmation_is_consumed(self):
        """Test a third press starts a new request instead of resetting again."""
        controller = make_controller()

        with patch("mantracounter.input.time.time", side_effect=[100.0, 100.5, 101.0]):
            controller._request_reset()
            controller._request_reset()
            controller._request_reset()

        controller.on_reset.assert_called_once()
        assert controller.on_reset_requested.call_count == 2


class TestKeyEvents:
    """Tests for key routing (needs a working pynput backend)."""

    @pytest.fixture(autouse=True)
    def keyboard(self):
        return pytest.importorskip("pynput.keyboard", exc_type=ImportError)

    def test_trigger_toggles_once_per_press(self, keyboard):
        controller = make_controller(trigger_key="alt_r")

        controller.on_key_press(keyboard.Key.alt_r)
        controller.on_key_press(keyboard.Key.alt_r)  # key repeat
        controller.on_key_release(keyboard.Key.alt_r)
        controller.on_key_press(keyboard.Key.alt_r)

        assert controller.on_toggle_recording.call_count == 2

    def test_character_trigger(self, keyboard):
        controller = make_controller(trigger_key="r")

        controller.on_key_press(keyboard.KeyCode.from_char("r"))
        controller.on_key_press(keyboard.KeyCode.from_char("x"))

        controller.on_toggle_recording.assert_called_once()

    def test_shift_esc_requests_reset(self, keyboard):
        controller = make_controller()

        controller.on_key_press(keyboard.Key.shift)
        controller.on_key_press(keyboard.Key.esc)
        controller.on_key_press(keyboard.Key.esc)

        controller.on_reset.assert_called_once()
        controller.on_toggle_recording.assert_not_called()

    def test_esc_without_shift_does_nothing(self, keyboard):
        controller = make_controller()

        controller.on_key_press(keyboard.Key.esc)

        controller.on_reset_requested.assert_not_called()

    def test_shift_tab_toggles_script(self, keyboard):
        controller = make_controller()

        controller.on_key_press(keyboard.Key.shift_r)
        controller.on_key_press(keyboard.Key.tab)
        controller.on_key_release(keyboard.Key.shift_r)
        controller.on_key_press(keyboard.Key.tab)

        controller.on_toggle_script.assert_called_once()
