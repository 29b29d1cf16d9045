"""
Tests for the console display sink.
"""

import io


class TestRenderGrid:
    def test_marks_missing_positions(self):
        from mantracounter.display import render_grid

        grid = render_grid([1, 15])
        rows = grid.splitlines()

        assert len(rows) == 4
        assert "[Krsna]" in rows[0]
        assert rows[3].endswith("[Hare]")
        assert grid.count("[") == 2

    def test_no_missing(self):
        from mantracounter.display import render_grid

        assert "[" not in render_grid([])


class TestConsoleDisplay:
    """Tests for ConsoleDisplay output."""

    def test_prints_changes_only(self):
        from mantracounter.display import ConsoleDisplay
        from mantracounter.types import DisplayUpdate

        out = io.StringIO()
        display = ConsoleDisplay(out)

        display.show(DisplayUpdate(display_text="Correct Mantras: 0", control_title="Stop Recording"))
        display.show(DisplayUpdate(display_text="Correct Mantras: 0", control_title="Stop Recording"))

        lines = out.getvalue().splitlines()
        assert lines == ["[Stop Recording]", "Correct Mantras: 0"]

    def test_prints_result_and_grid(self):
        from mantracounter.display import ConsoleDisplay
        from mantracounter.types import DisplayUpdate

        out = io.StringIO()
        display = ConsoleDisplay(out)

        display.show(DisplayUpdate(
            display_text="Correct Mantras: 1",
            result_text="हरे कृष्णा",
            missing_first=[0],
            missing_second=[],
        ))

        text = out.getvalue()
        assert "  हरे कृष्णा" in text
        assert "Missing (first cycle): [0]" in text
        assert "[Hare]" in text

    def test_disabled_control(self):
        from mantracounter.display import ConsoleDisplay
        from mantracounter.types import DisplayUpdate

        out = io.StringIO()
        ConsoleDisplay(out, show_grid=False).show(DisplayUpdate(
            display_text="Correct Mantras: 0",
            control_title="Recording Not Available",
            control_enabled=False,
            missing_first=[3],
        ))

        assert "[Recording Not Available] (disabled)" in out.getvalue()
        assert "Missing" not in out.getvalue()
