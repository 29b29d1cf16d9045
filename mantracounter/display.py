"""
Console display sink.
"""

from typing import List, Optional, TextIO
import sys

from .types import DisplayUpdate, REFERENCE_PATTERN


GRID_COLUMNS = 4


def render_grid(missing: List[int], columns: int = GRID_COLUMNS) -> str:
    """
    Render the reference chant as a grid, bracketing missing positions.

    render_grid([1]) shows "[Krsna]" in the second cell of the first row.
    """
    missing_set = set(missing)
    cells = []
    for index, word in enumerate(REFERENCE_PATTERN):
        cell = f"[{word}]" if index in missing_set else f" {word} "
        cells.append(f"{cell:<8}")

    rows = []
    for start in range(0, len(cells), columns):
        rows.append("".join(cells[start:start + columns]).rstrip())
    return "\n".join(rows)


class ConsoleDisplay:
    """
    Prints engine updates to a text stream.

    Only reprints what changed since the last update.
    """

    def __init__(self, stream: Optional[TextIO] = None, show_grid: bool = True):
        self.stream = stream if stream is not None else sys.stdout
        self.show_grid = show_grid
        self._last: Optional[DisplayUpdate] = None

    def show(self, update: DisplayUpdate) -> None:
        last = self._last
        self._last = update

        if last is None or update.control_title != last.control_title:
            state = "" if update.control_enabled else " (disabled)"
            self._print(f"[{update.control_title}]{state}")

        if last is None or update.display_text != last.display_text:
            self._print(update.display_text)

        if update.result_text and (last is None or update.result_text != last.result_text):
            self._print(f"  {update.result_text}")

        if not self.show_grid:
            return

        changed = (
            last is None
            or update.missing_first != last.missing_first
            or update.missing_second != last.missing_second
        )
        if changed and (update.missing_first or update.missing_second):
            self._print(f"Missing (first cycle): {update.missing_first}")
            self._print(render_grid(update.missing_first))
            self._print(f"Missing (second cycle): {update.missing_second}")
            self._print(render_grid(update.missing_second))

    def _print(self, text: str) -> None:
        print(text, file=self.stream, flush=True)
