"""
Viewport over the active row set

Tracks which columns are scrolled into view and which row is selected.
It knows nothing about where rows come from; the session calls
``resync`` whenever the displayed row set is swapped.
"""

from typing import Tuple

DEFAULT_VISIBLE_COLUMNS = 10


class Viewport:
    def __init__(self, visible_window: int = DEFAULT_VISIBLE_COLUMNS):
        if visible_window < 1:
            raise ValueError(f"visible_window must be >= 1, got {visible_window}")
        self.visible_window = visible_window
        self.column_offset = 0
        self.selected_row = 0
        self.total_columns = 0
        self.total_rows = 0

    @property
    def max_column_offset(self) -> int:
        return max(0, self.total_columns - self.visible_window)

    def resync(self, total_columns: int, total_rows: int) -> None:
        """Bind to a new row set and return to the top-left corner."""
        self.total_columns = total_columns
        self.total_rows = total_rows
        self.column_offset = 0
        self.selected_row = 0

    def scroll_left(self) -> None:
        if self.column_offset > 0:
            self.column_offset -= 1

    def scroll_right(self) -> None:
        if self.column_offset < self.max_column_offset:
            self.column_offset += 1

    def select_prev(self) -> None:
        if self.selected_row > 0:
            self.selected_row -= 1

    def select_next(self) -> None:
        if self.selected_row + 1 < self.total_rows:
            self.selected_row += 1

    def visible_columns(self) -> Tuple[int, int]:
        """Half-open [start, end) range of column indexes on screen."""
        start = self.column_offset
        end = min(start + self.visible_window, self.total_columns)
        return start, end
