"""
Rendering of a session snapshot

Pure functions from a ``Snapshot`` to Rich renderables and strings. The
shell calls them after every dispatched command; nothing here touches the
session.
"""

from typing import Tuple

from rich.table import Table
from rich.text import Text

from parqpeek.core.session import Snapshot
from parqpeek.core.status import Error, Executing, Idle, NoResults, Success

COLUMN_WIDTH = 12

EDITOR_TITLE = "SQL Editor (F2: Switch | Ctrl+E: Execute | Ctrl+R: Reset | Ctrl+S: Save | Esc: Quit)"


def status_line(snapshot: Snapshot) -> Tuple[str, str]:
    """Status message and its Rich style."""
    status = snapshot.status
    if isinstance(status, Idle):
        if snapshot.is_filtered:
            return "✓ Showing SQL query results", "green"
        if snapshot.read_only:
            return "Read-only view (PgUp/PgDn: Batches | Esc: Quit)", "yellow"
        return "Ready (Ctrl+E to execute SQL)", "yellow"
    if isinstance(status, Executing):
        return "⏳ Executing SQL query... Please wait (Ctrl+R is unavailable until it finishes)", "bold magenta"
    if isinstance(status, Success):
        return f"✓ {status.message}", "green"
    if isinstance(status, NoResults):
        return f"ℹ {status.message}", "yellow"
    if isinstance(status, Error):
        return f"❌ {status.message}", "red"
    raise TypeError(f"Unknown execution status: {status!r}")


def table_title(snapshot: Snapshot) -> str:
    """Border title of the data pane: origin, column window and row range."""
    total_columns = len(snapshot.header)
    start, end = snapshot.visible_columns
    columns = f"Cols {start}–{max(end - 1, 0)}/{total_columns}"
    window = snapshot.window

    if snapshot.is_filtered:
        limit_note = f" (limited to {snapshot.preview_limit} for preview)" if snapshot.truncated else ""
        return (
            f"SQL Results | {columns} | {window.total_rows} rows{limit_note} "
            "| [←/→: Cols | ↑/↓: Rows]"
        )

    first_row = window.first_row
    last_row = first_row + max(len(snapshot.rows) - 1, 0)
    batch_number = window.batch_index + 1 if window.total_batches else 0
    return (
        f"Original Data | {columns} | Rows {first_row}–{last_row}/{window.total_rows} "
        f"| Batch {batch_number}/{window.total_batches} "
        "| [PgUp/PgDn: Batches | ←/→: Cols | ↑/↓: Rows]"
    )


def row_window(selected_row: int, total_rows: int, capacity: int) -> Tuple[int, int]:
    """
    Half-open range of rows to draw so that ``selected_row`` stays visible

    The selection is kept near the middle of the pane once it has moved
    past the first half page.
    """
    capacity = max(1, capacity)
    if total_rows <= capacity:
        return 0, total_rows
    start = max(0, selected_row - capacity // 2)
    start = min(start, total_rows - capacity)
    return start, start + capacity


def build_table(snapshot: Snapshot, capacity: int = 50):
    """Rich table for the visible columns and rows, or a placeholder."""
    if not snapshot.rows:
        return Text("No data to display", style="grey50")

    start, end = snapshot.visible_columns
    table = Table(show_edge=False, expand=False, header_style="bold", pad_edge=False)
    for name in snapshot.header[start:end]:
        table.add_column(Text(name), width=COLUMN_WIDTH, no_wrap=True, overflow="ellipsis")

    first, last = row_window(snapshot.selected_row, len(snapshot.rows), capacity)
    for index in range(first, last):
        row = snapshot.rows[index]
        style = "underline" if index == snapshot.selected_row else None
        # Cell values are data, not console markup
        table.add_row(*(Text(value) for value in row[start:end]), style=style)
    return table
