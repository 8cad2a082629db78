"""
Browsing session: the one owner of all view state

A Session composes the windowed cursor, the query overlay, the execution
state machine, the viewport and the focus router. Only ``dispatch`` (or
the Session methods it calls) mutates it, always from the UI thread; the
renderer reads a frozen ``Snapshot`` and never writes back.

Which rows are on screen:

    overlay present  -> overlay rows, pagination inert (1 batch)
    overlay absent   -> rows of the cursor's active batch

Every change of that row set resynchronizes the viewport to (0, 0).
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

import pyarrow as pa

from parqpeek.core.commands import (
    CancelSave,
    Command,
    ConfirmSave,
    Effect,
    Execute,
    ExecutionFinished,
    NextBatch,
    OpenHelp,
    OpenSave,
    PreviousBatch,
    Quit,
    QuitApp,
    Reset,
    RunQuery,
    ScrollLeft,
    ScrollRight,
    SelectNext,
    SelectPrev,
    ShowHelp,
    ToggleFocus,
)
from parqpeek.core.engine import QueryEngine, QueryResult
from parqpeek.core.errors import NoOverlayError, ParqPeekError, QueryError, SourceError
from parqpeek.core.exporter import save_overlay
from parqpeek.core.focus import FocusRouter, FocusTarget
from parqpeek.core.overlay import MAX_PREVIEW_ROWS, Overlay, apply_preview_limit, normalize_query
from parqpeek.core.status import ExecutionStateMachine, ExecutionStatus
from parqpeek.core.viewport import DEFAULT_VISIBLE_COLUMNS, Viewport
from parqpeek.core.window import WindowedCursor, WindowState
from parqpeek.readers.base import Row

logger = logging.getLogger(__name__)

DEFAULT_QUERY = "SELECT * FROM data LIMIT 100"
DEFAULT_SAVE_PATH = "output.parquet"


@dataclass(frozen=True)
class Snapshot:
    """Everything one frame needs, copied out of the session."""

    header: Tuple[str, ...]
    rows: Tuple[Row, ...]
    is_filtered: bool
    window: WindowState
    column_offset: int
    visible_columns: Tuple[int, int]
    selected_row: int
    status: ExecutionStatus
    focus: FocusTarget
    read_only: bool
    query_text: str
    save_path: str
    truncated: bool
    preview_limit: int


class Session:
    def __init__(
        self,
        cursor: WindowedCursor,
        engine: Optional[QueryEngine] = None,
        *,
        read_only: bool = False,
        visible_columns: int = DEFAULT_VISIBLE_COLUMNS,
        preview_limit: int = MAX_PREVIEW_ROWS,
        default_query: str = DEFAULT_QUERY,
        default_save_path: str = DEFAULT_SAVE_PATH,
    ):
        self.cursor = cursor
        self.source_path: Optional[Path] = getattr(cursor.source, "path", None)
        if engine is None:
            engine = QueryEngine(self.source_path)
        self.engine = engine

        self.overlay: Optional[Overlay] = None
        self.execution = ExecutionStateMachine()
        self.viewport = Viewport(visible_columns)
        self.router = FocusRouter(read_only=read_only)

        self.preview_limit = preview_limit
        self.default_query = default_query
        self.default_save_path = default_save_path
        self.query_text = default_query
        self.save_path = default_save_path

        self._resync_viewport()

    @classmethod
    def open(cls, path: Union[str, Path], batch_size: int, **kwargs) -> "Session":
        """
        Open ``path`` and build a session positioned at batch 0

        Raises:
            SourceError: If the file cannot be opened or decoded
        """
        cursor = WindowedCursor.open(path, batch_size)
        return cls(cursor, QueryEngine(path), **kwargs)

    # --- Active row set ---

    @property
    def is_filtered(self) -> bool:
        return self.overlay is not None

    @property
    def header(self) -> List[str]:
        if self.overlay is not None:
            return list(self.overlay.header)
        return self.cursor.header

    @property
    def rows(self) -> List[Row]:
        if self.overlay is not None:
            return list(self.overlay.rows)
        return self.cursor.current_rows()

    @property
    def window(self) -> WindowState:
        if self.overlay is not None:
            return WindowState(
                batch_index=0,
                batch_size=self.cursor.batch_size,
                total_batches=1,
                total_rows=self.overlay.total_rows,
            )
        return self.cursor.state

    @property
    def status(self) -> ExecutionStatus:
        return self.execution.status

    def _resync_viewport(self) -> None:
        self.viewport.resync(total_columns=len(self.header), total_rows=len(self.rows))

    # --- Navigation (inert while an overlay is shown) ---

    def goto_batch(self, n: int) -> bool:
        if self.is_filtered:
            return False
        self.cursor.goto_batch(n)
        self._resync_viewport()
        return True

    def next_batch(self) -> bool:
        if self.is_filtered or not self.cursor.next():
            return False
        self._resync_viewport()
        return True

    def previous_batch(self) -> bool:
        if self.is_filtered or not self.cursor.previous():
            return False
        self._resync_viewport()
        return True

    # --- Query execution ---

    def begin_execute(self, query_text: Optional[str] = None) -> Optional[str]:
        """
        Start an execution

        Returns:
            The SQL to hand to the engine, or None when nothing should run
            (already executing, or the query is empty)
        """
        if query_text is not None:
            self.query_text = query_text

        if not self.execution.begin():
            return None

        sql = normalize_query(self.query_text)
        if not sql:
            self.execution.fail("SQL query is empty")
            return None

        sql = apply_preview_limit(sql, self.preview_limit)
        logger.info("Executing query: %s", sql)
        return sql

    def finish_execute(self, result: Optional[QueryResult] = None, error: Optional[QueryError] = None) -> None:
        """Apply the engine outcome of the running execution."""
        if error is not None:
            logger.info("Query failed: %s", error)
            self.execution.fail(str(error))
            return

        if result is None or not result.rows:
            # Keep whatever was on screen before
            logger.info("Query returned no rows")
            self.execution.no_results()
            return

        self.overlay = Overlay.from_result(result.header, result.rows, self.preview_limit)
        self._resync_viewport()
        logger.info("Query returned %d rows", self.overlay.total_rows)
        self.execution.succeed()

    def execute(self, query_text: Optional[str] = None) -> ExecutionStatus:
        """Run a query to completion on the calling thread."""
        sql = self.begin_execute(query_text)
        if sql is None:
            return self.status

        try:
            result = self.engine.execute(sql)
        except QueryError as e:
            self.finish_execute(error=e)
        else:
            self.finish_execute(result=result)
        return self.status

    def reset(self) -> None:
        """Drop the overlay and reload the raw view at batch 0."""
        if self.execution.is_executing:
            logger.info("Reset rejected: a query is running")
            return

        try:
            cursor = WindowedCursor.open(self.source_path or self.cursor.source, self.cursor.batch_size)
        except SourceError as e:
            self.execution.notify_error(f"Error resetting: {e}")
            return

        self.cursor = cursor
        self.overlay = None
        self.query_text = self.default_query
        if self.router.save_dialog_open:
            self.cancel_save()
        self._resync_viewport()
        self.execution.reset()

    # --- Saving ---

    def open_save(self) -> None:
        if self.overlay is None:
            raise NoOverlayError()
        if self.router.save_dialog_open:
            # Keep the path being typed
            return
        self.save_path = self.default_save_path
        self.router.open_save_dialog()

    def cancel_save(self) -> None:
        self.save_path = self.default_save_path
        self.router.close_save_dialog()

    def save(self, destination: Union[str, Path, None] = None) -> int:
        """
        Export the overlay

        Returns:
            Number of rows written

        Raises:
            NoOverlayError: If no query result is on screen
            SourceError: If ``destination`` is the file being viewed
            ValueError: If ``destination`` is empty
        """
        if self.overlay is None:
            raise NoOverlayError()

        target = str(destination if destination is not None else self.save_path).strip()
        if not target:
            raise ValueError("Save path is empty")
        if self.source_path is not None and Path(target).resolve() == Path(self.source_path).resolve():
            raise SourceError("Refusing to overwrite the file being viewed", path=target)

        return save_overlay(self.overlay, target)

    def confirm_save(self) -> None:
        """Save to the dialog's path and return focus to the query editor."""
        target = self.save_path.strip()
        try:
            replaced = bool(target) and Path(target).exists()
            count = self.save(target)
        except (ParqPeekError, ValueError, OSError, pa.ArrowException) as e:
            logger.warning("Save to %r failed: %s", target, e)
            self.execution.notify_error(f"Save error: {e}")
        else:
            note = " (replaced existing file)" if replaced else ""
            self.execution.notify_success(f"Saved {count} rows to {target}{note}")
        finally:
            self.router.close_save_dialog()
            self.save_path = self.default_save_path

    # --- Rendering ---

    def snapshot(self) -> Snapshot:
        return Snapshot(
            header=tuple(self.header),
            rows=tuple(self.rows),
            is_filtered=self.is_filtered,
            window=self.window,
            column_offset=self.viewport.column_offset,
            visible_columns=self.viewport.visible_columns(),
            selected_row=self.viewport.selected_row,
            status=self.status,
            focus=self.router.focus,
            read_only=self.router.read_only,
            query_text=self.query_text,
            save_path=self.save_path,
            truncated=self.overlay.truncated if self.overlay is not None else False,
            preview_limit=self.preview_limit,
        )


def dispatch(session: Session, command: Command) -> Optional[Effect]:
    """
    Apply one command to the session

    All in-session errors stop here and become an ``Error`` status; the
    caller only ever sees an effect or None.

    Returns:
        An effect for the shell to carry out, or None
    """
    try:
        return _reduce(session, command)
    except ParqPeekError as e:
        logger.warning("%s failed: %s", type(command).__name__, e)
        session.execution.notify_error(str(e))
        return None


def _reduce(session: Session, command: Command) -> Optional[Effect]:
    if isinstance(command, Quit):
        return QuitApp()
    if isinstance(command, ShowHelp):
        return OpenHelp()

    if isinstance(command, Execute):
        sql = session.begin_execute()
        return RunQuery(sql) if sql is not None else None
    if isinstance(command, ExecutionFinished):
        if not session.execution.is_executing:
            logger.debug("Dropping engine result with no execution in progress")
            return None
        session.finish_execute(result=command.result, error=command.error)
        return None
    if isinstance(command, Reset):
        session.reset()
        return None

    if isinstance(command, OpenSave):
        session.open_save()
        return None
    if isinstance(command, ConfirmSave):
        session.confirm_save()
        return None
    if isinstance(command, CancelSave):
        session.cancel_save()
        return None
    if isinstance(command, ToggleFocus):
        session.router.toggle()
        return None

    if isinstance(command, NextBatch):
        session.next_batch()
        return None
    if isinstance(command, PreviousBatch):
        session.previous_batch()
        return None
    if isinstance(command, ScrollLeft):
        session.viewport.scroll_left()
        return None
    if isinstance(command, ScrollRight):
        session.viewport.scroll_right()
        return None
    if isinstance(command, SelectPrev):
        session.viewport.select_prev()
        return None
    if isinstance(command, SelectNext):
        session.viewport.select_next()
        return None

    raise TypeError(f"Unknown command: {command!r}")
