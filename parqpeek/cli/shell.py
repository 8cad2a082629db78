"""
parqpeek terminal UI

A Textual app that owns one ``Session``. Every key the app cares about is
bound at app level with priority, handed to the session's focus router and,
if it maps to a command, run through ``dispatch``. After each command the
whole screen is repainted from a fresh snapshot. Keys the router does not
claim fall through to the focused text widget (query editor or save path).

Queries run on a thread worker so the screen stays live while DuckDB works;
the worker only talks to the engine and hands its outcome back to the UI
thread as an ``ExecutionFinished`` command.
"""

import logging
from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Input, Label, Static, TextArea

from parqpeek.cli import render
from parqpeek.core.commands import Command, ExecutionFinished, OpenHelp, QuitApp, RunQuery
from parqpeek.core.engine import QueryEngine
from parqpeek.core.errors import QueryError
from parqpeek.core.focus import DATA_PANE_KEYS, FocusTarget
from parqpeek.core.session import Session, dispatch

logger = logging.getLogger(__name__)


class QueryEditor(TextArea):
    """Multi-line SQL editor."""

    def __init__(self, text: str = "", **kwargs) -> None:
        super().__init__(text, language="sql", show_line_numbers=True, **kwargs)
        self.border_title = render.EDITOR_TITLE


class StatusBar(Static):
    """One-line execution status."""

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.border_title = "Status"

    def show(self, message: str, style: str) -> None:
        self.update(Text(message, style=style))


class DataPane(Static, can_focus=True):
    """The visible window of the active row set."""

    BINDINGS = [Binding(key, f"app.route('{key}')", show=False) for key in DATA_PANE_KEYS]

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.border_title = "Preview"

    @property
    def row_capacity(self) -> int:
        # Border (2) and table header (2) take four lines
        return max(1, self.size.height - 4)

    def on_resize(self) -> None:
        self.app.refresh_view()


class SaveDialog(Container):
    """Inline prompt for the export path."""

    def compose(self) -> ComposeResult:
        yield Label("Save As (Enter to save, Esc to cancel)", classes="dialog-label")
        yield Input(id="save-path")


class HelpDialog(ModalScreen):
    """Modal dialog listing the key bindings."""

    def compose(self) -> ComposeResult:
        help_text = """[bold cyan]parqpeek - Keyboard Shortcuts[/bold cyan]

[yellow]Anywhere:[white]
[bold]  Ctrl+E                 [not bold]Execute the SQL in the editor
[bold]  Ctrl+R                 [not bold]Reset to the original data (not while a query runs)
[bold]  Ctrl+S                 [not bold]Save query results as Parquet
[bold]  F2                     [not bold]Switch between editor and table
[bold]  Esc / Ctrl+Q           [not bold]Quit (Esc cancels the save dialog)
[bold]  F1                     [not bold]Show this help

[yellow]Table:[white]
[bold]  Up / Down              [not bold]Select row
[bold]  Left / Right           [not bold]Scroll columns
[bold]  PgUp / PgDn            [not bold]Previous / next batch

[dim]Query the file as the table named data, e.g. SELECT * FROM data WHERE id > 10[/dim]"""

        with Container(id="help-dialog"):
            yield Label("Keyboard Shortcuts & Help", id="help-title")
            with VerticalScroll(id="help-content"):
                yield Static(help_text, id="help-text")
            yield Button("Close", variant="primary", id="close-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss()


def _route_binding(key: str, description: str = "", show: bool = False) -> Binding:
    return Binding(key, f"route('{key}')", description, show=show, priority=True)


class ParqPeekApp(App):
    """
    parqpeek browser

    ``read_only`` (peek) hides the editor and only allows navigation,
    help and quit.
    """

    CSS = """
    Screen {
        background: $surface;
        layout: vertical;
    }

    QueryEditor {
        height: 25%;
        border: solid $panel-lighten-2;
    }

    StatusBar {
        height: 3;
        border: solid $panel-lighten-2;
        padding: 0 1;
    }

    DataPane {
        height: 1fr;
        border: solid $panel-lighten-2;
        padding: 0 1;
    }

    .focused {
        border: solid $accent;
    }

    SaveDialog {
        height: auto;
        border: solid $success;
        padding: 0 1;
        display: none;
    }

    SaveDialog.visible {
        display: block;
    }

    .dialog-label {
        color: $success;
        text-style: bold;
    }

    #help-dialog {
        width: 70%;
        height: 80%;
        border: thick $primary;
        background: $panel;
        padding: 1 2;
    }

    #help-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #help-content {
        height: 1fr;
    }

    HelpDialog {
        align: center middle;
    }
    """

    # The focus router decides what has focus
    AUTO_FOCUS = None

    BINDINGS = [
        _route_binding("f1", "Help", show=True),
        _route_binding("f2", "Switch", show=True),
        _route_binding("ctrl+e", "Execute", show=True),
        _route_binding("ctrl+r", "Reset", show=True),
        _route_binding("ctrl+s", "Save", show=True),
        _route_binding("ctrl+q", "Quit", show=True),
        _route_binding("escape"),
        # Focus belongs to the router; Tab must not move it behind its back
        Binding("tab", "noop", show=False, priority=True),
        Binding("shift+tab", "noop", show=False, priority=True),
    ]

    def __init__(self, session: Session, **kwargs):
        super().__init__(**kwargs)
        self.session = session

    def compose(self) -> ComposeResult:
        with Vertical(id="main"):
            yield QueryEditor(self.session.query_text, id="query-editor")
            yield StatusBar(id="status-bar")
            yield SaveDialog(id="save-dialog")
            yield DataPane(id="data-pane")
        yield Footer()

    def on_mount(self) -> None:
        self.title = "parqpeek"
        editor = self.query_one(QueryEditor)
        editor.display = not self.session.router.read_only

        self.refresh_view()

    # --- Input ---

    def action_noop(self) -> None:
        pass

    def action_route(self, key: str) -> None:
        """Send a key through the focus router and run the resulting command."""
        if isinstance(self.screen, HelpDialog):
            if key in ("escape", "f1"):
                self.pop_screen()
                return
            if key != "ctrl+q":
                return

        command = self.session.router.route(key)
        if command is not None:
            self.run_command(command)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self.session.query_text = event.text_area.text

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "save-path":
            self.session.save_path = event.value

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "save-path":
            self.action_route("enter")

    # --- Commands and effects ---

    def run_command(self, command: Command) -> None:
        effect = dispatch(self.session, command)
        self.refresh_view()

        if isinstance(effect, QuitApp):
            self.exit()
        elif isinstance(effect, OpenHelp):
            self.push_screen(HelpDialog())
        elif isinstance(effect, RunQuery):
            self.run_query(self.session.engine, effect.sql)

    @work(thread=True, exclusive=True, group="query")
    def run_query(self, engine: QueryEngine, sql: str) -> None:
        """Run ``sql`` off the UI thread and report back with ExecutionFinished."""
        try:
            result = engine.execute(sql)
        except QueryError as e:
            outcome = ExecutionFinished(error=e)
        except Exception as e:
            # The execution must still end, or the status stays Executing
            logger.exception("Query worker failed")
            outcome = ExecutionFinished(error=QueryError(f"Execution: {e}", sql=sql))
        else:
            outcome = ExecutionFinished(result=result)
        self.call_from_thread(self.run_command, outcome)

    # --- Rendering ---

    def refresh_view(self) -> None:
        """Repaint every widget from one snapshot."""
        snapshot = self.session.snapshot()
        # Widgets live on the default screen even while the help dialog is up
        main = self.screen_stack[0]

        status_bar = main.query_one(StatusBar)
        status_bar.show(*render.status_line(snapshot))

        pane = main.query_one(DataPane)
        pane.border_title = render.table_title(snapshot)
        pane.update(render.build_table(snapshot, pane.row_capacity))

        editor = main.query_one(QueryEditor)
        if editor.text != snapshot.query_text:
            editor.text = snapshot.query_text

        dialog = main.query_one(SaveDialog)
        save_input = main.query_one("#save-path", Input)
        dialog.set_class(snapshot.focus is FocusTarget.SAVE_DIALOG, "visible")
        if save_input.value != snapshot.save_path:
            save_input.value = snapshot.save_path

        editor.set_class(snapshot.focus is FocusTarget.QUERY_INPUT, "focused")
        pane.set_class(snapshot.focus is FocusTarget.DATA_PANE, "focused")

        target = {
            FocusTarget.QUERY_INPUT: editor,
            FocusTarget.DATA_PANE: pane,
            FocusTarget.SAVE_DIALOG: save_input,
        }[snapshot.focus]
        if self.screen is main and self.focused is not target:
            target.focus()


def launch_shell(session: Session) -> None:
    """
    Run the browser until the user quits.

    Args:
        session: An opened session; it is owned by the app from here on
    """
    app = ParqPeekApp(session)
    app.run()
