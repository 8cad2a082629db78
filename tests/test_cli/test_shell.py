"""
Pilot tests for the parqpeek Textual app
"""

import pytest

from parqpeek.cli.shell import DataPane, HelpDialog, ParqPeekApp, QueryEditor, SaveDialog
from parqpeek.core.focus import FocusTarget
from parqpeek.core.session import Session
from parqpeek.core.status import Error, Idle, Success


@pytest.fixture
def session(five_rows_parquet):
    return Session.open(five_rows_parquet, batch_size=2)


def _record_exits(app):
    """Replace App.exit so quitting can be observed without tearing the app down"""
    exits = []
    app.exit = lambda *args, **kwargs: exits.append(args)
    return exits


@pytest.mark.anyio
async def test_edit_starts_in_editor(session):
    app = ParqPeekApp(session)
    async with app.run_test() as pilot:
        await pilot.pause()

        assert isinstance(app.focused, QueryEditor)
        assert app.query_one(QueryEditor).text == session.query_text
        assert not app.query_one(SaveDialog).has_class("visible")


@pytest.mark.anyio
async def test_switch_focus_and_navigate(session):
    app = ParqPeekApp(session)
    async with app.run_test() as pilot:
        await pilot.press("f2")
        await pilot.pause()

        assert session.router.focus is FocusTarget.DATA_PANE
        assert isinstance(app.focused, DataPane)

        await pilot.press("pagedown", "down")
        await pilot.pause()

        assert session.cursor.batch_index == 1
        assert session.viewport.selected_row == 1

        await pilot.press("f2")
        await pilot.pause()

        assert isinstance(app.focused, QueryEditor)


@pytest.mark.anyio
async def test_execute_runs_in_background(session):
    app = ParqPeekApp(session)
    async with app.run_test() as pilot:
        await pilot.press("ctrl+e")
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert session.status == Success("Query executed successfully")
        assert session.is_filtered
        assert len(session.rows) == 5


@pytest.mark.anyio
async def test_save_flow(session, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    session.execute("SELECT name FROM data")

    app = ParqPeekApp(session)
    async with app.run_test() as pilot:
        await pilot.press("ctrl+s")
        await pilot.pause()

        assert session.router.focus is FocusTarget.SAVE_DIALOG
        assert app.query_one(SaveDialog).has_class("visible")

        await pilot.press("enter")
        await pilot.pause()

        assert session.status == Success("Saved 5 rows to output.parquet")
        assert session.router.focus is FocusTarget.QUERY_INPUT
        assert not app.query_one(SaveDialog).has_class("visible")

    assert (tmp_path / "output.parquet").exists()


@pytest.mark.anyio
async def test_escape_cancels_save_dialog(session):
    session.execute("SELECT name FROM data")

    app = ParqPeekApp(session)
    exits = _record_exits(app)
    async with app.run_test() as pilot:
        await pilot.press("ctrl+s")
        await pilot.pause()
        await pilot.press("escape")
        await pilot.pause()

        assert exits == []
        assert session.router.focus is FocusTarget.QUERY_INPUT
        assert not app.query_one(SaveDialog).has_class("visible")


@pytest.mark.anyio
async def test_save_without_results_shows_error(session):
    app = ParqPeekApp(session)
    async with app.run_test() as pilot:
        await pilot.press("ctrl+s")
        await pilot.pause()

        assert session.status == Error("Execute a query first before saving")
        assert session.router.focus is FocusTarget.QUERY_INPUT


@pytest.mark.anyio
async def test_help_dialog(session):
    app = ParqPeekApp(session)
    exits = _record_exits(app)
    async with app.run_test() as pilot:
        await pilot.press("f1")
        await pilot.pause()

        assert isinstance(app.screen, HelpDialog)

        # Global commands do not reach the session while help is open
        await pilot.press("ctrl+e")
        await pilot.pause()
        assert session.status == Idle()

        await pilot.press("escape")
        await pilot.pause()

        assert not isinstance(app.screen, HelpDialog)
        assert exits == []


@pytest.mark.anyio
async def test_peek_is_read_only(five_rows_parquet):
    session = Session.open(five_rows_parquet, batch_size=2, read_only=True)

    app = ParqPeekApp(session)
    async with app.run_test() as pilot:
        await pilot.pause()

        assert not app.query_one(QueryEditor).display
        assert isinstance(app.focused, DataPane)

        await pilot.press("ctrl+e", "f2", "pagedown")
        await pilot.pause()

        assert session.status == Idle()
        assert session.router.focus is FocusTarget.DATA_PANE
        assert session.cursor.batch_index == 1


@pytest.mark.anyio
async def test_escape_quits(session):
    app = ParqPeekApp(session)
    exits = _record_exits(app)
    async with app.run_test() as pilot:
        await pilot.press("escape")
        await pilot.pause()

        assert len(exits) == 1


@pytest.mark.anyio
async def test_unexpected_engine_failure_ends_execution(session, monkeypatch):
    def explode(sql):
        raise OverflowError("date value out of range")

    monkeypatch.setattr(session.engine, "execute", explode)

    app = ParqPeekApp(session)
    async with app.run_test() as pilot:
        await pilot.press("ctrl+e")
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert session.status == Error("Execution: date value out of range")
        assert not session.execution.is_executing
