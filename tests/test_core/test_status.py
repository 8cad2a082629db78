"""
Tests for the execution state machine
"""

import pytest

from parqpeek.core.status import Error, ExecutionStateMachine, Executing, Idle, NoResults, Success


def test_starts_idle():
    assert ExecutionStateMachine().status == Idle()


def test_begin_then_succeed():
    machine = ExecutionStateMachine()

    assert machine.begin() is True
    assert machine.status == Executing()

    machine.succeed()
    assert machine.status == Success("Query executed successfully")


def test_second_begin_is_rejected():
    machine = ExecutionStateMachine()
    machine.begin()

    assert machine.begin() is False
    assert machine.is_executing


@pytest.mark.parametrize("finish", ["succeed", "no_results"])
def test_terminal_states_allow_new_execution(finish):
    machine = ExecutionStateMachine()
    machine.begin()
    getattr(machine, finish)()

    assert machine.begin() is True


def test_error_allows_new_execution():
    machine = ExecutionStateMachine()
    machine.begin()
    machine.fail("boom")

    assert machine.status == Error("boom")
    assert machine.begin() is True


def test_no_results_is_neither_success_nor_error():
    machine = ExecutionStateMachine()
    machine.begin()
    machine.no_results()

    assert isinstance(machine.status, NoResults)
    assert not isinstance(machine.status, (Success, Error))


def test_completing_without_execution_is_a_bug():
    with pytest.raises(RuntimeError):
        ExecutionStateMachine().succeed()


def test_notifications_do_not_interrupt_execution():
    machine = ExecutionStateMachine()
    machine.begin()

    machine.notify_error("save failed")
    machine.notify_success("saved")

    assert machine.status == Executing()


def test_notifications_and_reset():
    machine = ExecutionStateMachine()

    machine.notify_error("nope")
    assert machine.status == Error("nope")

    machine.notify_success("Saved 3 rows")
    assert machine.status == Success("Saved 3 rows")

    machine.reset()
    assert machine.status == Idle()
