"""
Commands understood by the session reducer, and the effects it hands back

Commands are small immutable values. ``parqpeek.core.session.dispatch``
applies one to the session; when the shell has work to do as a result
(run a query, quit, show help) the reducer returns an effect.
"""

from dataclasses import dataclass
from typing import Optional, Union

from parqpeek.core.engine import QueryResult
from parqpeek.core.errors import QueryError


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class ShowHelp:
    pass


@dataclass(frozen=True)
class Execute:
    pass


@dataclass(frozen=True)
class ExecutionFinished:
    """Engine outcome for the query started by the last accepted Execute."""

    result: Optional[QueryResult] = None
    error: Optional[QueryError] = None


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class OpenSave:
    pass


@dataclass(frozen=True)
class ConfirmSave:
    pass


@dataclass(frozen=True)
class CancelSave:
    pass


@dataclass(frozen=True)
class ToggleFocus:
    pass


@dataclass(frozen=True)
class NextBatch:
    pass


@dataclass(frozen=True)
class PreviousBatch:
    pass


@dataclass(frozen=True)
class ScrollLeft:
    pass


@dataclass(frozen=True)
class ScrollRight:
    pass


@dataclass(frozen=True)
class SelectPrev:
    pass


@dataclass(frozen=True)
class SelectNext:
    pass


Command = Union[
    Quit, ShowHelp, Execute, ExecutionFinished, Reset, OpenSave, ConfirmSave, CancelSave,
    ToggleFocus, NextBatch, PreviousBatch, ScrollLeft, ScrollRight, SelectPrev, SelectNext,
]


@dataclass(frozen=True)
class RunQuery:
    """Run ``sql`` on the engine and dispatch ExecutionFinished with the outcome."""

    sql: str


@dataclass(frozen=True)
class QuitApp:
    pass


@dataclass(frozen=True)
class OpenHelp:
    pass


Effect = Union[RunQuery, QuitApp, OpenHelp]
