"""
Query execution lifecycle

    Idle / Success / NoResults / Error --execute--> Executing
    Executing --engine result--> Success | NoResults | Error

Terminal states stick until the next command replaces them. A second
execute while ``Executing`` is refused, so at most one query is in flight.
"""

import logging
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Executing:
    pass


@dataclass(frozen=True)
class Success:
    message: str = "Query executed successfully"


@dataclass(frozen=True)
class NoResults:
    """Query ran but matched nothing. Neither a success nor an error."""

    message: str = "Query returned no results"


@dataclass(frozen=True)
class Error:
    message: str


ExecutionStatus = Union[Idle, Executing, Success, NoResults, Error]


class ExecutionStateMachine:
    """Tracks the current ExecutionStatus and admits new executions."""

    def __init__(self) -> None:
        self.status: ExecutionStatus = Idle()

    @property
    def is_executing(self) -> bool:
        return isinstance(self.status, Executing)

    def begin(self) -> bool:
        """Enter Executing. Returns False if an execution is already running."""
        if self.is_executing:
            logger.debug("Execute rejected: a query is already running")
            return False
        self.status = Executing()
        return True

    def _complete(self, status: ExecutionStatus) -> None:
        if not self.is_executing:
            raise RuntimeError(f"No execution in progress (status is {self.status!r})")
        self.status = status

    def succeed(self, message: str = "Query executed successfully") -> None:
        self._complete(Success(message))

    def no_results(self, message: str = "Query returned no results") -> None:
        self._complete(NoResults(message))

    def fail(self, message: str) -> None:
        self._complete(Error(message))

    def notify_success(self, message: str) -> None:
        """Outcome of a non-query command, e.g. a save."""
        self._notify(Success(message))

    def notify_error(self, message: str) -> None:
        """Outcome of a failed non-query command."""
        self._notify(Error(message))

    def _notify(self, status: ExecutionStatus) -> None:
        # Executing only ends with the engine result
        if self.is_executing:
            logger.info("Not shown while a query is running: %s", status)
            return
        self.status = status

    def reset(self) -> None:
        self.status = Idle()
