"""Exception hierarchy for parqpeek.

    ParqPeekError (base)
    ├── SourceError - the Parquet file could not be opened or decoded
    ├── QueryError - the query engine rejected or failed a query
    ├── NoOverlayError - save requested without a query result on screen
    └── UnsupportedExtensionError - the file is not a recognized Parquet file

Startup code lets these propagate to the CLI, which prints them and exits.
Inside a session they are caught by ``parqpeek.core.session.dispatch`` and
turned into an ``Error`` status.
"""

from typing import Optional


class ParqPeekError(Exception):
    """Base exception for all parqpeek errors."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return self.message


class SourceError(ParqPeekError):
    """Opening or decoding the columnar source failed."""


class QueryError(ParqPeekError):
    """Parsing or executing a query failed."""

    def __init__(self, message: str, *, sql: Optional[str] = None) -> None:
        super().__init__(message)
        self.sql = sql


class NoOverlayError(ParqPeekError):
    """Only a materialized query result can be exported."""

    def __init__(self, message: str = "Execute a query first before saving") -> None:
        super().__init__(message)


class UnsupportedExtensionError(ParqPeekError):
    """The file extension is not one parqpeek can read."""

    def __init__(self, path: str) -> None:
        super().__init__("UNSUPPORTED_FILE_TYPE (.parquet or .pqt only)", path=path)
