"""
Windowed cursor over a columnar source

Owns the raw pagination state: which batch is on screen and the rows it
holds. Batches are fetched on demand; only the active one is in memory.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from parqpeek.readers.base import BaseSource, Row
from parqpeek.readers.parquet_reader import ParquetSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowState:
    """Pagination position of the raw view."""

    batch_index: int
    batch_size: int
    total_batches: int
    total_rows: int

    @property
    def first_row(self) -> int:
        """Absolute index of the first row in the active batch."""
        return self.batch_index * self.batch_size


class WindowedCursor:
    """
    Paginates a source one batch at a time

    Example:
        >>> cursor = WindowedCursor.open("data.parquet", batch_size=2)
        >>> cursor.total_batches          # 5 rows
        3
        >>> cursor.goto_batch(2)
        >>> cursor.current_rows()         # the single trailing row
    """

    def __init__(self, source: BaseSource, batch_size: int):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        self.source = source
        self.batch_size = batch_size
        self.total_rows = source.total_rows
        self.total_batches = source.num_batches(batch_size)
        self.batch_index = 0
        self._rows: List[Row] = []

        if self.total_batches > 0:
            self._rows = self.source.batch(0, self.batch_size)

    @classmethod
    def open(cls, source: Union[BaseSource, str, Path], batch_size: int) -> "WindowedCursor":
        """
        Create a cursor positioned at batch 0

        Args:
            source: An open source, or a path to a Parquet file
            batch_size: Rows per batch

        Raises:
            SourceError: If the file cannot be opened or decoded
        """
        if not isinstance(source, BaseSource):
            source = ParquetSource.open(source)
        return cls(source, batch_size)

    @property
    def header(self) -> List[str]:
        return list(self.source.schema)

    @property
    def state(self) -> WindowState:
        return WindowState(
            batch_index=self.batch_index,
            batch_size=self.batch_size,
            total_batches=self.total_batches,
            total_rows=self.total_rows,
        )

    def current_rows(self) -> List[Row]:
        return self._rows

    def goto_batch(self, n: int) -> None:
        """
        Load batch ``n``

        Raises:
            IndexError: If n is outside [0, total_batches)
            SourceError: If the batch cannot be read; the window is unchanged
        """
        if not 0 <= n < self.total_batches:
            raise IndexError(f"Batch {n} out of range [0, {self.total_batches})")

        rows = self.source.batch(n, self.batch_size)
        self._rows = rows
        self.batch_index = n

    def next(self) -> bool:
        """Advance one batch. Returns False (and does nothing) at the last batch."""
        if self.batch_index + 1 >= self.total_batches:
            return False
        self.goto_batch(self.batch_index + 1)
        return True

    def previous(self) -> bool:
        """Go back one batch. Returns False (and does nothing) at batch 0."""
        if self.batch_index == 0:
            return False
        self.goto_batch(self.batch_index - 1)
        return True
