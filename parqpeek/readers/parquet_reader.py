"""
Parquet source with a batch offset index

Parquet metadata records how many rows every row group holds. Turning those
counts into cumulative offsets once, at open time, lets us find the row
groups behind any batch directly:

    Row groups:  RG0 [0-49]  RG1 [50-99]  RG2 [100-149]
    batch_size=40, batch 2 -> rows [80-119] -> read RG1 and RG2 only

The file itself is reopened for every batch read, so nothing is held open
between navigation commands.
"""

import logging
from bisect import bisect_right
from pathlib import Path
from typing import List, Union

import pyarrow as pa
import pyarrow.parquet as pq

from parqpeek.core.errors import SourceError
from parqpeek.readers.base import BaseSource, Row, table_to_rows

logger = logging.getLogger(__name__)

PARQUET_EXTENSIONS = (".parquet", ".pqt")


def is_parquet_path(path: Union[str, Path]) -> bool:
    """True if the path carries a recognized Parquet extension."""
    return Path(path).suffix.lower() in PARQUET_EXTENSIONS


class ParquetSource(BaseSource):
    """
    Random-access Parquet source

    Example:
        >>> source = ParquetSource.open("events.parquet")
        >>> source.schema
        ('id', 'name', 'ts')
        >>> source.batch(3, batch_size=100)   # rows 300-399
    """

    def __init__(self, path: Union[str, Path]):
        """
        Open a Parquet file and index its row groups

        Args:
            path: Path to a local Parquet file

        Raises:
            SourceError: If the file is missing or is not valid Parquet
        """
        self.path = Path(path)
        if not self.path.exists():
            raise SourceError(f"Parquet file not found: {path}", path=str(path))

        try:
            with open(self.path, "rb") as handle:
                parquet_file = pq.ParquetFile(handle)
                self.metadata = parquet_file.metadata
                self.schema = tuple(parquet_file.schema_arrow.names)
        except (pa.ArrowException, OSError) as e:
            raise SourceError(f"Could not read {path}: {e}", path=str(path)) from e

        self.total_rows = self.metadata.num_rows

        # row_group_offsets[i] is the absolute index of the first row of
        # row group i; the final entry equals total_rows
        self.row_group_offsets: List[int] = [0]
        for rg_idx in range(self.metadata.num_row_groups):
            rg_rows = self.metadata.row_group(rg_idx).num_rows
            self.row_group_offsets.append(self.row_group_offsets[-1] + rg_rows)

        logger.debug(
            "Opened %s: %d rows, %d columns, %d row groups",
            self.path, self.total_rows, len(self.schema), self.metadata.num_row_groups,
        )

    @classmethod
    def open(cls, path: Union[str, Path]) -> "ParquetSource":
        return cls(path)

    def _row_groups_for(self, start: int, stop: int) -> List[int]:
        """Row groups overlapping the half-open row range [start, stop)."""
        first = bisect_right(self.row_group_offsets, start) - 1
        last = bisect_right(self.row_group_offsets, stop - 1) - 1
        return list(range(first, last + 1))

    def batch(self, index: int, batch_size: int) -> List[Row]:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        start = index * batch_size
        if index < 0 or start >= self.total_rows:
            raise SourceError(
                f"Batch {index} out of range ({self.num_batches(batch_size)} batches)",
                path=str(self.path),
            )
        stop = min(start + batch_size, self.total_rows)
        row_groups = self._row_groups_for(start, stop)

        try:
            with open(self.path, "rb") as handle:
                parquet_file = pq.ParquetFile(handle, metadata=self.metadata)
                table = parquet_file.read_row_groups(row_groups)
        except (pa.ArrowException, OSError) as e:
            raise SourceError(f"Error loading batch {index}: {e}", path=str(self.path)) from e

        table = table.slice(start - self.row_group_offsets[row_groups[0]], stop - start)
        try:
            rows = table_to_rows(table)
        except (pa.ArrowException, OverflowError, ValueError) as e:
            raise SourceError(f"Error loading batch {index}: {e}", path=str(self.path)) from e

        logger.debug("Loaded batch %d (rows %d-%d) from row groups %s", index, start, stop - 1, row_groups)
        return rows
