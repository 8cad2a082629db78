"""
Base interface for columnar sources

A source exposes a fixed schema, a total row count and batch-by-index
retrieval. Batches come back as rows of display strings, which is all the
viewer and the exporter ever need.
"""

from typing import Any, List, Sequence, Tuple

import pyarrow as pa

Row = List[str]


class BaseSource:
    """
    Base class for columnar sources

    Sources are responsible for:
    1. Reporting the schema (ordered column names)
    2. Reporting the total number of rows
    3. Returning any batch by index without requiring earlier batches
       to have been read first
    """

    schema: Tuple[str, ...] = ()
    total_rows: int = 0

    def num_batches(self, batch_size: int) -> int:
        """
        Number of batches of ``batch_size`` rows in this source

        Args:
            batch_size: Rows per batch (>= 1)

        Returns:
            ceil(total_rows / batch_size)
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        return (self.total_rows + batch_size - 1) // batch_size

    def batch(self, index: int, batch_size: int) -> List[Row]:
        """
        Rows of batch ``index``

        Must be callable independently of prior calls.

        Raises:
            SourceError: If the batch cannot be read
        """
        raise NotImplementedError("Subclasses must implement batch()")


def format_value(value: Any) -> str:
    """Format a value for display, handling nulls and float noise."""
    if value is None:
        return "NULL"
    elif isinstance(value, float):
        if abs(value) < 1e-10 and value != 0:
            return "0.0"
        elif abs(value) < 0.01 or abs(value) > 1e6:
            return f"{value:.6g}"
        else:
            return f"{value:.6f}".rstrip("0").rstrip(".")
    else:
        return str(value)


def table_to_rows(table) -> List[Row]:
    """
    Convert a pyarrow Table into row-oriented display strings

    Args:
        table: pyarrow.Table (or RecordBatch)

    Returns:
        One list of strings per row, in column order
    """
    columns: Sequence[list] = [_column_values(column) for column in table.columns]
    return [[format_value(value) for value in values] for values in zip(*columns)]


def _column_values(column) -> list:
    """
    Python values of a column

    Values Python cannot represent (timestamps past year 9999, for one) make
    ``to_pylist`` fail; such columns are rendered to text by Arrow instead.

    Raises:
        pyarrow.ArrowException: If Arrow cannot render the column either
    """
    try:
        return column.to_pylist()
    except (OverflowError, ValueError):
        return column.cast(pa.string()).to_pylist()
