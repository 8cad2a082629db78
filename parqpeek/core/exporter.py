"""
Export of query results to Parquet

Only a materialized overlay can be exported. Every column is written as
a string column; the original types are not recovered.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import pyarrow as pa
import pyarrow.parquet as pq

from parqpeek.core.errors import NoOverlayError
from parqpeek.core.overlay import Overlay

logger = logging.getLogger(__name__)


def overlay_to_table(overlay: Overlay) -> pa.Table:
    """Build an all-string Arrow table from an overlay."""
    schema = pa.schema([pa.field(name, pa.string(), nullable=True) for name in overlay.header])
    columns = [
        pa.array([row[col_idx] for row in overlay.rows], type=pa.string())
        for col_idx in range(len(overlay.header))
    ]
    return pa.Table.from_arrays(columns, schema=schema)


def save_overlay(overlay: Optional[Overlay], destination: Union[str, Path]) -> int:
    """
    Write the overlay to ``destination``, replacing any existing file

    Args:
        overlay: Active overlay, or None when the raw view is on screen
        destination: Output path

    Returns:
        Number of rows written

    Raises:
        NoOverlayError: If there is no overlay to write
    """
    if overlay is None:
        raise NoOverlayError()

    table = overlay_to_table(overlay)
    pq.write_table(table, str(destination))
    logger.info("Wrote %d rows to %s", table.num_rows, destination)
    return table.num_rows
