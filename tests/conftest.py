"""
Pytest configuration and shared fixtures
"""

import pyarrow as pa
import pyarrow.parquet as pq
import pytest


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to only use asyncio backend."""
    return "asyncio"


@pytest.fixture
def five_rows_parquet(tmp_path):
    """5 rows in row groups of 3, so batches of 2 straddle row groups"""
    table = pa.table(
        {
            "id": [0, 1, 2, 3, 4],
            "name": ["Alice", "Bob", "Charlie", "Diana", "Eve"],
            "age": [30, 25, 35, 28, 32],
            "city": ["NYC", "LA", "SF", "NYC", "LA"],
        }
    )
    path = tmp_path / "people.parquet"
    pq.write_table(table, path, row_group_size=3)
    return path


@pytest.fixture
def wide_parquet(tmp_path):
    """15 columns x 25 rows, row groups of 7"""
    data = {f"c{i:02d}": [f"r{row}c{i}" for row in range(25)] for i in range(15)}
    path = tmp_path / "wide.parquet"
    pq.write_table(pa.table(data), path, row_group_size=7)
    return path


@pytest.fixture
def large_parquet(tmp_path):
    """2500 rows, more than the default preview cap"""
    table = pa.table({"n": list(range(2500)), "label": [f"row-{i}" for i in range(2500)]})
    path = tmp_path / "large.parquet"
    pq.write_table(table, path, row_group_size=400)
    return path


@pytest.fixture
def empty_parquet(tmp_path):
    """Schema but no rows"""
    table = pa.table({"id": pa.array([], type=pa.int64()), "name": pa.array([], type=pa.string())})
    path = tmp_path / "empty.parquet"
    pq.write_table(table, path)
    return path
