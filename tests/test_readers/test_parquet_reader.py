"""
Tests for the Parquet source and its batch offset index
"""

import re

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from parqpeek.core.errors import SourceError
from parqpeek.readers.base import format_value, table_to_rows
from parqpeek.readers.parquet_reader import ParquetSource, is_parquet_path


class TestOpen:
    def test_schema_and_row_count(self, five_rows_parquet):
        source = ParquetSource.open(five_rows_parquet)

        assert source.schema == ("id", "name", "age", "city")
        assert source.total_rows == 5

    def test_row_group_offsets(self, five_rows_parquet):
        """Row groups of 3 over 5 rows -> [0, 3, 5]"""
        source = ParquetSource.open(five_rows_parquet)

        assert source.row_group_offsets == [0, 3, 5]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceError, match="not found"):
            ParquetSource.open(tmp_path / "nope.parquet")

    def test_not_a_parquet_file(self, tmp_path):
        bogus = tmp_path / "bogus.parquet"
        bogus.write_text("name,age\nAlice,30\n")

        with pytest.raises(SourceError):
            ParquetSource.open(bogus)

    def test_empty_file(self, empty_parquet):
        source = ParquetSource.open(empty_parquet)

        assert source.total_rows == 0
        assert source.num_batches(10) == 0


class TestBatch:
    def test_batches_straddling_row_groups(self, five_rows_parquet):
        source = ParquetSource.open(five_rows_parquet)

        assert [row[0] for row in source.batch(0, 2)] == ["0", "1"]
        assert [row[0] for row in source.batch(1, 2)] == ["2", "3"]
        assert [row[0] for row in source.batch(2, 2)] == ["4"]

    def test_batch_is_independent_of_prior_calls(self, wide_parquet):
        source = ParquetSource.open(wide_parquet)

        late = source.batch(3, 6)
        early = source.batch(0, 6)

        assert late[0][0] == "r18c0"
        assert len(late) == 6
        assert early[0][0] == "r0c0"

    def test_batch_larger_than_file(self, five_rows_parquet):
        source = ParquetSource.open(five_rows_parquet)

        rows = source.batch(0, 100)

        assert len(rows) == 5
        assert rows[4] == ["4", "Eve", "32", "LA"]

    def test_empty_row_groups_are_skipped(self, tmp_path):
        schema = pa.schema([("x", pa.int64())])
        path = tmp_path / "gaps.parquet"
        with pq.ParquetWriter(path, schema) as writer:
            writer.write_table(pa.table({"x": pa.array([], type=pa.int64())}))
            writer.write_table(pa.table({"x": [1, 2, 3]}))
            writer.write_table(pa.table({"x": [4, 5]}))

        source = ParquetSource.open(path)

        assert source.total_rows == 5
        assert source.batch(1, 2) == [["3"], ["4"]]

    @pytest.mark.parametrize("index", [-1, 3, 50])
    def test_out_of_range(self, five_rows_parquet, index):
        source = ParquetSource.open(five_rows_parquet)

        with pytest.raises(SourceError, match="out of range"):
            source.batch(index, 2)

    def test_file_removed_after_open(self, five_rows_parquet):
        source = ParquetSource.open(five_rows_parquet)
        five_rows_parquet.unlink()

        with pytest.raises(SourceError, match="Error loading batch 1"):
            source.batch(1, 2)

    def test_nulls_render_as_null(self, tmp_path):
        path = tmp_path / "nulls.parquet"
        pq.write_table(pa.table({"a": [1, None], "b": [None, "x"]}), path)

        assert ParquetSource.open(path).batch(0, 10) == [["1", "NULL"], ["NULL", "x"]]


class TestHelpers:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("data.parquet", True),
            ("data.pqt", True),
            ("DATA.PARQUET", True),
            ("dir/data.parquet", True),
            ("data.csv", False),
            ("parquet", False),
            ("data.parquet.bak", False),
        ],
    )
    def test_is_parquet_path(self, path, expected):
        assert is_parquet_path(path) is expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "NULL"),
            (42, "42"),
            (1.5, "1.5"),
            (2.0, "2"),
            (1e-12, "0.0"),
            (0.001234, "0.001234"),
            (12345678.9, "1.23457e+07"),
            ("text", "text"),
            (True, "True"),
        ],
    )
    def test_format_value(self, value, expected):
        assert format_value(value) == expected

    def test_table_to_rows(self):
        table = pa.table({"a": [1, 2], "b": ["x", "y"]})

        assert table_to_rows(table) == [["1", "x"], ["2", "y"]]


# Seconds since the epoch for a date in the year 20983, past Python's datetime range
FAR_FUTURE_SECONDS = 600_000_000_000


class TestUnrepresentableValues:
    @pytest.fixture
    def far_future_parquet(self, tmp_path):
        table = pa.table(
            {
                "id": [0, 1, 2, 3],
                "ts": pa.array([0, 0, FAR_FUTURE_SECONDS, None], type=pa.timestamp("s")),
            }
        )
        path = tmp_path / "far_future.parquet"
        pq.write_table(table, path)
        return path

    def test_far_future_timestamp_is_shown_as_text(self, far_future_parquet):
        source = ParquetSource.open(far_future_parquet)

        rows = source.batch(1, batch_size=2)

        assert rows[0][0] == "2"
        assert re.match(r"^20983-\d{2}-\d{2}", rows[0][1])
        assert rows[1] == ["3", "NULL"]

    def test_conversion_failure_becomes_source_error(self, five_rows_parquet, monkeypatch):
        def overflow(table):
            raise OverflowError("date value out of range")

        monkeypatch.setattr("parqpeek.readers.parquet_reader.table_to_rows", overflow)
        source = ParquetSource.open(five_rows_parquet)

        with pytest.raises(SourceError, match="Error loading batch 0: date value out of range"):
            source.batch(0, batch_size=2)
