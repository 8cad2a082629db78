"""
DuckDB query engine

Every ``execute`` call opens a fresh in-memory DuckDB connection, registers
the known files as views and runs the query, so no state carries over
between queries. Results come back already converted to display strings.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

import duckdb
import pyarrow as pa

from parqpeek.core.errors import QueryError
from parqpeek.readers.base import Row, table_to_rows

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "data"

# Errors raised while parsing or binding the statement, before any data is read
_SQL_ERRORS = (duckdb.ParserException, duckdb.BinderException, duckdb.CatalogException)


@dataclass
class QueryResult:
    header: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)


class QueryEngine:
    """
    Stateless SQL execution over registered Parquet files

    Example:
        >>> engine = QueryEngine("employees.parquet")
        >>> result = engine.execute("SELECT name FROM data WHERE age > 25")
        >>> result.header
        ['name']
    """

    def __init__(self, path: Union[str, Path, None] = None, table_name: str = DEFAULT_TABLE_NAME):
        self.sources: Dict[str, str] = {}
        if path is not None:
            self.register(table_name, path)

    def register(self, table_name: str, path: Union[str, Path]) -> None:
        """Make ``path`` queryable as ``table_name`` in later executions."""
        self.sources[table_name] = str(path)

    def execute(self, sql: str) -> QueryResult:
        """
        Run one statement

        Raises:
            QueryError: "SQL: ..." when the statement does not parse or bind,
                "Execution: ..." when it fails while running
        """
        conn = duckdb.connect(":memory:")
        try:
            for table_name, file_path in self.sources.items():
                self._register_source(conn, table_name, file_path)

            result = conn.execute(sql)
            if result.description is None:
                # Statement without a result set
                return QueryResult()

            table = result.to_arrow_table()
            return QueryResult(header=list(table.column_names), rows=table_to_rows(table))

        except _SQL_ERRORS as e:
            raise QueryError(f"SQL: {e}", sql=sql) from e
        except duckdb.Error as e:
            raise QueryError(f"Execution: {e}", sql=sql) from e
        except (pa.ArrowException, OverflowError, ValueError) as e:
            # Result values that cannot be turned into display text
            raise QueryError(f"Execution: {e}", sql=sql) from e
        finally:
            conn.close()

    def _register_source(self, conn, table_name: str, file_path: str) -> None:
        """
        Register a Parquet file as a view

        Table names are double-quoted so that names like ``order`` work,
        and single quotes in paths are doubled for the string literal.
        """
        quoted_path = file_path.replace("'", "''")
        quoted_table = table_name.replace('"', '""')
        conn.execute(
            f'CREATE OR REPLACE VIEW "{quoted_table}" AS SELECT * FROM read_parquet(\'{quoted_path}\')'
        )
