"""
Materialized query results shown in place of the raw batches

An Overlay is never edited in place: a new query builds a new one and
``reset`` drops it.
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

from parqpeek.readers.base import Row

MAX_PREVIEW_ROWS = 1000

_LIMIT_RE = re.compile(r"\bLIMIT\b", re.IGNORECASE)
_SELECT_RE = re.compile(r"^\s*SELECT\b", re.IGNORECASE)


@dataclass(frozen=True)
class Overlay:
    header: Tuple[str, ...]
    rows: Tuple[Row, ...]
    preview_limit: int = MAX_PREVIEW_ROWS

    @classmethod
    def from_result(cls, header: List[str], rows: List[Row], preview_limit: int = MAX_PREVIEW_ROWS) -> "Overlay":
        return cls(header=tuple(header), rows=tuple(rows), preview_limit=preview_limit)

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def truncated(self) -> bool:
        """True when the row count hit the preview cap, so more rows may exist."""
        return self.total_rows >= self.preview_limit


def strip_sql_comments(sql: str) -> str:
    """Strip ``--`` comments that are not inside string literals."""
    cleaned_lines = []
    for line in sql.split("\n"):
        comment_pos = -1
        in_string = False
        string_char = None

        for i, char in enumerate(line):
            if char in ('"', "'") and (i == 0 or line[i - 1] != "\\"):
                if not in_string:
                    in_string = True
                    string_char = char
                elif char == string_char:
                    in_string = False
                    string_char = None
            elif char == "-" and i + 1 < len(line) and line[i + 1] == "-" and not in_string:
                comment_pos = i
                break

        if comment_pos >= 0:
            line = line[:comment_pos].rstrip()

        if line.strip():
            cleaned_lines.append(line)

    return "\n".join(cleaned_lines)


def normalize_query(query_text: str) -> str:
    """
    Turn editor contents into a single statement

    Comments are dropped, lines joined with spaces and one trailing
    semicolon removed.
    """
    sql = " ".join(line.strip() for line in strip_sql_comments(query_text).splitlines()).strip()
    if sql.endswith(";"):
        sql = sql[:-1].rstrip()
    return sql


def apply_preview_limit(sql: str, limit: int = MAX_PREVIEW_ROWS) -> str:
    """
    Cap plain SELECTs that carry no LIMIT of their own

    Examples:
        >>> apply_preview_limit("SELECT * FROM data")
        'SELECT * FROM data LIMIT 1000'
        >>> apply_preview_limit("SELECT * FROM data limit 5")
        'SELECT * FROM data limit 5'
        >>> apply_preview_limit("WITH t AS (SELECT 1) SELECT * FROM t")
        'WITH t AS (SELECT 1) SELECT * FROM t'
    """
    if _SELECT_RE.match(sql) and not _LIMIT_RE.search(sql):
        return f"{sql} LIMIT {limit}"
    return sql
