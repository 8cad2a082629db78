"""
parqpeek - Browse large Parquet files from the terminal

Pages through a Parquet file batch by batch without loading it into
memory, overlays the result of ad-hoc SQL (run by DuckDB) on the raw view,
and saves that result as a new Parquet file.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
