"""
Lenient date parsing shared by the transaction and review stages.
"""

import polars as pl

DATE_FORMAT = "%Y-%m-%d"


def parse_date_prefix(column: str) -> pl.Expr:
    """
    Parse the ``YYYY-MM-DD`` prefix of a timestamp column into a date.

    Works on text as well as temporal columns. Empty, missing or malformed
    values become null instead of raising.
    """
    return (
        pl.col(column)
        .cast(pl.Utf8)
        .str.slice(0, len("0000-00-00"))
        .str.strptime(pl.Date, DATE_FORMAT, strict=False)
    )
