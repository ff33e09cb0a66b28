"""
Window Filter

Restricts date-keyed tables to the analysis window.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

import polars as pl
import structlog

from ecommerce_report.config import Settings, get_settings
from .reviews import REVIEW_DATE
from .transactions import ORDER_DATE

logger = structlog.get_logger(__name__)

CLOSED_OPTIONS = ("none", "left", "right", "both")


@dataclass(frozen=True)
class AnalysisWindow:
    """
    Date range applied row by row to derived date columns.

    ``closed`` names the inclusive bounds, as in ``polars.Expr.is_between``;
    the default keeps rows strictly between ``start`` and ``end``. Rows with
    a null date never pass.
    """
    start: date
    end: date
    closed: str = "none"

    def __post_init__(self):
        if self.closed not in CLOSED_OPTIONS:
            raise ValueError(f"closed must be one of {CLOSED_OPTIONS}, got {self.closed!r}")
        if self.start >= self.end:
            raise ValueError(f"Window start {self.start} must be earlier than end {self.end}")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AnalysisWindow":
        """Build the configured window"""
        analysis = (settings or get_settings()).analysis
        return cls(analysis.window_start, analysis.window_end, analysis.window_closed)

    def contains(self, column: str) -> pl.Expr:
        """Boolean expression testing each row of a date column"""
        return pl.col(column).is_between(self.start, self.end, closed=self.closed)

    def filter(self, df: pl.DataFrame, date_column: str) -> pl.DataFrame:
        """Keep rows whose date lies inside the window"""
        filtered = df.filter(self.contains(date_column))
        logger.debug(
            "Window applied",
            column=date_column,
            start=self.start.isoformat(),
            end=self.end.isoformat(),
            rows_in=df.height,
            rows_out=filtered.height,
        )
        return filtered


def filter_transactions(transactions: pl.DataFrame, window: AnalysisWindow) -> pl.DataFrame:
    """Window filter on ``order_date``"""
    return window.filter(transactions, ORDER_DATE)


def filter_reviews(reviews: pl.DataFrame, window: AnalysisWindow) -> pl.DataFrame:
    """Window filter on ``review_date``"""
    return window.filter(reviews, REVIEW_DATE)
