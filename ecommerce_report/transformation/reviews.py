"""
Review Normalizer
"""

import polars as pl
import structlog

from .dates import parse_date_prefix

logger = structlog.get_logger(__name__)

CREATION_TIMESTAMP = "review_creation_date"
REVIEW_DATE = "review_date"
REVIEW_SCORE = "review_score"


def normalize_reviews(reviews: pl.DataFrame) -> pl.DataFrame:
    """
    Remove exact duplicate review rows and derive ``review_date``.

    ``review_score`` becomes an integer, null where the source value is not
    a whole number. Free-text title and comment columns are carried through
    untouched.
    """
    deduplicated = reviews.unique(maintain_order=True)
    normalized = deduplicated.with_columns([
        pl.col(REVIEW_SCORE).cast(pl.Int64, strict=False),
        parse_date_prefix(CREATION_TIMESTAMP).alias(REVIEW_DATE),
    ])

    unparseable_scores = normalized[REVIEW_SCORE].null_count() - deduplicated[REVIEW_SCORE].null_count()

    logger.info(
        "Reviews normalized",
        rows=normalized.height,
        duplicates_removed=reviews.height - deduplicated.height,
        unparseable_dates=normalized[REVIEW_DATE].null_count(),
        unparseable_scores=unparseable_scores,
    )
    return normalized
