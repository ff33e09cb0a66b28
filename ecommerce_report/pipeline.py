"""
Report Pipeline

Runs the transformation stages and every aggregator over one set of source
snapshots. Each stage returns a new table; inputs are never modified, so a
run can be repeated on the same Datasets with identical results.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import polars as pl
import structlog

from ecommerce_report.analytics import (
    CorrelationResult,
    DeliveryDelayComparison,
    HeadlineMetrics,
    ScoreDistribution,
    category_average_rating,
    category_sales,
    customer_frequency_spend,
    daily_sales,
    delivery_delay_comparison,
    frequency_spend_correlation,
    headline_metrics,
    monthly_active_users,
    review_score_distribution,
)
from ecommerce_report import __version__
from ecommerce_report.config import get_settings
from ecommerce_report.ingestion import Datasets
from ecommerce_report.transformation import (
    AnalysisWindow,
    attach_customers,
    build_transactions,
    filter_reviews,
    filter_transactions,
    normalize_reviews,
    resolve_categories,
)

logger = structlog.get_logger(__name__)


@dataclass
class StageStats:
    """Row counts through one pipeline stage"""
    stage: str
    input_rows: int
    output_rows: int

    @property
    def rows_dropped(self) -> int:
        return self.input_rows - self.output_rows


@dataclass
class ReportResult:
    """Every summary table and figure of one report run"""
    window: AnalysisWindow
    transactions: pl.DataFrame
    reviews: pl.DataFrame
    categories: pl.DataFrame
    daily_sales: pl.DataFrame
    monthly_active_users: pl.DataFrame
    category_sales: pl.DataFrame
    category_average_rating: pl.DataFrame
    score_distribution: ScoreDistribution
    delivery_delay: DeliveryDelayComparison
    frequency_spend: pl.DataFrame
    correlation: Optional[CorrelationResult]
    headline: HeadlineMetrics
    stages: List[StageStats] = field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if self.started_at is None or self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def summary_tables(self) -> dict:
        """Summary tables keyed by export name"""
        return {
            "daily_sales": self.daily_sales,
            "monthly_active_users": self.monthly_active_users,
            "category_sales": self.category_sales,
            "category_average_rating": self.category_average_rating,
            "review_score_distribution": self.score_distribution.table,
            "customer_frequency_spend": self.frequency_spend,
        }


class ReportPipeline:
    """
    Orchestrates transaction building, review normalization, category
    resolution, window filtering and aggregation.

    Example:
        pipeline = ReportPipeline()
        result = pipeline.run(DatasetLoader().load_all())
    """

    def __init__(
        self,
        window: Optional[AnalysisWindow] = None,
        customer_key: Optional[str] = None,
        lowest_rating: Optional[int] = None,
        review_coupled_sales: bool = False,
    ):
        settings = get_settings()
        self.app_name = settings.app_name
        self.window = window or AnalysisWindow.from_settings(settings)
        self.customer_key = customer_key or settings.analysis.customer_key
        self.lowest_rating = lowest_rating if lowest_rating is not None else settings.analysis.lowest_rating
        self.review_coupled_sales = review_coupled_sales

    def run(self, datasets: Datasets) -> ReportResult:
        """
        Compute the full report.

        Args:
            datasets: Loaded source tables

        Returns:
            ReportResult with all summary tables and per-stage row counts
        """
        started_at = datetime.now(timezone.utc)
        stages: List[StageStats] = []

        logger.info(
            "Starting report pipeline",
            app=self.app_name,
            version=__version__,
            window_start=self.window.start.isoformat(),
            window_end=self.window.end.isoformat(),
            closed=self.window.closed,
        )

        # Stage 1: transactions
        transactions = build_transactions(datasets.orders, datasets.payments)
        stages.append(StageStats("transactions", datasets.payments.height, transactions.height))
        transactions = attach_customers(transactions, datasets.customers)

        # Stage 2: reviews
        reviews = normalize_reviews(datasets.reviews)
        stages.append(StageStats("reviews", datasets.reviews.height, reviews.height))

        # Stage 3: categories
        categories = resolve_categories(datasets.products, datasets.category_translation)
        stages.append(StageStats("categories", datasets.products.height, categories.height))

        # Stage 4: analysis window
        windowed_transactions = filter_transactions(transactions, self.window)
        stages.append(StageStats("transaction_window", transactions.height, windowed_transactions.height))
        windowed_reviews = filter_reviews(reviews, self.window)
        stages.append(StageStats("review_window", reviews.height, windowed_reviews.height))

        # Stage 5: aggregates
        frequency_spend = customer_frequency_spend(windowed_transactions, self.customer_key)

        result = ReportResult(
            window=self.window,
            transactions=windowed_transactions,
            reviews=windowed_reviews,
            categories=categories,
            daily_sales=daily_sales(windowed_transactions),
            monthly_active_users=monthly_active_users(windowed_transactions, self.customer_key),
            category_sales=category_sales(
                datasets.order_items,
                categories,
                windowed_transactions,
                windowed_reviews if self.review_coupled_sales else None,
            ),
            category_average_rating=category_average_rating(
                datasets.order_items, categories, windowed_reviews
            ),
            score_distribution=review_score_distribution(windowed_reviews),
            delivery_delay=delivery_delay_comparison(
                windowed_transactions, windowed_reviews, self.lowest_rating
            ),
            frequency_spend=frequency_spend,
            correlation=frequency_spend_correlation(frequency_spend),
            headline=headline_metrics(windowed_transactions, self.customer_key),
            stages=stages,
            started_at=started_at,
        )
        result.completed_at = datetime.now(timezone.utc)

        for stats in stages:
            logger.info(
                "Stage complete",
                stage=stats.stage,
                input_rows=stats.input_rows,
                output_rows=stats.output_rows,
                rows_dropped=stats.rows_dropped,
            )
        logger.info(
            "Report pipeline complete",
            revenue=round(result.headline.total_revenue, 2),
            orders=result.headline.order_count,
            duration_seconds=round(result.duration_seconds, 3),
        )
        return result
