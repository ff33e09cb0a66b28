"""
Report Aggregators

Independent reducers from the joined and window-filtered tables to the small
summary tables behind the report. None of them depends on another, and each
returns an empty table for an empty input.

Includes:
- Daily sales and monthly active users
- Category sales (total and average) and category rating
- Review score distribution
- Delivery delay, all orders vs. lowest-rated orders
- Per-customer order count vs. spend
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import polars as pl
import structlog

from ecommerce_report.transformation import CATEGORY_ENGLISH, DELIVERY_DATE, ORDER_DATE

logger = structlog.get_logger(__name__)

PAYMENT_VALUE = "payment_value"
REVIEW_SCORE = "review_score"


@dataclass
class ScoreDistribution:
    """Review score counts with their share of all reviews"""
    table: pl.DataFrame  # review_score, count, fraction
    mean_score: Optional[float]
    total_reviews: int


@dataclass
class DeliveryDelayComparison:
    """Mean days from purchase to delivery"""
    all_orders_days: Optional[float]
    lowest_rated_days: Optional[float]
    all_orders_count: int
    lowest_rated_count: int
    lowest_rating: int = 1

    @property
    def difference_days(self) -> Optional[float]:
        """Extra delay of the lowest-rated subset"""
        if self.all_orders_days is None or self.lowest_rated_days is None:
            return None
        return self.lowest_rated_days - self.all_orders_days


@dataclass
class HeadlineMetrics:
    """Top-line figures over the filtered transactions"""
    total_revenue: float
    order_count: int
    customer_count: int
    average_order_value: Optional[float]


def daily_sales(transactions: pl.DataFrame) -> pl.DataFrame:
    """Sum of payment value per order date, ascending by date"""
    return (
        transactions.drop_nulls(ORDER_DATE)
        .group_by(ORDER_DATE)
        .agg(pl.col(PAYMENT_VALUE).cast(pl.Float64).sum().alias("total_sales"))
        .sort(ORDER_DATE)
    )


def monthly_active_users(transactions: pl.DataFrame, customer_key: str = "customer_id") -> pl.DataFrame:
    """
    Distinct customers per calendar month.

    Only months present in the data get a row: a month without transactions
    is a gap in the output, not a zero.
    """
    return (
        transactions.drop_nulls(ORDER_DATE)
        .group_by(pl.col(ORDER_DATE).dt.truncate("1mo").alias("month"))
        .agg(pl.col(customer_key).n_unique().alias("active_users"))
        .sort("month")
    )


def category_sales(
    order_items: pl.DataFrame,
    categories: pl.DataFrame,
    transactions: pl.DataFrame,
    reviews: Optional[pl.DataFrame] = None,
) -> pl.DataFrame:
    """
    Payment value per translated category, total and average.

    Joins order items to resolved products and then to transactions. Passing
    ``reviews`` adds an inner join on reviews before the payments, which
    hides categories whose orders have no review.

    Args:
        order_items: Order items table
        categories: Output of resolve_categories
        transactions: Transaction table (usually window-filtered)
        reviews: Optional normalized reviews for the review-coupled figures

    Returns:
        DataFrame sorted by total_sales descending
    """
    chain = order_items.select(["order_id", "product_id"]).join(
        categories.select(["product_id", CATEGORY_ENGLISH]), on="product_id", how="inner"
    )
    if reviews is not None:
        chain = chain.join(reviews.select(["order_id", REVIEW_SCORE]), on="order_id", how="inner")
    chain = chain.join(transactions.select(["order_id", PAYMENT_VALUE]), on="order_id", how="inner")

    return (
        chain.group_by(CATEGORY_ENGLISH)
        .agg([
            pl.col(PAYMENT_VALUE).cast(pl.Float64).sum().alias("total_sales"),
            pl.col(PAYMENT_VALUE).cast(pl.Float64).mean().alias("average_sales"),
        ])
        .sort(["total_sales", CATEGORY_ENGLISH], descending=[True, False])
    )


def category_sales_total(
    order_items: pl.DataFrame,
    categories: pl.DataFrame,
    transactions: pl.DataFrame,
    reviews: Optional[pl.DataFrame] = None,
) -> pl.DataFrame:
    """Total sales per category, largest first"""
    return category_sales(order_items, categories, transactions, reviews).select(
        [CATEGORY_ENGLISH, "total_sales"]
    )


def category_sales_average(
    order_items: pl.DataFrame,
    categories: pl.DataFrame,
    transactions: pl.DataFrame,
    reviews: Optional[pl.DataFrame] = None,
) -> pl.DataFrame:
    """Average payment value per category, largest first"""
    return (
        category_sales(order_items, categories, transactions, reviews)
        .select([CATEGORY_ENGLISH, "average_sales"])
        .sort(["average_sales", CATEGORY_ENGLISH], descending=[True, False])
    )


def review_score_distribution(reviews: pl.DataFrame) -> ScoreDistribution:
    """Count and fraction per review score, plus the mean score"""
    scored = reviews.drop_nulls(REVIEW_SCORE)
    total = scored.height

    table = (
        scored.group_by(REVIEW_SCORE)
        .agg(pl.len().alias("count"))
        .with_columns((pl.col("count") / max(total, 1)).alias("fraction"))
        .sort(REVIEW_SCORE)
    )

    return ScoreDistribution(
        table=table,
        mean_score=scored[REVIEW_SCORE].mean() if total else None,
        total_reviews=total,
    )


def category_average_rating(
    order_items: pl.DataFrame,
    categories: pl.DataFrame,
    reviews: pl.DataFrame,
) -> pl.DataFrame:
    """Mean review score per translated category, highest first"""
    chain = (
        order_items.select(["order_id", "product_id"])
        .join(categories.select(["product_id", CATEGORY_ENGLISH]), on="product_id", how="inner")
        .join(reviews.select(["order_id", REVIEW_SCORE]), on="order_id", how="inner")
        .drop_nulls(REVIEW_SCORE)
    )

    return (
        chain.group_by(CATEGORY_ENGLISH)
        .agg([
            pl.col(REVIEW_SCORE).mean().alias("average_rating"),
            pl.len().alias("review_count"),
        ])
        .sort(["average_rating", CATEGORY_ENGLISH], descending=[True, False])
    )


def _mean_delay_days(transactions: pl.DataFrame) -> Tuple[Optional[float], int]:
    """Mean delivery delay in days over rows with both dates"""
    delivered = transactions.drop_nulls([ORDER_DATE, DELIVERY_DATE])
    if delivered.is_empty():
        return None, 0

    mean_days = delivered.select(
        (pl.col(DELIVERY_DATE) - pl.col(ORDER_DATE)).dt.total_days().mean()
    ).item()
    return float(mean_days), delivered.height


def delivery_delay_comparison(
    transactions: pl.DataFrame,
    reviews: pl.DataFrame,
    lowest_rating: int = 1,
) -> DeliveryDelayComparison:
    """
    Compare the mean delivery delay of all transactions with the subset
    whose order received a ``lowest_rating`` review.

    Rows without a delivery date are left out of both means.
    """
    low_rated_orders = reviews.filter(pl.col(REVIEW_SCORE) == lowest_rating).select("order_id")
    low_rated = transactions.join(low_rated_orders, on="order_id", how="semi")

    all_days, all_count = _mean_delay_days(transactions)
    low_days, low_count = _mean_delay_days(low_rated)

    return DeliveryDelayComparison(
        all_orders_days=all_days,
        lowest_rated_days=low_days,
        all_orders_count=all_count,
        lowest_rated_count=low_count,
        lowest_rating=lowest_rating,
    )


def customer_frequency_spend(transactions: pl.DataFrame, customer_key: str = "customer_id") -> pl.DataFrame:
    """Distinct order count and total spend per customer"""
    return (
        transactions.group_by(customer_key)
        .agg([
            pl.col("order_id").n_unique().alias("order_count"),
            pl.col(PAYMENT_VALUE).cast(pl.Float64).sum().alias("total_spend"),
        ])
        .sort(customer_key)
    )


def headline_metrics(transactions: pl.DataFrame, customer_key: str = "customer_id") -> HeadlineMetrics:
    """Revenue, order and customer counts, and average order value"""
    revenue = transactions[PAYMENT_VALUE].cast(pl.Float64).sum() if transactions.height else 0.0
    order_count = transactions["order_id"].n_unique()

    return HeadlineMetrics(
        total_revenue=float(revenue),
        order_count=order_count,
        customer_count=transactions[customer_key].n_unique(),
        average_order_value=float(revenue) / order_count if order_count else None,
    )
