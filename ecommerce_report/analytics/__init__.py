"""
Report Analytics Module
"""
from .aggregators import (
    DeliveryDelayComparison,
    HeadlineMetrics,
    ScoreDistribution,
    category_average_rating,
    category_sales,
    category_sales_average,
    category_sales_total,
    customer_frequency_spend,
    daily_sales,
    delivery_delay_comparison,
    headline_metrics,
    monthly_active_users,
    review_score_distribution,
)
from .statistics import CorrelationResult, frequency_spend_correlation, pearson_correlation

__all__ = [
    "CorrelationResult",
    "DeliveryDelayComparison",
    "HeadlineMetrics",
    "ScoreDistribution",
    "category_average_rating",
    "category_sales",
    "category_sales_average",
    "category_sales_total",
    "customer_frequency_spend",
    "daily_sales",
    "delivery_delay_comparison",
    "frequency_spend_correlation",
    "headline_metrics",
    "monthly_active_users",
    "pearson_correlation",
    "review_score_distribution",
]
