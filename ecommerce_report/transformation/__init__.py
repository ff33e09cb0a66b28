"""
Data Transformation Module
"""
from .categories import CATEGORY, CATEGORY_ENGLISH, resolve_categories
from .dates import parse_date_prefix
from .reviews import REVIEW_DATE, normalize_reviews
from .transactions import DELIVERY_DATE, ORDER_DATE, attach_customers, build_transactions
from .window import AnalysisWindow, filter_reviews, filter_transactions

__all__ = [
    "CATEGORY",
    "CATEGORY_ENGLISH",
    "DELIVERY_DATE",
    "ORDER_DATE",
    "REVIEW_DATE",
    "AnalysisWindow",
    "attach_customers",
    "build_transactions",
    "filter_reviews",
    "filter_transactions",
    "normalize_reviews",
    "parse_date_prefix",
    "resolve_categories",
]
