"""
Transaction Builder

Joins orders to their payments and derives the calendar dates used by every
date-keyed metric. One output row per (order, payment) pair.
"""

import polars as pl
import structlog

from .dates import parse_date_prefix

logger = structlog.get_logger(__name__)

PURCHASE_TIMESTAMP = "order_purchase_timestamp"
DELIVERED_TIMESTAMP = "order_delivered_customer_date"
ORDER_DATE = "order_date"
DELIVERY_DATE = "delivery_date"
PAYMENT_VALUE = "payment_value"


def build_transactions(orders: pl.DataFrame, payments: pl.DataFrame) -> pl.DataFrame:
    """
    Build the transaction table.

    Orders without payments and payments without orders are dropped (inner
    join). Exact duplicate rows are removed. ``order_date`` and
    ``delivery_date`` are null when the source timestamp cannot be parsed;
    ``payment_value`` is null when the source value is not a number.

    Args:
        orders: Orders table
        payments: Payments table

    Returns:
        New DataFrame; the inputs are left untouched
    """
    joined = orders.join(payments, on="order_id", how="inner")

    orders_without_payment = orders.join(payments, on="order_id", how="anti").height
    payments_without_order = payments.join(orders, on="order_id", how="anti").height
    if orders_without_payment or payments_without_order:
        logger.info(
            "Join misses dropped",
            stage="transactions",
            orders_without_payment=orders_without_payment,
            payments_without_order=payments_without_order,
        )

    deduplicated = joined.unique(maintain_order=True)

    transactions = deduplicated.with_columns([
        pl.col(PAYMENT_VALUE).cast(pl.Float64, strict=False),
        parse_date_prefix(PURCHASE_TIMESTAMP).alias(ORDER_DATE),
        parse_date_prefix(DELIVERED_TIMESTAMP).alias(DELIVERY_DATE),
    ])

    null_order_dates = transactions[ORDER_DATE].null_count()
    unparseable_payments = (
        transactions[PAYMENT_VALUE].null_count() - deduplicated[PAYMENT_VALUE].null_count()
    )
    # Delivery before purchase is reported, not corrected
    delivered_before_order = transactions.filter(
        pl.col(DELIVERY_DATE) < pl.col(ORDER_DATE)
    ).height
    if delivered_before_order:
        logger.warning(
            "Transactions delivered before purchase",
            rows=delivered_before_order,
        )

    logger.info(
        "Transactions built",
        orders=orders.height,
        payments=payments.height,
        rows=transactions.height,
        duplicates_removed=joined.height - deduplicated.height,
        unparseable_order_dates=null_order_dates,
        unparseable_payments=unparseable_payments,
        undelivered=transactions[DELIVERY_DATE].null_count(),
    )
    return transactions


def attach_customers(transactions: pl.DataFrame, customers: pl.DataFrame) -> pl.DataFrame:
    """
    Add customer attributes (e.g. ``customer_unique_id``, city, state).

    Left join on ``customer_id``: transactions are never dropped here.
    """
    extra = [c for c in customers.columns if c == "customer_id" or c not in transactions.columns]
    lookup = customers.select(extra).unique(subset=["customer_id"], keep="first", maintain_order=True)
    return transactions.join(lookup, on="customer_id", how="left")
