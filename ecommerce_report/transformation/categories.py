"""
Category Resolver

Relabels products with their translated category name.
"""

import polars as pl
import structlog

logger = structlog.get_logger(__name__)

CATEGORY = "product_category_name"
CATEGORY_ENGLISH = "product_category_name_english"


def resolve_categories(products: pl.DataFrame, translations: pl.DataFrame) -> pl.DataFrame:
    """
    Attach the translated category name to each product.

    This step is lossy: products whose raw category is missing or has no
    translation are dropped, so they never reach a category-keyed metric.
    Names are never made up for them.

    Args:
        products: Products table
        translations: Category translation table

    Returns:
        DataFrame with product_id, raw and translated category name
    """
    # One translation per raw name keeps the join one-to-one
    lookup = translations.select([CATEGORY, CATEGORY_ENGLISH]).unique(
        subset=[CATEGORY], keep="first", maintain_order=True
    )

    resolved = products.select(["product_id", CATEGORY]).join(lookup, on=CATEGORY, how="inner")

    dropped = products.height - resolved.height
    if dropped:
        untranslated = (
            products.join(lookup, on=CATEGORY, how="anti")
            .get_column(CATEGORY)
            .drop_nulls()
            .unique()
            .to_list()
        )
        logger.info(
            "Products without translated category dropped",
            rows=dropped,
            categories=sorted(untranslated),
        )

    return resolved
