"""
Test Suite Configuration
"""
from datetime import date
from pathlib import Path

import pytest
import polars as pl

from ecommerce_report.config import Settings
from ecommerce_report.ingestion import Datasets, SourceName, source_file_stems
from ecommerce_report.transformation import (
    AnalysisWindow,
    attach_customers,
    build_transactions,
    filter_reviews,
    filter_transactions,
    normalize_reviews,
    resolve_categories,
)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(APP_ENV="testing")


@pytest.fixture
def window() -> AnalysisWindow:
    """The report's default analysis window"""
    return AnalysisWindow(date(2017, 1, 1), date(2018, 9, 30))


@pytest.fixture
def customers_df() -> pl.DataFrame:
    return pl.DataFrame({
        "customer_id": ["cust-1", "cust-2", "cust-3"],
        "customer_unique_id": ["person-1", "person-2", "person-1"],
        "customer_zip_code_prefix": ["01310", "22041", "30130"],
        "customer_city": ["sao paulo", "rio de janeiro", "belo horizonte"],
        "customer_state": ["SP", "RJ", "MG"],
    })


@pytest.fixture
def orders_df() -> pl.DataFrame:
    """
    ord-1, ord-2, ord-3 fall inside the window; ord-4 before it; ord-5 has
    an unparseable purchase timestamp; ord-6 has no payment.
    """
    return pl.DataFrame({
        "order_id": ["ord-1", "ord-2", "ord-3", "ord-4", "ord-5", "ord-6"],
        "customer_id": ["cust-1", "cust-1", "cust-2", "cust-3", "cust-3", "cust-2"],
        "order_status": ["delivered", "delivered", "shipped", "delivered", "delivered", "delivered"],
        "order_purchase_timestamp": [
            "2017-03-01 10:00:00",
            "2017-03-15 09:00:00",
            "2017-04-02 14:00:00",
            "2016-12-20 08:00:00",
            "not a date",
            "2018-01-10 11:00:00",
        ],
        "order_delivered_customer_date": [
            "2017-03-06 12:00:00",
            "2017-03-25 08:00:00",
            None,
            "2016-12-28 16:00:00",
            "",
            "2018-01-20 10:00:00",
        ],
    })


@pytest.fixture
def payments_df() -> pl.DataFrame:
    """ord-2 is paid in two parts, ord-3 has a duplicated row, ord-9 has no order"""
    return pl.DataFrame({
        "order_id": ["ord-1", "ord-2", "ord-2", "ord-3", "ord-3", "ord-4", "ord-5", "ord-9"],
        "payment_sequential": [1, 1, 2, 1, 1, 1, 1, 1],
        "payment_type": [
            "credit_card", "credit_card", "voucher", "boleto",
            "boleto", "credit_card", "debit_card", "boleto",
        ],
        "payment_value": [100.0, 60.0, 40.0, 80.0, 80.0, 50.0, 30.0, 20.0],
    })


@pytest.fixture
def reviews_df() -> pl.DataFrame:
    """rev-2 is duplicated, rev-4 predates the window, rev-5 has no date"""
    return pl.DataFrame({
        "review_id": ["rev-1", "rev-2", "rev-2", "rev-3", "rev-4", "rev-5"],
        "order_id": ["ord-1", "ord-2", "ord-2", "ord-3", "ord-4", "ord-5"],
        "review_score": [1, 5, 5, 4, 3, 2],
        "review_comment_title": ["Não recebi", None, None, "Recomendo", None, None],
        "review_creation_date": [
            "2017-03-07 00:00:00",
            "2017-03-26 00:00:00",
            "2017-03-26 00:00:00",
            "2017-04-10 00:00:00",
            "2016-12-29 00:00:00",
            "",
        ],
    })


@pytest.fixture
def products_df() -> pl.DataFrame:
    """prod-3 has an untranslated category, prod-4 none at all"""
    return pl.DataFrame({
        "product_id": ["prod-1", "prod-2", "prod-3", "prod-4"],
        "product_category_name": ["beleza_saude", "informatica_acessorios", "pc_gamer", None],
        "product_weight_g": [500, 1200, 3000, 250],
    })


@pytest.fixture
def translation_df() -> pl.DataFrame:
    return pl.DataFrame({
        "product_category_name": ["beleza_saude", "informatica_acessorios", "moveis_decoracao"],
        "product_category_name_english": ["health_beauty", "computers_accessories", "furniture_decor"],
    })


@pytest.fixture
def order_items_df() -> pl.DataFrame:
    return pl.DataFrame({
        "order_id": ["ord-1", "ord-2", "ord-2", "ord-3", "ord-3", "ord-4"],
        "order_item_id": [1, 1, 2, 1, 2, 1],
        "product_id": ["prod-1", "prod-2", "prod-1", "prod-2", "prod-3", "prod-1"],
        "price": [90.0, 55.0, 35.0, 70.0, 5.0, 45.0],
    })


@pytest.fixture
def datasets(
    customers_df,
    orders_df,
    reviews_df,
    payments_df,
    products_df,
    order_items_df,
    translation_df,
) -> Datasets:
    """All seven sources as an in-memory container"""
    return Datasets.from_frames(
        customers=customers_df,
        orders=orders_df,
        reviews=reviews_df,
        payments=payments_df,
        products=products_df,
        order_items=order_items_df,
        category_translation=translation_df,
    )


@pytest.fixture
def transactions_df(datasets) -> pl.DataFrame:
    return attach_customers(
        build_transactions(datasets.orders, datasets.payments),
        datasets.customers,
    )


@pytest.fixture
def windowed_transactions(transactions_df, window) -> pl.DataFrame:
    return filter_transactions(transactions_df, window)


@pytest.fixture
def windowed_reviews(datasets, window) -> pl.DataFrame:
    return filter_reviews(normalize_reviews(datasets.reviews), window)


@pytest.fixture
def categories_df(datasets) -> pl.DataFrame:
    return resolve_categories(datasets.products, datasets.category_translation)


@pytest.fixture
def raw_dir(tmp_path, datasets) -> Path:
    """The sample sources written as CSV files under the configured names"""
    directory = tmp_path / "raw"
    directory.mkdir()
    stems = source_file_stems()
    for source in SourceName:
        getattr(datasets, source.value).write_csv(directory / f"{stems[source]}.csv")
    return directory
