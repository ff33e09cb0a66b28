"""
Dataset Loader

Reads the raw marketplace snapshots (CSV or Parquet) into Polars DataFrames.
Loading is lenient: apart from the columns needed for joins and date
derivation, no row-level validation happens here. Malformed values are kept
as-is for the transformation stage to deal with.
"""

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

import polars as pl
from polars.exceptions import PolarsError
import structlog

from ecommerce_report.config.settings import DataSourceSettings, get_settings

logger = structlog.get_logger(__name__)


class SourceName(str, Enum):
    """Raw tabular sources consumed by the report"""
    CUSTOMERS = "customers"
    ORDERS = "orders"
    REVIEWS = "reviews"
    PAYMENTS = "payments"
    PRODUCTS = "products"
    ORDER_ITEMS = "order_items"
    CATEGORY_TRANSLATION = "category_translation"


class FileFormat(str, Enum):
    """Supported file formats"""
    CSV = "csv"
    PARQUET = "parquet"


# Columns each source must carry for the joins and date derivations
SOURCE_COLUMNS: Dict[SourceName, List[str]] = {
    SourceName.CUSTOMERS: ["customer_id"],
    SourceName.ORDERS: [
        "order_id",
        "customer_id",
        "order_purchase_timestamp",
        "order_delivered_customer_date",
    ],
    SourceName.REVIEWS: ["order_id", "review_score", "review_creation_date"],
    SourceName.PAYMENTS: ["order_id", "payment_value"],
    SourceName.PRODUCTS: ["product_id", "product_category_name"],
    SourceName.ORDER_ITEMS: ["order_id", "product_id"],
    SourceName.CATEGORY_TRANSLATION: ["product_category_name", "product_category_name_english"],
}

# Read as text whatever the inferred type: keys, labels and raw timestamps
TEXT_COLUMNS = {
    "customer_id",
    "customer_unique_id",
    "customer_zip_code_prefix",
    "order_id",
    "review_id",
    "product_id",
    "seller_id",
    "product_category_name",
    "product_category_name_english",
    "order_purchase_timestamp",
    "order_approved_at",
    "order_delivered_carrier_date",
    "order_delivered_customer_date",
    "order_estimated_delivery_date",
    "review_creation_date",
    "review_answer_timestamp",
    "shipping_limit_date",
    "review_comment_title",
    "review_comment_message",
}



def source_file_stems(config: Optional[DataSourceSettings] = None) -> Dict[SourceName, str]:
    """File name (without extension) of each source"""
    config = config or get_settings().data
    return {
        SourceName.CUSTOMERS: config.customers_file,
        SourceName.ORDERS: config.orders_file,
        SourceName.REVIEWS: config.reviews_file,
        SourceName.PAYMENTS: config.payments_file,
        SourceName.PRODUCTS: config.products_file,
        SourceName.ORDER_ITEMS: config.order_items_file,
        SourceName.CATEGORY_TRANSLATION: config.category_translation_file,
    }

class LoadError(Exception):
    """A required source is missing or structurally unreadable"""

    def __init__(self, source: Union[SourceName, str], message: str, path: Optional[Path] = None):
        self.source = SourceName(source).value if isinstance(source, SourceName) else source
        self.path = path
        location = f" ({path})" if path is not None else ""
        super().__init__(f"Cannot load '{self.source}'{location}: {message}")


def _check_columns(source: SourceName, df: pl.DataFrame, path: Optional[Path] = None) -> None:
    """Fail when a source has no columns or lacks a join column"""
    if df.width == 0:
        raise LoadError(source, "source has no columns", path)

    missing = [c for c in SOURCE_COLUMNS[source] if c not in df.columns]
    if missing:
        raise LoadError(source, f"missing columns {missing}", path)


def _text_columns(df: pl.DataFrame) -> pl.DataFrame:
    """Cast key, label and timestamp columns to text"""
    return df.with_columns([
        pl.col(c).cast(pl.Utf8)
        for c in df.columns
        if c in TEXT_COLUMNS and df.schema[c] != pl.Utf8
    ])


@dataclass(frozen=True)
class Datasets:
    """One immutable table per raw source"""
    customers: pl.DataFrame
    orders: pl.DataFrame
    reviews: pl.DataFrame
    payments: pl.DataFrame
    products: pl.DataFrame
    order_items: pl.DataFrame
    category_translation: pl.DataFrame

    @classmethod
    def from_frames(cls, **frames: pl.DataFrame) -> "Datasets":
        """
        Build the container from in-memory frames.

        Applies the same column checks as file loading.

        Raises:
            LoadError: a source is missing or lacks a required column
        """
        tables = {}
        for source in SourceName:
            df = frames.get(source.value)
            if df is None:
                raise LoadError(source, "source not provided")
            _check_columns(source, df)
            tables[source.value] = _text_columns(df)
        return cls(**tables)

    def row_counts(self) -> Dict[str, int]:
        """Row count per source"""
        return {f.name: len(getattr(self, f.name)) for f in fields(self)}


class DatasetLoader:
    """
    Loads the seven marketplace sources from a directory.

    Example:
        loader = DatasetLoader("data/raw")
        datasets = loader.load_all()
    """

    def __init__(
        self,
        raw_path: Optional[Union[str, Path]] = None,
        file_format: Optional[Union[FileFormat, str]] = None,
        file_names: Optional[Dict[str, str]] = None,
        null_values: Optional[List[str]] = None,
    ):
        config = get_settings().data
        self.raw_path = Path(raw_path or config.raw_path)
        self.file_format = FileFormat(file_format or config.file_format)
        self.null_values = null_values if null_values is not None else list(config.null_values)

        self.file_names = source_file_stems(config)
        for name, stem in (file_names or {}).items():
            self.file_names[SourceName(name)] = stem

    def path_for(self, source: SourceName) -> Path:
        """Resolve the file path of a source"""
        return self.raw_path / f"{self.file_names[source]}.{self.file_format.value}"

    def _read_csv(self, path: Path) -> pl.DataFrame:
        """Read CSV file with Polars"""
        return pl.read_csv(
            path,
            null_values=self.null_values,
            infer_schema_length=10000,
            try_parse_dates=False,
        )

    def _read_parquet(self, path: Path) -> pl.DataFrame:
        """Read Parquet file"""
        return pl.read_parquet(path)

    def _read_file(self, path: Path) -> pl.DataFrame:
        """Read file based on format"""
        readers = {
            FileFormat.CSV: self._read_csv,
            FileFormat.PARQUET: self._read_parquet,
        }
        return readers[self.file_format](path)

    def load(self, source: Union[SourceName, str]) -> pl.DataFrame:
        """
        Load a single source table.

        Args:
            source: Source to load

        Returns:
            DataFrame with inferred column types

        Raises:
            LoadError: file missing, unreadable, empty or lacking join columns
        """
        source = SourceName(source)
        path = self.path_for(source)

        if not path.is_file():
            raise LoadError(source, "file not found", path)

        try:
            df = self._read_file(path)
        except (PolarsError, OSError) as e:
            raise LoadError(source, str(e), path) from e

        _check_columns(source, df, path)
        df = _text_columns(df)

        logger.info("Source loaded", source=source.value, rows=len(df), columns=df.width)
        return df

    def load_all(self) -> Datasets:
        """Load every source; the first failure aborts the run"""
        tables = {source.value: self.load(source) for source in SourceName}
        return Datasets(**tables)
