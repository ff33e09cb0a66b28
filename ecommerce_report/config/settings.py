"""
E-Commerce Business Report
Centralized Configuration Management

Configuration is read from environment variables (and an optional .env file)
through Pydantic settings, with validation and type safety.
"""

from datetime import date
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataSourceSettings(BaseSettings):
    """Raw snapshot location and file names"""

    model_config = SettingsConfigDict(env_prefix="DATA_")

    raw_path: str = Field(default="./data/raw", description="Directory holding the source files")
    file_format: Literal["csv", "parquet"] = Field(default="csv", description="Source file format")

    customers_file: str = Field(default="olist_customers_dataset", description="Customers file stem")
    orders_file: str = Field(default="olist_orders_dataset", description="Orders file stem")
    reviews_file: str = Field(default="olist_order_reviews_dataset", description="Reviews file stem")
    payments_file: str = Field(default="olist_order_payments_dataset", description="Payments file stem")
    products_file: str = Field(default="olist_products_dataset", description="Products file stem")
    order_items_file: str = Field(default="olist_order_items_dataset", description="Order items file stem")
    category_translation_file: str = Field(
        default="product_category_name_translation",
        description="Category translation file stem",
    )

    null_values: List[str] = Field(
        default=["", "NULL", "null", "NA", "N/A"],
        description="Cell values read as null",
    )


class AnalysisSettings(BaseSettings):
    """Analysis window and metric options"""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    window_start: date = Field(default=date(2017, 1, 1), description="Lower window bound")
    window_end: date = Field(default=date(2018, 9, 30), description="Upper window bound")
    window_closed: Literal["none", "left", "right", "both"] = Field(
        default="none",
        description="Which window bounds are inclusive",
    )
    customer_key: str = Field(default="customer_id", description="Column identifying a customer")
    lowest_rating: int = Field(default=1, ge=1, le=5, description="Score of the low-rated review subset")

    @model_validator(mode="after")
    def validate_window(self) -> "AnalysisSettings":
        """Window bounds must be ordered"""
        if self.window_start >= self.window_end:
            raise ValueError("window_start must be earlier than window_end")
        return self


class OutputSettings(BaseSettings):
    """Report export configuration"""

    model_config = SettingsConfigDict(env_prefix="REPORT_")

    output_path: str = Field(default="./data/report", description="Report output directory")
    output_format: Literal["csv", "parquet", "json"] = Field(default="csv", description="Summary table format")


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="text", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="ecommerce-report", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")

    # Subsystem configurations
    data: DataSourceSettings = Field(default_factory=DataSourceSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
