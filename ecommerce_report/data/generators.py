"""
Synthetic Data Generator

Generates an Olist-shaped marketplace snapshot (seven related tables) for
testing and demos. Includes the irregularities the report pipeline has to
cope with:
- Orders never delivered (missing delivery timestamp)
- Orders without payments and orders paid in several installments
- Duplicated review rows
- A product category with no English translation
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import polars as pl
import structlog
from faker import Faker

from ecommerce_report.ingestion import SourceName, source_file_stems

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

CATEGORY_TRANSLATIONS = {
    "beleza_saude": "health_beauty",
    "informatica_acessorios": "computers_accessories",
    "moveis_decoracao": "furniture_decor",
    "esporte_lazer": "sports_leisure",
    "cama_mesa_banho": "bed_bath_table",
    "utilidades_domesticas": "housewares",
    "relogios_presentes": "watches_gifts",
    "telefonia": "telephony",
    "brinquedos": "toys",
    "livros_tecnicos": "books_technical",
}
UNTRANSLATED_CATEGORY = "pc_gamer"

STATES = ["SP", "RJ", "MG", "RS", "PR", "SC", "BA", "DF", "GO", "ES"]
PAYMENT_TYPES = ["credit_card", "boleto", "voucher", "debit_card"]
PAYMENT_WEIGHTS = [0.74, 0.19, 0.05, 0.02]
SCORE_WEIGHTS = [0.11, 0.03, 0.08, 0.19, 0.59]

REVIEW_TITLES = [
    None, None, None,
    "Recomendo", "Ótimo produto", "Chegou antes do prazo",
    "Não recebi", "Péssimo", "Produto com defeito",
]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
PERIOD_START = datetime(2016, 9, 1)
PERIOD_END = datetime(2018, 10, 31)


def _format(ts: Optional[datetime]) -> Optional[str]:
    return ts.strftime(TIMESTAMP_FORMAT) if ts is not None else None


# =============================================================================
# GENERATOR
# =============================================================================

class OlistDatasetGenerator:
    """
    Generate a consistent set of marketplace tables.

    Example:
        generator = OlistDatasetGenerator(seed=42)
        tables = generator.generate(n_orders=5000)
        generator.write(tables, "data/raw")
    """

    def __init__(self, seed: int = 42):
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.fake = Faker("pt_BR")
        self.fake.seed_instance(seed)

    def _new_id(self) -> str:
        """32-character hex key drawn from the seeded generator"""
        return self.rng.bytes(16).hex()

    def generate_customers(self, n: int) -> pl.DataFrame:
        """Customers with Brazilian locations"""
        return pl.DataFrame({
            "customer_id": [self._new_id() for _ in range(n)],
            "customer_unique_id": [self._new_id() for _ in range(n)],
            "customer_zip_code_prefix": [f"{z:05d}" for z in self.rng.integers(1000, 99999, n)],
            "customer_city": [self.fake.city().lower() for _ in range(n)],
            "customer_state": self.rng.choice(STATES, n),
        })

    def generate_products(self, n: int) -> pl.DataFrame:
        """Products spread over the translated categories plus one untranslated"""
        names = list(CATEGORY_TRANSLATIONS) + [UNTRANSLATED_CATEGORY]
        weights = np.array([1.0] * len(CATEGORY_TRANSLATIONS) + [0.3])

        return pl.DataFrame({
            "product_id": [self._new_id() for _ in range(n)],
            "product_category_name": self.rng.choice(names, n, p=weights / weights.sum()),
            "product_weight_g": self.rng.integers(100, 20000, n),
        })

    def generate_category_translation(self) -> pl.DataFrame:
        return pl.DataFrame({
            "product_category_name": list(CATEGORY_TRANSLATIONS),
            "product_category_name_english": list(CATEGORY_TRANSLATIONS.values()),
        })

    def generate(
        self,
        n_orders: int = 5000,
        n_customers: Optional[int] = None,
        n_products: Optional[int] = None,
    ) -> Dict[SourceName, pl.DataFrame]:
        """
        Generate all seven tables.

        Args:
            n_orders: Number of orders
            n_customers: Customer pool size (default: 60% of orders, so some repeat)
            n_products: Catalog size (default: 20% of orders)

        Returns:
            Mapping of source to DataFrame

        Raises:
            ValueError: n_orders below 1
        """
        if n_orders < 1:
            raise ValueError(f"n_orders must be at least 1, got {n_orders}")

        n_customers = n_customers or max(1, int(n_orders * 0.6))
        n_products = n_products or max(1, int(n_orders * 0.2))

        logger.info(
            "Generating synthetic dataset",
            orders=n_orders,
            customers=n_customers,
            products=n_products,
            seed=self.seed,
        )

        customers = self.generate_customers(n_customers)
        products = self.generate_products(n_products)
        translation = self.generate_category_translation()

        customer_ids = customers["customer_id"].to_list()
        product_ids = products["product_id"].to_list()
        span_seconds = int((PERIOD_END - PERIOD_START).total_seconds())

        orders, payments, items, reviews = [], [], [], []

        for _ in range(n_orders):
            order_id = self._new_id()
            purchased = PERIOD_START + timedelta(seconds=int(self.rng.integers(0, span_seconds)))
            delay_days = int(self.rng.gamma(2.5, 4.5)) + 1
            delivered = purchased + timedelta(days=delay_days, hours=int(self.rng.integers(0, 24)))
            is_delivered = self.rng.random() > 0.03

            orders.append({
                "order_id": order_id,
                "customer_id": customer_ids[int(self.rng.integers(0, n_customers))],
                "order_status": "delivered" if is_delivered else "shipped",
                "order_purchase_timestamp": _format(purchased),
                "order_delivered_customer_date": _format(delivered if is_delivered else None),
                "order_estimated_delivery_date": _format(purchased + timedelta(days=24)),
            })

            # Items
            order_total = 0.0
            for item_number in range(1, int(self.rng.integers(1, 4)) + 1):
                price = round(float(self.rng.lognormal(4.3, 0.8)), 2)
                freight = round(float(self.rng.uniform(7, 40)), 2)
                order_total += price + freight
                items.append({
                    "order_id": order_id,
                    "order_item_id": item_number,
                    "product_id": product_ids[int(self.rng.integers(0, n_products))],
                    "seller_id": self._new_id(),
                    "price": price,
                    "freight_value": freight,
                })

            # Payments: ~2% unpaid, ~5% split in two
            roll = self.rng.random()
            if roll >= 0.02:
                payment_type = str(self.rng.choice(PAYMENT_TYPES, p=PAYMENT_WEIGHTS))
                installments = int(self.rng.integers(1, 11)) if payment_type == "credit_card" else 1
                parts = [order_total] if roll >= 0.07 else [order_total * 0.6, order_total * 0.4]
                for sequential, value in enumerate(parts, start=1):
                    payments.append({
                        "order_id": order_id,
                        "payment_sequential": sequential,
                        "payment_type": payment_type if sequential == 1 else "voucher",
                        "payment_installments": installments,
                        "payment_value": round(value, 2),
                    })

            # Reviews: ~95% reviewed; long delays pull the score down
            if self.rng.random() < 0.95:
                score = int(self.rng.choice([1, 2, 3, 4, 5], p=SCORE_WEIGHTS))
                if delay_days > 20 and score > 2:
                    score -= 2
                created = (delivered if is_delivered else purchased + timedelta(days=30)) + timedelta(days=1)
                review = {
                    "review_id": self._new_id(),
                    "order_id": order_id,
                    "review_score": score,
                    "review_comment_title": REVIEW_TITLES[int(self.rng.integers(0, len(REVIEW_TITLES)))],
                    "review_creation_date": created.strftime("%Y-%m-%d 00:00:00"),
                    "review_answer_timestamp": _format(created + timedelta(days=2)),
                }
                reviews.append(review)
                if self.rng.random() < 0.01:
                    reviews.append(dict(review))

        tables = {
            SourceName.CUSTOMERS: customers,
            SourceName.ORDERS: pl.DataFrame(orders, infer_schema_length=None),
            SourceName.REVIEWS: pl.DataFrame(reviews, infer_schema_length=None),
            SourceName.PAYMENTS: pl.DataFrame(payments, infer_schema_length=None),
            SourceName.PRODUCTS: products,
            SourceName.ORDER_ITEMS: pl.DataFrame(items, infer_schema_length=None),
            SourceName.CATEGORY_TRANSLATION: translation,
        }

        logger.info(
            "Synthetic dataset generated",
            **{source.value: df.height for source, df in tables.items()},
        )
        return tables

    def write(
        self,
        tables: Dict[SourceName, pl.DataFrame],
        output_dir: Union[str, Path],
        file_format: str = "csv",
    ) -> Dict[SourceName, Path]:
        """Write tables under the configured file names"""
        stems = source_file_stems()

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        written = {}
        for source, df in tables.items():
            path = output_dir / f"{stems[source]}.{file_format}"
            if file_format == "parquet":
                df.write_parquet(path)
            else:
                df.write_csv(path)
            written[source] = path

        logger.info("Synthetic dataset written", directory=str(output_dir), files=len(written))
        return written
