"""
Statistical checks run on aggregator outputs.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import polars as pl
import structlog
from scipy import stats

logger = structlog.get_logger(__name__)


@dataclass
class CorrelationResult:
    """Pearson correlation between two columns"""
    coefficient: float
    p_value: float
    sample_size: int

    def is_significant(self, alpha: float = 0.05) -> bool:
        """Two-sided test of zero correlation"""
        return self.p_value < alpha


def pearson_correlation(df: pl.DataFrame, x: str, y: str) -> Optional[CorrelationResult]:
    """
    Pearson r and its p-value between two numeric columns.

    Returns None when fewer than two complete rows remain or either column is
    constant, where the coefficient is undefined.
    """
    complete = df.select([x, y]).drop_nulls()
    if complete.height < 2:
        return None

    x_values = complete[x].cast(pl.Float64).to_numpy()
    y_values = complete[y].cast(pl.Float64).to_numpy()
    if np.ptp(x_values) == 0 or np.ptp(y_values) == 0:
        logger.debug("Correlation undefined for constant column", x=x, y=y)
        return None

    coefficient, p_value = stats.pearsonr(x_values, y_values)
    return CorrelationResult(
        coefficient=float(coefficient),
        p_value=float(p_value),
        sample_size=complete.height,
    )


def frequency_spend_correlation(pairs: pl.DataFrame) -> Optional[CorrelationResult]:
    """Correlation between order count and total spend per customer"""
    return pearson_correlation(pairs, "order_count", "total_spend")
