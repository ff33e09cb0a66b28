"""
Report Exporter

Writes the summary tables of a report run to an output directory, one file
per table, plus a ``summary.json`` with the scalar figures. This is the
hand-off point to charting and narrative tools.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

import polars as pl
import structlog

from ecommerce_report.config import get_settings
from ecommerce_report.pipeline import ReportResult

logger = structlog.get_logger(__name__)

OUTPUT_FORMATS = ("csv", "parquet", "json")


def _write_table(df: pl.DataFrame, path: Path, output_format: str) -> None:
    """Write one table in the requested format"""
    if output_format == "csv":
        df.write_csv(path)
    elif output_format == "parquet":
        df.write_parquet(path)
    else:
        df.write_json(path)


def build_summary(result: ReportResult) -> Dict[str, Any]:
    """Scalar figures of a report run as plain JSON-ready values"""
    distribution = result.score_distribution
    correlation = result.correlation

    return {
        "window": {
            "start": result.window.start.isoformat(),
            "end": result.window.end.isoformat(),
            "closed": result.window.closed,
        },
        "headline": asdict(result.headline),
        "reviews": {
            "total": distribution.total_reviews,
            "mean_score": distribution.mean_score,
        },
        "delivery_delay": {
            **asdict(result.delivery_delay),
            "difference_days": result.delivery_delay.difference_days,
        },
        "frequency_spend_correlation": None if correlation is None else {
            **asdict(correlation),
            "significant": correlation.is_significant(),
        },
        "stages": [
            {**asdict(stats), "rows_dropped": stats.rows_dropped}
            for stats in result.stages
        ],
        "duration_seconds": result.duration_seconds,
    }


def export_report(
    result: ReportResult,
    output_path: Optional[Union[str, Path]] = None,
    output_format: Optional[str] = None,
) -> Dict[str, Path]:
    """
    Export a report run.

    Args:
        result: Output of ReportPipeline.run
        output_path: Target directory (created if missing)
        output_format: "csv", "parquet" or "json"

    Returns:
        Mapping of table name to written file, including "summary"
    """
    config = get_settings().output
    output_dir = Path(output_path or config.output_path)
    output_format = output_format or config.output_format
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {output_format}")

    output_dir.mkdir(parents=True, exist_ok=True)
    written: Dict[str, Path] = {}

    for name, table in result.summary_tables().items():
        path = output_dir / f"{name}.{output_format}"
        _write_table(table, path, output_format)
        written[name] = path
        logger.debug("Summary table written", table=name, rows=table.height, path=str(path))

    summary_path = output_dir / "summary.json"
    with open(summary_path, "w", encoding="utf-8") as f:
        json.dump(build_summary(result), f, indent=2, ensure_ascii=False)
    written["summary"] = summary_path

    logger.info("Report exported", directory=str(output_dir), files=len(written), format=output_format)
    return written
