"""
Command Line Entry Point

Usage:
    ecommerce-report run --data-dir data/raw --output data/report
    ecommerce-report run --start 2017-01-01 --end 2018-09-30 --closed both
    ecommerce-report generate --output data/raw --orders 5000
"""

import argparse
import sys
from datetime import date
from typing import List, Optional

import structlog

from ecommerce_report.config import get_settings
from ecommerce_report.config.logging import configure_logging

logger = structlog.get_logger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"Must be at least 1: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with the run and generate commands"""
    parser = argparse.ArgumentParser(
        prog="ecommerce-report",
        description="E-commerce business report over marketplace snapshots",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-format", choices=["text", "json"], default=None, help="Log line format")
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", help="Compute and export the report")
    run.add_argument("--data-dir", default=None, help="Directory holding the source files")
    run.add_argument("--input-format", choices=["csv", "parquet"], default=None, help="Source file format")
    run.add_argument("--start", type=_parse_date, default=None, help="Window start (YYYY-MM-DD)")
    run.add_argument("--end", type=_parse_date, default=None, help="Window end (YYYY-MM-DD)")
    run.add_argument(
        "--closed",
        choices=["none", "left", "right", "both"],
        default=None,
        help="Inclusive window bounds",
    )
    run.add_argument("--customer-key", default=None, help="Column identifying a customer")
    run.add_argument(
        "--review-coupled-sales",
        action="store_true",
        help="Only count category sales of orders that have a review",
    )
    run.add_argument("--output", default=None, help="Report output directory")
    run.add_argument("--format", choices=["csv", "parquet", "json"], default=None, help="Summary table format")

    generate = commands.add_parser("generate", help="Write a synthetic dataset")
    generate.add_argument("--output", default=None, help="Target directory (default: configured raw path)")
    generate.add_argument("--orders", type=_positive_int, default=5000, help="Number of orders")
    generate.add_argument("--seed", type=int, default=42, help="Random seed")
    generate.add_argument("--format", choices=["csv", "parquet"], default="csv", help="File format")

    return parser


def run_report(args: argparse.Namespace) -> int:
    """Load, compute and export the report"""
    from ecommerce_report.ingestion import DatasetLoader, LoadError
    from ecommerce_report.pipeline import ReportPipeline
    from ecommerce_report.reporting import export_report
    from ecommerce_report.transformation import AnalysisWindow

    settings = get_settings()
    try:
        window = AnalysisWindow(
            start=args.start or settings.analysis.window_start,
            end=args.end or settings.analysis.window_end,
            closed=args.closed or settings.analysis.window_closed,
        )
    except ValueError as e:
        logger.error("Invalid analysis window", error=str(e))
        return 2

    try:
        datasets = DatasetLoader(args.data_dir, args.input_format).load_all()
    except LoadError as e:
        logger.error("Report aborted", source=e.source, path=str(e.path), error=str(e))
        return 1

    result = ReportPipeline(
        window=window,
        customer_key=args.customer_key,
        review_coupled_sales=args.review_coupled_sales,
    ).run(datasets)
    written = export_report(result, args.output, args.format)

    delay = result.delivery_delay
    logger.info(
        "Report summary",
        revenue=round(result.headline.total_revenue, 2),
        orders=result.headline.order_count,
        customers=result.headline.customer_count,
        mean_review_score=result.score_distribution.mean_score,
        delay_all_days=delay.all_orders_days,
        delay_lowest_rated_days=delay.lowest_rated_days,
        correlation=result.correlation.coefficient if result.correlation else None,
        files=len(written),
    )
    return 0


def generate_dataset(args: argparse.Namespace) -> int:
    """Write a synthetic dataset"""
    from ecommerce_report.data import OlistDatasetGenerator

    generator = OlistDatasetGenerator(seed=args.seed)
    tables = generator.generate(n_orders=args.orders)
    generator.write(tables, args.output or get_settings().data.raw_path, args.format)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    commands = {
        "run": run_report,
        "generate": generate_dataset,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
