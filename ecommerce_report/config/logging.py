"""
Logging Configuration for the E-Commerce Business Report

Stage events (row counts, join misses, unparseable values) go through
structlog and are rendered by the stdlib root handler, either as aligned
key=value lines for a terminal or as one JSON object per line for log
collection.
"""

import logging
import sys
from typing import IO, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import add_log_level, ProcessorFormatter

from ecommerce_report.config.settings import get_settings

LOG_FORMATS = ("text", "json")

# Libraries whose DEBUG output drowns the stage events
NOISY_LOGGERS = ("faker",)


def configure_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Route structlog and stdlib logging through one handler.

    Args:
        log_level: Override of MonitoringSettings.log_level
        log_format: Override of MonitoringSettings.log_format ("text" or "json")
        stream: Output stream, stderr by default so that stdout stays free
    """
    settings = get_settings()
    level = (log_level or settings.monitoring.log_level).upper()
    fmt = log_format or settings.monitoring.log_format
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unknown log format '{fmt}', expected one of {LOG_FORMATS}")

    numeric_level = getattr(logging, level, logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = JSONRenderer() if fmt == "json" else structlog.dev.ConsoleRenderer(colors=False)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors))

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    structlog.get_logger(__name__).debug(
        "Logging configured",
        level=level,
        format=fmt,
        environment=settings.app_env,
    )
