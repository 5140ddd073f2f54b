"""
Logging setup - Review Dashboard
review_dashboard/logging_config.py

Routes structlog events and stdlib log records through one handler, rendered
as JSON lines or coloured console output depending on LOG_FORMAT.
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.types import Processor

from review_dashboard.config import settings


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog and the root logger.

    Args:
        level: Log level name, defaults to settings.LOG_LEVEL.
        json_output: JSON rendering, defaults to settings.LOG_FORMAT == "json".
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    if json_output is None:
        json_output = settings.LOG_FORMAT == "json"

    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    logging.getLogger("urllib3").setLevel(logging.WARNING)
