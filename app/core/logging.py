"""Locale Store structured logging module."""

import logging
import inspect
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger
from .config import settings


def _is_test_environment() -> bool:
    """Detect if running in a test environment."""
    return "pytest" in sys.modules


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structured logging for the locale store.

    Args:
        log_level: Overrides settings.LOG_LEVEL when given.
        is_production: Overrides settings.is_production when given. Selects
            JSON output instead of the console renderer.

    Returns:
        The root bound logger.

    Example:
        logger = configure_logging(log_level="DEBUG", is_production=False)
    """
    # Tests keep structlog working but nothing reaches the handlers
    if _is_test_environment():
        logging.root.setLevel(logging.CRITICAL + 1)
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            level=logging.CRITICAL + 1,
            force=True,
        )
        return structlog.stdlib.get_logger()

    prod_mode = settings.is_production if is_production is None else is_production

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if prod_mode:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=level)
    # basicConfig leaves an already configured root logger alone
    logging.root.setLevel(level)

    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Get a logger bound to the calling module."""
    current_frame = inspect.currentframe()
    if current_frame is None:
        return logger

    frame = current_frame.f_back
    module = inspect.getmodule(frame)

    if module:
        module_name = module.__name__
        return logger.bind(
            component=module_name.split(".")[-1],
            module_path=module_name,
        )

    return logger.bind(component="unknown")
