"""Centralized logging configuration for perf_profiler.

This module provides unified logging setup using Loguru as the canonical
logging facade. A single configure_logging() function configures the global
logger for all submodules.

Usage (in scripts):
    >>> from perf_profiler.common.logging import configure_logging
    >>> from loguru import logger
    >>> configure_logging(verbose=args.verbose)
    >>> logger.info("Sampling started")

Usage (in modules):
    >>> from loguru import logger
    >>> logger.info("Scenario {} completed", target_id)
"""

from __future__ import annotations

import sys

from loguru import logger


def configure_logging(verbose: bool = False) -> None:
    """Configure the global loguru logger.

    Call this once at application startup. After this, use
    `from loguru import logger` everywhere and the configuration
    will be applied automatically.

    Args:
        verbose: If True, enable DEBUG level; if False, use INFO level.

    Note:
        This function is idempotent and safe to call multiple times.
    """
    logger.remove()

    log_format = (
        "<level>{level: <7}</level>| "
        "<dim><cyan>{file}:{line}</cyan></dim> | "
        "<level>{message}</level>"
    )

    logger.add(
        sys.stderr,
        format=log_format,
        level="DEBUG" if verbose else "INFO",
        colorize=True,
        backtrace=verbose,
        diagnose=verbose,
    )

    logger.level("DEBUG", color="<dim><white>")
    logger.level("WARNING", color="<fg #ffff00><bold>")
    logger.level("ERROR", color="<fg #ff0000><bold>")

