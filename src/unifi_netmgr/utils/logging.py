"""Structured JSON logging configuration."""

import os
import sys
from loguru import logger
from pathlib import Path
from typing import Any


def configure_logging(
    log_file: str | None = None,
    log_level: str = 'DEBUG',
    include_console: bool = False,
) -> None:
    """Configure structured JSON logging.

    Args:
        log_file: Path to log file (defaults to ~/.unifi-netmgr/logs/unifi_netmgr.log)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        include_console: Whether to also log to console
    """
    logger.remove()

    if not log_file:
        log_dir = Path.home() / '.unifi-netmgr' / 'logs'
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = str(log_dir / 'unifi_netmgr.log')

    # JSON file logging with rotation
    logger.add(
        log_file,
        format='{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[correlation_id]} | {message}',
        serialize=True,
        rotation='10 MB',
        retention='7 days',
        compression='gz',
        level=log_level,
        backtrace=True,
        diagnose=True,
    )

    if include_console or os.getenv('UNIFI_NETMGR_DEBUG'):
        logger.add(
            sys.stderr,
            format='<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>',
            level=log_level,
            colorize=True,
        )

    logger.configure(extra={'correlation_id': ''})


def get_logger(correlation_id: str = '') -> Any:
    """Get logger with correlation ID for request tracing.

    Args:
        correlation_id: Unique identifier for tracking one run (e.g. an organisation pass)

    Returns:
        Logger instance with correlation ID bound
    """
    return logger.bind(correlation_id=correlation_id)


def log_operation_start(operation: str, params: dict[str, Any], correlation_id: str = '') -> None:
    """Log the start of a CLI/MCP operation with its parameters."""
    log = get_logger(correlation_id)
    log.info('Operation started', operation=operation, params=params)


def log_operation_result(
    operation: str,
    success: bool,
    result: Any = None,
    error: str | None = None,
    correlation_id: str = '',
) -> None:
    """Log the outcome of a CLI/MCP operation.

    Args:
        operation: Name of the operation
        success: Whether the operation succeeded
        result: Result object (only its type is logged)
        error: Error message (logged only if success=False)
        correlation_id: Run correlation ID
    """
    log = get_logger(correlation_id)

    if success:
        log.info('Operation completed', operation=operation, result_type=type(result).__name__)
    else:
        log.error('Operation failed', operation=operation, error=error)
