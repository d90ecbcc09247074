"""Logging utilities for monitoring and debugging."""

from pricehist.core.logging.config import LogConfig
from pricehist.core.logging.logger import (
    configure_logging,
    current_trace_id,
    get_logger,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "configure_logging",
    "current_trace_id",
    "get_logger",
    "log_context",
    "logger",
]
