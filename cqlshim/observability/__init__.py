"""
Observability module: Structured logging.
"""

from cqlshim.observability.logging import (
    StructuredLogger,
    LogLevel,
    JsonFormatter,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    "StructuredLogger",
    "LogLevel",
    "JsonFormatter",
    "setup_logging",
    "setup_logging_from_config",
]
