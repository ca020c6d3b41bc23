"""
Core module: Type definitions, error hierarchy, and configuration.

This module provides the foundational abstractions for the client shim:
- Result containers for returning classified failures as data
- The operation record shared with the test harness
- Error hierarchy for failures raised by the shim itself
- Configuration management with validation
"""

from cqlshim.core.types import (
    Result,
    Ok,
    Err,
    Operation,
    OperationStatus,
)
from cqlshim.core.errors import (
    ErrorCode,
    ShimError,
    NodeConnectionError,
    AwaitOpenTimeout,
    ExecutionFailed,
    QueryFailure,
    ConfigurationError,
)
from cqlshim.core.config import ShimConfig

__all__ = [
    "Result",
    "Ok",
    "Err",
    "Operation",
    "OperationStatus",
    "ErrorCode",
    "ShimError",
    "NodeConnectionError",
    "AwaitOpenTimeout",
    "ExecutionFailed",
    "QueryFailure",
    "ConfigurationError",
    "ShimConfig",
]
