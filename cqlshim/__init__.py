"""
Fault-Tolerant CQL Client Shim for Fault-Injection Testing

Drives a Cassandra/Scylla cluster while nodes are killed and partitioned:
- Session Manager: connections pinned to one node, awaited with a canary read
- Retry Policy: opt-in aggressive same-consistency retries for final reads
- Error Classifier: driver exceptions mapped to definite/indefinite failures
- Outcome Wrapper: classified failures turned into FAIL/INFO operations

Statement construction, workload generation and history checking live in
the harness that calls into this package.

License: MIT
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from cqlshim.core.types import (
    Result,
    Ok,
    Err,
    Operation,
    OperationStatus,
)
from cqlshim.core.errors import (
    ShimError,
    NodeConnectionError,
    AwaitOpenTimeout,
    ExecutionFailed,
    QueryFailure,
    ConfigurationError,
)
from cqlshim.core.config import ShimConfig

# Session Manager exports
from cqlshim.session import (
    Connection,
    open_connection,
    close_connection,
    await_open,
)

# Retry Policy exports
from cqlshim.reliability import (
    AGGRESSIVE_READ,
    AggressiveReadRetryPolicy,
    aggressive_read_statement,
)

# Outcome exports
from cqlshim.outcome import (
    ErrorKind,
    ClassifiedError,
    classify,
    with_errors,
    remap_errors,
)

__all__ = [
    # Version
    "__version__",
    # Result monad
    "Result",
    "Ok",
    "Err",
    # Operations
    "Operation",
    "OperationStatus",
    # Errors
    "ShimError",
    "NodeConnectionError",
    "AwaitOpenTimeout",
    "ExecutionFailed",
    "QueryFailure",
    "ConfigurationError",
    # Config
    "ShimConfig",
    # Session Manager
    "Connection",
    "open_connection",
    "close_connection",
    "await_open",
    # Retry Policy
    "AGGRESSIVE_READ",
    "AggressiveReadRetryPolicy",
    "aggressive_read_statement",
    # Outcomes
    "ErrorKind",
    "ClassifiedError",
    "classify",
    "with_errors",
    "remap_errors",
]
