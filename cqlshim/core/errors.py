"""
Error Hierarchy for the Pinned-Node Client Shim

Two families of failure leave this package:

- Errors it raises itself (ShimError subclasses below): connection
  establishment failures, exhausted connection budgets, the generic
  execution envelope, and remapped query failures.
- Driver errors it does not recognise, which propagate unchanged. These are
  treated as setup or programming problems and are never folded into an
  operation outcome.

Each ShimError carries:
- Unique error code for programmatic handling
- Human-readable message for logging
- Optional cause for root cause analysis
- Creation time for correlation with node logs

Usage:
    try:
        conn = await_open("n1")
    except AwaitOpenTimeout as e:
        log.error(e.to_dict())
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional
from uuid import uuid4

if TYPE_CHECKING:
    from cqlshim.outcome.classifier import ClassifiedError


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Unique error codes for programmatic error handling.

    Codes are grouped by subsystem:
    - 1xxx: Connection errors
    - 2xxx: Query errors
    - 9xxx: Internal errors
    """

    # Connection errors (1xxx)
    CONNECTION_FAILED = 1001
    AWAIT_OPEN_TIMEOUT = 1002

    # Query errors (2xxx)
    EXECUTION_FAILED = 2001
    QUERY_FAILED = 2002

    # Internal errors (9xxx)
    CONFIGURATION_INVALID = 9002


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class ShimError(Exception):
    """
    Base class for errors raised by this package.

    Errors are treated as immutable after creation; use with_context() to
    derive a copy with extra fields.
    """

    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    created_ns: int = field(default_factory=time.time_ns)
    cause: Optional[BaseException] = None
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def with_context(self, **kwargs: Any) -> ShimError:
        """Add context to error (returns new instance of the same class)."""
        return dataclasses.replace(self, context={**self.context, **kwargs})

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to dictionary for structured logging."""
        data = {
            "error_id": self.error_id,
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "created_ns": self.created_ns,
            "context": self.context,
        }
        if self.cause is not None:
            data["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return data

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (id={self.error_id[:8]})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# CONNECTION ERRORS
# =============================================================================
@dataclass
class NodeConnectionError(ShimError):
    """
    A session could not be established against the pinned node.

    Any cluster handle created for the attempt has already been shut down
    by the time this is raised.
    """

    @classmethod
    def connection_failed(
        cls,
        node: str,
        port: int,
        cause: Optional[BaseException] = None,
    ) -> NodeConnectionError:
        return cls(
            code=ErrorCode.CONNECTION_FAILED,
            message=f"Failed to connect to node {node}:{port}",
            cause=cause,
            context={"node": node, "port": port},
        )

    @property
    def node(self) -> str:
        return self.context["node"]


@dataclass
class AwaitOpenTimeout(ShimError):
    """The node never became available within the connection budget."""

    @classmethod
    def exhausted(
        cls,
        node: str,
        attempts: int,
        cause: Optional[BaseException] = None,
    ) -> AwaitOpenTimeout:
        return cls(
            code=ErrorCode.AWAIT_OPEN_TIMEOUT,
            message=f"Node {node} not available after {attempts} attempts",
            cause=cause,
            context={"node": node, "attempts": attempts},
        )

    @property
    def node(self) -> str:
        return self.context["node"]


# =============================================================================
# QUERY ERRORS
# =============================================================================
@dataclass
class ExecutionFailed(ShimError):
    """
    Generic envelope around a failed statement execution.

    Raised by Connection.execute. Callers that use the driver session
    directly see the raw driver exception instead, so the classifier
    accepts both shapes.
    """

    @classmethod
    def wrap(
        cls,
        statement: Any,
        cause: BaseException,
    ) -> ExecutionFailed:
        query = getattr(statement, "query_string", statement)
        return cls(
            code=ErrorCode.EXECUTION_FAILED,
            message=f"Query execution failed: {type(cause).__name__}",
            cause=cause,
            context={"query": str(query)[:200]},
        )


@dataclass
class QueryFailure(ShimError):
    """A driver failure remapped to its classified form."""

    classified: Optional[ClassifiedError] = None

    @classmethod
    def from_classified(cls, classified: ClassifiedError) -> QueryFailure:
        return cls(
            code=ErrorCode.QUERY_FAILED,
            message=f"{classified.kind.name} (definite={classified.definite})",
            cause=classified.cause,
            context={"kind": classified.kind.name, "definite": classified.definite},
            classified=classified,
        )

    @property
    def definite(self) -> bool:
        return self.classified.definite


# =============================================================================
# INTERNAL ERRORS
# =============================================================================
@dataclass
class ConfigurationError(ShimError):
    """Configuration failed to load or validate."""

    @classmethod
    def invalid(cls, reason: str) -> ConfigurationError:
        return cls(
            code=ErrorCode.CONFIGURATION_INVALID,
            message=f"Invalid configuration: {reason}",
            context={"reason": reason},
        )
