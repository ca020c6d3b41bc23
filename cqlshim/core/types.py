"""
Core Type Definitions for the Pinned-Node Client Shim

Result/Either containers for returning outcomes as data, plus the
operation record the test harness hands to the outcome wrapper.

Design Principles:
- Classified failures are values, not exceptions
- Unknown failures still propagate as exceptions
- Operation records are owned by a single worker for one call
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Generic,
    Literal,
    Optional,
    TypeVar,
    Union,
)

if TYPE_CHECKING:
    from cqlshim.outcome.classifier import ClassifiedError

# =============================================================================
# TYPE VARIABLES FOR GENERIC CONTAINERS
# =============================================================================
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


# =============================================================================
# RESULT MONAD
# =============================================================================
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant: the wrapped body returned normally."""

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failure variant.

    For the outcome wrapper the error is the operation itself, already
    marked FAIL or INFO with the classified error attached.
    """

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """
        Unwrapping an error is a programming error.

        Raises:
            RuntimeError: Always, with error context
        """
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]


# =============================================================================
# OPERATIONS
# =============================================================================
class OperationStatus(Enum):
    """
    Lifecycle of a harness operation.

    FAIL means the operation certainly did not take effect (or is safe to
    treat that way); INFO means the outcome is unknown.
    """
    INVOKE = "invoke"
    OK = "ok"
    FAIL = "fail"
    INFO = "info"


@dataclass
class Operation:
    """
    A single logical action issued by a harness worker.

    Attributes:
        f: Name of the action (e.g. "read", "write", "cas")
        value: Argument or observed value, opaque to this package
        process: Worker identifier, opaque to this package
        status: Set by the outcome wrapper on classified failure
        error: Classified error attached alongside status
    """

    f: str
    value: Any = None
    process: Any = None
    status: OperationStatus = OperationStatus.INVOKE
    error: Optional[ClassifiedError] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "f": self.f,
            "value": self.value,
            "process": self.process,
            "type": self.status.value,
        }
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data
