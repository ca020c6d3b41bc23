"""
Error Classifier: Driver Exceptions to Definite/Indefinite Outcomes

A failure is definite when the operation provably did not take effect, and
indefinite when the request may have been applied before the error came
back. The table is fixed:

    NoHostAvailable  -> NO_HOST_AVAILABLE  definite
    ReadTimeout      -> READ_TIMEOUT       indefinite
    Unavailable      -> UNAVAILABLE        definite
    WriteFailure     -> WRITE_FAILURE      indefinite
    WriteTimeout     -> WRITE_TIMEOUT      indefinite

Anything else is unclassified and must reach the caller untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from cassandra import ReadTimeout, Unavailable, WriteFailure, WriteTimeout
from cassandra.cluster import NoHostAvailable

from cqlshim.core.errors import ExecutionFailed


class ErrorKind(Enum):
    """Canonical failure kinds, each with a fixed definiteness."""
    NO_HOST_AVAILABLE = "no-host-available"
    READ_TIMEOUT = "read-timeout"
    UNAVAILABLE = "unavailable"
    WRITE_FAILURE = "write-failure"
    WRITE_TIMEOUT = "write-timeout"
    UNKNOWN = "unknown"

    @property
    def definite(self) -> bool:
        return self in _DEFINITE_KINDS


_DEFINITE_KINDS = frozenset({ErrorKind.NO_HOST_AVAILABLE, ErrorKind.UNAVAILABLE})

_CLASSIFICATION_TABLE: tuple[tuple[type[BaseException], ErrorKind], ...] = (
    (NoHostAvailable, ErrorKind.NO_HOST_AVAILABLE),
    (ReadTimeout, ErrorKind.READ_TIMEOUT),
    (Unavailable, ErrorKind.UNAVAILABLE),
    (WriteFailure, ErrorKind.WRITE_FAILURE),
    (WriteTimeout, ErrorKind.WRITE_TIMEOUT),
)


@dataclass(frozen=True)
class ClassifiedError:
    """A driver failure reduced to its kind and definiteness."""

    kind: ErrorKind
    definite: bool
    cause: Optional[BaseException] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "definite": self.definite,
            "message": str(self.cause) if self.cause is not None else None,
        }


def _lookup(exc: BaseException) -> Optional[ClassifiedError]:
    for exc_type, kind in _CLASSIFICATION_TABLE:
        if isinstance(exc, exc_type):
            return ClassifiedError(kind=kind, definite=kind.definite, cause=exc)
    return None


def classify(exc: BaseException) -> Optional[ClassifiedError]:
    """
    Classify a driver exception.

    One layer of the generic ExecutionFailed envelope is unwrapped and its
    cause looked up in the same table. Deeper nesting is not unwrapped.

    Returns:
        ClassifiedError, or None if the exception is not a known failure
    """
    if isinstance(exc, ExecutionFailed):
        return _lookup(exc.cause) if exc.cause is not None else None
    return _lookup(exc)


def is_no_host_available(exc: BaseException) -> bool:
    """True if exc (or its single-envelope cause) means no host could be reached."""
    classified = classify(exc)
    return classified is not None and classified.kind is ErrorKind.NO_HOST_AVAILABLE
