"""
Outcome module: Error classification and idempotency-aware outcome wrapping.
"""

from cqlshim.outcome.classifier import ErrorKind, ClassifiedError, classify, is_no_host_available
from cqlshim.outcome.wrapper import with_errors, remap_errors

__all__ = [
    "ErrorKind",
    "ClassifiedError",
    "classify",
    "is_no_host_available",
    "with_errors",
    "remap_errors",
]
