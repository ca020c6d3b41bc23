"""
Reliability module: Driver-level retry policy for final reads.
"""

from cqlshim.reliability.retry import (
    AGGRESSIVE_READ,
    AggressiveReadRetryPolicy,
    aggressive_read_statement,
)

__all__ = [
    "AGGRESSIVE_READ",
    "AggressiveReadRetryPolicy",
    "aggressive_read_statement",
]
