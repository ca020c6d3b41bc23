"""
Client Shim Constants

All timing and retry defaults for the pinned-node client centralized here.
Values are tuned for fault-injection runs, where nodes are killed and
partitioned for tens of seconds at a time.
"""

from typing import Final

# =============================================================================
# TIME UNITS
# =============================================================================
SECOND_MS: Final[int] = 1000

# =============================================================================
# CONTACT
# =============================================================================
CQL_NATIVE_PORT: Final[int] = 9042
CONNECT_TIMEOUT_S: Final[float] = 5.0
RECONNECT_DELAY_MS: Final[int] = 1 * SECOND_MS

# =============================================================================
# CONNECTION ESTABLISHMENT
# =============================================================================
AWAIT_OPEN_ATTEMPTS: Final[int] = 32
AWAIT_OPEN_INTERVAL_MS: Final[int] = 5 * SECOND_MS
CANARY_QUERY: Final[str] = "SELECT * FROM system.peers"

# =============================================================================
# QUERY RETRY (final reads only)
# =============================================================================
MAX_QUERY_RETRIES: Final[int] = 100
UNAVAILABLE_BACKOFF_MS: Final[int] = 2 * SECOND_MS

# =============================================================================
# OUTCOME WRAPPING
# =============================================================================
NO_HOST_THROTTLE_MS: Final[int] = 2 * SECOND_MS
