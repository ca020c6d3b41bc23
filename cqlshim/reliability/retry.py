"""
Retry Policy: Aggressive Same-Consistency Retries for Final Reads

Intended only for reads issued after the cluster has been allowed to
stabilize, when the goal is to get *an* answer out of it:

- Read timeout: retry at the same consistency, up to 100 retries
- Write timeout: never retried; the write may already have applied
- Unavailable: sleep 2s, then retry at the same consistency, up to 100 retries

Never install this as a profile default. During the workload a hundred
retries would hide exactly the availability problems under test.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from cassandra.policies import RetryPolicy
from cassandra.query import SimpleStatement

from cqlshim.core import constants as C
from cqlshim.core.config import ShimConfig

logger = logging.getLogger(__name__)


class AggressiveReadRetryPolicy(RetryPolicy):
    """
    Driver retry policy for final-verification reads.

    Stateless: the retry count and consistency are supplied by the driver
    on every call, so one instance can be shared across sessions.
    """

    def __init__(
        self,
        max_retries: int = C.MAX_QUERY_RETRIES,
        unavailable_backoff_ms: int = C.UNAVAILABLE_BACKOFF_MS,
    ) -> None:
        """
        Args:
            max_retries: Escalate once the retry count exceeds this
            unavailable_backoff_ms: Sleep before deciding on an unavailable error
        """
        self.max_retries = max_retries
        self.unavailable_backoff_ms = unavailable_backoff_ms

    def _retry_or_rethrow(self, consistency: Any, retry_num: int) -> tuple[int, Any]:
        if retry_num > self.max_retries:
            logger.warning(f"Giving up after {retry_num} retries")
            return self.RETHROW, None
        return self.RETRY, consistency

    def on_read_timeout(
        self,
        query: Any,
        consistency: Any,
        required_responses: int,
        received_responses: int,
        data_retrieved: bool,
        retry_num: int,
    ) -> tuple[int, Any]:
        return self._retry_or_rethrow(consistency, retry_num)

    def on_write_timeout(
        self,
        query: Any,
        consistency: Any,
        write_type: Any,
        required_responses: int,
        received_responses: int,
        retry_num: int,
    ) -> tuple[int, Any]:
        return self.RETHROW, None

    def on_unavailable(
        self,
        query: Any,
        consistency: Any,
        required_replicas: int,
        alive_replicas: int,
        retry_num: int,
    ) -> tuple[int, Any]:
        logger.info(
            f"Caught Unavailable in driver ({alive_replicas}/{required_replicas} "
            f"replicas alive), sleeping {self.unavailable_backoff_ms}ms"
        )
        time.sleep(self.unavailable_backoff_ms / 1000)
        return self._retry_or_rethrow(consistency, retry_num)


AGGRESSIVE_READ = AggressiveReadRetryPolicy()


def aggressive_read_statement(
    query: str,
    consistency_level: Optional[int] = None,
    policy: Optional[RetryPolicy] = None,
    config: Optional[ShimConfig] = None,
) -> SimpleStatement:
    """
    Build a statement that opts in to the aggressive read policy.

    Args:
        query: CQL text
        consistency_level: cassandra.ConsistencyLevel value, or driver default
        policy: Override the shared AGGRESSIVE_READ instance
        config: Build a policy from its retry settings instead of the
            shared instance (ignored when policy is given)
    """
    if policy is None and config is not None:
        policy = AggressiveReadRetryPolicy(
            max_retries=config.max_query_retries,
            unavailable_backoff_ms=config.unavailable_backoff_ms,
        )
    return SimpleStatement(
        query,
        consistency_level=consistency_level,
        retry_policy=policy or AGGRESSIVE_READ,
    )
