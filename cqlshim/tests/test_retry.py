"""
Unit Tests: Aggressive Read Retry Policy

Tests:
    - Read timeouts retried at the same consistency up to the threshold
    - Write timeouts never retried
    - Unavailable backoff and threshold
    - Opt-in statement construction
"""

import pytest
from cassandra import ConsistencyLevel
from cassandra.policies import RetryPolicy, WriteType
from cassandra.query import SimpleStatement

from cqlshim.core.config import ShimConfig
from cqlshim.reliability.retry import (
    AGGRESSIVE_READ,
    AggressiveReadRetryPolicy,
    aggressive_read_statement,
)

QUORUM = ConsistencyLevel.QUORUM


@pytest.fixture
def policy():
    return AggressiveReadRetryPolicy()


def read_timeout(policy, retry_num, consistency=QUORUM):
    return policy.on_read_timeout(
        None, consistency,
        required_responses=2, received_responses=1,
        data_retrieved=False, retry_num=retry_num,
    )


def unavailable(policy, retry_num, consistency=QUORUM):
    return policy.on_unavailable(
        None, consistency,
        required_replicas=2, alive_replicas=1, retry_num=retry_num,
    )


class TestReadTimeout:

    @pytest.mark.parametrize("retry_num", [0, 1, 50, 100])
    def test_retries_same_consistency(self, policy, retry_num):
        assert read_timeout(policy, retry_num) == (RetryPolicy.RETRY, QUORUM)

    def test_keeps_requested_consistency(self, policy):
        assert read_timeout(policy, 3, ConsistencyLevel.ALL) == (RetryPolicy.RETRY, ConsistencyLevel.ALL)

    @pytest.mark.parametrize("retry_num", [101, 500])
    def test_escalates_past_threshold(self, policy, retry_num):
        assert read_timeout(policy, retry_num) == (RetryPolicy.RETHROW, None)

    def test_custom_threshold(self):
        policy = AggressiveReadRetryPolicy(max_retries=2)

        assert read_timeout(policy, 2)[0] == RetryPolicy.RETRY
        assert read_timeout(policy, 3)[0] == RetryPolicy.RETHROW


class TestWriteTimeout:

    @pytest.mark.parametrize("retry_num", [0, 1, 100])
    def test_never_retried(self, policy, retry_num):
        decision = policy.on_write_timeout(
            None, QUORUM, WriteType.SIMPLE,
            required_responses=2, received_responses=1, retry_num=retry_num,
        )

        assert decision == (RetryPolicy.RETHROW, None)


class TestUnavailable:

    def test_sleeps_then_retries(self, policy, sleeps):
        assert unavailable(policy, 0) == (RetryPolicy.RETRY, QUORUM)
        assert sleeps == [2.0]

    def test_threshold(self, policy, sleeps):
        assert unavailable(policy, 100)[0] == RetryPolicy.RETRY
        assert unavailable(policy, 101) == (RetryPolicy.RETHROW, None)
        assert sleeps == [2.0, 2.0]

    def test_custom_backoff(self, sleeps):
        policy = AggressiveReadRetryPolicy(unavailable_backoff_ms=500)

        unavailable(policy, 0)

        assert sleeps == [0.5]


class TestStatement:

    def test_default_policy_installed(self):
        stmt = aggressive_read_statement("SELECT * FROM registers", ConsistencyLevel.ALL)

        assert isinstance(stmt, SimpleStatement)
        assert stmt.retry_policy is AGGRESSIVE_READ
        assert stmt.consistency_level == ConsistencyLevel.ALL
        assert stmt.query_string == "SELECT * FROM registers"

    def test_policy_override(self):
        custom = AggressiveReadRetryPolicy(max_retries=5)

        stmt = aggressive_read_statement("SELECT 1", policy=custom)

        assert stmt.retry_policy is custom

    def test_shared_instance_is_a_driver_policy(self):
        assert isinstance(AGGRESSIVE_READ, RetryPolicy)
        assert AGGRESSIVE_READ.max_retries == 100

    def test_policy_from_environment(self, monkeypatch, sleeps):
        monkeypatch.setenv("CQLSHIM_MAX_QUERY_RETRIES", "5")
        monkeypatch.setenv("CQLSHIM_UNAVAILABLE_BACKOFF_MS", "10")

        stmt = aggressive_read_statement("SELECT 1", config=ShimConfig.load())

        assert stmt.retry_policy is not AGGRESSIVE_READ
        assert stmt.retry_policy.max_retries == 5
        assert read_timeout(stmt.retry_policy, 6) == (RetryPolicy.RETHROW, None)
        unavailable(stmt.retry_policy, 0)
        assert sleeps == [0.01]

    def test_explicit_policy_wins_over_config(self):
        custom = AggressiveReadRetryPolicy(max_retries=1)

        stmt = aggressive_read_statement("SELECT 1", policy=custom, config=ShimConfig.default())

        assert stmt.retry_policy is custom
