"""
Unit Tests: Operation Outcome Wrapper

Tests:
    - Success passes the body's value through untouched
    - FAIL/INFO by definiteness and idempotency
    - No-host-available throttle
    - Unknown exceptions propagate unchanged
    - remap_errors context manager
"""

import pytest
from cassandra import InvalidRequest

from cqlshim.core.config import ShimConfig
from cqlshim.core.errors import ExecutionFailed, QueryFailure
from cqlshim.core.types import Operation, OperationStatus
from cqlshim.outcome.classifier import ErrorKind
from cqlshim.outcome.wrapper import remap_errors, with_errors
from cqlshim.tests import driver_errors

IDEMPOTENT = {"read"}

DEFINITE = [driver_errors.no_host_available, driver_errors.unavailable]
INDEFINITE = [driver_errors.read_timeout, driver_errors.write_failure, driver_errors.write_timeout]


class TestSuccess:

    def test_returns_body_value(self, sleeps):
        op = Operation(f="read", value=3)

        result = with_errors(op, IDEMPOTENT, lambda: [1, 2, 3])

        assert result.is_ok()
        assert result.unwrap() == [1, 2, 3]
        assert op.status is OperationStatus.INVOKE
        assert op.error is None
        assert sleeps == []


class TestScenarios:
    """Harness-facing scenarios."""

    def test_idempotent_read_timeout_fails(self, sleeps, raising):
        op = Operation(f="read")

        result = with_errors(op, lambda f: True, raising(driver_errors.read_timeout()))

        assert result.is_err()
        assert result.error is op
        assert op.f == "read"
        assert op.status is OperationStatus.FAIL
        assert op.error.kind is ErrorKind.READ_TIMEOUT
        assert op.error.definite is False

    def test_non_idempotent_write_timeout_is_info(self, sleeps, raising):
        op = Operation(f="write", value=4)

        result = with_errors(op, lambda f: False, raising(driver_errors.write_timeout()))

        assert result.error is op
        assert op.status is OperationStatus.INFO
        assert op.error.kind is ErrorKind.WRITE_TIMEOUT
        assert op.error.definite is False

    def test_non_idempotent_unavailable_fails(self, sleeps, raising):
        op = Operation(f="write", value=4)

        with_errors(op, lambda f: False, raising(driver_errors.unavailable()))

        assert op.status is OperationStatus.FAIL
        assert op.error.kind is ErrorKind.UNAVAILABLE
        assert op.error.definite is True


class TestOutcomeRules:
    """FAIL/INFO decision table."""

    @pytest.mark.parametrize("make", DEFINITE + INDEFINITE)
    def test_idempotent_always_fails(self, make, sleeps, raising):
        op = Operation(f="read")

        with_errors(op, IDEMPOTENT, raising(make()))

        assert op.status is OperationStatus.FAIL

    @pytest.mark.parametrize("make", DEFINITE)
    def test_non_idempotent_definite_fails(self, make, sleeps, raising):
        op = Operation(f="cas")

        with_errors(op, IDEMPOTENT, raising(make()))

        assert op.status is OperationStatus.FAIL

    @pytest.mark.parametrize("make", INDEFINITE)
    def test_non_idempotent_indefinite_is_info(self, make, sleeps, raising):
        op = Operation(f="cas")

        with_errors(op, IDEMPOTENT, raising(make()))

        assert op.status is OperationStatus.INFO

    def test_predicate_receives_f(self, sleeps, raising):
        seen = []

        def idempotent(f):
            seen.append(f)
            return False

        with_errors(Operation(f="add"), idempotent, raising(driver_errors.write_timeout()))

        assert seen == ["add"]

    def test_enveloped_error_is_classified(self, sleeps, raising):
        op = Operation(f="write")
        wrapped = ExecutionFailed.wrap("UPDATE registers SET v = 1", driver_errors.write_failure())

        with_errors(op, IDEMPOTENT, raising(wrapped))

        assert op.status is OperationStatus.INFO
        assert op.error.kind is ErrorKind.WRITE_FAILURE

    def test_to_dict(self, sleeps, raising):
        op = Operation(f="write", value=1, process=7)

        with_errors(op, IDEMPOTENT, raising(driver_errors.write_timeout()))

        data = op.to_dict()
        assert data["type"] == "info"
        assert data["process"] == 7
        assert data["error"]["type"] == "write-timeout"


class TestNoHostThrottle:

    def test_sleeps_before_returning(self, sleeps, raising):
        op = Operation(f="read")

        with_errors(op, IDEMPOTENT, raising(driver_errors.no_host_available()))

        assert sleeps == [2.0]
        assert op.status is OperationStatus.FAIL
        assert op.error.kind is ErrorKind.NO_HOST_AVAILABLE

    def test_configured_delay(self, sleeps, raising):
        config = ShimConfig(no_host_throttle_ms=250)

        with_errors(Operation(f="read"), IDEMPOTENT, raising(driver_errors.no_host_available()), config)

        assert sleeps == [0.25]

    @pytest.mark.parametrize("make", INDEFINITE + [driver_errors.unavailable])
    def test_other_kinds_do_not_sleep(self, make, sleeps, raising):
        with_errors(Operation(f="read"), IDEMPOTENT, raising(make()))

        assert sleeps == []


class TestUnclassified:

    @pytest.mark.parametrize("exc", [
        InvalidRequest("unconfigured table registers"),
        KeyError("value"),
    ])
    def test_propagates_unchanged(self, exc, sleeps, raising):
        op = Operation(f="read")

        with pytest.raises(type(exc)) as excinfo:
            with_errors(op, IDEMPOTENT, raising(exc))

        assert excinfo.value is exc
        assert op.status is OperationStatus.INVOKE
        assert op.error is None
        assert sleeps == []

    def test_envelope_dropped_around_unknown_cause(self, sleeps, raising):
        cause = InvalidRequest("unconfigured table registers")
        op = Operation(f="write")

        with pytest.raises(InvalidRequest) as excinfo:
            with_errors(op, IDEMPOTENT, raising(ExecutionFailed.wrap("SELECT 1", cause)))

        assert excinfo.value is cause
        assert op.status is OperationStatus.INVOKE
        assert op.error is None


class TestRemapErrors:

    def test_raises_query_failure(self):
        cause = driver_errors.unavailable()

        with pytest.raises(QueryFailure) as excinfo:
            with remap_errors():
                raise cause

        assert excinfo.value.classified.kind is ErrorKind.UNAVAILABLE
        assert excinfo.value.definite is True
        assert excinfo.value.__cause__ is cause

    def test_passes_unknown_through(self):
        cause = InvalidRequest("bad")

        with pytest.raises(InvalidRequest) as excinfo:
            with remap_errors():
                raise cause

        assert excinfo.value is cause

    def test_no_error(self):
        with remap_errors():
            value = 1

        assert value == 1

    def test_unwraps_envelope_around_unknown(self):
        cause = KeyError("value")

        with pytest.raises(KeyError) as excinfo:
            with remap_errors():
                raise ExecutionFailed.wrap("SELECT 1", cause)

        assert excinfo.value is cause

    def test_envelope_without_cause_passes_through(self):
        envelope = ExecutionFailed.wrap("SELECT 1", InvalidRequest("bad"))
        envelope.cause = None

        with pytest.raises(ExecutionFailed) as excinfo:
            with remap_errors():
                raise envelope

        assert excinfo.value is envelope
