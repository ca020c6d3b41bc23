"""
Operation Outcome Wrapper

Runs a database call on behalf of a harness operation and turns any known
driver failure into data:

    FAIL  the operation certainly did not happen, or the action is
          idempotent so treating an ambiguous failure as failed is safe
    INFO  the outcome is unknown; a non-idempotent write may have landed

Unknown exceptions are never absorbed; they propagate as-is.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Container
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar, Union

from cqlshim.core.config import ShimConfig
from cqlshim.core.errors import ExecutionFailed, QueryFailure
from cqlshim.core.types import Err, Ok, Operation, OperationStatus, Result
from cqlshim.outcome.classifier import ErrorKind, classify

logger = logging.getLogger(__name__)

T = TypeVar("T")

Idempotence = Union[Callable[[str], bool], Container[str]]


def _as_predicate(idempotent: Idempotence) -> Callable[[str], bool]:
    if callable(idempotent):
        return idempotent
    return lambda f: f in idempotent


@contextmanager
def remap_errors() -> Iterator[None]:
    """
    Re-raise classifiable driver failures as QueryFailure.

    Usage:
        with remap_errors():
            session.execute(stmt)

    The original exception is chained as __cause__. Unclassified
    exceptions pass through unchanged, except that an ExecutionFailed
    envelope around an unclassified cause is dropped and the cause raised.
    """
    try:
        yield
    except Exception as e:
        classified = classify(e)
        if classified is None:
            if isinstance(e, ExecutionFailed) and e.cause is not None:
                raise e.cause
            raise
        raise QueryFailure.from_classified(classified) from e


def with_errors(
    op: Operation,
    idempotent: Idempotence,
    body: Callable[[], T],
    config: Optional[ShimConfig] = None,
) -> Result[T, Operation]:
    """
    Evaluate body, mapping known failures onto op.

    Args:
        op: Operation being performed; mutated only on classified failure
        idempotent: Predicate over op.f, or a collection of idempotent f names
        body: Zero-argument callable performing the database call
        config: Supplies the no-host throttle (default config if None)

    Returns:
        Ok with body's return value, or Err with op marked FAIL or INFO
    """
    config = config or ShimConfig.default()

    try:
        with remap_errors():
            return Ok(body())
    except QueryFailure as failure:
        classified = failure.classified

    if classified.kind is ErrorKind.NO_HOST_AVAILABLE:
        # Client thinks every node is down; pace the caller's request loop
        logger.debug(f"No host available for {op.f}, sleeping {config.no_host_throttle_ms}ms")
        time.sleep(config.no_host_throttle_ms / 1000)

    if classified.definite or _as_predicate(idempotent)(op.f):
        op.status = OperationStatus.FAIL
    else:
        op.status = OperationStatus.INFO
    op.error = classified

    logger.debug(f"{op.f} -> {op.status.value} ({classified.kind.value})")
    return Err(op)
