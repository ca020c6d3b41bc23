"""
Shared fixtures: a sleep recorder and raising bodies.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List

import pytest


@pytest.fixture
def sleeps(monkeypatch) -> List[float]:
    """Record every time.sleep call instead of sleeping."""
    recorded: List[float] = []
    monkeypatch.setattr(time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def raising() -> Callable[[BaseException], Callable[[], None]]:
    """Build a zero-argument body that raises the given exception."""
    def factory(exc: BaseException) -> Callable[[], None]:
        def body() -> None:
            raise exc
        return body
    return factory


@pytest.fixture
def root_logger():
    """Restore root logger handlers and level after setup_logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    cassandra_level = logging.getLogger("cassandra").level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("cassandra").setLevel(cassandra_level)
