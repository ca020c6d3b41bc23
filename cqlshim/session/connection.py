"""
Connection Manager: Sessions Pinned to a Single Node

Every connection talks to exactly one node. The driver's smart routing is
disabled with a whitelist policy so that requests are never silently
forwarded to a healthy replica; a worker pinned to an isolated node must
actually observe that node's failures.

Lifecycle:
    open_connection(node)   build cluster, connect session
    await_open(node)        open + canary read, retried while no host is up
    close_connection(conn)  shut down session, then cluster

A Connection is either fully open or fully closed after open_connection
returns; a failed connect shuts the cluster down before raising.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

from cassandra import DriverException
from cassandra.cluster import (
    EXEC_PROFILE_DEFAULT,
    Cluster,
    ExecutionProfile,
    NoHostAvailable,
    Session,
)
from cassandra.policies import ConstantReconnectionPolicy, WhiteListRoundRobinPolicy

from cqlshim.core import constants as C
from cqlshim.core.config import ShimConfig
from cqlshim.core.errors import AwaitOpenTimeout, ExecutionFailed, NodeConnectionError
from cqlshim.observability.logging import StructuredLogger
from cqlshim.outcome.classifier import is_no_host_available

logger = StructuredLogger(__name__)


# =============================================================================
# CONNECTION
# =============================================================================
@dataclass
class Connection:
    """
    Cluster and session handles bound to one node.

    The session is derived from the cluster and must not outlive it.

    Usage:
        with await_open("n1") as conn:
            conn.execute("SELECT * FROM jepsen.registers WHERE id = 1")
    """

    node: str
    cluster: Cluster
    session: Session

    def execute(self, statement: Any, parameters: Any = None, **kwargs: Any) -> Any:
        """
        Execute a statement on the pinned session.

        Raises:
            ExecutionFailed: Wrapping any driver failure, with the query as context
        """
        try:
            return self.session.execute(statement, parameters, **kwargs)
        except (DriverException, NoHostAvailable) as e:
            raise ExecutionFailed.wrap(statement, e) from e

    def close(self) -> None:
        """Shut down the session, then the cluster."""
        try:
            self.session.shutdown()
        finally:
            self.cluster.shutdown()
        logger.info("Connection closed", node=self.node)

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


# =============================================================================
# OPEN / CLOSE
# =============================================================================
def build_cluster(node: str, config: ShimConfig) -> Cluster:
    """
    Cluster restricted to one contact point and one routable host.

    The reconnection policy is constant: the driver's exponential default
    can leave a recovered node marked down long after it came back.
    """
    profile = ExecutionProfile(
        load_balancing_policy=WhiteListRoundRobinPolicy([node]),
    )
    kwargs: dict[str, Any] = {
        "contact_points": [node],
        "port": config.port,
        "execution_profiles": {EXEC_PROFILE_DEFAULT: profile},
        "reconnection_policy": ConstantReconnectionPolicy(
            config.reconnect_delay_ms / 1000,
            max_attempts=None,
        ),
        "connect_timeout": config.connect_timeout_s,
    }
    if config.protocol_version is not None:
        kwargs["protocol_version"] = config.protocol_version
    return Cluster(**kwargs)


def open_connection(node: str, config: Optional[ShimConfig] = None) -> Connection:
    """
    Open a connection pinned to node.

    Raises:
        NodeConnectionError: If the cluster cannot be built or the session
            cannot connect. The cluster has been shut down already.
    """
    config = config or ShimConfig.default()

    try:
        cluster = build_cluster(node, config)
    except OSError as e:
        # Whitelist resolves the hostname up front
        raise NodeConnectionError.connection_failed(node, config.port, cause=e) from e

    try:
        session = cluster.connect()
    except Exception as e:
        cluster.shutdown()
        raise NodeConnectionError.connection_failed(node, config.port, cause=e) from e

    logger.info("Connection opened", node=node, port=config.port)
    return Connection(node=node, cluster=cluster, session=session)


def close_connection(conn: Connection) -> None:
    """Release both handles of conn. Pair exactly once with open_connection."""
    conn.close()


# =============================================================================
# AWAIT OPEN
# =============================================================================
def _host_unavailable(exc: BaseException) -> bool:
    if isinstance(exc, NodeConnectionError):
        return exc.cause is not None and is_no_host_available(exc.cause)
    return is_no_host_available(exc)


def _open_and_probe(node: str, config: ShimConfig) -> Connection:
    conn = open_connection(node, config)
    try:
        peers = list(conn.session.execute(C.CANARY_QUERY))
    except BaseException:
        try:
            conn.close()
        except Exception:
            logger.warning("Close after failed canary read raised", node=node, exc_info=True)
        raise
    logger.info("Canary read succeeded", node=node, peers=len(peers))
    return conn


def await_open(node: str, config: Optional[ShimConfig] = None) -> Connection:
    """
    Block until node serves a canary read, then return the connection.

    Only host-unavailability is retried, with a fixed sleep between
    attempts. Every other failure propagates on the first occurrence.

    Raises:
        AwaitOpenTimeout: After config.await_open_attempts failed attempts
    """
    config = config or ShimConfig.default()
    attempts = config.await_open_attempts

    with logger.context(node=node):
        for attempt in range(1, attempts + 1):
            try:
                return _open_and_probe(node, config)
            except Exception as e:
                if not _host_unavailable(e):
                    raise
                if attempt == attempts:
                    raise AwaitOpenTimeout.exhausted(node, attempts, cause=e) from e
                logger.info(
                    f"{node} not yet available, retrying",
                    attempt=attempt,
                    attempts_left=attempts - attempt,
                )
                time.sleep(config.await_open_interval_ms / 1000)

    raise AwaitOpenTimeout.exhausted(node, attempts)
