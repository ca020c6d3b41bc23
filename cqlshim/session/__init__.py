"""
Session module: Connections pinned to a single cluster node.
"""

from cqlshim.session.connection import (
    Connection,
    build_cluster,
    open_connection,
    close_connection,
    await_open,
)

__all__ = [
    "Connection",
    "build_cluster",
    "open_connection",
    "close_connection",
    "await_open",
]
