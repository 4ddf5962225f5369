"""
Database layer: store connections, the connection pool and reply decoding.
"""

from .connection import (
    StoreConnection,
    default_dialer,
    noop_test_on_borrower,
    ping_test_on_borrower,
)
from .pool import ConnectionPool, PooledConnection, PoolStats

__all__ = [
    "StoreConnection",
    "default_dialer",
    "noop_test_on_borrower",
    "ping_test_on_borrower",
    "ConnectionPool",
    "PooledConnection",
    "PoolStats",
]
