"""
RDB_ENGINE - Redis Engine

Pooled, thread-safe Redis client with a typed command surface, functional
configuration options and a safe mode that refuses destructive commands.

    from rdb_engine import safe, host, db

    with safe(host("cache.internal"), db(2)) as client:
        client.set("greeting", "hello")
        client.get("greeting")
"""

# Configuration
from .config import (
    Configuration,
    Option,
    RedisSettings,
    cluster,
    db,
    default_config,
    dialer,
    host,
    idle_timeout,
    max_active,
    max_conn_lifetime,
    max_idle,
    new_config,
    password,
    port,
    test_on_borrower,
    wait,
)
# Core client
from .core import ClientStats, PoolClient, safe, unsafe
# Database layer
from .database import ConnectionPool, PooledConnection, PoolStats, StoreConnection
# Exceptions
from .exceptions import (
    ArgumentError,
    ConfigurationError,
    NilReplyError,
    PolicyError,
    PoolClosedError,
    PoolExhaustedError,
    RedisEngineError,
    ReplyTypeError,
    ResponseMismatchError,
    StoreConnectionError,
)
from .observability import CommandCounts

__version__ = "0.1.0"

__all__ = [
    # Core
    "PoolClient",
    "ClientStats",
    "safe",
    "unsafe",
    # Configuration
    "Configuration",
    "Option",
    "RedisSettings",
    "default_config",
    "new_config",
    "cluster",
    "db",
    "dialer",
    "host",
    "idle_timeout",
    "max_active",
    "max_conn_lifetime",
    "max_idle",
    "password",
    "port",
    "test_on_borrower",
    "wait",
    # Database
    "ConnectionPool",
    "PooledConnection",
    "PoolStats",
    "StoreConnection",
    "CommandCounts",
    # Exceptions
    "RedisEngineError",
    "ConfigurationError",
    "StoreConnectionError",
    "PoolExhaustedError",
    "PoolClosedError",
    "ResponseMismatchError",
    "PolicyError",
    "ArgumentError",
    "NilReplyError",
    "ReplyTypeError",
]
