"""
Store connections for RDB_ENGINE.

A StoreConnection is one physical connection to the Redis server. It wraps a
redis-py ``redis.Connection`` and exposes the two primitives the rest of the
engine needs: ``do(command, *args)`` for a single round-trip and ``close()``.

The dial strategy lives here too. A dialer is a factory taking the
Configuration and returning a zero-argument ``dial`` callable; the pool calls
``dial`` whenever it needs a fresh connection. The default dialer AUTHs when a
password is configured and always SELECTs the configured database, so every
connection the pool hands out is already on the right index.

This module is part of RDB_ENGINE - Redis Engine.
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import redis
from redis.exceptions import RedisError

from ..constants import DEFAULT_CONNECT_TIMEOUT
from ..exceptions import StoreConnectionError

if TYPE_CHECKING:
    from ..config import Configuration

logger = logging.getLogger(__name__)

DialFunc = Callable[[], Any]
BorrowFunc = Callable[[Any, float], None]


class StoreConnection:
    """A single round-trip connection to the store backed by redis-py."""

    def __init__(self, connection: redis.Connection) -> None:
        self._connection = connection

    def do(self, command: str, *args: Any) -> Any:
        """
        Send one command and return its decoded reply.

        Server error replies are raised as redis.exceptions.ResponseError;
        transport failures as redis.exceptions.ConnectionError/TimeoutError.
        """
        self._connection.send_command(command, *args)
        return self._connection.read_response()

    def close(self) -> None:
        self._connection.disconnect()

    def __repr__(self) -> str:
        return f"StoreConnection({self._connection.host}:{self._connection.port})"


def default_dialer(cfg: "Configuration") -> DialFunc:
    """
    Build the default dial strategy for a configuration.

    Args:
        cfg: Configuration to dial with

    Returns:
        Callable opening an authenticated StoreConnection on cfg.db
    """

    def dial() -> StoreConnection:
        raw = redis.Connection(
            host=cfg.host,
            port=cfg.port,
            socket_connect_timeout=DEFAULT_CONNECT_TIMEOUT,
            decode_responses=True,
        )
        try:
            raw.connect()
        except (redis.ConnectionError, redis.TimeoutError, OSError) as e:
            raise StoreConnectionError(
                f"Failed to connect to Redis: {e}", address=cfg.addr, db=cfg.db
            ) from e

        conn = StoreConnection(raw)
        try:
            if cfg.password:
                conn.do("AUTH", cfg.password)
            conn.do("SELECT", cfg.db)
        except (RedisError, OSError) as e:
            conn.close()
            raise StoreConnectionError(
                f"Failed to prepare Redis connection: {e}",
                address=cfg.addr,
                db=cfg.db,
                context={"error_type": type(e).__name__},
            ) from e

        logger.debug(f"Dialed Redis at {cfg.addr} (db={cfg.db})")
        return conn

    return dial


def noop_test_on_borrower(cfg: "Configuration") -> BorrowFunc:
    """Default borrow test: every idle connection is considered healthy."""

    def test_on_borrow(conn: Any, last_used: float) -> None:
        return None

    return test_on_borrow


def ping_test_on_borrower(cfg: "Configuration") -> BorrowFunc:
    """Borrow test that PINGs idle connections before handing them out."""

    def test_on_borrow(conn: Any, last_used: float) -> None:
        conn.do("PING")

    return test_on_borrow
