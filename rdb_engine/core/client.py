"""
Pooled Redis client.

PoolClient owns one ConnectionPool and one set of command counters. Every
command goes through a typed execution helper that acquires a connection,
runs the command, releases the connection and counts the command.

A client is either safe or unsafe. Safe clients refuse destructive commands
(FLUSHALL, FLUSHDB, del_pattern) before any connection is acquired.

This module is part of RDB_ENGINE - Redis Engine.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from ..commands import (
    ConnectionCommands,
    KeyCommands,
    ListCommands,
    ServerCommands,
    SetCommands,
    StringCommands,
)
from ..config import (
    Configuration,
    Option,
    _unselectable,
    db,
    idle_timeout,
    max_active,
    max_conn_lifetime,
    max_idle,
    new_config,
    wait,
)
from ..constants import OK_REPLY
from ..database.pool import ConnectionPool, PooledConnection, PoolStats
from ..database.replies import as_bool, as_int, as_str, as_strings
from ..exceptions import PolicyError, ResponseMismatchError
from ..observability.health import HealthChecker
from ..observability.logging import get_logger, log_operation
from ..observability.metrics import CommandCounters, CommandCounts, timed_operation
from .transaction import TransactionCommands

T = TypeVar("T")
Operation = Callable[[PooledConnection], Any]


@dataclass(frozen=True)
class ClientStats:
    """Snapshot of pool statistics and per-command counts."""

    pool: PoolStats
    counts: CommandCounts

    def to_dict(self) -> dict[str, Any]:
        return {"pool": self.pool.to_dict(), "counts": dict(self.counts)}


class PoolClient(
    ServerCommands,
    ConnectionCommands,
    KeyCommands,
    ListCommands,
    SetCommands,
    StringCommands,
    TransactionCommands,
):
    """
    Thread-safe Redis client backed by a connection pool.

    Build one with safe() or unsafe() rather than directly. Close it exactly
    once, or use it as a context manager.
    """

    def __init__(self, config: Configuration, *, unsafe: bool = False) -> None:
        """
        Initialize the client. Nothing is dialed until the first command.

        Args:
            config: Validated configuration
            unsafe: Allow destructive commands
        """
        self._config = config
        self._unsafe = unsafe
        self._pool = ConnectionPool(
            config.dialer(config),
            max_active=config.max_active,
            max_idle=config.max_idle,
            idle_timeout=config.idle_timeout,
            max_conn_lifetime=config.max_conn_lifetime,
            wait=config.wait,
            test_on_borrow=config.test_on_borrower(config),
        )
        self._counters = CommandCounters()
        self._logger = get_logger(
            __name__,
            addr=config.addr,
            db=config.db,
            mode="unsafe" if unsafe else "safe",
        )
        self._logger.info(
            "Redis client created",
            extra={
                "max_active": config.max_active,
                "max_idle": config.max_idle,
                "cluster": config.cluster,
            },
        )

    @property
    def config(self) -> Configuration:
        return self._config

    @property
    def unsafe(self) -> bool:
        return self._unsafe

    @property
    def selectable(self) -> bool:
        return self._config.selectable

    def close(self) -> None:
        """Close the pool and every idle connection it holds."""
        self._pool.close()
        self._logger.info("Redis client closed")

    def __enter__(self) -> "PoolClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __repr__(self) -> str:
        mode = "unsafe" if self._unsafe else "safe"
        return f"PoolClient(addr={self._config.addr!r}, db={self._config.db}, mode={mode})"

    def conn(self) -> PooledConnection:
        """
        Acquire a connection from the pool.

        The caller must release it, preferably with a ``with`` block.

        Raises:
            PoolExhaustedError: If the pool is saturated and wait is disabled
            PoolClosedError: If the client has been closed
            StoreConnectionError: If a new connection cannot be dialed
        """
        return self._pool.acquire()

    def stats(self) -> ClientStats:
        return ClientStats(pool=self._pool.stats(), counts=self._counters.snapshot())

    def health(self) -> dict[str, Any]:
        """Run the PING and pool usage checks and return the combined report."""
        return HealthChecker(self).check_all()

    # ------------------------------------------------------------------
    # Execution helpers
    # ------------------------------------------------------------------

    def _execute(self, command: str, operation: Operation, decode: Callable[[Any], T]) -> T:
        conn = self.conn()
        start_time = time.perf_counter()
        success = False
        try:
            result = decode(operation(conn))
            success = True
            return result
        finally:
            conn.release()
            self._counters.increment(command)
            log_operation(
                self._logger,
                command.upper(),
                success=success,
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

    def run_bool(self, command: str, operation: Operation) -> bool:
        return self._execute(command, operation, as_bool)

    def run_int(self, command: str, operation: Operation) -> int:
        return self._execute(command, operation, as_int)

    def run_str(self, command: str, operation: Operation) -> str:
        return self._execute(command, operation, as_str)

    def run_strings(self, command: str, operation: Operation) -> list[str]:
        return self._execute(command, operation, as_strings)

    def match(self, command: str, expected: str, operation: Operation) -> str:
        """
        Run a command whose reply must equal expected.

        Raises:
            ResponseMismatchError: If the reply differs from expected
        """
        actual = self.run_str(command, operation)
        if actual != expected:
            raise ResponseMismatchError(command, expected, actual)
        return actual

    def ok(self, command: str, operation: Operation) -> None:
        """Run a command whose reply must be OK."""
        self.match(command, OK_REPLY, operation)

    def require_unsafe(self, command: str) -> None:
        """
        Refuse command on a safe client.

        Raises:
            PolicyError: If the client is safe
        """
        if not self._unsafe:
            self._logger.warning("Refused command on safe client", extra={"command": command})
            raise PolicyError(
                f"{command} requires an unsafe client; build one with rdb_engine.unsafe()",
                command=command,
            )

    @timed_operation("client.select")
    def select(self, index: int) -> "PoolClient":
        """
        Derive a client bound to database index.

        The derived client holds at most one connection, closed after every
        command, and keeps this client's safe/unsafe mode. It cannot select
        again. The caller must close it.

        Raises:
            PolicyError: If this client is not selectable (cluster mode, or
                already a select() product)
            ConfigurationError: If index is negative
        """
        if not self.selectable:
            raise PolicyError(
                "no select",
                command="SELECT",
                context={"cluster": self._config.cluster},
            )
        config = self._config.copy(
            db(index),
            idle_timeout(0),
            max_active(1),
            max_conn_lifetime(0),
            max_idle(0),
            wait(False),
            _unselectable(),
        )
        self._logger.info("Selected database", extra={"select_db": index})
        return PoolClient(config, unsafe=self._unsafe)


def safe(*options: Option) -> PoolClient:
    """
    Build a safe client: destructive commands raise PolicyError.

    Example:
        with safe(host("cache.internal"), db(2)) as client:
            client.set("greeting", "hello")

    Raises:
        ConfigurationError: If any option is invalid
    """
    return PoolClient(new_config(*options), unsafe=False)


def unsafe(*options: Option) -> PoolClient:
    """Build an unsafe client that may run FLUSHALL, FLUSHDB and del_pattern."""
    return PoolClient(new_config(*options), unsafe=True)
