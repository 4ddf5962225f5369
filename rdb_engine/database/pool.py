"""
Connection pool for RDB_ENGINE.

ConnectionPool hands out and reclaims store connections while enforcing the
pool shape from the configuration:

- max_active: cap on open connections (idle + in use); 0 means unlimited
- max_idle: idle connections kept for reuse; extras are closed on release
- idle_timeout: idle connections unused for longer are closed (0 disables)
- max_conn_lifetime: connections older than this are closed (0 disables)
- wait: block in acquire() when saturated instead of failing

Stale idle connections are pruned lazily on acquire; the pool runs no
background thread. Dialing and borrow tests happen outside the pool lock.

This module is part of RDB_ENGINE - Redis Engine.
"""

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NamedTuple

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

from ..exceptions import PoolClosedError, PoolExhaustedError, StoreConnectionError
from ..observability.metrics import record_operation

logger = logging.getLogger(__name__)

# Errors after which a connection can no longer be trusted.
_TRANSPORT_ERRORS = (RedisConnectionError, RedisTimeoutError, OSError)


@dataclass(frozen=True)
class PoolStats:
    """Point-in-time pool statistics."""

    active_count: int  # open connections, idle or in use
    idle_count: int
    wait_count: int = 0  # acquires that had to wait
    wait_duration: float = 0.0  # total seconds spent waiting

    def to_dict(self) -> dict[str, Any]:
        return {
            "active_count": self.active_count,
            "idle_count": self.idle_count,
            "wait_count": self.wait_count,
            "wait_duration": round(self.wait_duration, 6),
        }


class _IdleEntry(NamedTuple):
    conn: Any
    created_at: float  # time.monotonic() when the connection was dialed
    last_used: float  # time.monotonic() when last returned to the pool


class PooledConnection:
    """
    A connection borrowed from a ConnectionPool.

    Use it as a context manager, or call release() exactly once. A connection
    whose transport failed is discarded on release instead of going back to
    the idle list.
    """

    def __init__(self, pool: "ConnectionPool", conn: Any, created_at: float) -> None:
        self._pool = pool
        self._conn = conn
        self._created_at = created_at
        self._broken = False
        self._released = False

    def do(self, command: str, *args: Any) -> Any:
        """Execute one command on the underlying connection."""
        if self._released:
            raise StoreConnectionError("connection already released to the pool")
        try:
            return self._conn.do(command, *args)
        except _TRANSPORT_ERRORS:
            self._broken = True
            raise

    def discard(self) -> None:
        """Close the connection on release instead of reusing it."""
        self._broken = True

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._pool._put(self._conn, self._created_at, broken=self._broken)

    close = release

    @property
    def released(self) -> bool:
        return self._released

    def __enter__(self) -> "PooledConnection":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()


class ConnectionPool:
    """Bounded, thread-safe pool of store connections."""

    def __init__(
        self,
        dial: Callable[[], Any],
        *,
        max_active: int = 0,
        max_idle: int = 0,
        idle_timeout: float = 0.0,
        max_conn_lifetime: float = 0.0,
        wait: bool = False,
        test_on_borrow: Callable[[Any, float], None] | None = None,
    ) -> None:
        """
        Initialize the pool. Nothing is dialed until the first acquire().

        Args:
            dial: Zero-argument callable opening a new store connection
            max_active: Maximum open connections (0 = unlimited)
            max_idle: Maximum idle connections kept for reuse
            idle_timeout: Seconds before an idle connection is closed (0 = never)
            max_conn_lifetime: Seconds before any connection is closed (0 = never)
            wait: Block when saturated instead of raising PoolExhaustedError
            test_on_borrow: Health check run on idle connections; raising
                            marks the connection unusable
        """
        self._dial = dial
        self.max_active = max_active
        self.max_idle = max_idle
        self.idle_timeout = idle_timeout
        self.max_conn_lifetime = max_conn_lifetime
        self.wait = wait
        self._test_on_borrow = test_on_borrow

        self._cond = threading.Condition()
        self._idle: deque[_IdleEntry] = deque()  # most recently used first
        self._active = 0
        self._closed = False
        self._wait_count = 0
        self._wait_duration = 0.0

    def acquire(self) -> PooledConnection:
        """
        Get a healthy connection (from the idle list or freshly dialed).

        Raises:
            PoolClosedError: If the pool was closed
            PoolExhaustedError: If saturated and wait is disabled
            StoreConnectionError: If dialing fails
        """
        wait_started: float | None = None
        while True:
            entry: _IdleEntry | None = None
            must_dial = False
            exhausted = False
            with self._cond:
                if self._closed:
                    raise PoolClosedError("get on closed pool")
                stale = self._prune_locked(time.monotonic())
                if self._idle:
                    entry = self._idle.popleft()
                elif self.max_active <= 0 or self._active < self.max_active:
                    self._active += 1
                    must_dial = True
                elif self.wait and not stale:
                    if wait_started is None:
                        wait_started = time.monotonic()
                        self._wait_count += 1
                    self._cond.wait()
                elif not stale:
                    exhausted = True
                if wait_started is not None and (entry is not None or must_dial):
                    self._wait_duration += time.monotonic() - wait_started
                    wait_started = None

            for stale_entry in stale:
                self._close_quiet(stale_entry.conn)

            if exhausted:
                raise PoolExhaustedError(
                    "connection pool exhausted", context={"max_active": self.max_active}
                )
            if entry is not None:
                if self._borrowable(entry):
                    return PooledConnection(self, entry.conn, entry.created_at)
                self._close_quiet(entry.conn)
                self._forget()
                continue
            if must_dial:
                return self._open()

    def stats(self) -> PoolStats:
        with self._cond:
            return PoolStats(
                active_count=self._active,
                idle_count=len(self._idle),
                wait_count=self._wait_count,
                wait_duration=self._wait_duration,
            )

    def close(self) -> None:
        """
        Close the pool: idle connections are closed now, borrowed ones when
        they are released. Waiting acquirers are woken and fail.
        """
        with self._cond:
            self._closed = True
            entries = list(self._idle)
            self._idle.clear()
            self._active -= len(entries)
            self._cond.notify_all()
        for entry in entries:
            self._close_quiet(entry.conn)
        logger.debug(f"Connection pool closed ({len(entries)} idle connections released)")

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open(self) -> PooledConnection:
        start_time = time.perf_counter()
        try:
            conn = self._dial()
        except Exception as e:
            self._forget()
            record_operation("pool.dial", (time.perf_counter() - start_time) * 1000, success=False)
            if isinstance(e, (RedisError, OSError)):
                raise StoreConnectionError(
                    f"Failed to dial connection: {e}", context={"error_type": type(e).__name__}
                ) from e
            raise
        record_operation("pool.dial", (time.perf_counter() - start_time) * 1000, success=True)
        return PooledConnection(self, conn, time.monotonic())

    def _put(self, conn: Any, created_at: float, broken: bool = False) -> None:
        victim = None
        with self._cond:
            if broken or self._closed or self.max_idle <= 0:
                victim = conn
            else:
                self._idle.appendleft(_IdleEntry(conn, created_at, time.monotonic()))
                if len(self._idle) > self.max_idle:
                    victim = self._idle.pop().conn
            if victim is not None:
                self._active -= 1
            self._cond.notify()
        if victim is not None:
            self._close_quiet(victim)

    def _forget(self) -> None:
        with self._cond:
            self._active -= 1
            self._cond.notify()

    def _prune_locked(self, now: float) -> list[_IdleEntry]:
        stale: list[_IdleEntry] = []
        if self.idle_timeout > 0:
            while self._idle and self._idle[-1].last_used + self.idle_timeout < now:
                stale.append(self._idle.pop())
        self._active -= len(stale)
        return stale

    def _borrowable(self, entry: _IdleEntry) -> bool:
        if self.max_conn_lifetime > 0:
            if time.monotonic() - entry.created_at >= self.max_conn_lifetime:
                return False
        if self._test_on_borrow is None:
            return True
        try:
            self._test_on_borrow(entry.conn, entry.last_used)
        except Exception as e:
            logger.debug(f"Idle connection failed borrow test, discarding: {e}")
            return False
        return True

    @staticmethod
    def _close_quiet(conn: Any) -> None:
        try:
            conn.close()
        except (RedisError, OSError) as e:
            logger.debug(f"Error closing pooled connection: {e}")
