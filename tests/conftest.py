"""
Pytest configuration and shared fixtures for RDB_ENGINE tests.

This module provides:
- An in-memory Redis double (FakeStore / FakeConnection) injected through
  the dialer Option, so unit tests never need a server
- Safe and unsafe client fixtures wired to the double
- A real Redis server for integration tests (testcontainers), skipped when
  unavailable
"""

import fnmatch
import threading
from collections import defaultdict
from typing import Any

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from rdb_engine import safe, unsafe
from rdb_engine.config import Option, db, dialer, host, port


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests using the in-memory store")
    config.addinivalue_line("markers", "integration: tests that need a real Redis server")


# ============================================================================
# IN-MEMORY STORE
# ============================================================================

WRONGTYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"


class FakeStore:
    """
    Minimal thread-safe Redis emulation covering the commands the engine issues.

    Values are str, list (for lists) or set (for sets), one dict per db index.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.dbs: dict[int, dict[str, Any]] = defaultdict(dict)
        self.dialed = 0
        self.closed = 0
        self.log: list[tuple[int, str]] = []

    def connect(self, db: int = 0) -> "FakeConnection":
        with self.lock:
            self.dialed += 1
        return FakeConnection(self, db)

    def commands(self, name: str) -> int:
        """Number of times a command reached the store."""
        return sum(1 for _, cmd in self.log if cmd == name)

    def execute(self, db: int, cmd: str, *args: Any) -> Any:
        with self.lock:
            self.log.append((db, cmd))
            data = self.dbs[db]
            handler = getattr(self, f"_cmd_{cmd.lower()}", None)
            if handler is None:
                raise ResponseError(f"ERR unknown command '{cmd}'")
            return handler(data, *[str(a) for a in args])

    # -- helpers -------------------------------------------------------

    @staticmethod
    def _typed(data: dict, key: str, kind: type, create: bool = False) -> Any:
        value = data.get(key)
        if value is None:
            if not create:
                return None
            value = data[key] = kind()
        if not isinstance(value, kind):
            raise ResponseError(WRONGTYPE)
        return value

    # -- server / connection ---------------------------------------------

    def _cmd_ping(self, data, *args):
        return args[0] if args else "PONG"

    def _cmd_echo(self, data, message):
        return message

    def _cmd_auth(self, data, *args):
        return "OK"

    def _cmd_dbsize(self, data):
        return len(data)

    def _cmd_flushall(self, data):
        self.dbs.clear()
        return "OK"

    def _cmd_flushdb(self, data):
        data.clear()
        return "OK"

    # -- keys ---------------------------------------------------------------

    def _cmd_del(self, data, *keys):
        return sum(1 for key in keys if data.pop(key, None) is not None)

    def _cmd_exists(self, data, key):
        return int(key in data)

    def _cmd_expire(self, data, key, seconds):
        return int(key in data)

    def _cmd_keys(self, data, pattern):
        return sorted(k for k in data if fnmatch.fnmatchcase(k, pattern))

    def _cmd_rename(self, data, src, dst):
        if src not in data:
            raise ResponseError("ERR no such key")
        data[dst] = data.pop(src)
        return "OK"

    # -- strings ------------------------------------------------------------

    def _cmd_set(self, data, key, value):
        data[key] = value
        return "OK"

    def _cmd_setex(self, data, key, seconds, value):
        data[key] = value
        return "OK"

    def _cmd_get(self, data, key):
        return self._typed(data, key, str)

    def _cmd_mget(self, data, *keys):
        return [v if isinstance(v, str) else None for v in (data.get(k) for k in keys)]

    def _cmd_append(self, data, key, value):
        current = self._typed(data, key, str) or ""
        data[key] = current + value
        return len(data[key])

    def _cmd_incr(self, data, key):
        current = self._typed(data, key, str) or "0"
        try:
            value = int(current) + 1
        except ValueError:
            raise ResponseError("ERR value is not an integer or out of range") from None
        data[key] = str(value)
        return value

    # -- lists --------------------------------------------------------------

    def _cmd_lpush(self, data, key, *items):
        values = self._typed(data, key, list, create=True)
        for item in items:
            values.insert(0, item)
        return len(values)

    def _cmd_rpush(self, data, key, *items):
        values = self._typed(data, key, list, create=True)
        values.extend(items)
        return len(values)

    def _pop(self, data, key, index):
        values = self._typed(data, key, list)
        if not values:
            return None
        value = values.pop(index)
        if not values:
            del data[key]
        return value

    def _cmd_lpop(self, data, key):
        return self._pop(data, key, 0)

    def _cmd_rpop(self, data, key):
        return self._pop(data, key, -1)

    def _cmd_llen(self, data, key):
        return len(self._typed(data, key, list) or [])

    # -- sets ---------------------------------------------------------------

    def _cmd_sadd(self, data, key, *members):
        values = self._typed(data, key, set, create=True)
        before = len(values)
        values.update(members)
        return len(values) - before

    def _cmd_scard(self, data, key):
        return len(self._typed(data, key, set) or ())

    def _cmd_smembers(self, data, key):
        return sorted(self._typed(data, key, set) or ())

    def _store_set(self, data, dest, result):
        if result:
            data[dest] = result
        else:
            data.pop(dest, None)
        return len(result)

    def _cmd_sdiffstore(self, data, dest, first, *others):
        result = set(self._typed(data, first, set) or ())
        for key in others:
            result -= self._typed(data, key, set) or set()
        return self._store_set(data, dest, result)

    def _cmd_sunionstore(self, data, dest, *keys):
        result = set()
        for key in keys:
            result |= self._typed(data, key, set) or set()
        return self._store_set(data, dest, result)


class FakeConnection:
    """A connection to FakeStore speaking the do()/close() protocol."""

    def __init__(self, store: FakeStore, db: int) -> None:
        self.store = store
        self.db = db
        self.closed = False

    def do(self, command: str, *args: Any) -> Any:
        if self.closed:
            raise RedisConnectionError("connection closed")
        cmd = command.upper()
        if cmd == "SELECT":
            self.db = int(args[0])
            return "OK"
        if cmd == "QUIT":
            self.closed = True
            return "OK"
        return self.store.execute(self.db, cmd, *args)

    def close(self) -> None:
        self.closed = True
        with self.store.lock:
            self.store.closed += 1


def fake_dialer(store: FakeStore) -> Option:
    """Option that makes a client dial the in-memory store."""
    return dialer(lambda cfg: lambda: store.connect(cfg.db))


# ============================================================================
# CLIENT FIXTURES
# ============================================================================


@pytest.fixture
def store() -> FakeStore:
    """Fresh in-memory store."""
    return FakeStore()


@pytest.fixture
def store_option(store: FakeStore) -> Option:
    return fake_dialer(store)


@pytest.fixture
def client(store_option):
    """Safe client backed by the in-memory store."""
    c = safe(store_option)
    yield c
    c.close()


@pytest.fixture
def unsafe_client(store_option):
    """Unsafe client backed by the in-memory store."""
    c = unsafe(store_option)
    yield c
    c.close()


# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset REDIS_* environment variables before each test."""
    for var in (
        "REDIS_HOST",
        "REDIS_PORT",
        "REDIS_DB",
        "REDIS_PASSWORD",
        "REDIS_CLUSTER",
        "REDIS_MAX_ACTIVE",
        "REDIS_MAX_IDLE",
        "REDIS_IDLE_TIMEOUT",
        "REDIS_MAX_CONN_LIFETIME",
        "REDIS_WAIT",
    ):
        monkeypatch.delenv(var, raising=False)
    yield


# ============================================================================
# TESTCONTAINERS FIXTURES (Real Redis for Integration Tests)
# ============================================================================


@pytest.fixture(scope="session")
def redis_container():
    """
    Start a Redis container for integration tests.

    Session-scoped: the container starts once and is reused.
    """
    try:
        from testcontainers.redis import RedisContainer
    except ImportError:
        pytest.skip("testcontainers not installed. Install with: pip install -e '.[test]'")

    container = RedisContainer(image="redis:7-alpine")
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"Redis container unavailable: {e}")
    yield container
    container.stop()


@pytest.fixture
def redis_options(redis_container) -> list:
    """Options pointing a client at the test container."""
    return [
        host(redis_container.get_container_host_ip()),
        port(int(redis_container.get_exposed_port(6379))),
        db(1),
    ]


@pytest.fixture
def real_client(redis_options):
    """Unsafe client on a real server; its database is flushed after the test."""
    c = unsafe(*redis_options)
    yield c
    c.flush_db()
    c.close()
