"""
Configuration management for RDB_ENGINE.

A Configuration is an immutable description of how to reach and use a Redis
server. It is built by applying Options, pure functions that take a
Configuration and return a new one or raise ConfigurationError, to the
defaults:

    cfg = new_config(host("cache.internal"), port(6380), db(2))
    replica = cfg.copy(max_active(1))

Every derivation copies and re-validates; the source is never mutated.

RedisSettings is an optional pydantic model that reads the same settings from
REDIS_* environment variables and turns them back into Options.
"""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_DB,
    DEFAULT_HOST,
    DEFAULT_IDLE_TIMEOUT,
    DEFAULT_MAX_ACTIVE,
    DEFAULT_MAX_CONN_LIFETIME,
    DEFAULT_MAX_IDLE,
    DEFAULT_PORT,
    MIN_PORT,
)
from .database.connection import (
    BorrowFunc,
    DialFunc,
    default_dialer,
    noop_test_on_borrower,
)
from .exceptions import ConfigurationError
from .utils.validation import is_blank


@dataclass(frozen=True)
class Configuration:
    """
    Redis Engine configuration.

    Durations are in seconds; 0 disables the corresponding limit. selectable
    and transacting are managed by the engine itself and only change through
    the internal Options.
    """

    cluster: bool = False
    db: int = DEFAULT_DB
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    password: str | None = None
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT
    max_conn_lifetime: float = DEFAULT_MAX_CONN_LIFETIME
    max_active: int = DEFAULT_MAX_ACTIVE
    max_idle: int = DEFAULT_MAX_IDLE
    wait: bool = False
    dialer: "Callable[[Configuration], DialFunc]" = default_dialer
    test_on_borrower: "Callable[[Configuration], BorrowFunc]" = noop_test_on_borrower
    selectable: bool = True
    transacting: bool = False

    @property
    def addr(self) -> str:
        """Return the host:port address."""
        return f"{self.host}:{self.port}"

    def copy(self, *options: "Option") -> "Configuration":
        """
        Derive a new configuration by applying options in order.

        Args:
            *options: Options to apply

        Returns:
            The validated new Configuration

        Raises:
            ConfigurationError: On the first failing option or failed validation
        """
        cfg = dataclasses.replace(self)
        for option in options:
            cfg = option(cfg)
        cfg.validate()
        return cfg

    def validate(self) -> None:
        """
        Validate cross-field constraints.

        Raises:
            ConfigurationError: If cluster mode is combined with a non-zero db
        """
        if self.cluster and self.db != 0:
            raise ConfigurationError(
                "cluster supports db/0 only", config_key="db", config_value=self.db
            )

    def __repr__(self) -> str:
        secret = "***" if self.password else None
        return (
            f"Configuration(addr={self.addr!r}, db={self.db}, cluster={self.cluster}, "
            f"password={secret!r}, max_active={self.max_active}, max_idle={self.max_idle}, "
            f"idle_timeout={self.idle_timeout}, max_conn_lifetime={self.max_conn_lifetime}, "
            f"wait={self.wait}, selectable={self.selectable}, transacting={self.transacting})"
        )


Option = Callable[[Configuration], Configuration]


def default_config() -> Configuration:
    """Return the default configuration."""
    return Configuration()


def new_config(*options: Option) -> Configuration:
    """
    Build a configuration from the defaults and the given options.

    Raises:
        ConfigurationError: On the first failing option or failed validation
    """
    return default_config().copy(*options)


def _seconds(value: float | timedelta) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


# ============================================================================
# INTERNAL OPTIONS
# ============================================================================


def _unselectable() -> Option:
    """Disallow select() on clients built from the configuration."""

    def apply(cfg: Configuration) -> Configuration:
        return dataclasses.replace(cfg, selectable=False)

    return apply


def _transacting() -> Option:
    """Mark the configuration as derived for a transaction."""

    def apply(cfg: Configuration) -> Configuration:
        return dataclasses.replace(cfg, transacting=True)

    return apply


# ============================================================================
# PUBLIC OPTIONS
# ============================================================================


def cluster(enabled: bool) -> Option:
    """
    Set cluster mode.

    Redis Cluster only supports database zero, so enabling cluster mode also
    disables select().
    """

    def apply(cfg: Configuration) -> Configuration:
        cfg = dataclasses.replace(cfg, cluster=enabled)
        if enabled:
            return _unselectable()(cfg)
        return cfg

    return apply


def db(index: int) -> Option:
    """Set the database index."""

    def apply(cfg: Configuration) -> Configuration:
        if index < 0:
            raise ConfigurationError("negative db", config_key="db", config_value=index)
        return dataclasses.replace(cfg, db=index)

    return apply


def host(name: str) -> Option:
    """Set the host; blank names are rejected."""

    def apply(cfg: Configuration) -> Configuration:
        if is_blank(name):
            raise ConfigurationError("empty host", config_key="host")
        return dataclasses.replace(cfg, host=name)

    return apply


def password(secret: str) -> Option:
    """Set the AUTH password; blank passwords are rejected."""

    def apply(cfg: Configuration) -> Configuration:
        if is_blank(secret):
            raise ConfigurationError("empty password", config_key="password")
        return dataclasses.replace(cfg, password=secret)

    return apply


def port(number: int) -> Option:
    """Set the port; reserved ports are rejected."""

    def apply(cfg: Configuration) -> Configuration:
        if number < MIN_PORT:
            raise ConfigurationError("invalid port", config_key="port", config_value=number)
        return dataclasses.replace(cfg, port=number)

    return apply


def idle_timeout(duration: float | timedelta) -> Option:
    def apply(cfg: Configuration) -> Configuration:
        return dataclasses.replace(cfg, idle_timeout=_seconds(duration))

    return apply


def max_conn_lifetime(duration: float | timedelta) -> Option:
    def apply(cfg: Configuration) -> Configuration:
        return dataclasses.replace(cfg, max_conn_lifetime=_seconds(duration))

    return apply


def max_active(count: int) -> Option:
    def apply(cfg: Configuration) -> Configuration:
        return dataclasses.replace(cfg, max_active=count)

    return apply


def max_idle(count: int) -> Option:
    def apply(cfg: Configuration) -> Configuration:
        return dataclasses.replace(cfg, max_idle=count)

    return apply


def wait(enabled: bool) -> Option:
    """Block in acquire() instead of failing when the pool is saturated."""

    def apply(cfg: Configuration) -> Configuration:
        return dataclasses.replace(cfg, wait=enabled)

    return apply


def dialer(factory: Callable[[Configuration], DialFunc]) -> Option:
    """Replace the connection-establishment strategy."""

    def apply(cfg: Configuration) -> Configuration:
        return dataclasses.replace(cfg, dialer=factory)

    return apply


def test_on_borrower(factory: Callable[[Configuration], BorrowFunc]) -> Option:
    """Replace the health check run on idle connections before reuse."""

    def apply(cfg: Configuration) -> Configuration:
        return dataclasses.replace(cfg, test_on_borrower=factory)

    return apply


# ============================================================================
# ENVIRONMENT SETTINGS
# ============================================================================


class RedisSettings(BaseSettings):
    """
    Pydantic-validated settings read from REDIS_* environment variables
    (or a .env file). Empty variables keep their defaults.

    Usage:
        settings = RedisSettings()
        client = safe(*settings.to_options())
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_", env_file=".env", env_ignore_empty=True, extra="ignore"
    )

    host: str = Field(DEFAULT_HOST, min_length=1, description="Redis host")
    port: int = Field(DEFAULT_PORT, ge=MIN_PORT, description="Redis port")
    db: int = Field(DEFAULT_DB, ge=0, description="Database index")
    password: str | None = Field(None, description="AUTH password")
    cluster: bool = Field(False, description="Cluster mode")
    max_active: int = Field(DEFAULT_MAX_ACTIVE, ge=0, description="Maximum open connections")
    max_idle: int = Field(DEFAULT_MAX_IDLE, ge=0, description="Maximum idle connections")
    idle_timeout: float = Field(DEFAULT_IDLE_TIMEOUT, ge=0, description="Idle timeout (s)")
    max_conn_lifetime: float = Field(
        DEFAULT_MAX_CONN_LIFETIME, ge=0, description="Connection lifetime (s)"
    )
    wait: bool = Field(False, description="Wait for a free connection")

    @classmethod
    def from_env(cls) -> "RedisSettings":
        """Read settings from the environment."""
        return cls()

    def to_options(self) -> list[Option]:
        """Return the Options equivalent to these settings."""
        options: list[Option] = [
            host(self.host),
            port(self.port),
            db(self.db),
            cluster(self.cluster),
            max_active(self.max_active),
            max_idle(self.max_idle),
            idle_timeout(self.idle_timeout),
            max_conn_lifetime(self.max_conn_lifetime),
            wait(self.wait),
        ]
        if self.password:
            options.append(password(self.password))
        return options
