"""
Constants for RDB_ENGINE.

This module contains the shared defaults and reply sentinels used across the
codebase to avoid magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================

DEFAULT_HOST: Final[str] = "localhost"
"""Default Redis host."""

DEFAULT_PORT: Final[int] = 6379
"""Default Redis port."""

DEFAULT_DB: Final[int] = 0
"""Default Redis database index."""

MIN_PORT: Final[int] = 1024
"""Lowest accepted port; reserved ports (<= 1023) are rejected."""

# ============================================================================
# CONNECTION POOL DEFAULTS
# ============================================================================

DEFAULT_IDLE_TIMEOUT: Final[float] = 60.0
"""Seconds an idle connection may sit in the pool before it is closed."""

DEFAULT_MAX_CONN_LIFETIME: Final[float] = 3600.0  # 1 hour
"""Seconds a connection may live before it is closed (0 disables)."""

DEFAULT_MAX_ACTIVE: Final[int] = 10
"""Default maximum number of open connections (0 means unlimited)."""

DEFAULT_MAX_IDLE: Final[int] = 3
"""Default maximum number of idle connections kept by the pool."""

DEFAULT_CONNECT_TIMEOUT: Final[float] = 5.0
"""Socket connect timeout used by the default dialer (seconds)."""

POOL_USAGE_DEGRADED_PERCENT: Final[float] = 80.0
"""Pool usage above which health checks report a degraded pool."""

POOL_USAGE_UNHEALTHY_PERCENT: Final[float] = 90.0
"""Pool usage above which health checks report an unhealthy pool."""

# ============================================================================
# REPLY SENTINELS
# ============================================================================

OK_REPLY: Final[str] = "OK"
"""Simple string reply returned by most write commands."""

PONG_REPLY: Final[str] = "PONG"
"""Reply to a PING without a message."""
