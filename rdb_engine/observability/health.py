"""
Health check utilities for RDB_ENGINE.

Provides the PING and pool usage checks for a client, and HealthChecker,
which runs them (plus any registered extras) into one report.
"""

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from redis.exceptions import RedisError

from ..constants import POOL_USAGE_DEGRADED_PERCENT, POOL_USAGE_UNHEALTHY_PERCENT
from ..exceptions import RedisEngineError

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health status enumeration."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class HealthCheckResult:
    """Outcome of one check; the report carries the timestamp."""

    name: str
    status: HealthStatus
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "status": self.status.value}


def check_client_health(client: Any | None) -> HealthCheckResult:
    """
    Check that the client can reach the server with PING.

    Args:
        client: PoolClient instance

    Returns:
        HealthCheckResult
    """
    if client is None:
        return HealthCheckResult(
            name="redis",
            status=HealthStatus.UNHEALTHY,
            message="Redis client not initialized",
        )

    try:
        reply = client.ping()
        return HealthCheckResult(
            name="redis",
            status=HealthStatus.HEALTHY,
            message="Redis connection is healthy",
            details={"addr": client.config.addr, "db": client.config.db, "reply": reply},
        )
    except (RedisEngineError, RedisError, OSError) as e:
        return HealthCheckResult(
            name="redis",
            status=HealthStatus.UNHEALTHY,
            message=f"Redis health check failed: {str(e)}",
            details={"addr": client.config.addr, "error_type": type(e).__name__},
        )


def check_pool_health(client: Any | None) -> HealthCheckResult:
    """
    Check connection pool usage against max_active.

    Usage above 80% is degraded and above 90% unhealthy. An unlimited pool
    (max_active 0) has no usage figure and is reported healthy.

    Args:
        client: PoolClient instance

    Returns:
        HealthCheckResult
    """
    if client is None:
        return HealthCheckResult(
            name="connection_pool",
            status=HealthStatus.UNKNOWN,
            message="Redis client not initialized",
        )

    try:
        pool_stats = client.stats().pool
        details = pool_stats.to_dict()
        max_active = client.config.max_active
        details["max_active"] = max_active

        if max_active <= 0:
            return HealthCheckResult(
                name="connection_pool",
                status=HealthStatus.HEALTHY,
                message="Connection pool is operational (unlimited size)",
                details=details,
            )

        usage_percent = pool_stats.active_count / max_active * 100
        details["pool_usage_percent"] = round(usage_percent, 1)
        if usage_percent > POOL_USAGE_UNHEALTHY_PERCENT:
            status = HealthStatus.UNHEALTHY
            message = f"Connection pool usage is critical: {usage_percent:.1f}%"
        elif usage_percent > POOL_USAGE_DEGRADED_PERCENT:
            status = HealthStatus.DEGRADED
            message = f"Connection pool usage is high: {usage_percent:.1f}%"
        else:
            status = HealthStatus.HEALTHY
            message = f"Connection pool is healthy: {usage_percent:.1f}% usage"

        return HealthCheckResult(
            name="connection_pool",
            status=status,
            message=message,
            details=details,
        )
    except (AttributeError, TypeError, ValueError, RuntimeError) as e:
        return HealthCheckResult(
            name="connection_pool",
            status=HealthStatus.UNKNOWN,
            message=f"Failed to check pool health: {str(e)}",
        )


# Ordered from best to worst; the overall report takes the worst.
_SEVERITY = {
    HealthStatus.HEALTHY: 0,
    HealthStatus.UNKNOWN: 1,
    HealthStatus.DEGRADED: 2,
    HealthStatus.UNHEALTHY: 3,
}

ClientCheck = Callable[[Any], HealthCheckResult]


class HealthChecker:
    """
    Runs health checks against one client.

    Every check receives the client; the PING and pool checks are always
    registered. The overall status is the worst individual status.

    Usage:
        report = HealthChecker(client).check_all()
    """

    def __init__(self, client: Any | None) -> None:
        self.client = client
        self._checks: list[ClientCheck] = [check_client_health, check_pool_health]

    def register_check(self, check_func: ClientCheck) -> None:
        """Add a check called with the client."""
        self._checks.append(check_func)

    def _run(self, check_func: ClientCheck) -> HealthCheckResult:
        try:
            return check_func(self.client)
        except (RuntimeError, ValueError, TypeError, AttributeError, OSError) as e:
            name = getattr(check_func, "__name__", repr(check_func))
            logger.error(f"Health check {name} failed: {e}", exc_info=True)
            return HealthCheckResult(
                name=name,
                status=HealthStatus.UNKNOWN,
                message=f"Check failed: {str(e)}",
            )

    def check_all(self) -> dict[str, Any]:
        """
        Run every check against the client.

        Returns:
            Dictionary with the client address, overall status and the
            individual check results
        """
        results = [self._run(check_func) for check_func in self._checks]
        overall = max(
            (r.status for r in results), key=_SEVERITY.__getitem__, default=HealthStatus.HEALTHY
        )
        config = getattr(self.client, "config", None)
        return {
            "status": overall.value,
            "addr": config.addr if config is not None else None,
            "db": config.db if config is not None else None,
            "timestamp": datetime.now().isoformat(),
            "checks": [r.to_dict() for r in results],
        }
