"""
Transaction surface for PoolClient.

MULTI/EXEC needs every queued command to run on the same connection, which a
pooled client does not guarantee. Until a connection-pinned transaction
object exists these methods are no-ops: they never contact the store and
always return None.
"""

import logging

logger = logging.getLogger(__name__)


class TransactionCommands:
    @property
    def transacting(self) -> bool:
        """Whether the client's configuration is flagged as transacting."""
        return self._config.transacting

    def multi(self) -> None:
        logger.debug("MULTI is a no-op on a pooled client")
        return None

    def watch(self, *keys: str) -> None:
        logger.debug("WATCH is a no-op on a pooled client", extra={"keys": list(keys)})
        return None

    def unwatch(self) -> None:
        return None

    def exec(self) -> None:
        logger.debug("EXEC is a no-op on a pooled client")
        return None

    def discard(self) -> None:
        return None
