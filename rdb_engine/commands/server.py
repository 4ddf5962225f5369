"""
Server commands.

FLUSHALL and FLUSHDB wipe whole databases, so only unsafe clients may run
them; safe clients fail before a connection is acquired.
"""


class ServerCommands:
    """DBSIZE, FLUSHALL, FLUSHDB."""

    def db_size(self) -> int:
        """Return the number of keys in the selected database."""
        return self.run_int("DBSIZE", lambda conn: conn.do("DBSIZE"))

    def flush_all(self) -> None:
        """Delete every key in every database. Requires an unsafe client."""
        self.require_unsafe("FLUSHALL")
        self.ok("FLUSHALL", lambda conn: conn.do("FLUSHALL"))

    def flush_db(self) -> None:
        """Delete every key in the configured database. Requires an unsafe client."""
        self.require_unsafe("FLUSHDB")
        self.ok("FLUSHDB", lambda conn: conn.do("FLUSHDB"))
