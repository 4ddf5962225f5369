"""
Connection commands: ECHO, PING, QUIT.

SELECT is not here: selecting a database derives a new client (see
PoolClient.select) because the selected index belongs to a physical
connection, not to a pooled client.
"""

from ..constants import PONG_REPLY


class ConnectionCommands:
    def echo(self, message: str) -> str:
        """Echo message back; any other reply raises ResponseMismatchError."""
        return self.match("ECHO", message, lambda conn: conn.do("ECHO", message))

    def ping(self, message: str | None = None) -> str:
        """
        Ping the server.

        Args:
            message: Optional message; the server echoes it instead of PONG

        Returns:
            PONG, or the message when one was given
        """
        if message is None:
            return self.match("PING", PONG_REPLY, lambda conn: conn.do("PING"))
        return self.match("PING", message, lambda conn: conn.do("PING", message))

    def quit(self) -> None:
        """Ask the server to close the connection that runs the command."""

        def operation(conn):
            try:
                return conn.do("QUIT")
            finally:
                conn.discard()

        self.ok("QUIT", operation)
