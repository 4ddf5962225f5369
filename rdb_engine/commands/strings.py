"""
String commands: APPEND, GET, INCR, MGET, SET, SETEX, plus appends().
"""

from datetime import timedelta

from ..exceptions import ArgumentError
from ..utils.validation import require_key, require_keys


class StringCommands:
    def append(self, key: str, value: str) -> int:
        """Append value to the string at key and return the new length."""
        require_key(key)
        return self.run_int("APPEND", lambda conn: conn.do("APPEND", key, value))

    def appends(self, key: str, sep: str, *values: str) -> int:
        """
        Append values joined by sep in a single APPEND.

        Example:
            client.appends("log", ",", "a", "b")  # appends "a,b"
        """
        return self.append(key, sep.join(values))

    def get(self, key: str) -> str:
        """Return the value at key; NilReplyError when the key is missing."""
        require_key(key)
        return self.run_str("GET", lambda conn: conn.do("GET", key))

    def incr(self, key: str) -> int:
        require_key(key)
        return self.run_int("INCR", lambda conn: conn.do("INCR", key))

    def mget(self, *keys: str) -> list[str]:
        """Return values for keys in order; a missing key yields ""."""
        keys = require_keys(keys)
        return self.run_strings("MGET", lambda conn: conn.do("MGET", *keys))

    def set(self, key: str, value: str) -> None:
        require_key(key)
        self.ok("SET", lambda conn: conn.do("SET", key, value))

    def setex(self, key: str, value: str, seconds: int) -> None:
        """Set key to value with a time-to-live of seconds (at least 1)."""
        require_key(key)
        if seconds < 1:
            raise ArgumentError("invalid expiry: seconds must be >= 1")
        self.ok("SETEX", lambda conn: conn.do("SETEX", key, seconds, value))

    def setex_duration(self, key: str, value: str, duration: timedelta) -> None:
        """setex() with a timedelta, truncated to whole seconds."""
        self.setex(key, value, int(duration.total_seconds()))
