"""
Key commands: DEL, EXISTS, EXPIRE, KEYS, RENAME, plus del_pattern.
"""

from ..exceptions import ArgumentError
from ..utils.validation import require_key, require_keys


class KeyCommands:
    def delete(self, *keys: str) -> int:
        """Delete keys and return how many actually existed."""
        keys = require_keys(keys)
        return self.run_int("DEL", lambda conn: conn.do("DEL", *keys))

    def del_pattern(self, pattern: str) -> int:
        """
        Delete every key matching pattern. Requires an unsafe client.

        Runs KEYS then DEL, so it walks the whole keyspace; avoid it on large
        production databases.
        """
        self.require_unsafe("DELPATTERN")
        require_key(pattern, "pattern")
        keys = self.keys(pattern)
        if not keys:
            return 0
        return self.delete(*keys)

    def exists(self, key: str) -> bool:
        """Return whether key exists. Only a single key is accepted."""
        require_key(key)
        return self.run_bool("EXISTS", lambda conn: conn.do("EXISTS", key))

    def expire(self, key: str, seconds: int) -> bool:
        """Set a timeout on key; False when the key does not exist."""
        require_key(key)
        return self.run_bool("EXPIRE", lambda conn: conn.do("EXPIRE", key, seconds))

    def keys(self, pattern: str) -> list[str]:
        require_key(pattern, "pattern")
        return self.run_strings("KEYS", lambda conn: conn.do("KEYS", pattern))

    def rename(self, src: str, dst: str) -> None:
        require_key(src, "from")
        require_key(dst, "to")
        if src == dst:
            raise ArgumentError("from == to")
        self.ok("RENAME", lambda conn: conn.do("RENAME", src, dst))
