"""
List commands: LLEN, LPOP, LPUSH, RPOP, RPUSH.
"""

from ..utils.validation import require_key, require_keys


class ListCommands:
    def llen(self, key: str) -> int:
        require_key(key)
        return self.run_int("LLEN", lambda conn: conn.do("LLEN", key))

    def lpop(self, key: str) -> str:
        """Pop the head of the list; NilReplyError when it is empty."""
        require_key(key)
        return self.run_str("LPOP", lambda conn: conn.do("LPOP", key))

    def lpush(self, key: str, *items: str) -> int:
        """Prepend items and return the new list length."""
        require_key(key)
        items = require_keys(items, "items")
        return self.run_int("LPUSH", lambda conn: conn.do("LPUSH", key, *items))

    def rpop(self, key: str) -> str:
        """Pop the tail of the list; NilReplyError when it is empty."""
        require_key(key)
        return self.run_str("RPOP", lambda conn: conn.do("RPOP", key))

    def rpush(self, key: str, *items: str) -> int:
        """Append items and return the new list length."""
        require_key(key)
        items = require_keys(items, "items")
        return self.run_int("RPUSH", lambda conn: conn.do("RPUSH", key, *items))
