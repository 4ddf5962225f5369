"""
Set commands: SADD, SCARD, SDIFFSTORE, SMEMBERS, SUNIONSTORE.
"""

from ..utils.validation import require_key, require_keys


class SetCommands:
    def sadd(self, key: str, *members: str) -> int:
        """
        Add members to the set at key.

        Returns:
            The number of members that were not already present
        """
        require_key(key)
        members = require_keys(members, "members")
        return self.run_int("SADD", lambda conn: conn.do("SADD", key, *members))

    def scard(self, key: str) -> int:
        require_key(key)
        return self.run_int("SCARD", lambda conn: conn.do("SCARD", key))

    def sdiffstore(self, dest: str, *keys: str) -> int:
        """Store the difference of the first set and the rest at dest; return its size."""
        require_key(dest, "dest")
        keys = require_keys(keys)
        return self.run_int("SDIFFSTORE", lambda conn: conn.do("SDIFFSTORE", dest, *keys))

    def smembers(self, key: str) -> list[str]:
        require_key(key)
        return self.run_strings("SMEMBERS", lambda conn: conn.do("SMEMBERS", key))

    def sunionstore(self, dest: str, *keys: str) -> int:
        """Store the union of keys at dest; return its size."""
        require_key(dest, "dest")
        keys = require_keys(keys)
        return self.run_int("SUNIONSTORE", lambda conn: conn.do("SUNIONSTORE", dest, *keys))
