"""
Command mixins for PoolClient.

Each mixin validates arguments, then runs the command through the client's
typed execution helpers (run_bool, run_int, run_str, run_strings, match, ok).
"""

from .connection import ConnectionCommands
from .keys import KeyCommands
from .lists import ListCommands
from .server import ServerCommands
from .sets import SetCommands
from .strings import StringCommands

__all__ = [
    "ConnectionCommands",
    "KeyCommands",
    "ListCommands",
    "ServerCommands",
    "SetCommands",
    "StringCommands",
]
