"""
Core client: PoolClient and the safe()/unsafe() constructors.
"""

from .client import ClientStats, PoolClient, safe, unsafe
from .transaction import TransactionCommands

__all__ = ["ClientStats", "PoolClient", "TransactionCommands", "safe", "unsafe"]
