"""
Utility functions and helpers for RDB Engine.
"""

from .validation import is_blank, require_key, require_keys

__all__ = ["is_blank", "require_key", "require_keys"]
