"""
Typed reply decoding.

Replies arrive from redis-py already parsed (decode_responses=True): simple
and bulk strings as str, integers as int, arrays as list and nil as None.
These helpers convert a reply into the type a command promises, raising
NilReplyError for nil and ReplyTypeError for anything else unexpected.
"""

from typing import Any

from ..exceptions import NilReplyError, ReplyTypeError


def as_str(reply: Any) -> str:
    if reply is None:
        raise NilReplyError("nil returned")
    if isinstance(reply, str):
        return reply
    if isinstance(reply, bytes):
        return reply.decode("utf-8")
    if isinstance(reply, int) and not isinstance(reply, bool):
        return str(reply)
    raise ReplyTypeError(f"unexpected type for string reply: {type(reply).__name__}")


def as_int(reply: Any) -> int:
    if reply is None:
        raise NilReplyError("nil returned")
    if isinstance(reply, bool):
        return int(reply)
    if isinstance(reply, int):
        return reply
    if isinstance(reply, (str, bytes)):
        try:
            return int(reply)
        except ValueError as e:
            raise ReplyTypeError(f"cannot convert reply {reply!r} to int") from e
    raise ReplyTypeError(f"unexpected type for integer reply: {type(reply).__name__}")


def as_bool(reply: Any) -> bool:
    """Integer replies are true when non-zero; string replies follow 1/0/true/false."""
    if reply is None:
        raise NilReplyError("nil returned")
    if isinstance(reply, (bool, int)):
        return reply != 0
    if isinstance(reply, bytes):
        reply = reply.decode("utf-8")
    if isinstance(reply, str):
        lowered = reply.strip().lower()
        if lowered in ("1", "t", "true"):
            return True
        if lowered in ("0", "f", "false"):
            return False
        raise ReplyTypeError(f"cannot convert reply {reply!r} to bool")
    raise ReplyTypeError(f"unexpected type for boolean reply: {type(reply).__name__}")


def as_strings(reply: Any) -> list[str]:
    """Decode an array reply; nil elements become empty strings."""
    if reply is None:
        raise NilReplyError("nil returned")
    if not isinstance(reply, (list, tuple, set)):
        raise ReplyTypeError(f"unexpected type for array reply: {type(reply).__name__}")
    return ["" if item is None else as_str(item) for item in reply]
