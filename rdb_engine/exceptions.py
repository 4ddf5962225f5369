"""
Custom exceptions for RDB_ENGINE.

Every error raised by the engine derives from RedisEngineError, which keeps
compatibility with RuntimeError and carries an optional context dictionary.
Errors returned by the Redis server itself (redis.exceptions.ResponseError)
are not wrapped and reach the caller unchanged.
"""

from typing import Any, Dict, Optional


class RedisEngineError(RuntimeError):
    """
    Base exception for Redis Engine errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (command, db,
                 address, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional dictionary with additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ConfigurationError(RedisEngineError):
    """
    Raised when an Option or the resulting configuration is invalid.

    Configuration errors surface at build time; a failed Option never leaves a
    partially applied configuration behind.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class StoreConnectionError(RedisEngineError):
    """
    Raised when a connection cannot be dialed, authenticated or acquired.

    Attributes:
        message: Error message
        address: host:port of the store (if available)
        db: Database index being dialed (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        address: Optional[str] = None,
        db: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if address:
            context["address"] = address
        if db is not None:
            context["db"] = db
        super().__init__(message, context=context)
        self.address = address
        self.db = db


class PoolExhaustedError(StoreConnectionError):
    """Raised when the pool is at max_active and the client does not wait."""


class PoolClosedError(StoreConnectionError):
    """Raised when acquiring from a pool that has been closed."""


class ResponseMismatchError(RedisEngineError):
    """
    Raised when a command expecting a sentinel reply gets something else.

    Attributes:
        command: Upper-cased command name
        expected: The expected reply
        actual: The reply actually received
    """

    def __init__(self, command: str, expected: str, actual: Any) -> None:
        command = command.upper()
        super().__init__(f'{command} expected "{expected}" response, got: "{actual}"')
        self.command = command
        self.expected = expected
        self.actual = actual


class PolicyError(RedisEngineError):
    """
    Raised when the client refuses a command before contacting the store.

    Used by the safe-mode gate and by select() on a non-selectable client.

    Attributes:
        command: The refused command
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if command:
            context["command"] = command
        super().__init__(message, context=context)
        self.command = command


class ArgumentError(RedisEngineError, ValueError):
    """Raised when a command is called with invalid arguments."""


class NilReplyError(RedisEngineError, LookupError):
    """Raised when the store returns nil where a value was required."""


class ReplyTypeError(RedisEngineError, TypeError):
    """Raised when a reply cannot be decoded into the requested type."""
