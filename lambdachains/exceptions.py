"""
Exceptions raised by lambdachains and helpers for carrying opaque errors.

Handlers and middleware may fail with any value, not only exceptions
(``done('nope')``, ``next_callable({'message': 'x'})``). While such a value
travels through the chain it is wrapped in a ``Rejection``; the completion
boundary unwraps it again so callbacks see exactly what was produced.
"""


class LambdaChainsError(Exception):
    """Base class for all lambdachains errors."""


class ConfigurationError(LambdaChainsError, TypeError):
    """Invalid arguments given while composing a handler or a chain."""


class ReentrancyError(LambdaChainsError, RuntimeError):
    """A middleware called its continuation more than once."""

    def __init__(self, message='next() called more than once'):
        super().__init__(message)


class Rejection(LambdaChainsError):
    """
    Carries a non-exception error value through the chain.

    Args:
        reason: The original error value
    """

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason

    def __repr__(self):
        return f"Rejection({self.reason!r})"


def as_exception(error):
    """Return ``error`` itself if it can be raised, else wrap it in a Rejection."""
    if isinstance(error, BaseException):
        return error
    return Rejection(error)


def unwrap_error(exc):
    """Inverse of ``as_exception``."""
    if isinstance(exc, Rejection):
        return exc.reason
    return exc
