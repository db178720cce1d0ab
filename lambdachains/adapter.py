"""
Adapter that turns a handler of either completion style into an awaitable.
"""

import asyncio
import inspect
from enum import Enum

import structlog

from .exceptions import ConfigurationError, as_exception

logger = structlog.get_logger(__name__)


class HandlerStyle(str, Enum):
    """How a handler reports completion."""
    RETURN = 'return'      # handler(event, context) returns a value or awaitable
    CALLBACK = 'callback'  # handler(event, context, done) calls done(err, value)


def handler_style(style):
    """Coerce ``style`` to a HandlerStyle or raise ConfigurationError."""
    try:
        return HandlerStyle(style)
    except ValueError:
        raise ConfigurationError(f"unknown handler style: {style!r}") from None


async def resolve(value):
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def invoke_handler(handler, event, context, style=HandlerStyle.RETURN):
    """
    Run ``handler`` once and wait for its outcome.

    With ``HandlerStyle.RETURN`` the handler's return value (awaited when it
    is awaitable) is the outcome. With ``HandlerStyle.CALLBACK`` the handler
    receives a ``done(err=None, value=None)`` function and only ``done``
    decides the outcome; whatever the handler returns is ignored.

    Args:
        handler: The user function
        event: Platform event
        context: Invocation context
        style: HandlerStyle the handler was registered with

    Returns:
        The handler's result

    Raises:
        Whatever the handler raised or passed to ``done``
    """
    if style == HandlerStyle.RETURN:
        return await resolve(handler(event, context))

    completion = asyncio.get_running_loop().create_future()

    def done(err=None, value=None):
        if completion.done():
            logger.warning('handler_completed_twice', handler=_name(handler))
            return
        if err:
            completion.set_exception(as_exception(err))
        else:
            completion.set_result(value)

    try:
        returned = handler(event, context, done)
    except Exception as exc:
        if not completion.done():
            raise
        _report_late_error(handler, exc)
        returned = None

    if inspect.isawaitable(returned):
        running = asyncio.ensure_future(returned)
        await asyncio.wait({running, completion}, return_when=asyncio.FIRST_COMPLETED)
        if completion.done():
            # done() decides; the handler may keep running in the background
            running.add_done_callback(lambda task: _check_background(handler, task))
        else:
            running.result()

    return await completion


def _check_background(handler, task):
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        _report_late_error(handler, exc)


def _report_late_error(handler, exc):
    # the outcome was already reported through done()
    logger.warning('handler_raised_after_completion', handler=_name(handler), error=repr(exc))


def _name(func):
    return getattr(func, '__qualname__', None) or type(func).__name__
