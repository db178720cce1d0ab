"""
Lifecycle hooks (before, after, error) and error sanitization.

Hooks may be plain functions or coroutine functions.
"""

from .adapter import resolve
from .exceptions import as_exception


async def call_before_hook(hook, event, context):
    """
    Run ``hook(event, context)``.

    Returns:
        The hook's return value if it is not None (a replacement event),
        otherwise ``event``
    """
    if hook is None:
        return event
    updated = await resolve(hook(event, context))
    return event if updated is None else updated


async def call_hook(hook, value, event, context):
    """
    Run ``hook(value, event, context)`` and let it replace ``value``.

    Args:
        hook: Optional hook function
        value: The in-flight result (or error)
        event: Current event
        context: Current context

    Returns:
        The hook's return value, or ``value`` when there is no hook or the
        hook returned None
    """
    if hook is None:
        return value
    updated = await resolve(hook(value, event, context))
    return value if updated is None else updated


async def call_error_hook(hook, error, event, context):
    """
    Same as ``call_hook`` for errors, except that a missing hook re-raises.
    """
    if hook is None:
        raise as_exception(error)
    return await call_hook(hook, error, event, context)


def sanitize_error(error, preserve_stack=False):
    """
    Strip the stack trace from an error before it leaves the handler.

    Only an existing stack is cleared: the traceback of an exception, a
    ``'stack'`` key of a dict, or a ``stack`` attribute. Nothing else on the
    error is touched and no stack field is ever added.

    Args:
        error: Exception or any other error value
        preserve_stack: Return the error untouched when True

    Returns:
        The same error object
    """
    if preserve_stack:
        return error

    if isinstance(error, BaseException):
        error.__traceback__ = None

    if isinstance(error, dict):
        if error.get('stack'):
            error['stack'] = ''
    elif getattr(error, 'stack', None):
        error.stack = ''

    return error
