"""
Ready-made middleware.
"""

from .exceptions import unwrap_error
from .hooks import sanitize_error
from .logger import ContextDecorator
from .middleware import Middleware


class LoggingMiddleware(Middleware):
    """
    Attach a structured logger to the context for the rest of the chain.

    Useful with a bare MiddlewareChain, which does not decorate contexts
    on its own. Middleware registered before this one still sees the
    platform context.
    """

    def __init__(self, decorator=None):
        """
        Initialize the LoggingMiddleware.

        Args:
            decorator: ContextDecorator to use (default: configured from the
                environment)
        """
        self.decorator = decorator if decorator is not None else ContextDecorator()

    def execute(self, event, context, next_callable):
        return next_callable(None, self.decorator(context))


class SanitizeErrorsMiddleware(Middleware):
    """
    Strip stack traces from errors raised further down the chain.

    Frames added while the error travels further up are not affected.
    """

    async def execute(self, event, context, next_callable):
        try:
            await next_callable()
        except Exception as exc:
            sanitize_error(unwrap_error(exc))
            raise
