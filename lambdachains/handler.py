"""
LambdaHandler - Wraps a function-as-a-service handler with middleware,
lifecycle hooks and a logging context.
"""

import asyncio

from .adapter import HandlerStyle, handler_style, invoke_handler
from .chain import InvocationState, MiddlewareChain
from .config import load_options
from .exceptions import ConfigurationError, as_exception, unwrap_error
from .hooks import call_before_hook, call_error_hook, call_hook, sanitize_error
from .logger import ContextDecorator
from .result import Result


class LambdaHandler:
    """
    A wrapped handler with the platform's ``(event, context, callback)`` shape.

    Every invocation:
    1. decorates the context (structured logger, ``child()``)
    2. runs ``on_before``
    3. runs the registered middleware in order, then the handler
    4. passes the result through ``on_after``
    5. on any failure runs ``on_error``, which may recover a result
       (then ``on_after`` runs) or replace the error
    6. sanitizes the final error unless ``error_stack`` is set
    7. calls ``callback`` exactly once, then returns the result or raises
       the error to whoever awaits the invocation

    Without middleware this is a plain hook-augmented wrapper around the
    handler.
    """

    def __init__(self, handler, style=HandlerStyle.RETURN, options=None, decorator=None):
        """
        Initialize the LambdaHandler.

        Args:
            handler: The user function
            style: HandlerStyle.RETURN or HandlerStyle.CALLBACK
            options: HandlerOptions or mapping of options (optional)
            decorator: Callable turning the platform context into the
                invocation context (default: ContextDecorator configured
                from the environment)

        Raises:
            ConfigurationError: If the handler, style or options are invalid
        """
        if not callable(handler):
            raise ConfigurationError('handler is not a function')
        if decorator is not None and not callable(decorator):
            raise ConfigurationError('decorator is not a function')

        self._handler = handler
        self._style = handler_style(style)
        self.options = load_options(options)
        self._decorate = decorator if decorator is not None else ContextDecorator()
        self._chain = MiddlewareChain(terminal=self._run_handler, strict=self.options.strict)

    def use(self, middleware):
        """
        Append middleware that runs before the handler.

        Args:
            middleware: Callable taking (event, context, next_callable)

        Returns:
            self (for method chaining)
        """
        self._chain.use(middleware)
        return self

    async def __call__(self, event, context, callback=None):
        """
        Run one invocation.

        Args:
            event: Platform event
            context: Platform context (left unmodified)
            callback: Optional ``callback(error, result)``

        Returns:
            The final result

        Raises:
            The final error, after ``callback`` has seen it
        """
        state = InvocationState(event, context)
        outcome = await self._invoke(state)
        return outcome.deliver(callback)

    def handle(self, event, context):
        """
        Run one invocation synchronously.

        Entry point for runtimes that call ``handler(event, context)`` and
        expect a plain return value. Must not be called from a running
        event loop.
        """
        return asyncio.run(self(event, context))

    async def _run_handler(self, event, context, next_callable):
        return await invoke_handler(self._handler, event, context, self._style)

    async def _invoke(self, state):
        options = self.options
        try:
            state.context = self._decorate(state.context)
            state.event = await call_before_hook(options.on_before, state.event, state.context)
            result = await self._chain.execute(state)
            return Result.ok(await call_hook(options.on_after, result, state.event, state.context))
        except Exception as exc:
            error = unwrap_error(exc)

        try:
            recovered = await call_error_hook(options.on_error, error, state.event, state.context)
            if recovered is error:
                raise as_exception(error)
            return Result.ok(await call_hook(options.on_after, recovered, state.event, state.context))
        except Exception as exc:
            return Result.fail(sanitize_error(unwrap_error(exc), preserve_stack=options.error_stack))

    def __repr__(self):
        return (f"LambdaHandler(handler={getattr(self._handler, '__name__', self._handler)!r}, "
                f"style={self._style.value}, middleware={self._chain.middleware_count()})")


def lambda_handler(handler, style=HandlerStyle.RETURN, decorator=None, **options):
    """
    Wrap ``handler`` for the function-as-a-service platform.

    Example:
        @lambda_handler
        async def handler(event, context):
            context.log.info('received')
            return {'statusCode': 200}

        handler.use(auth_middleware)

    Args:
        handler: ``handler(event, context)`` returning a value or awaitable,
            or ``handler(event, context, done)`` with style CALLBACK
        style: HandlerStyle of the handler
        decorator: Optional context decorator
        **options: on_before, on_after, on_error, error_stack, strict;
            unknown options are ignored

    Returns:
        LambdaHandler
    """
    return LambdaHandler(handler, style=style, options=options, decorator=decorator)


def callback_handler(handler, decorator=None, **options):
    """Like ``lambda_handler`` for handlers that complete via ``done(err, value)``."""
    return LambdaHandler(handler, style=HandlerStyle.CALLBACK, options=options, decorator=decorator)
