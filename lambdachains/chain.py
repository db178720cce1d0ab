"""
MiddlewareChain - Threads (event, context) through ordered middleware.
"""

import asyncio

import structlog

from .adapter import resolve
from .exceptions import ConfigurationError, ReentrancyError, as_exception, unwrap_error
from .result import Result

logger = structlog.get_logger(__name__)


class InvocationState:
    """
    Mutable state of a single invocation.

    Created fresh for every invocation and never shared between them.
    """

    def __init__(self, event, context):
        self.event = event
        self.context = context
        self.result = None
        self.position = -1  # highest position dispatched so far

    def __repr__(self):
        return (f"InvocationState(position={self.position}, "
                f"result={self.result!r})")


class MiddlewareChain:
    """
    Runs middleware one after another through continuations.

    Each middleware is called as ``middleware(event, context, next_callable)``
    and may:
    - return a value (or awaitable) to set the invocation result
    - call ``next_callable()`` to run the rest of the chain, optionally
      replacing the context and/or event for everything downstream
    - call ``next_callable(err)`` to fail the invocation
    - wrap ``await next_callable()`` in try/except to catch downstream errors

    Calling ``next_callable()`` past the last middleware runs the terminal
    function when one is configured and otherwise completes the invocation
    with the current result.
    """

    def __init__(self, terminal=None, strict=True):
        """
        Initialize a MiddlewareChain.

        Args:
            terminal: Optional middleware-shaped function run after the last
                registered middleware
            strict: Fail when a continuation is called more than once
                (default: True)
        """
        self._middleware = []
        self._terminal = terminal
        self._strict = strict

    def use(self, middleware):
        """
        Append middleware to the chain.
        Middleware executes in registration order.

        Args:
            middleware: Callable taking (event, context, next_callable)

        Returns:
            self (for method chaining)

        Raises:
            ConfigurationError: If middleware is not callable
        """
        if not callable(middleware):
            raise ConfigurationError('middleware is not a function')
        self._middleware.append(middleware)
        return self

    def middleware_count(self):
        """Return the number of registered middleware."""
        return len(self._middleware)

    async def execute(self, state):
        """
        Run the chain over ``state``.

        Args:
            state: InvocationState, mutated in place

        Returns:
            The final result

        Raises:
            The first error not caught inside the chain
        """
        await self._dispatch(state, 0)
        return state.result

    async def __call__(self, event, context, callback=None):
        """
        Run one invocation and report it to ``callback(error, result)``.

        Returns:
            The final result (errors are raised after the callback ran)
        """
        state = InvocationState(event, context)
        try:
            result = await self.execute(state)
        except Exception as exc:
            outcome = Result.fail(unwrap_error(exc))
        else:
            outcome = Result.ok(result)
        return outcome.deliver(callback)

    def _middleware_at(self, position):
        if position < len(self._middleware):
            return self._middleware[position]
        if position == len(self._middleware):
            return self._terminal
        return None

    def _dispatch(self, state, position):
        if position <= state.position:
            if self._strict:
                logger.warning('next_called_more_than_once', position=position)
                return _rejected(ReentrancyError())
        else:
            state.position = position

        # scheduled right away so that middleware which only returns the
        # continuation without awaiting it still runs the rest of the chain
        return asyncio.ensure_future(self._run(state, position))

    async def _run(self, state, position):
        middleware = self._middleware_at(position)
        if middleware is None:
            return

        def next_callable(err=None, context=None, event=None):
            if context is not None:
                state.context = context
            if event is not None:
                state.event = event
            if err:
                return _rejected(as_exception(err))
            return self._dispatch(state, position + 1)

        value = await resolve(middleware(state.event, state.context, next_callable))
        if value is not None:
            state.result = value

    def __repr__(self):
        return (f"MiddlewareChain(middleware={len(self._middleware)}, "
                f"terminal={self._terminal is not None}, strict={self._strict})")


def _rejected(exc):
    future = asyncio.get_running_loop().create_future()
    future.set_exception(exc)
    return future
