"""
Middleware - Base class for units of the invocation chain.
"""


class Middleware:
    """
    Base class for middleware.

    Any callable taking ``(event, context, next_callable)`` can be used as
    middleware; subclassing is only a convenience for middleware that
    carries configuration. Middleware runs in registration order on the way
    down and code after ``await next_callable()`` runs in reverse order on
    the way back up.
    """

    def execute(self, event, context, next_callable):
        """
        Execute the middleware logic.

        Args:
            event: The current event
            context: The current InvocationContext
            next_callable: ``next_callable(err=None, context=None, event=None)``
                continues the chain and returns an awaitable. Passing
                ``context`` or ``event`` replaces it for the rest of the chain;
                passing ``err`` fails the invocation instead.

        Returns:
            None, a value that becomes the invocation result, or an awaitable
            of either

        Example:
            async def execute(self, event, context, next_callable):
                # Before logic
                context.log.info('before')

                # Call next in chain, catching downstream errors
                try:
                    await next_callable()
                except KeyError:
                    return {'statusCode': 404}

                # After logic
                context.log.info('after')
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement execute()")

    def __call__(self, event, context, next_callable):
        return self.execute(event, context, next_callable)

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def __str__(self):
        return self.__class__.__name__
