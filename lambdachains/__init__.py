"""
lambdachains - Middleware chains for function-as-a-service handlers

Wraps a single-invocation handler so that it can:
- return a value, return an awaitable, or complete through a callback
- run behind an ordered chain of middleware (onion model)
- use before/after/error lifecycle hooks
- log through a structured logger attached to its context

Example:
    from lambdachains import lambda_handler

    async def authenticate(event, context, next_callable):
        if 'token' not in event:
            return {'statusCode': 401}
        await next_callable(None, context.child(user=event['token']))

    def handler(event, context):
        context.log.info('handling')
        return {'statusCode': 200}

    app = lambda_handler(handler, error_stack=False).use(authenticate)

    result = await app(event, context)   # or: app.handle(event, context)
"""

__version__ = "1.0.0"
__author__ = "lambdachains Contributors"

from .adapter import HandlerStyle, invoke_handler
from .chain import InvocationState, MiddlewareChain
from .config import HandlerOptions, LoggingSettings
from .context import InvocationContext, derive_child
from .exceptions import ConfigurationError, LambdaChainsError, ReentrancyError, Rejection
from .extensions import LoggingMiddleware, SanitizeErrorsMiddleware
from .handler import LambdaHandler, callback_handler, lambda_handler
from .hooks import call_error_hook, call_hook, sanitize_error
from .logger import ContextDecorator
from .middleware import Middleware
from .result import Result

__all__ = [
    'lambda_handler',
    'callback_handler',
    'LambdaHandler',
    'HandlerStyle',
    'HandlerOptions',
    'MiddlewareChain',
    'InvocationState',
    'Middleware',
    'LoggingMiddleware',
    'SanitizeErrorsMiddleware',
    'InvocationContext',
    'ContextDecorator',
    'LoggingSettings',
    'derive_child',
    'invoke_handler',
    'call_hook',
    'call_error_hook',
    'sanitize_error',
    'Result',
    'LambdaChainsError',
    'ConfigurationError',
    'ReentrancyError',
    'Rejection',
]
