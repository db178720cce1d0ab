"""
Context decoration: attach a structured logger to every invocation.
"""

import structlog

from .config import LoggingSettings
from .context import InvocationContext, context_fields, log_safe_fields


class ContextDecorator:
    """
    Turns a platform context into an InvocationContext.

    Each call creates a new structlog logger bound to the function name,
    the request id and the function version, filtered at the configured
    level. The settings are fixed when the decorator is created.

    Example:
        decorate = ContextDecorator(LoggingSettings(level='debug'))
        context = decorate({'function_name': 'orders', 'aws_request_id': 'abc'})
        context.log.info('received', items=3)
    """

    def __init__(self, settings=None, logger_factory=None):
        """
        Initialize the ContextDecorator.

        Args:
            settings: LoggingSettings (default: read from the environment)
            logger_factory: structlog logger factory (default: print to stdout)
        """
        self.settings = settings if settings is not None else LoggingSettings.from_env()
        self._logger_factory = logger_factory or structlog.PrintLoggerFactory()

    def create_logger(self, **fields):
        """Create a level-filtered JSON logger bound to ``fields``."""
        logger = structlog.wrap_logger(
            self._logger_factory(),
            wrapper_class=structlog.make_filtering_bound_logger(self.settings.levelno),
            processors=[
                log_safe_fields,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt='iso'),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
        )
        return logger.bind(**fields)

    def __call__(self, context):
        """
        Decorate ``context``.

        Args:
            context: dict, InvocationContext or platform context object;
                it is never modified

        Returns:
            A new InvocationContext
        """
        fields = context_fields(context)
        log = self.create_logger(
            name=fields.get('function_name'),
            aws_request_id=fields.get('aws_request_id'),
            function_version=fields.get('function_version'),
        )
        raw = context.raw if isinstance(context, InvocationContext) else context
        return InvocationContext(fields, log, raw=raw)

    def __repr__(self):
        return f"ContextDecorator(level={self.settings.level})"
