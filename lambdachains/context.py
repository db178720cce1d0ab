"""
InvocationContext - Platform context fields plus a per-invocation logger.
"""

import copy
import traceback

# names that must never end up inside a log record
_CONTEXT_CAPABILITIES = ('log', 'child')

# attributes of the AWS Lambda python runtime context object
LAMBDA_CONTEXT_ATTRIBUTES = (
    'function_name',
    'function_version',
    'invoked_function_arn',
    'memory_limit_in_mb',
    'aws_request_id',
    'log_group_name',
    'log_stream_name',
    'identity',
    'client_context',
)


class InvocationContext:
    """
    The context handed to middleware, hooks and the handler.

    Holds a copy of the platform context's fields and a structured logger
    bound to them. The platform's own context object stays reachable
    through ``raw`` (for example ``raw.get_remaining_time_in_millis()``);
    attribute access falls through to the fields first and then to ``raw``.

    Instances are never mutated by lambdachains. ``child()`` returns a new
    context whose logger carries extra fields.
    """

    def __init__(self, fields, log, raw=None):
        """
        Initialize the InvocationContext.

        Args:
            fields: Dictionary of context fields
            log: structlog bound logger for this invocation
            raw: The platform context object the fields came from (optional)
        """
        self.fields = fields
        self.log = log
        self.raw = raw

    def get(self, key, default=None):
        """
        Get a field value.

        Args:
            key: The field to retrieve
            default: Default value if the field is missing

        Returns:
            The field value, or default if not found
        """
        return self.fields.get(key, default)

    def has(self, key):
        """Check if a field exists."""
        return key in self.fields

    def keys(self):
        return self.fields.keys()

    def items(self):
        return self.fields.items()

    def to_dict(self):
        """Return a copy of the fields, without logging capabilities."""
        return self.fields.copy()

    def child(self, **fields):
        """Shortcut for ``derive_child(self, fields)``."""
        return derive_child(self, fields)

    def __getitem__(self, key):
        return self.fields[key]

    def __contains__(self, key):
        return key in self.fields

    def __getattr__(self, name):
        # only called for names not found the normal way
        if name.startswith('__'):
            raise AttributeError(name)
        fields = self.__dict__.get('fields') or {}
        if name in fields:
            return fields[name]
        raw = self.__dict__.get('raw')
        if raw is not None and not isinstance(raw, dict):
            return getattr(raw, name)
        raise AttributeError(f"{type(self).__name__!s} has no field {name!r}")

    def __repr__(self):
        return f"InvocationContext({self.fields})"

    def __str__(self):
        return str(self.fields)


def derive_child(context, fields):
    """
    Create a copy of ``context`` whose logger carries ``fields``.

    The receiver is left untouched: fields are deep-copied and the logger
    is rebound. Values are serialized log-safely before they are bound.

    Args:
        context: InvocationContext to derive from
        fields: Dictionary of extra logger fields

    Returns:
        A new InvocationContext
    """
    safe = {key: serialize_value(key, value) for key, value in fields.items()}
    return InvocationContext(
        copy.deepcopy(context.fields),
        context.log.bind(**safe),
        raw=context.raw,
    )


def context_fields(context):
    """
    Extract a fresh dictionary of fields from a platform context.

    Accepts dictionaries, InvocationContext instances and objects such as
    the Lambda runtime's context (public, non-callable attributes).
    """
    if context is None:
        return {}
    if isinstance(context, InvocationContext):
        return copy.deepcopy(context.fields)
    if isinstance(context, dict):
        return copy.deepcopy(serialize_context(context))

    fields = {}
    for name in LAMBDA_CONTEXT_ATTRIBUTES:
        if hasattr(context, name):
            fields[name] = getattr(context, name)
    for name, value in getattr(context, '__dict__', {}).items():
        if not name.startswith('_') and not callable(value):
            fields[name] = value
    return copy.deepcopy(fields)


def serialize_context(context):
    """Log-safe form of a context: its fields without ``log`` and ``child``."""
    if isinstance(context, InvocationContext):
        return context.to_dict()
    if isinstance(context, dict):
        return {key: value for key, value in context.items() if key not in _CONTEXT_CAPABILITIES}
    return context


def serialize_error(error):
    """
    Log-safe form of an error.

    Exceptions become ``{**custom_attributes, 'message', 'name', 'stack'}``;
    anything else is returned unchanged.
    """
    if not isinstance(error, BaseException):
        return error

    data = dict(getattr(error, '__dict__', {}))
    data.update(
        message=str(error),
        name=type(error).__name__,
        stack=''.join(traceback.format_exception(type(error), error, error.__traceback__)),
    )
    return data


def serialize_value(key, value):
    if key in ('err', 'error') or isinstance(value, BaseException):
        return serialize_error(value)
    if key == 'context' or isinstance(value, InvocationContext):
        return serialize_context(value)
    return value


def log_safe_fields(logger, method_name, event_dict):
    """
    structlog processor applying the error and context serializers.

    ``exc_info`` is left for ``structlog.processors.format_exc_info``.
    """
    for key, value in event_dict.items():
        if key == 'exc_info':
            continue
        event_dict[key] = serialize_value(key, value)
    return event_dict
