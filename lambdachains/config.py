"""
Configuration models for wrapped handlers and their loggers.
"""

import logging
import os
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError, field_validator

from .exceptions import ConfigurationError

# bunyan level names still show up in LOG_LEVEL settings of older functions
_LEVEL_ALIASES = {
    'TRACE': logging.DEBUG,
    'WARN': logging.WARNING,
    'FATAL': logging.CRITICAL,
}


class HandlerOptions(BaseModel):
    """Lifecycle hooks and error policy of a wrapped handler."""

    model_config = ConfigDict(extra='ignore', frozen=True)

    on_before: Optional[Callable] = None
    on_after: Optional[Callable] = None
    on_error: Optional[Callable] = None
    error_stack: StrictBool = True
    strict: StrictBool = True


class LoggingSettings(BaseModel):
    """Settings for the per-invocation logger."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    level: str = 'INFO'

    @field_validator('level')
    @classmethod
    def _normalize_level(cls, value):
        return value.strip().upper() or 'INFO'

    @property
    def levelno(self):
        if self.level in _LEVEL_ALIASES:
            return _LEVEL_ALIASES[self.level]
        level = getattr(logging, self.level, logging.INFO)
        return level if isinstance(level, int) else logging.INFO

    @classmethod
    def from_env(cls, environ=None):
        """
        Read settings from the environment.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            LoggingSettings with ``level`` taken from LOG_LEVEL
        """
        env = os.environ if environ is None else environ
        return cls(level=env.get('LOG_LEVEL') or 'INFO')


def load_options(options=None, **overrides):
    """
    Validate handler options.

    Unknown keys are ignored.

    Args:
        options: Mapping of option names to values (optional)
        **overrides: Options given as keyword arguments; they win over ``options``

    Returns:
        HandlerOptions

    Raises:
        ConfigurationError: If a hook is not callable or a flag is not a boolean
    """
    if isinstance(options, HandlerOptions) and not overrides:
        return options
    if isinstance(options, HandlerOptions):
        options = options.model_dump()

    data = dict(options or {})
    data.update(overrides)
    try:
        return HandlerOptions.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid handler options: {exc}") from exc
