"""Environment-driven settings and logging setup."""

from .settings import ENV_PREFIX, Settings, get_settings, load_settings
from .logging import LOG_FORMAT, configure_logging

__all__ = [
    'ENV_PREFIX',
    'Settings',
    'get_settings',
    'load_settings',
    'LOG_FORMAT',
    'configure_logging'
]
