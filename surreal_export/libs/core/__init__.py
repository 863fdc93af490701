"""
Core Libraries

Shared functionality and utilities for the export tool.
"""

from .config import ConfigManager, ConnectionParameters
from .exceptions import ExportError, ConfigurationError
from .utils import setup_logging, disable_ssl_warnings, mask_sensitive_info, format_bytes

__all__ = [
    'ConfigManager',
    'ConnectionParameters',
    'ExportError',
    'ConfigurationError',
    'setup_logging',
    'disable_ssl_warnings',
    'mask_sensitive_info',
    'format_bytes'
]
