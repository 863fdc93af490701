"""
Export Library

Core configuration, error and logging support plus the export transfer client.
"""

# Core libraries
from .core import ConfigManager, ConnectionParameters
from .core.exceptions import (
    ErrorKind, ExportError, UsageError, DestinationError, ConfigurationError,
    NetworkError, AuthenticationError, ServerError, TransferError
)

# Export libraries
from .export import ExportClient, ExportResult, build_export_url, require_single_path

__all__ = [
    # Core
    'ConfigManager',
    'ConnectionParameters',
    'ErrorKind',
    'ExportError',
    'UsageError',
    'DestinationError',
    'ConfigurationError',
    'NetworkError',
    'AuthenticationError',
    'ServerError',
    'TransferError',
    # Export
    'ExportClient',
    'ExportResult',
    'build_export_url',
    'require_single_path',
]
