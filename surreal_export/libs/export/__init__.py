"""
Export Libraries

Streams the export endpoint's response body into a local file.
"""

from .client import ExportClient, ExportResult, build_export_url, require_single_path
from .session import create_session

__all__ = [
    'ExportClient',
    'ExportResult',
    'build_export_url',
    'require_single_path',
    'create_session'
]
