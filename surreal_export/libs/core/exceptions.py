"""
Exceptions Module

Typed error hierarchy for the export tool. Every failure of an export is
raised as exactly one ExportError subclass tagged with its ErrorKind.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Mutually exclusive failure kinds of an export"""
    USAGE = "usage"
    DESTINATION = "destination"
    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    AUTHENTICATION = "authentication"
    SERVER = "server"
    TRANSFER = "transfer"

    def __str__(self) -> str:
        return self.value


class ExportError(Exception):
    """Base exception for all export failures"""

    kind: ErrorKind = None

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class UsageError(ExportError):
    """Wrong number of destination path arguments"""
    kind = ErrorKind.USAGE


class DestinationError(ExportError):
    """Destination file could not be opened or created"""
    kind = ErrorKind.DESTINATION


class ConfigurationError(ExportError):
    """Unsupported scheme or invalid configuration file"""
    kind = ErrorKind.CONFIGURATION


class NetworkError(ExportError):
    """Request could not be constructed or the server could not be reached"""
    kind = ErrorKind.CONNECTION


class AuthenticationError(ExportError):
    """Server rejected the credentials (HTTP 401)"""
    kind = ErrorKind.AUTHENTICATION


class ServerError(ExportError):
    """Server answered with a status other than 200 or 401"""
    kind = ErrorKind.SERVER

    def __init__(self, message: str, status_code: int, body: str = "",
                 cause: Optional[BaseException] = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.body = body


class TransferError(ExportError):
    """Copying the response body to the destination failed mid-stream"""
    kind = ErrorKind.TRANSFER
