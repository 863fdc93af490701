"""
Constants Module

Centralized constants for the export tool to eliminate magic strings
and improve maintainability.
"""


class ConnectionConstants:
    """Connection defaults and supported values"""

    from enum import Enum

    # Defaults used when neither flags, environment nor config file set a value
    DEFAULT_AUTH = "root:root"
    DEFAULT_SCHEME = "https"
    DEFAULT_HOST = "surreal.io"
    DEFAULT_PORT = "80"

    EXPORT_PATH = "/export"

    class Scheme(str, Enum):
        """Connection schemes accepted by the export endpoint"""
        HTTP = "http"
        HTTPS = "https"

        def __str__(self) -> str:
            """Return the scheme value for use in URLs"""
            return self.value

        @classmethod
        def values(cls) -> list:
            """Get all supported scheme strings"""
            return [member.value for member in cls]


class EnvironmentConstants:
    """Environment variable names read through python-decouple"""

    AUTH = "SURREAL_AUTH"
    SCHEME = "SURREAL_SCHEME"
    HOST = "SURREAL_HOST"
    PORT = "SURREAL_PORT"


class NetworkConstants:
    """Network-related constants with improved enum-based structure"""

    from enum import Enum, IntEnum

    # Streaming copy buffer, reused for every chunk
    DEFAULT_CHUNK_SIZE = 64 * 1024

    USER_AGENT = "surreal-export/1.0"

    class HTTPStatus(IntEnum):
        """HTTP status codes the export client reacts to"""
        OK = 200
        UNAUTHORIZED = 401

        def __str__(self) -> str:
            """Return a human-readable description of the status code"""
            descriptions = {
                200: "OK",
                401: "Unauthorized",
            }
            return f"{self.value} {descriptions.get(self.value, 'Unknown')}"

    class ContentType(Enum):
        """Content-Type header values"""
        OCTET_STREAM = "application/octet-stream"

        def __str__(self) -> str:
            """Return the content type value for use in headers"""
            return self.value

    class HTTPHeader(Enum):
        """Standard HTTP header names"""
        CONTENT_TYPE = "Content-Type"
        USER_AGENT = "User-Agent"

        def __str__(self) -> str:
            """Return the header name for use in HTTP requests"""
            return self.value


class ErrorMessages:
    """Centralized user-facing error messages, one per failure kind"""

    NO_FILEPATH = "No filepath provided."
    DESTINATION_FAILED = "Export failed - please check the filepath and try again."
    INVALID_SCHEME = "Connection failed - please specify 'http' or 'https' for the scheme."
    CONNECTION_FAILED = "Connection failed - check the connection details and try again."
    AUTHENTICATION_FAILED = "Authentication failed - check the connection details and try again."
    SERVER_ERROR_EMPTY = "Export failed - the server returned status {status} with no message."
    TRANSFER_FAILED = "Export failed - there was an error saving the database content."

    CONFIG_FILE_NOT_FOUND = "Configuration file not found: {config_path}"
    CANCELLED = "Operation cancelled by user."


class FileConstants:
    """File and directory related constants"""

    DEFAULT_CONFIG_FILE = "surreal-export.yaml"

    # Searched in order when no --config path is given
    DEFAULT_CONFIG_LOCATIONS = [
        "surreal-export.yaml",
        "~/.surreal-export.yaml",
        "~/.config/surreal-export.yaml",
    ]
