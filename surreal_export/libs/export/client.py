"""
Export Client

Retrieves a full database dump from the export endpoint and streams it into
a local file without holding the payload in memory.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Union
from urllib.parse import quote

import requests

from ..core.config import ConnectionParameters
from ..core.constants import ConnectionConstants, NetworkConstants, ErrorMessages
from ..core.exceptions import (
    UsageError, DestinationError, ConfigurationError, NetworkError,
    AuthenticationError, ServerError, TransferError
)
from ..core.utils import format_bytes, mask_sensitive_info
from .session import create_session

logger = logging.getLogger(__name__)

PathType = Union[str, os.PathLike]


@dataclass(frozen=True)
class ExportResult:
    """Outcome of a successful export"""
    destination: str
    bytes_written: int
    elapsed_seconds: float


def require_single_path(paths: Sequence[PathType]) -> PathType:
    """
    Ensure exactly one destination path was supplied

    Args:
        paths: Positional path arguments as given on the command line

    Returns:
        The single destination path

    Raises:
        UsageError: If zero or more than one path was supplied
    """
    if paths is None or len(paths) != 1 or not paths[0]:
        raise UsageError(ErrorMessages.NO_FILEPATH)
    return paths[0]


def build_export_url(params: ConnectionParameters) -> str:
    """
    Compose the export endpoint URL with the credentials inline

    The user and password halves of "user:pass" are percent-encoded
    separately so that reserved characters survive in the authority.

    Args:
        params: Resolved connection parameters

    Returns:
        str: URL of the form {scheme}://{user}:{pass}@{host}:{port}/export
    """
    user, separator, password = params.auth.partition(':')
    userinfo = quote(user, safe='')
    if separator:
        userinfo += ':' + quote(password, safe='')
    return (f"{params.scheme}://{userinfo}@{params.host}:{params.port}"
            f"{ConnectionConstants.EXPORT_PATH}")


class ExportClient:
    """Client for the export transfer protocol"""

    def __init__(self, session: Optional[requests.Session] = None, skip_tls: bool = False,
                 chunk_size: int = NetworkConstants.DEFAULT_CHUNK_SIZE):
        """
        Initialize export client

        Args:
            session: HTTP session to use (a default one is created if omitted)
            skip_tls: Whether to skip TLS verification on a created session
            chunk_size: Size of the buffer used for the streaming copy
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        self._owns_session = session is None
        self.session = session if session is not None else create_session(skip_tls=skip_tls)
        self.chunk_size = chunk_size

    @staticmethod
    def build_headers() -> Dict[str, str]:
        """Headers sent with the export request"""
        return {
            str(NetworkConstants.HTTPHeader.CONTENT_TYPE): str(NetworkConstants.ContentType.OCTET_STREAM),
            str(NetworkConstants.HTTPHeader.USER_AGENT): NetworkConstants.USER_AGENT,
        }

    def export(self, params: ConnectionParameters, destination_path: PathType) -> ExportResult:
        """
        Export the remote database into a local file

        The destination is opened (created or truncated) before anything
        else and is closed on every path. A failure after it was opened
        leaves whatever was written so far in place.

        Args:
            params: Resolved connection parameters
            destination_path: Path of the output file

        Returns:
            ExportResult: Destination path and number of bytes written

        Raises:
            UsageError: If no destination path was given
            DestinationError: If the destination cannot be opened
            ConfigurationError: If the scheme is not http or https
            NetworkError: If the request cannot be built or sent
            AuthenticationError: If the server answers 401
            ServerError: If the server answers anything else but 200
            TransferError: If copying the body fails mid-stream
        """
        if not isinstance(destination_path, (str, os.PathLike)) or not os.fspath(destination_path):
            raise UsageError(ErrorMessages.NO_FILEPATH)

        start_time = time.monotonic()
        destination = self._open_destination(destination_path)

        with destination:
            self._validate_scheme(params.scheme)

            url = build_export_url(params)
            logger.info(f"Exporting from {mask_sensitive_info(url, params.auth)}")

            response = self._send_request(url, params.auth)
            try:
                self._check_status(response)
                bytes_written = self._stream_to_file(response, destination)
            finally:
                response.close()

        elapsed = time.monotonic() - start_time
        logger.info(f"Export complete: {format_bytes(bytes_written)} written to "
                    f"{os.fspath(destination_path)} in {elapsed:.2f}s")

        return ExportResult(
            destination=os.fspath(destination_path),
            bytes_written=bytes_written,
            elapsed_seconds=elapsed
        )

    def _open_destination(self, destination_path: PathType):
        """
        Open the destination file for binary writing

        Raises:
            DestinationError: If the file cannot be opened or created
        """
        try:
            return open(destination_path, 'wb')
        except OSError as e:
            logger.debug(f"Failed to open destination {destination_path}: {e}")
            raise DestinationError(ErrorMessages.DESTINATION_FAILED, cause=e)

    def _validate_scheme(self, scheme: str) -> None:
        """
        Raises:
            ConfigurationError: If scheme is not exactly http or https
        """
        if scheme not in ConnectionConstants.Scheme.values():
            logger.debug(f"Rejected scheme: {scheme!r}")
            raise ConfigurationError(ErrorMessages.INVALID_SCHEME)

    def _send_request(self, url: str, auth: str) -> requests.Response:
        """
        Issue the streaming GET request

        Raises:
            NetworkError: If the request cannot be constructed or sent
        """
        user, _, password = auth.partition(':')
        # Basic credentials go out UTF-8 encoded
        credentials = (user.encode('utf-8'), password.encode('utf-8'))
        try:
            return self.session.get(url, headers=self.build_headers(), auth=credentials, stream=True)
        except (requests.RequestException, UnicodeError) as e:
            logger.debug(f"Request failed: {mask_sensitive_info(str(e), auth)}")
            raise NetworkError(ErrorMessages.CONNECTION_FAILED, cause=e)

    def _check_status(self, response: requests.Response) -> None:
        """
        Validate the response status code

        Raises:
            AuthenticationError: On 401
            ServerError: On any other status but 200, with the body as message
        """
        status_code = response.status_code
        logger.debug(f"Export endpoint answered with status {status_code}")

        if status_code == NetworkConstants.HTTPStatus.UNAUTHORIZED:
            raise AuthenticationError(ErrorMessages.AUTHENTICATION_FAILED)

        if status_code != NetworkConstants.HTTPStatus.OK:
            # Error payloads are small; read them whole
            try:
                body = response.text
            except requests.RequestException as e:
                logger.debug(f"Failed to read error body: {e}")
                body = ""
            message = body.strip() or ErrorMessages.SERVER_ERROR_EMPTY.format(status=status_code)
            raise ServerError(message, status_code=status_code, body=body)

    def _stream_to_file(self, response: requests.Response, destination) -> int:
        """
        Copy the response body into the destination one chunk at a time

        Returns:
            int: Number of bytes written

        Raises:
            TransferError: If reading the body or writing the file fails
        """
        bytes_written = 0
        try:
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if not chunk:
                    continue
                destination.write(chunk)
                bytes_written += len(chunk)
            destination.flush()
        except (requests.RequestException, OSError) as e:
            logger.debug(f"Transfer aborted after {format_bytes(bytes_written)}: {e}")
            raise TransferError(ErrorMessages.TRANSFER_FAILED, cause=e)

        return bytes_written

    def close(self) -> None:
        """Close the HTTP session if this client created it"""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
