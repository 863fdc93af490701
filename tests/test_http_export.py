"""
End-to-end export tests against a local HTTP server.
"""

import base64
import os

import pytest
import requests

from surreal_export.libs.core.config import ConnectionParameters
from surreal_export.libs.core.exceptions import AuthenticationError, NetworkError, ServerError
from surreal_export.libs.export.client import ExportClient

from conftest import TestConstants


@pytest.fixture
def http_client():
    """Client whose session ignores proxy and netrc settings from the host"""
    session = requests.Session()
    session.trust_env = False
    with ExportClient(session=session) as client:
        yield client
    session.close()


def server_params(server, auth=TestConstants.AUTH):
    return ConnectionParameters(
        scheme="http",
        host=TestConstants.HOST,
        port=str(server.server_address[1]),
        auth=auth
    )


class TestHttpExport:
    """Full request/response cycle over a real socket"""

    def test_body_is_written_byte_for_byte(self, export_server, http_client, destination):
        # Arrange
        body = os.urandom(3 * 1024 * 1024 + 17)
        export_server.reply = (200, body)

        # Act
        result = http_client.export(server_params(export_server), destination)

        # Assert
        assert destination.read_bytes() == body
        assert result.bytes_written == len(body)

    def test_empty_body_creates_empty_file(self, export_server, http_client, destination):
        export_server.reply = (200, b"")

        http_client.export(server_params(export_server), destination)

        assert destination.read_bytes() == b""

    def test_request_carries_path_credentials_and_content_type(self, export_server, http_client, destination):
        export_server.reply = (200, b"ok")

        http_client.export(server_params(export_server), destination)

        assert len(export_server.received) == 1
        request = export_server.received[0]
        expected_auth = base64.b64encode(TestConstants.AUTH.encode()).decode()
        assert request['path'] == "/export"
        assert request['headers']['Authorization'] == f"Basic {expected_auth}"
        assert request['headers']['Content-Type'] == "application/octet-stream"

    def test_non_latin1_credentials_are_sent_as_utf8_basic_auth(self, export_server, http_client, destination):
        # Arrange
        auth = "root:密码"
        export_server.reply = (200, b"ok")

        # Act
        http_client.export(server_params(export_server, auth=auth), destination)

        # Assert
        expected_auth = base64.b64encode(auth.encode("utf-8")).decode()
        assert export_server.received[0]['headers']['Authorization'] == f"Basic {expected_auth}"
        assert destination.read_bytes() == b"ok"

    def test_unauthorized(self, export_server, http_client, destination):
        export_server.reply = (401, b"Authentication failed")

        with pytest.raises(AuthenticationError):
            http_client.export(server_params(export_server, auth="root:wrong"), destination)

        assert destination.exists()

    def test_server_error_message(self, export_server, http_client, destination):
        export_server.reply = (500, TestConstants.SERVER_DIAGNOSTIC.encode())

        with pytest.raises(ServerError) as exc_info:
            http_client.export(server_params(export_server), destination)

        assert TestConstants.SERVER_DIAGNOSTIC in str(exc_info.value)

    def test_repeat_export_leaves_latest_body(self, export_server, http_client, destination):
        export_server.reply = (200, b"first body, longer than the second")
        http_client.export(server_params(export_server), destination)

        export_server.reply = (200, b"second")
        http_client.export(server_params(export_server), destination)

        assert destination.read_bytes() == b"second"

    def test_refused_connection(self, export_server, http_client, destination):
        params = server_params(export_server)
        export_server.shutdown()
        export_server.server_close()

        with pytest.raises(NetworkError):
            http_client.export(params, destination)
