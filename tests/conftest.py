"""
Shared test fixtures and doubles for the export tool test suite.
"""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Iterable, List

import pytest

from surreal_export.libs.core.constants import EnvironmentConstants


class TestConstants:
    """Constants shared across test modules"""
    __test__ = False

    AUTH = "root:secret"
    HOST = "127.0.0.1"
    DESTINATION_NAME = "backup.db"
    SERVER_DIAGNOSTIC = "disk full"


class FakeResponse:
    """
    Stand-in for a streaming requests.Response

    The body is only available through iter_content; touching .content
    fails the test, so a client that buffers the whole payload is caught.
    """

    def __init__(self, status_code: int = 200, chunks: Iterable[bytes] = (), text: str = ""):
        self.status_code = status_code
        self._chunks = chunks
        self._text = text
        self.closed = False
        self.requested_chunk_sizes: List[int] = []

    def iter_content(self, chunk_size=1, decode_unicode=False):
        self.requested_chunk_sizes.append(chunk_size)
        for chunk in self._chunks:
            yield chunk

    @property
    def text(self) -> str:
        return self._text

    @property
    def content(self) -> bytes:
        raise AssertionError("response body must be streamed, not read whole")

    def close(self) -> None:
        self.closed = True


class ExportRequestHandler(BaseHTTPRequestHandler):
    """Serves the configured reply for every GET and records the request"""

    def do_GET(self):
        self.server.received.append({
            'path': self.path,
            'headers': dict(self.headers),
        })
        status, body = self.server.reply
        self.send_response(status)
        self.send_header('Content-Type', 'application/octet-stream')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep user config files and SURREAL_* variables out of every test"""
    for name in (EnvironmentConstants.AUTH, EnvironmentConstants.SCHEME,
                 EnvironmentConstants.HOST, EnvironmentConstants.PORT):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('HOME', str(tmp_path))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def destination(tmp_path):
    """Path of the export output file"""
    return tmp_path / TestConstants.DESTINATION_NAME


@pytest.fixture
def export_server():
    """Local HTTP server standing in for the database export endpoint"""
    server = ThreadingHTTPServer((TestConstants.HOST, 0), ExportRequestHandler)
    server.received = []
    server.reply = (200, b"")
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
