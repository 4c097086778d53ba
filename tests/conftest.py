import json
import sys
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for path in (ROOT, SRC):
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from schemaregistry import MEDIA_TYPE  # noqa: E402

TEST_SCHEMA = json.dumps(
    {
        "type": "record",
        "name": "Frame",
        "fields": [{"name": "data", "type": "bytes"}],
    },
    indent=2,
)


class DummyResponse:
    def __init__(self, status_code: int = 200, json_data: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text

    def json(self):
        return json.loads(self.text)


@dataclass
class RecordedCall:
    method: str
    url: str
    data: Optional[str]
    headers: Dict[str, str]
    timeout: Optional[float]

    @property
    def body(self) -> Any:
        return json.loads(self.data) if self.data is not None else None


class DummySession:
    """Stand-in for ``requests.Session`` answering from a route table."""

    def __init__(self, responses=None, error: Optional[BaseException] = None):
        self.responses = responses or {}
        self.error = error
        self.calls: List[RecordedCall] = []
        self.closed = False
        self.auth = None

    def request(self, method, url, data=None, headers=None, timeout=None):
        self.calls.append(RecordedCall(method, url, data, dict(headers or {}), timeout))
        if self.error is not None:
            raise self.error
        response = self.responses.get((method, url))
        if response is None:
            response = DummyResponse(404, {"error_code": 404, "message": "HTTP 404 Not Found"})
        return response

    def close(self):
        self.closed = True


@pytest.fixture
def dummy_session() -> DummySession:
    return DummySession()


# ---------------------------------------------------------------------------
# Local HTTP registry
# ---------------------------------------------------------------------------


@dataclass
class ReceivedRequest:
    method: str
    path: str
    headers: Dict[str, str]
    body: str

    def json(self):
        return json.loads(self.body)


@dataclass
class LocalRegistry:
    url: str
    routes: Dict[Tuple[str, str], Tuple[int, Any]] = field(default_factory=dict)
    received: List[ReceivedRequest] = field(default_factory=list)

    def route(self, method: str, path: str, status: int, body: Any) -> None:
        self.routes[(method, path)] = (status, body)


class _RegistryHandler(BaseHTTPRequestHandler):
    def _handle(self) -> None:
        registry: LocalRegistry = self.server.registry  # type: ignore[attr-defined]
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode("utf-8") if length else ""
        registry.received.append(
            ReceivedRequest(
                method=self.command,
                path=self.path,
                headers={key.lower(): value for key, value in self.headers.items()},
                body=body,
            )
        )

        status, payload = registry.routes.get(
            (self.command, self.path),
            (404, {"error_code": 404, "message": "HTTP 404 Not Found"}),
        )
        raw = payload if isinstance(payload, str) else json.dumps(payload)
        encoded = raw.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", MEDIA_TYPE)
        self.send_header("Content-Length", str(len(encoded)))
        self.end_headers()
        self.wfile.write(encoded)

    do_GET = _handle
    do_POST = _handle
    do_PUT = _handle

    def log_message(self, format, *args):  # noqa: A002 - silence request logging
        return


@pytest.fixture
def local_registry():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _RegistryHandler)
    host, port = server.server_address[:2]
    registry = LocalRegistry(url=f"http://{host}:{port}")
    server.registry = registry  # type: ignore[attr-defined]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield registry
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
