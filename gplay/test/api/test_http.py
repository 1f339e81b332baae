"""Tests for api/http.py - HTTP transport abstraction."""

from __future__ import annotations

import http.client
import io
import socket
import threading
import urllib.error
import urllib.request
from email.message import Message
from typing import Any

import pytest

from gplay.api.http import HttpClient, HttpResponse, MockHttpClient, RealHttpClient
from gplay.core.errors import PlayError
from gplay.core.result import Err, Ok


# =============================================================================
# HttpResponse tests
# =============================================================================


class TestHttpResponse:
    def test_ok_range(self) -> None:
        assert HttpResponse(status=200).ok
        assert HttpResponse(status=204).ok
        assert not HttpResponse(status=302).ok
        assert not HttpResponse(status=404).ok

    def test_status_text_uses_reason(self) -> None:
        assert HttpResponse(status=404, reason="Nope").status_text == "404 Nope"

    def test_status_text_falls_back_to_standard_phrase(self) -> None:
        assert HttpResponse(status=403).status_text == "403 Forbidden"

    def test_status_text_unknown_code(self) -> None:
        assert HttpResponse(status=599).status_text == "599"


# =============================================================================
# MockHttpClient tests
# =============================================================================


class TestMockHttpClient:
    def test_isinstance_check(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)

    def test_json_response(self) -> None:
        http = MockHttpClient()
        http.add("POST", "https://x/edits", json_body={"id": "e1"})

        result = http.send("POST", "https://x/edits", body=b"{}")

        assert isinstance(result, Ok)
        assert result.value.status == 200
        assert result.value.body == b'{"id": "e1"}'

    def test_unscripted_is_404(self) -> None:
        result = MockHttpClient().send("GET", "https://x/unknown")
        assert isinstance(result, Ok)
        assert result.value.status == 404

    def test_queued_responses_then_last_repeats(self) -> None:
        http = MockHttpClient()
        http.add("GET", "https://x/a", status=500)
        http.add("GET", "https://x/a", status=200)

        statuses = []
        for _ in range(3):
            result = http.send("GET", "https://x/a")
            assert isinstance(result, Ok)
            statuses.append(result.value.status)

        assert statuses == [500, 200, 200]

    def test_transport_error(self) -> None:
        http = MockHttpClient()
        http.add_error("POST", "https://x/up", PlayError(kind="timeout", message="Request timed out"))

        result = http.send("POST", "https://x/up", timeout=5)

        assert isinstance(result, Err)
        assert result.error.kind == "timeout"

    def test_records_calls(self) -> None:
        http = MockHttpClient()
        http.send("PUT", "https://x/t?q=1", body=b"b", headers={"A": "1"}, timeout=3.0)

        call = http.calls[0]
        assert call.method == "PUT"
        assert call.body == b"b"
        assert call.headers == {"A": "1"}
        assert call.timeout == 3.0
        assert http.calls_to("PUT", "/t") == [call]
        assert http.calls_to("GET") == []


# =============================================================================
# RealHttpClient tests (urlopen patched, no network)
# =============================================================================


class _FakeResponse:
    def __init__(self, status: int, body: bytes, reason: str = "OK") -> None:
        self.status = status
        self.reason = reason
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None


class TestRealHttpClient:
    def test_isinstance_check(self) -> None:
        assert isinstance(RealHttpClient(), HttpClient)

    def test_success(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, Any] = {}

        def fake_urlopen(req: urllib.request.Request, **kwargs: Any) -> _FakeResponse:
            seen["method"] = req.get_method()
            seen["data"] = req.data
            seen["headers"] = dict(req.header_items())
            seen["kwargs"] = kwargs
            return _FakeResponse(200, b'{"id":"e1"}')

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        result = RealHttpClient(user_agent="gplay/test").send(
            "POST", "https://x/edits", body=b"{}", headers={"Authorization": "Bearer t"}
        )

        assert isinstance(result, Ok)
        assert result.value == HttpResponse(status=200, reason="OK", body=b'{"id":"e1"}')
        assert seen["method"] == "POST"
        assert seen["data"] == b"{}"
        assert seen["headers"]["Authorization"] == "Bearer t"
        assert seen["headers"]["User-agent"] == "gplay/test"
        assert "timeout" not in seen["kwargs"]

    def test_passes_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: dict[str, Any] = {}

        def fake_urlopen(req: urllib.request.Request, **kwargs: Any) -> _FakeResponse:
            seen.update(kwargs)
            return _FakeResponse(200, b"{}")

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        RealHttpClient().send("POST", "https://x/up", body=b"data", timeout=300)

        assert seen["timeout"] == 300

    def test_http_error_keeps_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_urlopen(req: urllib.request.Request, **kwargs: Any) -> _FakeResponse:
            raise urllib.error.HTTPError(
                req.full_url,
                404,
                "Not Found",
                Message(),
                io.BytesIO(b'{"error":{"message":"track not found"}}'),
            )

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        result = RealHttpClient().send("PUT", "https://x/tracks/internal")

        assert isinstance(result, Ok)
        assert result.value.status == 404
        assert b"track not found" in result.value.body

    def test_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_urlopen(req: urllib.request.Request, **kwargs: Any) -> _FakeResponse:
            raise TimeoutError("timed out")

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        result = RealHttpClient().send("POST", "https://x/up", timeout=2)

        assert isinstance(result, Err)
        assert result.error.kind == "timeout"
        assert "2s" in result.error.message

    def test_url_error_wrapping_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_urlopen(req: urllib.request.Request, **kwargs: Any) -> _FakeResponse:
            raise urllib.error.URLError(TimeoutError("timed out"))

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        result = RealHttpClient().send("GET", "https://x/a")

        assert isinstance(result, Err)
        assert result.error.kind == "timeout"

    def test_connection_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_urlopen(req: urllib.request.Request, **kwargs: Any) -> _FakeResponse:
            raise urllib.error.URLError("connection refused")

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        result = RealHttpClient().send("GET", "https://x/a")

        assert isinstance(result, Err)
        assert result.error.kind == "transport"
        assert result.error.message == "connection refused"
        assert result.error.hint == "https://x/a"

    def test_malformed_status_line_is_transport_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fake_urlopen(req: urllib.request.Request, **kwargs: Any) -> _FakeResponse:
            raise http.client.BadStatusLine("GARBAGE")

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        result = RealHttpClient().send("POST", "https://x/up", body=b"data", timeout=5)

        assert isinstance(result, Err)
        assert result.error.kind == "transport"
        assert "BadStatusLine" in result.error.message
        assert result.error.hint == "https://x/up"

    def test_truncated_body_is_transport_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        class _TruncatedResponse(_FakeResponse):
            def read(self) -> bytes:
                raise http.client.IncompleteRead(b"{\"versionCode\"", expected=40)

        def fake_urlopen(req: urllib.request.Request, **kwargs: Any) -> _FakeResponse:
            return _TruncatedResponse(200, b"")

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        result = RealHttpClient().send("GET", "https://x/bundles")

        assert isinstance(result, Err)
        assert result.error.kind == "transport"
        assert "IncompleteRead" in result.error.message


def test_garbage_from_a_real_socket_is_transport_error() -> None:
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    port = listener.getsockname()[1]

    def reply_garbage() -> None:
        conn, _ = listener.accept()
        with conn:
            conn.recv(65536)
            conn.sendall(b"GARBAGE\r\n\r\n")

    server = threading.Thread(target=reply_garbage, daemon=True)
    server.start()
    try:
        result = RealHttpClient().send(
            "POST", f"http://127.0.0.1:{port}/upload", body=b"0123456789", timeout=5
        )
    finally:
        server.join(timeout=5)
        listener.close()

    assert isinstance(result, Err)
    assert result.error.kind == "transport"
