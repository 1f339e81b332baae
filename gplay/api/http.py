"""HTTP transport for the Play API.

This module provides:
- HttpResponse: status, reason and raw body of a completed exchange
- HttpClient: Protocol for sending requests (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Scripted implementation for testing

A response with a non-success status is still a completed exchange: it is
returned as ``Ok(HttpResponse)`` so the caller can read the error body.
Only failures to complete the exchange (connection, timeout) are ``Err``.
"""

from __future__ import annotations

import http.client
import json
import ssl
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Protocol, runtime_checkable

from gplay.core.errors import PlayError
from gplay.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "HttpResponse",
    "MockHttpClient",
    "RealHttpClient",
    "RecordedCall",
]


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """A completed HTTP exchange.

    Attributes:
        status: HTTP status code
        reason: Status text as sent by the server (may be empty)
        body: Raw response body
    """

    status: int
    reason: str = ""
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def status_text(self) -> str:
        """Status line text, e.g. ``404 Not Found``."""
        reason = self.reason
        if not reason:
            try:
                reason = HTTPStatus(self.status).phrase
            except ValueError:
                reason = ""
        return f"{self.status} {reason}".strip()


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations.

    Allows injecting a scripted client in tests so no real network call is
    ever made.
    """

    def send(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[HttpResponse, PlayError]:
        """Send a request and wait for the full response.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            url: Absolute URL
            body: Request body, if any
            headers: Extra request headers
            timeout: Seconds to wait before failing; None waits on the
                transport's own limits

        Returns:
            Ok with the response (any status), or Err with kind
            "transport" / "timeout"
        """
        ...


class RealHttpClient:
    """HTTP client using urllib with system certificates."""

    def __init__(self, user_agent: str = "gplay") -> None:
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def send(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[HttpResponse, PlayError]:
        all_headers = {"User-Agent": self.user_agent}
        if headers:
            all_headers.update(headers)

        req = urllib.request.Request(url, data=body, headers=all_headers, method=method)
        # urlopen only accepts a number; omit it to keep the socket default.
        kwargs: dict[str, float] = {} if timeout is None else {"timeout": timeout}
        try:
            with urllib.request.urlopen(req, context=self._ssl_context, **kwargs) as response:
                return Ok(
                    HttpResponse(
                        status=response.status,
                        reason=response.reason or "",
                        body=response.read(),
                    )
                )
        except urllib.error.HTTPError as e:
            # Non-2xx: still a response, keep the body for error decoding.
            try:
                error_body = e.read()
            except (OSError, http.client.HTTPException):
                error_body = b""
            return Ok(HttpResponse(status=e.code, reason=str(e.reason or ""), body=error_body))
        except urllib.error.URLError as e:
            if isinstance(e.reason, TimeoutError):
                return Err(_timeout_error(url, timeout))
            return Err(PlayError(kind="transport", message=str(e.reason), hint=url))
        except TimeoutError:
            return Err(_timeout_error(url, timeout))
        except http.client.HTTPException as e:
            # Malformed status line, truncated body: the exchange never completed.
            return Err(
                PlayError(kind="transport", message=f"{type(e).__name__}: {e}", hint=url)
            )
        except (ValueError, OSError) as e:
            return Err(PlayError(kind="transport", message=str(e), hint=url))


def _timeout_error(url: str, timeout: float | None) -> PlayError:
    if timeout is None:
        return PlayError(kind="timeout", message="Request timed out", hint=url)
    return PlayError(kind="timeout", message=f"Request timed out after {timeout:g}s", hint=url)


@dataclass(frozen=True, slots=True)
class RecordedCall:
    """One request seen by MockHttpClient."""

    method: str
    url: str
    body: bytes | None
    headers: dict[str, str]
    timeout: float | None


def _empty_calls() -> list[RecordedCall]:
    return []


@dataclass
class MockHttpClient:
    """Scripted HTTP client for testing.

    Responses are queued per ``(method, url)``; each request pops the next
    one, and the last one is reused once the queue is down to a single
    entry. Unscripted requests get a 404.

    Usage:
        http = MockHttpClient()
        http.add("POST", f"{EDITS_URL}/com.example.app/edits", json_body={"id": "e1"})
        http.add("DELETE", f"{EDITS_URL}/com.example.app/edits/e1", status=204)
    """

    calls: list[RecordedCall] = field(default_factory=_empty_calls)
    _routes: dict[tuple[str, str], list[Result[HttpResponse, PlayError]]] = field(
        default_factory=dict
    )

    def add(
        self,
        method: str,
        url: str,
        *,
        status: int = 200,
        json_body: object = None,
        body: bytes = b"",
        reason: str = "",
    ) -> None:
        """Queue a response for ``method url``."""
        payload = json.dumps(json_body).encode("utf-8") if json_body is not None else body
        self._queue(method, url).append(Ok(HttpResponse(status=status, reason=reason, body=payload)))

    def add_error(self, method: str, url: str, error: PlayError) -> None:
        """Queue a transport-level failure (connection error, timeout)."""
        self._queue(method, url).append(Err(error))

    def _queue(self, method: str, url: str) -> list[Result[HttpResponse, PlayError]]:
        return self._routes.setdefault((method.upper(), url), [])

    def send(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[HttpResponse, PlayError]:
        self.calls.append(
            RecordedCall(
                method=method.upper(),
                url=url,
                body=body,
                headers=dict(headers or {}),
                timeout=timeout,
            )
        )
        queue = self._routes.get((method.upper(), url))
        if not queue:
            return Ok(HttpResponse(status=404, reason="Not Found", body=b""))
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    # Test helper methods

    def calls_to(self, method: str, suffix: str = "") -> list[RecordedCall]:
        """Calls with the given method whose URL path ends with ``suffix``."""
        return [
            c
            for c in self.calls
            if c.method == method.upper() and c.url.split("?", 1)[0].endswith(suffix)
        ]
