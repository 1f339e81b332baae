"""Android Publisher edits API client.

One method per endpoint. Each method sends exactly one request through the
injected ``HttpClient`` and interprets the response; none of them retries.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import quote

from gplay import __version__
from gplay.api.http import HttpClient, HttpResponse
from gplay.api.models import (
    Bundle,
    Track,
    parse_bundle,
    parse_bundles_list,
    parse_edit_id,
    parse_track,
    parse_tracks_list,
)
from gplay.api.response import interpret_empty, interpret_json
from gplay.core.config import EDITS_URL, UPLOAD_URL
from gplay.core.errors import PlayError
from gplay.core.result import Err, Result

__all__ = ["PublisherClient"]


def _seg(value: str) -> str:
    return quote(value, safe="")


@dataclass(frozen=True, slots=True)
class PublisherClient:
    """Authenticated access to the edits resources of one service account.

    Attributes:
        http: Transport
        token: OAuth bearer token
        edits_url: Base URL for edit resources
        upload_url: Base URL for media uploads
    """

    http: HttpClient
    token: str
    edits_url: str = EDITS_URL
    upload_url: str = UPLOAD_URL

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "User-Agent": f"gplay/{__version__}",
        }
        if extra:
            headers.update(extra)
        return headers

    def _send(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Result[HttpResponse, PlayError]:
        return self.http.send(
            method, url, body=body, headers=self._headers(headers), timeout=timeout
        )

    def edit_url(self, package_name: str, edit_id: str | None = None) -> str:
        base = f"{self.edits_url}/{_seg(package_name)}/edits"
        if edit_id is None:
            return base
        return f"{base}/{_seg(edit_id)}"

    # -- edits ---------------------------------------------------------------

    def insert_edit(self, package_name: str) -> Result[str, PlayError]:
        """Open an edit; returns its id."""
        url = self.edit_url(package_name)
        sent = self._send(
            "POST", url, body=b"{}", headers={"Content-Type": "application/json"}
        )
        if isinstance(sent, Err):
            return sent
        return interpret_json(sent.value, parse_edit_id, expected="edit", url=url)

    def commit_edit(self, package_name: str, edit_id: str) -> Result[None, PlayError]:
        url = f"{self.edit_url(package_name, edit_id)}:commit"
        sent = self._send("POST", url, body=b"", headers={"Content-Length": "0"})
        if isinstance(sent, Err):
            return sent
        return interpret_empty(sent.value, url=url)

    def delete_edit(self, package_name: str, edit_id: str) -> Result[None, PlayError]:
        url = self.edit_url(package_name, edit_id)
        sent = self._send("DELETE", url)
        if isinstance(sent, Err):
            return sent
        return interpret_empty(sent.value, url=url)

    # -- bundles -------------------------------------------------------------

    def list_bundles(self, package_name: str, edit_id: str) -> Result[list[Bundle], PlayError]:
        url = f"{self.edit_url(package_name, edit_id)}/bundles"
        sent = self._send("GET", url)
        if isinstance(sent, Err):
            return sent
        return interpret_json(sent.value, parse_bundles_list, expected="bundles list", url=url)

    def upload_bundle(
        self,
        package_name: str,
        edit_id: str,
        data: bytes,
        *,
        timeout: float | None,
    ) -> Result[Bundle, PlayError]:
        """Upload raw bundle bytes into the edit."""
        url = (
            f"{self.upload_url}/{_seg(package_name)}/edits/{_seg(edit_id)}"
            "/bundles?uploadType=media"
        )
        sent = self._send(
            "POST",
            url,
            body=data,
            headers={
                "Content-Type": "application/octet-stream",
                "Content-Length": str(len(data)),
            },
            timeout=timeout,
        )
        if isinstance(sent, Err):
            return sent
        return interpret_json(sent.value, parse_bundle, expected="bundle", url=url)

    # -- tracks --------------------------------------------------------------

    def list_tracks(self, package_name: str, edit_id: str) -> Result[list[Track], PlayError]:
        url = f"{self.edit_url(package_name, edit_id)}/tracks"
        sent = self._send("GET", url)
        if isinstance(sent, Err):
            return sent
        return interpret_json(sent.value, parse_tracks_list, expected="tracks list", url=url)

    def update_track(
        self, package_name: str, edit_id: str, track: Track
    ) -> Result[Track, PlayError]:
        """Replace the releases of ``track.name`` with ``track.releases``."""
        url = f"{self.edit_url(package_name, edit_id)}/tracks/{_seg(track.name)}"
        sent = self._send(
            "PUT",
            url,
            body=json.dumps(track.to_json()).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
        if isinstance(sent, Err):
            return sent
        return interpret_json(sent.value, parse_track, expected="track", url=url)
