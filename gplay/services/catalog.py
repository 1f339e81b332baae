"""Read-only catalog listings.

The API only exposes bundles and tracks through an edit, so each listing
opens a session, reads, and deletes the session again without mutating
anything. The delete is attempted whatever the outcome of the read.
"""

from __future__ import annotations

from collections.abc import Callable

from gplay.api.client import PublisherClient
from gplay.api.models import Bundle, EditSession, Track
from gplay.core.errors import PlayError
from gplay.core.result import Err, Ok, Result
from gplay.output.console import ConsoleProtocol
from gplay.services.edits import EditSessionManager


class CatalogReader:
    def __init__(
        self,
        *,
        client: PublisherClient,
        edits: EditSessionManager,
        console: ConsoleProtocol,
    ) -> None:
        self._client = client
        self._edits = edits
        self._console = console

    def list_bundles(self, package_name: str) -> Result[list[Bundle], PlayError]:
        """Print one ``Version <code> [<sha256>]`` line per uploaded bundle."""

        def fetch(session: EditSession) -> Result[list[Bundle], PlayError]:
            result = self._client.list_bundles(session.package_name, session.id)
            if isinstance(result, Ok):
                for bundle in result.value:
                    self._console.output(bundle.describe())
            return result

        return self._within_edit(package_name, fetch)

    def list_tracks(self, package_name: str) -> Result[list[Track], PlayError]:
        """Print one ``Track '<name>'`` line per track."""

        def fetch(session: EditSession) -> Result[list[Track], PlayError]:
            result = self._client.list_tracks(session.package_name, session.id)
            if isinstance(result, Ok):
                for track in result.value:
                    self._console.output(f"Track '{track.name}'")
            return result

        return self._within_edit(package_name, fetch)

    def _within_edit[T](
        self,
        package_name: str,
        fetch: Callable[[EditSession], Result[T, PlayError]],
    ) -> Result[T, PlayError]:
        opened = self._edits.open(package_name)
        if isinstance(opened, Err):
            return opened

        session = opened.value
        try:
            return fetch(session)
        finally:
            self._edits.discard(session)
