"""Command dispatch.

``ToolDriver`` owns the console and the token provider. For each invocation
it resolves a bearer token once, then runs exactly one command.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gplay.api.client import PublisherClient
from gplay.api.http import HttpClient
from gplay.core.config import Config, UPLOAD_TIMEOUT_SECONDS
from gplay.core.errors import PlayError
from gplay.core.result import Err, Ok, Result
from gplay.output.console import ConsoleProtocol
from gplay.services.auth import ANDROID_PUBLISHER_SCOPE, TokenProvider
from gplay.services.catalog import CatalogReader
from gplay.services.edits import EditSessionManager
from gplay.services.upload import BundleUploadWorkflow, UploadRequest


@dataclass(frozen=True, slots=True)
class ListBundles:
    package_name: str


@dataclass(frozen=True, slots=True)
class ListTracks:
    package_name: str


@dataclass(frozen=True, slots=True)
class Upload:
    package_name: str
    bundle_file: Path
    track_name: str
    timeout: float = UPLOAD_TIMEOUT_SECONDS


Command = ListBundles | ListTracks | Upload


class ToolDriver:
    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        token_provider: TokenProvider,
        http_factory: Callable[[], HttpClient],
        config: Config | None = None,
    ) -> None:
        self._console = console
        self._token_provider = token_provider
        self._http_factory = http_factory
        self._config = config or Config()

    def run(self, command: Command) -> Result[None, PlayError]:
        self._console.output("Requesting OAuth token with Android Publisher scope")
        token = self._token_provider.get_token([ANDROID_PUBLISHER_SCOPE])
        if isinstance(token, Err):
            return token

        client = PublisherClient(
            http=self._http_factory(),
            token=token.value,
            edits_url=self._config.api.edits_url,
            upload_url=self._config.api.upload_url,
        )
        edits = EditSessionManager(client=client, console=self._console)

        match command:
            case ListBundles(package_name=package_name):
                reader = CatalogReader(client=client, edits=edits, console=self._console)
                listed = reader.list_bundles(package_name)
                if isinstance(listed, Err):
                    return listed
            case ListTracks(package_name=package_name):
                reader = CatalogReader(client=client, edits=edits, console=self._console)
                tracks = reader.list_tracks(package_name)
                if isinstance(tracks, Err):
                    return tracks
            case Upload():
                workflow = BundleUploadWorkflow(client=client, edits=edits, console=self._console)
                uploaded = workflow.run(
                    UploadRequest(
                        package_name=command.package_name,
                        bundle_file=command.bundle_file,
                        track_name=command.track_name,
                        timeout=command.timeout,
                    )
                )
                if isinstance(uploaded, Err):
                    return uploaded

        return Ok(None)
