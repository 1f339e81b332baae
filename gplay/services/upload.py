"""Bundle upload workflow.

Stages, in order:

    OPENED -> UPLOADED -> TRACK_ASSIGNED -> COMMITTED

with DELETED as the absorbing failure state. The sequence is all-or-nothing:
if reading the file, uploading it, or assigning it to the track fails, the
edit is deleted before the original error is returned (or the exception
re-raised). A failed commit is returned as-is, without a delete.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from gplay.api.client import PublisherClient
from gplay.api.models import Bundle, EditSession, Track, draft_track
from gplay.core.config import UPLOAD_TIMEOUT_SECONDS
from gplay.core.errors import PlayError
from gplay.core.result import Err, Ok, Result
from gplay.output.console import ConsoleProtocol
from gplay.services.edits import EditSessionManager


class UploadStage(Enum):
    OPENED = "opened"
    UPLOADED = "uploaded"
    TRACK_ASSIGNED = "track_assigned"
    COMMITTED = "committed"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class UploadRequest:
    package_name: str
    bundle_file: Path
    track_name: str
    timeout: float = UPLOAD_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class UploadOutcome:
    session: EditSession
    bundle: Bundle
    track: Track
    stage: UploadStage = UploadStage.COMMITTED


@dataclass(frozen=True, slots=True)
class _Staged:
    """Uploaded and assigned, waiting for commit."""

    bundle: Bundle
    track: Track


def read_bundle_file(path: Path) -> Result[bytes, PlayError]:
    try:
        return Ok(path.read_bytes())
    except FileNotFoundError:
        return Err(PlayError(kind="local_io", message=f"Bundle file not found: {path}"))
    except IsADirectoryError:
        return Err(PlayError(kind="local_io", message=f"Bundle path is a directory: {path}"))
    except PermissionError:
        return Err(PlayError(kind="local_io", message=f"Permission denied reading: {path}"))
    except OSError as e:
        return Err(PlayError(kind="local_io", message=f"Unable to read bundle file: {e}"))


class BundleUploadWorkflow:
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
        self.stage: UploadStage | None = None

    def run(self, request: UploadRequest) -> Result[UploadOutcome, PlayError]:
        """Upload ``request.bundle_file`` and publish it as a draft on the track."""
        opened = self._edits.open(request.package_name)
        if isinstance(opened, Err):
            # No session yet: nothing to clean up.
            return opened
        session = opened.value
        self.stage = UploadStage.OPENED

        try:
            staged = self._stage(session, request)
        except Exception:
            self._roll_back(session)
            raise
        if isinstance(staged, Err):
            self._roll_back(session)
            return staged

        self._console.output("Committing upload")
        committed = self._edits.commit(session)
        if isinstance(committed, Err):
            return committed

        self.stage = UploadStage.COMMITTED
        return Ok(
            UploadOutcome(
                session=committed.value,
                bundle=staged.value.bundle,
                track=staged.value.track,
            )
        )

    def _roll_back(self, session: EditSession) -> None:
        self._edits.discard(session)
        self.stage = UploadStage.DELETED

    def _stage(self, session: EditSession, request: UploadRequest) -> Result[_Staged, PlayError]:
        # The file is read only once the edit exists, so a read failure
        # goes through the same rollback as a failed request.
        data = read_bundle_file(request.bundle_file)
        if isinstance(data, Err):
            return data

        self._console.output(
            f"Read bundle file '{request.bundle_file}' ({len(data.value)} bytes), uploading..."
        )
        uploaded = self._client.upload_bundle(
            session.package_name, session.id, data.value, timeout=request.timeout
        )
        if isinstance(uploaded, Err):
            return uploaded

        bundle = uploaded.value
        self.stage = UploadStage.UPLOADED
        self._console.output(f"{bundle.describe()} uploaded")

        assigned = self._client.update_track(
            session.package_name,
            session.id,
            draft_track(request.track_name, bundle.version_code),
        )
        if isinstance(assigned, Err):
            return assigned

        self.stage = UploadStage.TRACK_ASSIGNED
        return Ok(_Staged(bundle=bundle, track=assigned.value))
