"""Edit session lifecycle.

Every mutation of a Play app happens inside an edit: it is opened, then
either committed (changes applied) or deleted (changes discarded). The two
terminal transitions are mutually exclusive; once a session is terminal the
manager refuses to act on it and sends nothing.
"""

from __future__ import annotations

from dataclasses import replace

from gplay.api.client import PublisherClient
from gplay.api.models import EditSession, EditState
from gplay.core.errors import PlayError
from gplay.core.result import Err, Ok, Result
from gplay.output.console import ConsoleProtocol


class EditSessionManager:
    def __init__(self, *, client: PublisherClient, console: ConsoleProtocol) -> None:
        self._client = client
        self._console = console

    def open(self, package_name: str) -> Result[EditSession, PlayError]:
        return self._client.insert_edit(package_name).map(
            lambda edit_id: EditSession(id=edit_id, package_name=package_name)
        )

    def commit(self, session: EditSession) -> Result[EditSession, PlayError]:
        """Apply every change made under ``session``.

        A failed commit leaves the remote session in an unknown state; it is
        returned as-is and must not be retried or deleted blindly.
        """
        guard = _require_open(session, "commit")
        if isinstance(guard, Err):
            return guard

        return self._client.commit_edit(session.package_name, session.id).map(
            lambda _: replace(session, state=EditState.COMMITTED)
        )

    def delete(self, session: EditSession) -> Result[EditSession, PlayError]:
        """Discard every change made under ``session``."""
        guard = _require_open(session, "delete")
        if isinstance(guard, Err):
            return guard

        return self._client.delete_edit(session.package_name, session.id).map(
            lambda _: replace(session, state=EditState.DELETED)
        )

    def discard(self, session: EditSession) -> EditSession:
        """Best-effort delete used for cleanup and rollback.

        A failure is reported as a warning and never escalated, so it cannot
        hide the error that triggered the cleanup. Returns the session in its
        resulting state (still OPEN if the delete failed).
        """
        result = self.delete(session)
        if isinstance(result, Err):
            self._console.warning(
                f"failed to delete edit {session.id} for {session.package_name}: "
                f"{result.error.message}"
            )
            return session
        return result.value


def _require_open(session: EditSession, action: str) -> Result[None, PlayError]:
    if session.state.is_terminal:
        return Err(
            PlayError(
                kind="invalid_state",
                message=f"cannot {action} edit {session.id}: already {session.state.value}",
            )
        )
    return Ok(None)
