"""Bearer tokens for the Android Publisher API.

The token provider is an external collaborator: given a list of OAuth
scopes, it produces a bearer token string or an ``auth`` error. The
production provider exchanges a service-account key file for a token with
google-auth.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from gplay.core.errors import PlayError
from gplay.core.result import Err, Ok, Result

ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"


@runtime_checkable
class TokenProvider(Protocol):
    def get_token(self, scopes: Sequence[str]) -> Result[str, PlayError]:
        """Return a bearer token valid for ``scopes``."""
        ...


class ServiceAccountTokenProvider:
    """Token provider backed by a service-account JSON key file."""

    def __init__(self, credentials_file: Path) -> None:
        self.credentials_file = credentials_file

    def get_token(self, scopes: Sequence[str]) -> Result[str, PlayError]:
        # Import lazily: google-auth pulls in requests and cryptography.
        from google.auth.exceptions import GoogleAuthError
        from google.auth.transport.requests import Request
        from google.oauth2 import service_account

        path = self.credentials_file
        try:
            credentials = service_account.Credentials.from_service_account_file(
                str(path), scopes=list(scopes)
            )
        except FileNotFoundError:
            return Err(
                PlayError(kind="auth", message=f"Credentials file not found: {path}")
            )
        except (OSError, ValueError) as e:
            return Err(
                PlayError(
                    kind="auth",
                    message=f"Invalid service account credentials: {e}",
                    hint=str(path),
                )
            )

        try:
            credentials.refresh(Request())
        except GoogleAuthError as e:
            return Err(
                PlayError(
                    kind="auth",
                    message=f"Unable to obtain OAuth token: {e}",
                    hint=str(path),
                )
            )

        token = credentials.token
        if not token:
            return Err(PlayError(kind="auth", message="OAuth token response was empty"))
        return Ok(str(token))


class StaticTokenProvider:
    """Provider returning a fixed token (tests, pre-fetched tokens)."""

    def __init__(self, token: str) -> None:
        self.token = token
        self.requested: list[tuple[str, ...]] = []

    def get_token(self, scopes: Sequence[str]) -> Result[str, PlayError]:
        self.requested.append(tuple(scopes))
        return Ok(self.token)
