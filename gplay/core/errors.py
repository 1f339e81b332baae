"""Error values and exit codes.

Operational failures are returned as ``Err(PlayError(...))``. The ``kind``
field classifies the failure so callers can branch on it without parsing
messages; ``message`` is what the user sees.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

__all__ = ["ErrorCode", "ErrorKind", "PlayError"]


ErrorKind = Literal[
    "transport",
    "timeout",
    "decode",
    "remote_api",
    "local_io",
    "auth",
    "config",
    "invalid_state",
]


@dataclass(frozen=True, slots=True)
class PlayError:
    """Canonical error payload.

    Attributes:
        kind: Failure class (connection, timeout, bad payload, API error, ...)
        message: Human-readable message. For API errors this is exactly the
            server-provided message, or the HTTP status text as a fallback.
        hint: Optional secondary line (URL, file path, remediation)
        status: HTTP status when the failure came from a response, else 0
    """

    kind: ErrorKind
    message: str
    hint: str | None = None
    status: int = 0

    def __str__(self) -> str:
        return self.message


class ErrorCode(IntEnum):
    """Process exit codes.

    USAGE is what click exits with on a command-line usage error; the
    entry point maps it back to OK, since printing usage is not an
    operational failure.
    """

    OK = 0
    FAILURE = 1
    USAGE = 2
