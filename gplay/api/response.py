"""Response interpretation.

One rule applies to every Play API call:

- success status: decode the body as the expected shape, else a decode error
- any other status: surface ``error.message`` from an ``{error: {message}}``
  body, falling back to the bare status text when the body has no such
  message. Exactly one of the two is used as the error message.

``interpret_empty`` is the variant for calls without a meaningful success
body (commit, delete): success is decided by the status alone.
"""

from __future__ import annotations

import json
from collections.abc import Callable

from gplay.api.http import HttpResponse
from gplay.api.models import parse_error_message
from gplay.core.errors import PlayError
from gplay.core.result import Err, Ok, Result


__all__ = ["api_error", "decode_json", "interpret_empty", "interpret_json"]


def decode_json(body: bytes) -> object | None:
    """Decode a JSON body; None if it is empty or not valid JSON."""
    if not body:
        return None
    try:
        return json.loads(body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def api_error(response: HttpResponse, *, url: str | None = None) -> PlayError:
    """Build the error for a non-success response."""
    message = parse_error_message(decode_json(response.body))
    return PlayError(
        kind="remote_api",
        message=message if message is not None else response.status_text,
        hint=url,
        status=response.status,
    )


def interpret_json[T](
    response: HttpResponse,
    parse: Callable[[object], T | None],
    *,
    expected: str,
    url: str | None = None,
) -> Result[T, PlayError]:
    """Decode a success body with ``parse`` or surface the API error.

    Args:
        response: Completed exchange
        parse: Shape parser returning None on mismatch
        expected: Name of the expected shape, used in decode errors
        url: Request URL, attached as hint
    """
    if not response.ok:
        return Err(api_error(response, url=url))

    try:
        obj: object = json.loads(response.body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return Err(
            PlayError(
                kind="decode",
                message=f"invalid JSON in {expected} response: {e}",
                hint=url,
                status=response.status,
            )
        )

    value = parse(obj)
    if value is None:
        return Err(
            PlayError(
                kind="decode",
                message=f"unexpected {expected} payload",
                hint=url,
                status=response.status,
            )
        )
    return Ok(value)


def interpret_empty(response: HttpResponse, *, url: str | None = None) -> Result[None, PlayError]:
    """Succeed on a success status, ignoring the body."""
    if response.ok:
        return Ok(None)
    return Err(api_error(response, url=url))
