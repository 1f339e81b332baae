"""Wire shapes of the Android Publisher edits API.

Parsers take an untyped JSON value and return ``None`` when the shape does
not match; the response layer turns that into a decode error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from gplay.core.structured import (
    StrDict,
    as_obj_list,
    as_str_dict,
    get_int,
    get_list,
    get_str,
    get_table,
)

ReleaseStatus = Literal["draft", "inProgress", "halted", "completed"]


class EditState(Enum):
    OPEN = "open"
    COMMITTED = "committed"
    DELETED = "deleted"

    @property
    def is_terminal(self) -> bool:
        return self is not EditState.OPEN


@dataclass(frozen=True, slots=True)
class EditSession:
    """A server-side edit, owned by the command that opened it."""

    id: str
    package_name: str
    state: EditState = EditState.OPEN


@dataclass(frozen=True, slots=True)
class Bundle:
    version_code: int
    sha256: str

    def describe(self) -> str:
        return f"Version {self.version_code} [{self.sha256}]"


@dataclass(frozen=True, slots=True)
class Release:
    # Kept as str: the service may send statuses outside ReleaseStatus.
    status: str
    version_codes: tuple[str, ...] | None = None

    def to_json(self) -> StrDict:
        out: StrDict = {"status": self.status}
        if self.version_codes is not None:
            out["versionCodes"] = list(self.version_codes)
        return out


@dataclass(frozen=True, slots=True)
class Track:
    name: str
    releases: tuple[Release, ...] = ()

    def to_json(self) -> StrDict:
        return {"track": self.name, "releases": [r.to_json() for r in self.releases]}


DRAFT: ReleaseStatus = "draft"


def draft_track(name: str, version_code: int) -> Track:
    """A track whose only release is a draft containing ``version_code``."""
    return Track(
        name=name,
        releases=(Release(status=DRAFT, version_codes=(str(version_code),)),),
    )


def parse_edit_id(obj: object) -> str | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    return get_str(data, "id")


def parse_bundle(obj: object) -> Bundle | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    version_code = get_int(data, "versionCode")
    sha256 = get_str(data, "sha256")
    if version_code is None or sha256 is None:
        return None
    return Bundle(version_code=version_code, sha256=sha256)


def parse_bundles_list(obj: object) -> list[Bundle] | None:
    """Parse ``{bundles: [...]}``. An edit with no bundles omits the key."""
    data = as_str_dict(obj)
    if data is None:
        return None
    if "bundles" not in data:
        return []
    raw = get_list(data, "bundles")
    if raw is None:
        return None

    bundles: list[Bundle] = []
    for item in raw:
        bundle = parse_bundle(item)
        if bundle is None:
            return None
        bundles.append(bundle)
    return bundles


def parse_release(obj: object) -> Release | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    status = get_str(data, "status")
    if status is None:
        return None

    codes: tuple[str, ...] | None = None
    if "versionCodes" in data:
        raw = get_list(data, "versionCodes")
        if raw is None:
            return None
        parsed: list[str] = []
        for code in raw:
            if isinstance(code, bool) or not isinstance(code, (str, int)):
                return None
            parsed.append(str(code))
        codes = tuple(parsed)
    return Release(status=status, version_codes=codes)


def parse_track(obj: object) -> Track | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    name = get_str(data, "track")
    if name is None:
        return None

    releases: list[Release] = []
    for item in get_list(data, "releases") or []:
        release = parse_release(item)
        if release is None:
            return None
        releases.append(release)
    return Track(name=name, releases=tuple(releases))


def parse_tracks_list(obj: object) -> list[Track] | None:
    data = as_str_dict(obj)
    if data is None:
        return None
    if "tracks" not in data:
        return []
    raw = as_obj_list(data.get("tracks"))
    if raw is None:
        return None

    tracks: list[Track] = []
    for item in raw:
        track = parse_track(item)
        if track is None:
            return None
        tracks.append(track)
    return tracks


def parse_error_message(obj: object) -> str | None:
    """Extract ``error.message`` from an ``{error: {message}}`` body."""
    data = as_str_dict(obj)
    if data is None:
        return None
    error = get_table(data, "error")
    if error is None:
        return None
    # Surfaced verbatim; only a blank message falls back to the status text.
    message = error.get("message")
    if not isinstance(message, str) or not message.strip():
        return None
    return message
