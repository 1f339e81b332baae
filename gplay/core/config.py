"""Typed configuration loading and access.

Configuration comes from an optional ``gplay.toml``:

    [api]
    edits_url = "https://androidpublisher.googleapis.com/androidpublisher/v3/applications"
    upload_url = "https://androidpublisher.googleapis.com/upload/androidpublisher/v3/applications"

    [defaults]
    credentials_file = "~/keys/play-service-account.json"
    package_name = "com.example.app"
    upload_timeout = 300

CLI flags and environment variables take precedence over file values
(see ``Config.with_overrides``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .errors import PlayError
from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "ApiConfig",
    "Config",
    "DefaultsConfig",
    "DEFAULT_CONFIG_FILENAME",
    "EDITS_URL",
    "UPLOAD_URL",
    "UPLOAD_TIMEOUT_SECONDS",
    "load_config",
    "resolve_config",
]

EDITS_URL = "https://androidpublisher.googleapis.com/androidpublisher/v3/applications"
UPLOAD_URL = "https://androidpublisher.googleapis.com/upload/androidpublisher/v3/applications"

UPLOAD_TIMEOUT_SECONDS = 300.0

DEFAULT_CONFIG_FILENAME = "gplay.toml"


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Base URLs of the Android Publisher API."""

    edits_url: str = EDITS_URL
    upload_url: str = UPLOAD_URL


@dataclass(frozen=True, slots=True)
class DefaultsConfig:
    """Values used when the matching CLI option is not given."""

    credentials_file: Path | None = None
    package_name: str | None = None
    upload_timeout: float = UPLOAD_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    api: ApiConfig = field(default_factory=ApiConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    no_color: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        api: StrDict = get_table(data, "api") or {}
        defaults: StrDict = get_table(data, "defaults") or {}

        cred = get_str(defaults, "credentials_file")
        timeout = get_float(defaults, "upload_timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"defaults.upload_timeout must be positive, got {timeout}")

        return cls(
            api=ApiConfig(
                edits_url=(get_str(api, "edits_url") or EDITS_URL).rstrip("/"),
                upload_url=(get_str(api, "upload_url") or UPLOAD_URL).rstrip("/"),
            ),
            defaults=DefaultsConfig(
                credentials_file=Path(cred).expanduser() if cred else None,
                package_name=get_str(defaults, "package_name"),
                upload_timeout=timeout if timeout is not None else UPLOAD_TIMEOUT_SECONDS,
            ),
        )

    def with_overrides(
        self,
        *,
        credentials_file: Path | None = None,
        package_name: str | None = None,
        no_color: bool | None = None,
    ) -> Config:
        """Return a copy where explicitly given values replace file values."""
        defaults = self.defaults
        if credentials_file is not None:
            defaults = replace(defaults, credentials_file=credentials_file.expanduser())
        if package_name:
            defaults = replace(defaults, package_name=package_name)
        return replace(
            self,
            defaults=defaults,
            no_color=self.no_color if no_color is None else no_color,
        )


def _parse_toml(path: Path) -> Result[StrDict, PlayError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(PlayError("config", "Config root must be a TOML table", hint=str(path)))
        return Ok(data)
    except FileNotFoundError:
        return Err(PlayError("config", f"Config file not found: {path}", hint=str(path)))
    except PermissionError:
        return Err(PlayError("config", f"Permission denied reading: {path}", hint=str(path)))
    except tomllib.TOMLDecodeError as e:
        return Err(PlayError("config", f"Invalid TOML syntax: {e}", hint=str(path)))
    except UnicodeDecodeError as e:
        return Err(PlayError("config", f"Error reading config: {e}", hint=str(path)))


def load_config(path: Path) -> Result[Config, PlayError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to a gplay.toml file

    Returns:
        Ok(Config) on success, Err(PlayError) with kind "config" on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(PlayError("config", f"Invalid config structure: {e}", hint=str(path)))


def resolve_config(explicit: Path | None, cwd: Path | None = None) -> Result[Config, PlayError]:
    """Load the explicit config file, else ``./gplay.toml`` if present, else defaults.

    A missing file is only an error when it was named explicitly.
    """
    if explicit is not None:
        return load_config(explicit.expanduser())

    candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    if candidate.is_file():
        return load_config(candidate)
    return Ok(Config())
