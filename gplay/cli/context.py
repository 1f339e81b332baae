from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from gplay.api.http import HttpClient, RealHttpClient
from gplay.core.config import Config, resolve_config
from gplay.core.errors import ErrorCode, PlayError
from gplay.core.result import Err
from gplay.output.console import ConsoleProtocol, RichConsole
from gplay.services.auth import ServiceAccountTokenProvider, TokenProvider
from gplay.services.driver import ToolDriver


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the subcommand, stored on ``typer.Context.obj``."""

    credentials_file: Path | None = None
    package_name: str | None = None
    no_color: bool = False
    config_path: Path | None = None


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    package_name: str
    driver: ToolDriver


# Factories are module-level so tests can swap them out.
def make_console(no_color: bool) -> ConsoleProtocol:
    return RichConsole(no_color=no_color)


def make_token_provider(credentials_file: Path) -> TokenProvider:
    return ServiceAccountTokenProvider(credentials_file)


def make_http_client() -> HttpClient:
    from gplay import __version__

    return RealHttpClient(user_agent=f"gplay/{__version__}")


def _fail(console: ConsoleProtocol, error: PlayError) -> typer.Exit:
    console.error(error.message)
    if error.hint:
        console.hint(error.hint)
    return typer.Exit(code=int(ErrorCode.FAILURE))


def build_context(ctx: typer.Context) -> CLIContext:
    options = ctx.obj if isinstance(ctx.obj, GlobalOptions) else GlobalOptions()

    loaded = resolve_config(options.config_path)
    if isinstance(loaded, Err):
        raise _fail(make_console(options.no_color), loaded.error)

    config = loaded.value.with_overrides(
        credentials_file=options.credentials_file,
        package_name=options.package_name,
        no_color=options.no_color or None,
    )
    console = make_console(config.no_color)

    credentials_file = config.defaults.credentials_file
    if credentials_file is None:
        raise _fail(
            console,
            PlayError(
                kind="config",
                message="missing service account credentials file",
                hint="pass --cred-file, set GPLAY_CRED_FILE, or defaults.credentials_file",
            ),
        )

    package_name = config.defaults.package_name
    if package_name is None:
        raise _fail(
            console,
            PlayError(
                kind="config",
                message="missing package name",
                hint="pass --package-name, set GPLAY_PACKAGE_NAME, or defaults.package_name",
            ),
        )

    driver = ToolDriver(
        console=console,
        token_provider=make_token_provider(credentials_file),
        http_factory=make_http_client,
        config=config,
    )
    return CLIContext(config=config, console=console, package_name=package_name, driver=driver)
