from __future__ import annotations

from pathlib import Path

import typer

from gplay import __version__
from gplay.cli._helpers import exit_on_error
from gplay.cli.context import GlobalOptions, build_context
from gplay.core.config import UPLOAD_TIMEOUT_SECONDS
from gplay.core.errors import ErrorCode
from gplay.services.driver import ListBundles, ListTracks, Upload


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Google Play Tool: list bundles and tracks, upload bundles.",
)


def _show_version(value: bool) -> None:
    # Eager, so it works without a subcommand.
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    credentials_file: Path | None = typer.Option(
        None,
        "--cred-file",
        "-c",
        metavar="JSON-FILE",
        envvar="GPLAY_CRED_FILE",
        help="Google API service account credentials file",
    ),
    package_name: str | None = typer.Option(
        None,
        "--package-name",
        "-n",
        metavar="PACKAGE-NAME",
        envvar="GPLAY_PACKAGE_NAME",
        help="Google Play package name",
    ),
    no_color: bool = typer.Option(
        False, "--no-color", envvar="NO_CLI_COLOR", help="Disable colors in output"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", metavar="TOML-FILE", help="Config file (default: ./gplay.toml)"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    ctx.obj = GlobalOptions(
        credentials_file=credentials_file,
        package_name=package_name,
        no_color=no_color,
        config_path=config_path,
    )


@app.command("list-bundles")
def list_bundles(ctx: typer.Context) -> None:
    """Lists uploaded bundle versions."""
    c = build_context(ctx)
    exit_on_error(c.driver.run(ListBundles(package_name=c.package_name)), c.console)


@app.command("list-tracks")
def list_tracks(ctx: typer.Context) -> None:
    """List available release tracks."""
    c = build_context(ctx)
    exit_on_error(c.driver.run(ListTracks(package_name=c.package_name)), c.console)


@app.command("upload")
def upload(
    ctx: typer.Context,
    bundle_file: Path = typer.Option(
        ..., "--bundle-file", "-b", metavar="AAB-FILE", help="The bundle file to upload"
    ),
    track_name: str = typer.Option(
        ..., "--track-name", "-n", metavar="NAME", help="The name of the track to add the bundle to"
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        metavar="TIMEOUT-SECS",
        min=1,
        help=f"The timeout for the upload in seconds [default: {UPLOAD_TIMEOUT_SECONDS:g}]",
    ),
) -> None:
    """Upload a new bundle and add it to a track as a draft release."""
    c = build_context(ctx)
    command = Upload(
        package_name=c.package_name,
        bundle_file=bundle_file,
        track_name=track_name,
        timeout=timeout if timeout is not None else c.config.defaults.upload_timeout,
    )
    exit_on_error(c.driver.run(command), c.console)


def main(args: list[str] | None = None) -> None:
    """Console entry point.

    Usage errors print the usage text and exit 0; only operational
    failures exit non-zero.
    """
    try:
        app(args=args, prog_name="gplay")
    except SystemExit as e:
        # Standalone mode renders usage errors itself and exits with USAGE.
        if e.code == ErrorCode.USAGE:
            raise SystemExit(int(ErrorCode.OK)) from None
        raise
