"""
zedext — CLI entrypoint.

Usage:
    zedext --help
    zedext search rust
    zedext install catppuccin
    zedext install catppuccin 0.2.1
    zedext list
    zedext remove catppuccin
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn

import click

from zedext import __version__
from zedext.core.config.loader import ConfigError, Settings, load_settings
from zedext.core.config.paths import ExtensionPaths, resolve_paths
from zedext.core.observability.logging_config import setup_logging
from zedext.core.reliability.retry import RetryPolicy
from zedext.core.services.downloader import Downloader, format_bytes
from zedext.core.services.http_client import HttpClient
from zedext.core.services.registry import RegistryClient

DESCRIPTION_WIDTH = 50


@click.group()
@click.version_option(version=__version__, prog_name="zedext")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    envvar="ZEDEXT_CONFIG",
    default=None,
    help="Path to config.yml (default: ~/.config/zedext/config.yml).",
)
@click.option(
    "--extensions-dir",
    type=click.Path(file_okay=False),
    envvar="ZEDEXT_HOME",
    default=None,
    help="Zed extensions directory (default: per-OS Zed data dir).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    extensions_dir: str | None,
) -> None:
    """zedext — install and manage Zed editor extensions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["extensions_dir"] = extensions_dir

    setup_logging(debug=debug, verbose=verbose, quiet=quiet)


# ── Composition root ────────────────────────────────────────────
#
# Everything below is built lazily, at most once per invocation, and
# cached in ctx.obj. Tests pre-seed ctx.obj (``obj=...``) to swap in fakes.


def _fail(message: str, as_json: bool = False) -> NoReturn:
    if as_json:
        click.echo(json.dumps({"error": message}, indent=2))
    else:
        click.secho(f"❌ {message}", fg="red")
    sys.exit(1)


def _settings(ctx: click.Context) -> Settings:
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = load_settings(ctx.obj.get("config_path"))
    return ctx.obj["settings"]


def _paths(ctx: click.Context) -> ExtensionPaths:
    if "paths" not in ctx.obj:
        override = ctx.obj.get("extensions_dir") or _settings(ctx).extensions_dir
        ctx.obj["paths"] = resolve_paths(override=override)
    return ctx.obj["paths"]


def _http_client(ctx: click.Context) -> HttpClient:
    if "http_client" not in ctx.obj:
        ctx.obj["http_client"] = HttpClient(timeout=_settings(ctx).timeout)
    return ctx.obj["http_client"]


def _registry(ctx: click.Context) -> RegistryClient:
    if "registry" not in ctx.obj:
        settings = _settings(ctx)
        ctx.obj["registry"] = RegistryClient(
            _http_client(ctx),
            api_base=settings.api_base,
            max_schema_version=settings.max_schema_version,
        )
    return ctx.obj["registry"]


def _downloader(ctx: click.Context, show_progress: bool) -> Downloader:
    if "downloader" not in ctx.obj:
        retry = _settings(ctx).retry
        ctx.obj["downloader"] = Downloader(
            _http_client(ctx),
            policy=RetryPolicy(
                max_retries=retry.max_retries,
                base_delay=retry.base_delay,
                max_delay=retry.max_delay,
            ),
            on_progress=_print_progress if show_progress else None,
        )
    return ctx.obj["downloader"]


def _print_progress(current: int, total: int) -> None:
    pct = current / total * 100
    click.echo(
        f"\r  downloading... {pct:.1f}% ({format_bytes(current)} / {format_bytes(total)})",
        nl=False,
    )
    if current >= total:
        click.echo()


def _print_table(headers: list[str], rows: list[list[str]]) -> None:
    """Left-aligned columns separated by two spaces."""
    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]
    for line in [headers, *rows]:
        click.echo("  ".join(cell.ljust(w) for cell, w in zip(line, widths)).rstrip())


def _truncate(text: str, width: int = DESCRIPTION_WIDTH) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[: width - 3] + "..."


# ── Commands ────────────────────────────────────────────────────


@cli.command()
@click.argument("extension_id")
@click.argument("version", required=False)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, extension_id: str, version: str | None, as_json: bool) -> None:
    """Install a Zed extension (optionally a specific VERSION).

    Examples:

        zedext install catppuccin

        zedext install html 0.1.2
    """
    from zedext.core.use_cases.install import install_extension

    quiet = as_json or ctx.obj.get("quiet", False)

    try:
        paths = _paths(ctx)
        registry = _registry(ctx)
        downloader = _downloader(ctx, show_progress=not quiet)
    except ConfigError as e:
        _fail(str(e), as_json)

    if not quiet:
        click.echo(f"Installing {extension_id!r}...")

    result = install_extension(
        extension_id,
        version,
        paths=paths,
        registry=registry,
        downloader=downloader,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.status == "failed":
            sys.exit(1)
        return

    if result.status == "failed":
        _fail(f"install {extension_id}: {result.error}")

    for warning in result.warnings:
        click.secho(f"⚠️  warning: {warning}", fg="yellow")

    click.secho(f"✅ Successfully installed {result.name} v{result.version}", fg="green")
    if ctx.obj.get("verbose"):
        click.echo(f"   {result.install_dir}")


@cli.command()
@click.argument("extension_id")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def remove(ctx: click.Context, extension_id: str, as_json: bool) -> None:
    """Remove an installed Zed extension."""
    from zedext.core.use_cases.remove import remove_extension

    try:
        paths = _paths(ctx)
    except ConfigError as e:
        _fail(str(e), as_json)

    if not as_json and not ctx.obj.get("quiet"):
        click.echo(f"Removing extension {extension_id!r}...")

    result = remove_extension(extension_id, paths=paths)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.status == "failed":
            sys.exit(1)
        return

    if result.status == "failed":
        _fail(str(result.error))

    for warning in result.warnings:
        click.secho(f"⚠️  warning: {warning}", fg="yellow")

    click.secho(f"✅ Successfully removed {extension_id}", fg="green")


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_command(ctx: click.Context, as_json: bool) -> None:
    """List installed Zed extensions."""
    from zedext.core.use_cases.listing import list_installed

    try:
        paths = _paths(ctx)
    except ConfigError as e:
        _fail(str(e), as_json)

    result = list_installed(paths=paths)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        _fail(result.error)

    if not result.extensions:
        click.echo("No extensions installed (via index.json).")
        if result.unindexed_dirs:
            click.echo()
            click.echo("Directories found in installed/:")
            for name in result.unindexed_dirs:
                click.echo(f"  {name}")
        return

    _print_table(
        ["ID", "NAME", "VERSION", "DEV"],
        [[e.id, e.name, e.version, "true" if e.dev else "false"] for e in result.extensions],
    )


@cli.command()
@click.argument("query")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def search(ctx: click.Context, query: str, as_json: bool) -> None:
    """Search for Zed extensions in the registry."""
    from zedext.core.use_cases.search import search_registry

    try:
        registry = _registry(ctx)
    except ConfigError as e:
        _fail(str(e), as_json)

    if not as_json and not ctx.obj.get("quiet"):
        click.echo(f"Searching for {query!r}...")
        click.echo()

    result = search_registry(query, registry=registry)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        _fail(result.error)

    if not result.entries:
        click.echo("No extensions found.")
        return

    _print_table(
        ["ID", "NAME", "VERSION", "DOWNLOADS", "DESCRIPTION"],
        [
            [e.id, e.name, e.version, str(e.download_count), _truncate(e.description)]
            for e in result.entries
        ],
    )


if __name__ == "__main__":
    cli()
