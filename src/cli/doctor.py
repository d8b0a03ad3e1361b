"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.browser import browser_available
from adapters.http_client import build_async_client
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.models import Flavor
from core.services.assets import REDOC_BUNDLE, SWAGGER_BUNDLE, asset_url, resolve_asset_prefix

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_BUNDLES: dict[Flavor, str] = {
    Flavor.REDOC: REDOC_BUNDLE,
    Flavor.SWAGGER: SWAGGER_BUNDLE,
}


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.head(url)
        return response.status_code < 400, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


async def _check_bundles(settings: AppSettings) -> dict[Flavor, tuple[str, bool, str]]:
    urls = {
        flavor: asset_url(resolve_asset_prefix(settings.source_url, flavor), bundle)
        for flavor, bundle in _BUNDLES.items()
    }
    results = await asyncio.gather(*(_check_http(url, settings) for url in urls.values()))
    return {flavor: (urls[flavor], ok, detail) for flavor, (ok, detail) in zip(urls, results)}


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="docserve doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Config file", "OK" if get_user_env_file().exists() else "OPTIONAL", str(get_user_env_file()))
    if settings.source_url:
        table.add_row("Asset prefix", "OK", settings.source_url)
    else:
        table.add_row("Asset prefix", "DEFAULT", "Public CDNs (unpkg / jsdelivr)")
    table.add_row("Log level", "OK", settings.log_level)

    # Connectivity (best-effort)
    all_ok = True
    for flavor, (url, ok, detail) in asyncio.run(_check_bundles(settings)).items():
        all_ok = all_ok and ok
        table.add_row(f"{flavor.label()} bundle", "OK" if ok else "FAIL", f"{url} ({detail})")

    ok_browser, detail_browser = browser_available()
    table.add_row("Browser", "OK" if ok_browser else "FAIL", detail_browser)

    _console.print(table)

    if not all_ok:
        _console.print(
            "\n[yellow]Note:[/yellow] UI assets are unreachable; point `-S/--source_url` "
            "(or `doctor set-source-url`) to a reachable mirror."
        )
    if not ok_browser:
        _console.print("[yellow]Note:[/yellow] No browser found; use `serve --no-open`.")


@app.command(name="set-source-url")
def set_source_url(
    url: str = typer.Argument(..., help="Prefix the UI assets are downloaded from."),
) -> None:
    """Store a default asset prefix in the user config .env."""

    url = url.strip()
    if not url:
        raise typer.BadParameter("url must not be empty")

    env_path = write_user_env_vars({"DOCSERVE_SOURCE_URL": url})
    _console.print(f"[green]Saved asset prefix to:[/green] {env_path}")
