"""CLI principal (Typer).

Comandos:
- `serve SPEC`: sirve la spec y, opcionalmente, una UI (ReDoc/Swagger UI).
- `doctor ...`: diagnósticos del entorno y configuración persistente.
"""

from __future__ import annotations

import logging

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.browser import SystemBrowserLauncher
from adapters.http_server import ServerHandle
from cli import doctor
from cli.ui_components import build_routes_table, build_serving_panel, print_banner
from core.config import AppSettings
from core.domain.errors import DocServeError
from core.domain.models import Flavor, ServeConfig
from core.services.serve_pipeline import PreparedServer, ServeHooks, run_serve

app = typer.Typer(
    no_args_is_help=True,
    help="Serve a Swagger/OpenAPI specification with a browsable docs UI.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def serve(
    spec: str = typer.Argument(..., help="Path or URL of the specification to serve."),
    base_path: str = typer.Option("", "--base-path", help="The base path to serve the spec and UI at."),
    flavor: Flavor = typer.Option(
        Flavor.REDOC,
        "--flavor",
        "-F",
        case_sensitive=False,
        help="The flavor of docs, can be swagger or redoc.",
    ),
    doc_url: str = typer.Option(
        "",
        "--doc-url",
        help="Override the url which takes a url query param to render the doc ui.",
    ),
    no_open: bool = typer.Option(False, "--no-open", help="Don't open the browser to show the url."),
    no_ui: bool = typer.Option(False, "--no-ui", help="Only serve the spec, without a docs UI."),
    flatten: bool = typer.Option(False, "--flatten", help="Flatten the spec before serving it."),
    port: int = typer.Option(0, "--port", "-p", envvar="PORT", help="The port to serve this site."),
    host: str = typer.Option(
        "0.0.0.0",
        "--host",
        envvar="HOST",
        help="The interface to serve this site.",
    ),
    path: str = typer.Option("docs", "--path", help="The uri path at which the docs will be served."),
    source_url: str = typer.Option(
        "",
        "--source_url",
        "-S",
        help="Prefix of the URL the UI assets (scripts, styles, icons) are downloaded from.",
    ),
) -> None:
    """Serve a specification with a docs UI."""

    settings = AppSettings()
    try:
        config = ServeConfig(
            base_path=base_path,
            flavor=flavor,
            doc_url=doc_url,
            no_open=no_open,
            no_ui=no_ui,
            flatten=flatten,
            host=host,
            port=port,
            ui_path=path,
            source_url=source_url or settings.source_url,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    def _started(prepared: PreparedServer, handle: ServerHandle) -> None:
        _console.print(build_serving_panel(prepared, config))
        _console.print(build_routes_table(prepared, config))

    hooks = ServeHooks(
        warning=lambda message: _console.print(f"[yellow]Warning:[/yellow] {escape(message)}"),
        started=_started,
    )

    print_banner(_console)
    try:
        run_serve(
            spec,
            config,
            browser=SystemBrowserLauncher(),
            settings=settings,
            hooks=hooks,
        )
    except DocServeError as exc:
        _err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    except KeyboardInterrupt:
        _console.print("\nServer stopped")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
