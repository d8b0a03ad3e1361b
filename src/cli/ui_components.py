"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `serve` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import NoUI, RedocUI, ServeConfig, SwaggerUI
from core.services.serve_pipeline import PreparedServer


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("docserve", style="bold cyan")
    subtitle = Text("Swagger/OpenAPI docs • ReDoc • Swagger UI", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_routes_table(prepared: PreparedServer, config: ServeConfig) -> Table:
    """Tabla con las rutas servidas y la URL de cada una."""

    table = Table(title="Routes")
    table.add_column("Route", style="cyan", no_wrap=True)
    table.add_column("Serves", style="white")
    table.add_column("URL", style="magenta")

    plan = prepared.plan
    table.add_row(plan.spec_path, "specification (JSON)", prepared.spec_url)

    ui = plan.ui
    if isinstance(ui, RedocUI):
        table.add_row(ui.path, "ReDoc viewer", prepared.address.url(ui.path))
    elif isinstance(ui, SwaggerUI):
        table.add_row(ui.path, "Swagger UI", prepared.address.url(ui.path))
    elif isinstance(ui, NoUI) and config.doc_url:
        table.add_row("-", "external docs", config.doc_url)
    return table


def build_serving_panel(prepared: PreparedServer, config: ServeConfig) -> Panel:
    body = Text()
    body.append("Listening on ", style="dim")
    body.append(f"{prepared.address.bound_host}:{prepared.address.bound_port}\n")
    if prepared.plan.visit_url:
        body.append("Visit ", style="dim")
        body.append(prepared.plan.visit_url, style="bold green")
    else:
        body.append("Spec ", style="dim")
        body.append(prepared.spec_url, style="bold green")
    if config.flatten:
        body.append("\nflattened", style="yellow")
    label = "spec only" if isinstance(prepared.plan.ui, NoUI) else config.flavor.label()
    return Panel(body, title=Text(label, style="bold"), border_style="green")
