"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import importlib.util
import sys

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.mock_erp import mock_erp_path
from core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.head(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_library() -> tuple[bool, str]:
    if importlib.util.find_spec("smooth_operator_agent_tools") is None:
        return False, "pip install 'smooth-operator-examples[automation]'"
    return True, "smooth_operator_agent_tools importable"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Smooth Operator Examples Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if settings.screengrasp_api_key:
        table.add_row("ScreenGrasp key", "OK", "Automation enabled")
    else:
        table.add_row("ScreenGrasp key", "FAIL", "Get a free key at https://screengrasp.com/api.html")
    if settings.openai_api_key:
        table.add_row("OpenAI key", "OK", "AI steps enabled")
    else:
        table.add_row("OpenAI key", "OPTIONAL", "No key set -> AI steps are skipped")
    table.add_row("OpenAI model", "OK", settings.openai_model)
    table.add_row("Server", "OK", settings.server_url or "managed (started by the client)")

    ok_lib, detail_lib = _check_library()
    table.add_row("Automation library", "OK" if ok_lib else "FAIL", detail_lib)

    table.add_row("Platform", "OK" if sys.platform == "win32" else "WARN", sys.platform)

    erp = mock_erp_path(settings)
    table.add_row("Mock ERP", "OK" if erp.exists() else "PENDING", str(erp))

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http("https://screengrasp.com", settings))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if sys.platform != "win32":
        _console.print("\n[yellow]Note:[/yellow] The automation server only runs on Windows.")


@app.command(name="setup-keys")
def setup_keys() -> None:
    """Interactive key setup (stored in the user config .env)."""

    screengrasp_key = typer.prompt("ScreenGrasp API key", hide_input=True).strip()
    openai_key = typer.prompt(
        "OpenAI API key (empty to skip)",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()

    if not screengrasp_key:
        raise typer.BadParameter("the ScreenGrasp API key is required")

    env_path = write_user_env_vars(
        {
            "SCREENGRASP_API_KEY": screengrasp_key,
            "OPENAI_API_KEY": openai_key or None,
        }
    )

    _console.print(f"[green]Saved keys to:[/green] {env_path}")
