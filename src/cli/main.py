"""CLI entry point (Typer).

Commands map one-to-one to the example workflows; `doctor` checks the
local setup.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from adapters.json_exporter import export_result_json
from cli import doctor
from cli.ui_components import build_answer_panel, build_news_panel, build_order_table, print_banner
from core.config import AppSettings
from core.domain.mail_source import MailSource
from core.errors import ExampleError
from core.logging_setup import configure_logging
from core.services.calculator import run_calculator_demo
from core.services.news_checker import run_news_checker
from core.services.order_entry import run_order_entry

app = typer.Typer(
    no_args_is_help=True,
    help="Example workflows driving the Smooth Operator desktop-automation server.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    configure_logging(verbose=verbose)
    if not no_banner:
        print_banner(_console)


def _fail(exc: ExampleError) -> None:
    _console.print(f"[red]Error:[/red] {exc}")
    raise typer.Exit(code=1)


@app.command()
def calculator(
    screenshot: bool = typer.Option(
        False,
        "--screenshot",
        help="Ask the AI about a screenshot instead of the automation tree.",
    ),
) -> None:
    """Open the calculator, compute 3+4 and let the AI read the result."""

    settings = AppSettings()
    try:
        result = asyncio.run(run_calculator_demo(settings=settings, use_screenshot=screenshot))
    except ExampleError as exc:
        _fail(exc)
        return

    if result.answer:
        _console.print(build_answer_panel(result.answer))


@app.command()
def news(
    account: Optional[list[str]] = typer.Option(
        None,
        "--account",
        "-a",
        help="Account to read (repeatable). Defaults to the configured accounts.",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the digest to a JSON file."),
) -> None:
    """Summarize the latest posts of AI news accounts on x.com."""

    settings = AppSettings()
    try:
        result = asyncio.run(run_news_checker(settings=settings, accounts=account or None))
    except ExampleError as exc:
        _fail(exc)
        return

    if result.digest is not None:
        _console.print(build_news_panel(result.digest))
        if output:
            path = export_result_json(payload=result.digest, output_path=output)
            _console.print(f"[green]Digest saved to:[/green] {path}")
    elif result.raw_response:
        _console.print(build_answer_panel(result.raw_response))


@app.command()
def orders(
    source: MailSource = typer.Option(
        MailSource.GMAIL,
        "--source",
        "-s",
        case_sensitive=False,
        help="Mailbox that holds the order email.",
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the extracted order to a JSON file."),
) -> None:
    """Read an order email, extract it with AI and type it into the mock ERP."""

    settings = AppSettings()
    try:
        result = asyncio.run(run_order_entry(settings=settings, source=source))
    except ExampleError as exc:
        _fail(exc)
        return

    if result.order is not None:
        _console.print(build_order_table(result.order))
        if output:
            path = export_result_json(payload=result.order, output_path=output)
            _console.print(f"[green]Order saved to:[/green] {path}")
    status = "[green]entered[/green]" if result.entered else "[yellow]not entered[/yellow]"
    _console.print(f"ERP data entry: {status}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
