"""Rich UI components for the CLI.

Why separate components:
- Keeps command logic apart from rendering details.
- Lets several commands reuse the same tables and panels.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import NewsDigest, Order


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in quiet/non-interactive modes)."""

    title = Text("Smooth Operator Examples", style="bold cyan")
    subtitle = Text("Desktop automation • Automation trees • AI", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_order_table(order: Order) -> Table:
    """Table with the line items of an extracted order."""

    table = Table(title=f"Order for {order.customer_name}")
    table.add_column("Article", style="cyan")
    table.add_column("Quantity", style="white", justify="right")
    table.add_column("Price per unit", style="green", justify="right")
    table.add_column("Total", style="magenta", justify="right")
    for article in order.ordered_articles:
        table.add_row(
            article.article_name,
            article.quantity_text(),
            article.price_text(),
            f"{article.quantity * article.price_per_unit:.2f}",
        )
    return table


def build_news_panel(digest: NewsDigest) -> Panel:
    """Panel presenting the AI news digest."""

    body = Text()
    for point in digest.summary_bullet_points:
        body.append(f"- {point}\n")
    probability = digest.breaking_news_probability_in_percent
    style = "bold red" if probability >= 70 else "yellow" if probability >= 40 else "green"
    body.append("\nBreaking news probability: ")
    body.append(f"{probability:.0f}%", style=style)
    return Panel(body, title=Text("AI News Digest", style="bold yellow"), border_style="yellow")


def build_answer_panel(answer: str, *, title: str = "OpenAI Result") -> Panel:
    return Panel(Text(answer.strip()), title=Text(title, style="bold yellow"), border_style="yellow")
