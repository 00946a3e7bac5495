"""Building blocks for colorized terminal reports."""

from typing import Iterable

from rich import box
from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def title(console: Console, text: str, subtitle: str = ""):
    console.print(Text(text, style="bold cyan"))
    if subtitle:
        console.print(subtitle)
    console.print()


def section(console: Console, heading: str, body: RenderableType):
    """Print a titled, framed block followed by a blank line."""
    console.print(Panel(
        body,
        title=Text(heading, style="bold"),
        title_align="left",
        box=box.ROUNDED,
        expand=False,
        padding=(0, 1),
    ))
    console.print()


def key_values(rows: Iterable[tuple[str, RenderableType]]) -> Table:
    grid = Table.grid(padding=(0, 2))
    grid.add_column(no_wrap=True)
    grid.add_column()
    for label, value in rows:
        grid.add_row(label, value)
    return grid


def bold(text: str) -> Text:
    return Text(text, style="bold white")


def dim(text: str) -> Text:
    return Text(text, style="dim")


def bar(value: int, maximum: int, width: int) -> Text:
    """Proportional bar; any positive value fills at least one cell."""
    if maximum <= 0 or value <= 0:
        return Text("░" * width, style="dim")
    filled = min(width, max(1, value * width // maximum))
    text = Text("█" * filled, style="green")
    text.append("░" * (width - filled), style="dim")
    return text
