from __future__ import annotations
from typing import Iterable, Optional
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich import box
from .model import DEFAULT_TAG, TodoItem


def _format_status(done: bool) -> Text:
    """Format status with modern indicators"""
    if done:
        return Text("✓", style="bold green")
    return Text("○", style="bright_black")


def _format_tag(tag: str) -> Text:
    if not tag or tag == DEFAULT_TAG:
        return Text(tag or "—", style="dim")
    return Text(f"#{tag}", style="bold cyan")


def _format_hash(hash_: str, done: bool) -> Text:
    style = "dim yellow" if done else "bold yellow"
    return Text(hash_, style=style)


def _format_description(text: str, done: bool) -> Text:
    out = Text(text or "")
    out.stylize("dim strikethrough" if done else "white")
    return out


def render_todos_table(
    items: Iterable[TodoItem], title: str = "Todos", console: Optional[Console] = None
) -> None:
    console = console or Console()
    items = list(items)
    if not items:
        console.print("[dim]📭 No entries[/dim]")
        return

    table = Table(
        title=f"[bold bright_magenta]📋 {title}[/bold bright_magenta]",
        box=box.ROUNDED,
        header_style="bold bright_white",
        border_style="bright_blue",
        padding=(0, 1),
    )
    table.add_column("Hash", no_wrap=True)
    table.add_column("", justify="center", width=2)
    table.add_column("Tag", no_wrap=True)
    table.add_column("Description", overflow="fold")

    for t in items:
        table.add_row(
            _format_hash(t.hash, t.completed),
            _format_status(t.completed),
            _format_tag(t.tag),
            _format_description(t.description, t.completed),
        )

    console.print(table)
    done = sum(1 for t in items if t.completed)
    console.print(
        f"[dim]{len(items)} entr{'ies' if len(items) != 1 else 'y'}, "
        f"{done} done, {len(items) - done} pending[/dim]"
    )


def render_todos_plain(items: Iterable[TodoItem], console: Optional[Console] = None) -> None:
    """One line per entry without styling, for pipes and scripts."""
    console = console or Console()
    items = list(items)
    if not items:
        console.print("No entries", markup=False, highlight=False)
        return
    for t in items:
        mark = "x" if t.completed else " "
        console.print(
            f"{t.hash} [{mark}] ({t.tag}) {t.description}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
