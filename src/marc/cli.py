from __future__ import annotations
import logging
import sys
from typing import Callable, IO, List, Optional, Tuple, TypeVar
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.table import Table
from rich import box
from . import __version__
from .args import (
    ArgKind,
    CommandLine,
    Subcommand,
    read_stdin_tokens,
    resolve_subcommand,
    specs_for,
)
from .config import Settings, resolve_settings
from .editor import edit_items
from .errors import EmptyDescription, EmptyPrefix, MarcError, TodoError
from .logs import setup_logging
from .model import TodoItem
from .render import render_todos_plain, render_todos_table
from .store import TodoStore
from .ui import pick_items_to_done
from .paths import APP_NAME

log = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")

# subcommands whose positional values may also come from a pipe
PIPED_COMMANDS = (Subcommand.ADD, Subcommand.REMOVE, Subcommand.DONE)

COMMANDS = {
    Subcommand.ADD: ("add [--tag NAME] <text>...", "Add one entry per text argument"),
    Subcommand.LOG: ("log [--tag NAME] [--done] [--undone]", "List entries"),
    Subcommand.REMOVE: ("rm [--done] <hash>...", "Remove entries by hash prefix"),
    Subcommand.DONE: ("done [<hash>...]", "Mark entries as completed"),
    Subcommand.EDIT: ("edit", "Reorder or drop entries in $EDITOR"),
    Subcommand.HELP: ("help [<command>]", "Show help"),
    Subcommand.VERSION: ("version", "Show the version"),
}

EXAMPLES = """
Examples:
  marc add "Fix login redirect" "Write release notes"
  marc add -t work "Review PR"
  echo "Buy milk" | marc add
  marc log -t work
  marc log --undone
  marc done 3fa9c1
  marc rm 3f          # any unique hash prefix works
  marc rm --done      # drop every completed entry
  marc edit           # pick / drop / reorder in $EDITOR

Environment:
  EDITOR      editor used by "marc edit" (default: vi)
  MARC_FILE   todo file to use instead of the default
  MARC_DEBUG  set to 1 for debug logging
"""


def _print_rich_help(subcommand: Optional[Subcommand] = None) -> None:
    """Print help using Rich formatting"""
    console.print()
    title = f"[bold bright_magenta]📋 {APP_NAME}[/bold bright_magenta]"
    if subcommand:
        title += f" [bold cyan]{subcommand}[/bold cyan]"
    console.print(Panel.fit(title, border_style="bright_magenta"))
    console.print()

    if subcommand:
        usage, description = COMMANDS[subcommand]
        console.print(f"[bold white]{description}[/bold white]")
        console.print()
        console.print(f"[bold bright_white]Usage:[/bold bright_white] {APP_NAME} {usage}")
        console.print()
        table = Table(
            show_header=True,
            header_style="bold bright_white",
            box=box.SIMPLE,
            padding=(0, 1),
        )
        table.add_column("Option", style="bold yellow", width=30)
        table.add_column("Description", style="white")
        for spec in specs_for(subcommand):
            opt_str = f"-{spec.short}, --{spec.long}"
            if spec.kind is ArgKind.OPTION:
                opt_str += f" [bold cyan]{spec.metavar or spec.name.upper()}[/bold cyan]"
            table.add_row(opt_str, spec.help)
        console.print("[bold bright_white]Options:[/bold bright_white]")
        console.print(table)
        console.print()
        return

    console.print(
        "[bold white]A small personal todo list, addressed by short hashes.[/bold white]"
    )
    console.print()
    table = Table(
        show_header=True,
        header_style="bold bright_white",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("Command", style="bold cyan", width=40)
    table.add_column("Description", style="white")
    for usage, description in COMMANDS.values():
        table.add_row(usage, description)
    console.print(table)
    console.print()
    console.print(
        Panel(
            Text(EXAMPLES.strip("\n")),
            title="[bold]Examples & Tips[/bold]",
            border_style="cyan",
        )
    )
    console.print()


def _fail(title: str, body: str) -> None:
    err_console.print()
    err_console.print(
        Panel(
            Text.assemble((f"❌ {title}", "bold red"), "\n\n", (body, "white")),
            border_style="red",
        )
    )
    err_console.print()


def _report_failure(target: str, err: TodoError) -> None:
    msg = Text()
    msg.append("❌ ", style="bold red")
    if target:
        msg.append(f"{target}: ", style="bold white")
    msg.append(str(err), style="white")
    err_console.print(msg)


def _batch(
    targets: List[str], op: Callable[[str], T]
) -> Tuple[List[T], List[Tuple[str, TodoError]]]:
    """Apply ``op`` to each target, collecting domain errors instead of stopping."""
    done: List[T] = []
    failed: List[Tuple[str, TodoError]] = []
    for target in targets:
        try:
            done.append(op(target))
        except TodoError as e:
            failed.append((target, e))
    for target, e in failed:
        _report_failure(target, e)
    return done, failed


def _announce(verb: str, style: str, item: TodoItem) -> None:
    msg = Text()
    msg.append(f"{verb} ", style=style)
    msg.append(item.hash, style="bold yellow")
    msg.append(f": {item.description}", style="white")
    console.print(msg)


def cmd_add(cl: CommandLine, settings: Settings) -> int:
    texts = cl.values
    if not texts:
        raise EmptyDescription()
    store = TodoStore.load(settings.data_path)
    tag = cl.option("tag")
    added, _ = _batch(texts, lambda text: store.add(text, tag=tag))
    if not added:
        return 1
    store.save()
    for t in added:
        _announce("✅ Added", "bold green", t)
    return 0


def cmd_log(cl: CommandLine, settings: Settings) -> int:
    store = TodoStore.load(settings.data_path)
    items = store.list_items(
        tag=cl.option("tag"), done=cl.flag("done"), undone=cl.flag("undone")
    )
    if console.is_terminal:
        title = "Done" if cl.flag("done") and not cl.flag("undone") else (
            "Pending" if cl.flag("undone") and not cl.flag("done") else "All"
        )
        render_todos_table(items, title=title, console=console)
    else:
        render_todos_plain(items, console=console)
    return 0


def cmd_rm(cl: CommandLine, settings: Settings) -> int:
    prefixes = cl.values
    if not prefixes and not cl.flag("done"):
        raise EmptyPrefix()
    store = TodoStore.load(settings.data_path)
    removed, failed = _batch(prefixes, store.remove_by_prefix)
    if cl.flag("done"):
        completed = store.remove_completed()
        if not completed:
            _report_failure("--done", TodoError("no completed entries"))
        removed.extend(completed)
    if not removed:
        return 1
    store.save()
    for t in removed:
        _announce("🗑️  Removed", "bold red", t)
    return 0


def _interactive() -> bool:
    return sys.stdin.isatty() and console.is_terminal


def cmd_done(cl: CommandLine, settings: Settings) -> int:
    store = TodoStore.load(settings.data_path)
    prefixes = cl.values
    if not prefixes:
        # no hash given: open the picker when a human is at the keyboard
        if not _interactive():
            raise EmptyPrefix()
        prefixes = pick_items_to_done(store.pending())
        if not prefixes:
            console.print("[dim]❌ (cancelled)[/dim]")
            return 0
    completed, _ = _batch(prefixes, store.mark_done_by_prefix)
    if not completed:
        return 1
    store.save()
    for t in completed:
        _announce("✅ Done", "bold green", t)
    return 0


def cmd_edit(cl: CommandLine, settings: Settings) -> int:
    store = TodoStore.load(settings.data_path)
    before = len(store)
    store.replace_all(edit_items(store.items, settings.editor))
    store.save()
    msg = Text()
    msg.append("✏️  Edited: ", style="bold cyan")
    msg.append(f"kept {len(store)} of {before}", style="bold white")
    if before - len(store):
        msg.append(f", dropped {before - len(store)}", style="dim")
    console.print(msg)
    return 0


def cmd_help(cl: CommandLine, settings: Settings) -> int:
    topics = cl.values
    _print_rich_help(resolve_subcommand(topics[0]) if topics else None)
    return 0


def cmd_version(cl: CommandLine, settings: Settings) -> int:
    console.print(f"{APP_NAME} version {__version__}", highlight=False)
    return 0


HANDLERS = {
    Subcommand.ADD: cmd_add,
    Subcommand.LOG: cmd_log,
    Subcommand.REMOVE: cmd_rm,
    Subcommand.DONE: cmd_done,
    Subcommand.EDIT: cmd_edit,
    Subcommand.HELP: cmd_help,
    Subcommand.VERSION: cmd_version,
}


def run(
    argv: List[str],
    settings: Optional[Settings] = None,
    stdin: Optional[IO[str]] = None,
) -> int:
    """Parse ``argv`` (without the program name), run the command, return the exit code."""
    try:
        if settings is None:
            settings = resolve_settings()
        setup_logging(settings.debug, console=err_console)
        if not argv:
            _print_rich_help()
            return 1
        extra = None
        if stdin is not None and resolve_subcommand(argv[0]) in PIPED_COMMANDS:
            extra = read_stdin_tokens(stdin)
        cl = CommandLine.parse(argv, extra)
        log.debug("parsed %s %s", cl.subcommand, cl.args)
        if cl.flag("help"):
            _print_rich_help(None if cl.subcommand is Subcommand.HELP else cl.subcommand)
            return 0
        return HANDLERS[cl.subcommand](cl, settings)
    except MarcError as e:
        _fail(e.title, str(e))
        return 1


def main() -> None:
    raise SystemExit(run(sys.argv[1:], stdin=sys.stdin))
