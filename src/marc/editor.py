"""
Reorganize todos in an external editor.

The list is written to a scratch file as one ``pick <n> <description>`` line per
entry. The user reorders lines or turns ``pick`` into ``drop``; the edited file
is read back and becomes the new list, in line order.
"""
from __future__ import annotations
import dataclasses, logging, os, shlex, subprocess, tempfile
from pathlib import Path
from typing import Callable, List, Sequence
from .errors import EditorError, NothingToEdit
from .model import TodoItem

log = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"
PICK_VERBS = ("pick", "p")
DROP_VERBS = ("drop", "d")

EDIT_HELP = """\
# Commands:
# p, pick <index> = keep the entry
# d, drop <index> = remove the entry
#
# Entries are kept in the order of the lines above.
# Lines starting with '#' are ignored. Deleting a line drops the entry."""


def render_buffer(items: Sequence[TodoItem]) -> str:
    lines = [f"pick {i} {t.description}" for i, t in enumerate(items, start=1)]
    return "\n".join(lines) + "\n\n" + EDIT_HELP + "\n"


def parse_buffer(text: str, items: Sequence[TodoItem]) -> List[TodoItem]:
    """Apply an edited buffer to the original ``items``.

    Malformed lines and out-of-range indexes are skipped. An index that already
    appeared earlier in the buffer is skipped too, so hashes stay unique.
    """
    out: List[TodoItem] = []
    seen = set()
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        fields = line.split(None, 2)
        if len(fields) < 2:
            log.debug("line %d: skipped, no index", lineno)
            continue
        verb, index = fields[0].lower(), fields[1]
        if not (index.isascii() and index.isdigit()) or not 1 <= int(index) <= len(items):
            log.debug("line %d: skipped, bad index %r", lineno, index)
            continue
        pos = int(index) - 1
        if pos in seen:
            log.debug("line %d: skipped, index %d repeated", lineno, pos + 1)
            continue
        seen.add(pos)
        if verb in DROP_VERBS:
            continue
        out.append(dataclasses.replace(items[pos]))
    return out


def editor_argv(editor: str, path: Path) -> List[str]:
    parts = shlex.split(editor or "") or [DEFAULT_EDITOR]
    return parts + [str(path)]


def launch_editor(
    editor: str, path: Path, run: Callable[..., subprocess.CompletedProcess] = subprocess.run
) -> None:
    argv = editor_argv(editor, path)
    log.debug("launching editor: %s", argv)
    try:
        proc = run(argv)
    except FileNotFoundError as e:
        raise EditorError(f"editor not found: {argv[0]}") from e
    except OSError as e:
        raise EditorError(f"failed to launch editor {argv[0]}: {e}") from e
    if proc.returncode != 0:
        raise EditorError(f"{argv[0]} exited with status {proc.returncode}, nothing changed")


def edit_items(
    items: Sequence[TodoItem],
    editor: str,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> List[TodoItem]:
    """Round-trip ``items`` through the editor and return the new list."""
    if not items:
        raise NothingToEdit()
    with tempfile.NamedTemporaryFile(
        "w", prefix="marc-edit-", suffix=".txt", delete=False, encoding="utf-8"
    ) as tf:
        tf.write(render_buffer(items))
        tmp = Path(tf.name)
    try:
        launch_editor(editor, tmp, run=run)
        try:
            text = tmp.read_text(encoding="utf-8")
        except OSError as e:
            raise EditorError(f"cannot read back {tmp}: {e}") from e
    finally:
        tmp.unlink(missing_ok=True)
    return parse_buffer(text, items)
