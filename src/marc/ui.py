from __future__ import annotations
from typing import List, Sequence, Tuple
from prompt_toolkit.shortcuts import checkboxlist_dialog
from .model import DEFAULT_TAG, TodoItem


def _format_item_for_picker(t: TodoItem) -> str:
    """Format an entry for the picker dialog"""
    status = "✓" if t.completed else "○"
    parts = [f"[{status}]", t.hash, t.description]
    if t.tag and t.tag != DEFAULT_TAG:
        parts.append(f"#{t.tag}")
    return "  ".join(parts)


def pick_items_to_done(items: Sequence[TodoItem]) -> List[str]:
    """Let the user tick pending entries; returns the chosen hashes."""
    values: List[Tuple[str, str]] = [
        (t.hash, _format_item_for_picker(t)) for t in items if not t.completed
    ]
    if not values:
        return []
    result = checkboxlist_dialog(
        title="✨ Mark Entries as Done",
        text="Use ↑/↓ to navigate, Space to toggle, Enter to confirm, Esc to cancel.",
        values=values,
        ok_text="✅ Done",
        cancel_text="❌ Cancel",
    ).run()
    return list(result or [])
