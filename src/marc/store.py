from __future__ import annotations
import hashlib, logging, time
from pathlib import Path
from typing import Callable, Iterable, List, Optional
from .errors import (
    AlreadyCompleted,
    EmptyDescription,
    EmptyPrefix,
    MultipleMatches,
    NotFound,
)
from .model import DEFAULT_TAG, HASH_LEN, TodoItem
from .storage import load_todos, save_todos

log = logging.getLogger(__name__)


def generate_hash(description: str, tag: Optional[str], stamp: int, salt: int = 0) -> str:
    """Short hex id from the description, the tag and a nanosecond timestamp."""
    h = hashlib.sha1()
    h.update(description.encode("utf-8"))
    if tag:
        h.update(tag.encode("utf-8"))
    h.update(str(stamp).encode("ascii"))
    if salt:
        h.update(str(salt).encode("ascii"))
    return h.hexdigest()[:HASH_LEN]


class TodoStore:
    """Ordered todo list bound to the file it was loaded from.

    Nothing is written until ``save()`` is called.
    """

    def __init__(
        self,
        path: Path,
        items: Optional[Iterable[TodoItem]] = None,
        clock: Callable[[], int] = time.time_ns,
    ):
        self.path = path
        self.items: List[TodoItem] = list(items or [])
        self.clock = clock

    @classmethod
    def load(cls, path: Path, clock: Callable[[], int] = time.time_ns) -> "TodoStore":
        return cls(path, load_todos(path), clock=clock)

    def save(self) -> None:
        save_todos(self.path, self.items)

    def __len__(self) -> int:
        return len(self.items)

    def find(self, prefix: str) -> List[TodoItem]:
        return [t for t in self.items if t.matches(prefix)]

    def resolve(self, prefix: str) -> TodoItem:
        """The single item whose hash starts with ``prefix``."""
        prefix = prefix.strip()
        if not prefix:
            raise EmptyPrefix()
        matches = self.find(prefix)
        if not matches:
            raise NotFound(prefix)
        if len(matches) > 1:
            raise MultipleMatches(prefix, [(t.hash, t.description) for t in matches])
        return matches[0]

    def _new_hash(self, description: str, tag: Optional[str]) -> str:
        taken = {t.hash for t in self.items}
        stamp = self.clock()
        salt = 0
        h = generate_hash(description, tag, stamp, salt)
        while h in taken:
            log.debug("hash collision on %s, re-rolling", h)
            salt += 1
            h = generate_hash(description, tag, self.clock(), salt)
        return h

    def add(self, description: str, tag: Optional[str] = None) -> TodoItem:
        description = description.strip()
        if not description:
            raise EmptyDescription()
        tag = (tag or "").strip() or None
        item = TodoItem(
            hash=self._new_hash(description, tag),
            description=description,
            completed=False,
            tag=tag or DEFAULT_TAG,
        )
        self.items.append(item)
        log.debug("added %s (%s)", item.hash, item.tag)
        return item

    def remove_by_prefix(self, prefix: str) -> TodoItem:
        item = self.resolve(prefix)
        self.items.remove(item)
        log.debug("removed %s", item.hash)
        return item

    def remove_completed(self) -> List[TodoItem]:
        removed = [t for t in self.items if t.completed]
        self.items = [t for t in self.items if not t.completed]
        log.debug("removed %d completed todos", len(removed))
        return removed

    def mark_done_by_prefix(self, prefix: str) -> TodoItem:
        item = self.resolve(prefix)
        if item.completed:
            raise AlreadyCompleted(item.hash, item.description)
        item.completed = True
        log.debug("completed %s", item.hash)
        return item

    def list_items(
        self, tag: Optional[str] = None, done: bool = False, undone: bool = False
    ) -> List[TodoItem]:
        """Items filtered by exact tag and completion state.

        ``done`` keeps completed items, ``undone`` keeps pending ones; both or
        neither keep everything.
        """
        out = list(self.items)
        if tag is not None:
            out = [t for t in out if t.tag == tag]
        if done and not undone:
            out = [t for t in out if t.completed]
        elif undone and not done:
            out = [t for t in out if not t.completed]
        return out

    def pending(self) -> List[TodoItem]:
        return [t for t in self.items if not t.completed]

    def replace_all(self, items: Iterable[TodoItem]) -> None:
        self.items = list(items)
