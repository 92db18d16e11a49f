from __future__ import annotations
import json, logging, os, tempfile
from pathlib import Path
from typing import Any, List
from .errors import CorruptStore, StorageError
from .model import TodoItem

log = logging.getLogger(__name__)

TODOS_KEY = "todos"


def ensure_parent(p: Path) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)


def atomic_write_json(path: Path, obj: Any) -> None:
    ensure_parent(path)
    data = json.dumps(obj, indent=2, ensure_ascii=False)
    with tempfile.NamedTemporaryFile(
        "w", delete=False, dir=str(path.parent), encoding="utf-8"
    ) as tf:
        tf.write(data)
        tf.flush()
        os.fsync(tf.fileno())
        tmp = tf.name
    os.replace(tmp, path)


def load_todos(path: Path) -> List[TodoItem]:
    """Read the whole todo file. Missing or blank file means no todos."""
    if not path.exists():
        log.debug("no todo file at %s", path)
        return []
    try:
        content = path.read_text(encoding="utf-8").strip()
    except UnicodeDecodeError as e:
        raise CorruptStore(path, f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise StorageError(path, f"cannot read: {e.strerror or e}") from e
    if not content:
        return []
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise CorruptStore(path, f"invalid JSON: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get(TODOS_KEY), list):
        raise CorruptStore(path, f'expected an object with a "{TODOS_KEY}" list')

    items: List[TodoItem] = []
    seen = set()
    for i, raw in enumerate(data[TODOS_KEY]):
        if not isinstance(raw, dict):
            raise CorruptStore(path, f"{TODOS_KEY}[{i}] is not an object")
        try:
            item = TodoItem.from_dict(raw)
        except KeyError as e:
            raise CorruptStore(path, f"{TODOS_KEY}[{i}] is missing {e}") from e
        except ValueError as e:
            raise CorruptStore(path, f"{TODOS_KEY}[{i}]: {e}") from e
        if not item.description.strip():
            raise CorruptStore(path, f"{TODOS_KEY}[{i}] has an empty description")
        if item.hash in seen:
            raise CorruptStore(path, f"{TODOS_KEY}[{i}] has a duplicate hash {item.hash}")
        seen.add(item.hash)
        items.append(item)
    log.debug("loaded %d todos from %s", len(items), path)
    return items


def save_todos(path: Path, items: List[TodoItem]) -> None:
    try:
        atomic_write_json(path, {TODOS_KEY: [t.to_dict() for t in items]})
    except OSError as e:
        raise StorageError(path, f"cannot write: {e.strerror or e}") from e
    log.debug("saved %d todos to %s", len(items), path)
