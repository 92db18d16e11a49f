from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any

DEFAULT_TAG = "default"
HASH_LEN = 7


@dataclass
class TodoItem:
    hash: str
    description: str
    completed: bool = False
    tag: str = DEFAULT_TAG

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TodoItem":
        completed = d.get("completed", False)
        if not isinstance(completed, bool):
            raise ValueError(f"completed must be true or false, got {completed!r}")
        return TodoItem(
            hash=str(d["hash"]),
            description=str(d["description"]),
            completed=completed,
            tag=str(d.get("tag") or DEFAULT_TAG),
        )

    def matches(self, prefix: str) -> bool:
        return self.hash.startswith(prefix)
