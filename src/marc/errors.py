from __future__ import annotations
from pathlib import Path
from typing import List, Tuple


class MarcError(Exception):
    """Base class for every error the CLI reports to the user."""

    title = "Error"


# Parse errors -----------------------------------------------------------------


class ParseError(MarcError):
    title = "Invalid arguments"


class UnknownSubcommand(ParseError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f'unknown subcommand "{token}"')


class UnknownArgument(ParseError):
    def __init__(self, token: str, subcommand: str):
        self.token = token
        self.subcommand = subcommand
        super().__init__(f'unknown argument "{token}" for {subcommand}')


class MissingValue(ParseError):
    def __init__(self, switch: str):
        self.switch = switch
        super().__init__(f'switch "{switch}" requires a value')


# Domain errors ----------------------------------------------------------------


class TodoError(MarcError):
    title = "Todo error"


class EmptyDescription(TodoError):
    def __init__(self):
        super().__init__("description must not be empty")


class EmptyPrefix(TodoError):
    def __init__(self):
        super().__init__("a hash (or hash prefix) is required")


class NotFound(TodoError):
    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(f'no entry matches "{prefix}"')


class AlreadyCompleted(TodoError):
    def __init__(self, hash_: str, description: str):
        self.hash = hash_
        self.description = description
        super().__init__(f"{hash_} is already completed: {description}")


class MultipleMatches(TodoError):
    def __init__(self, prefix: str, matches: List[Tuple[str, str]]):
        self.prefix = prefix
        self.matches = list(matches)
        lines = "\n".join(f"  {h} {d}" for h, d in self.matches)
        super().__init__(f'"{prefix}" matches {len(self.matches)} entries:\n{lines}')


class NothingToEdit(TodoError):
    def __init__(self):
        super().__init__('nothing to edit, add an entry first with "marc add <text>"')


# I/O errors -------------------------------------------------------------------


class StorageError(MarcError):
    title = "Storage error"

    def __init__(self, path: Path, cause: str):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class CorruptStore(StorageError):
    title = "Corrupt todo file"


class EditorError(MarcError):
    title = "Editor failed"
