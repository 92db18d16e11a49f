"""
Per-subcommand argument parsing.

Every subcommand declares the switches it understands in ``ARG_SPECS``. The
parser walks the raw tokens once, left to right, and classifies each one as a
``Flag``, an ``Option`` (which takes the next token as its value) or a
positional ``Value``:

    >>> parse_args(Subcommand.LOG, ["-ud"])
    [Flag(name='undone'), Flag(name='done')]

Short switches may be clustered (``-ud``). An option inside a cluster takes the
token after the whole cluster, never the rest of the cluster.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, IO, List, Optional, Sequence, Tuple, Union
from .errors import MissingValue, ParseError, UnknownArgument, UnknownSubcommand

LONG_PREFIX = "--"
SHORT_PREFIX = "-"


class Subcommand(Enum):
    ADD = "add"
    LOG = "log"
    REMOVE = "rm"
    EDIT = "edit"
    DONE = "done"
    HELP = "help"
    VERSION = "version"

    def __str__(self) -> str:
        return self.value


class ArgKind(Enum):
    FLAG = "flag"
    OPTION = "option"


@dataclass(frozen=True)
class ArgSpec:
    name: str
    short: str
    long: str
    kind: ArgKind
    help: str = ""
    metavar: str = ""


@dataclass(frozen=True)
class Option:
    name: str
    value: str


@dataclass(frozen=True)
class Flag:
    name: str


@dataclass(frozen=True)
class Value:
    value: str


Arg = Union[Option, Flag, Value]

HELP_SPEC = ArgSpec("help", "h", "help", ArgKind.FLAG, help="Show help for this command")

_TAG = ArgSpec("tag", "t", "tag", ArgKind.OPTION, help="Tag name", metavar="NAME")

ARG_SPECS: Dict[Subcommand, Tuple[ArgSpec, ...]] = {
    Subcommand.ADD: (_TAG,),
    Subcommand.LOG: (
        _TAG,
        ArgSpec("done", "d", "done", ArgKind.FLAG, help="Show completed entries"),
        ArgSpec("undone", "u", "undone", ArgKind.FLAG, help="Show pending entries"),
    ),
    Subcommand.REMOVE: (
        ArgSpec("done", "d", "done", ArgKind.FLAG, help="Remove every completed entry"),
    ),
    Subcommand.EDIT: (),
    Subcommand.DONE: (),
    Subcommand.HELP: (),
    Subcommand.VERSION: (),
}

SUBCOMMAND_ALIASES: Dict[str, Subcommand] = {
    "add": Subcommand.ADD,
    "log": Subcommand.LOG,
    "rm": Subcommand.REMOVE,
    "remove": Subcommand.REMOVE,
    "edit": Subcommand.EDIT,
    "done": Subcommand.DONE,
    "help": Subcommand.HELP,
    "--help": Subcommand.HELP,
    "-h": Subcommand.HELP,
    "version": Subcommand.VERSION,
    "--version": Subcommand.VERSION,
    "v": Subcommand.VERSION,
}


def specs_for(subcommand: Subcommand) -> Tuple[ArgSpec, ...]:
    """Declared specs for ``subcommand`` plus the implicit help flag."""
    return ARG_SPECS[subcommand] + (HELP_SPEC,)


def resolve_subcommand(token: str) -> Subcommand:
    try:
        return SUBCOMMAND_ALIASES[token.lower()]
    except KeyError:
        raise UnknownSubcommand(token) from None


def _lookup(specs: Sequence[ArgSpec], key: str, attr: str) -> Optional[ArgSpec]:
    # flags first, then options
    for kind in (ArgKind.FLAG, ArgKind.OPTION):
        for spec in specs:
            if spec.kind is kind and getattr(spec, attr) == key:
                return spec
    return None


def parse_args(subcommand: Subcommand, tokens: Sequence[str]) -> List[Arg]:
    """Classify ``tokens`` against the specs of ``subcommand``.

    Raises ``UnknownArgument`` for a switch the subcommand does not declare and
    ``MissingValue`` for an option with no token after it.
    """
    specs = specs_for(subcommand)
    args: List[Arg] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.startswith(LONG_PREFIX):
            name = token[len(LONG_PREFIX):]
            spec = _lookup(specs, name, "long")
            if spec is None:
                raise UnknownArgument(token, str(subcommand))
            if spec.kind is ArgKind.FLAG:
                args.append(Flag(spec.name))
            else:
                if i + 1 >= len(tokens):
                    raise MissingValue(token)
                i += 1
                args.append(Option(spec.name, tokens[i]))
        elif token.startswith(SHORT_PREFIX) and len(token) > 1:
            # the value of every option in the cluster comes after the cluster
            value_at = i
            for ch in token[1:]:
                spec = _lookup(specs, ch, "short")
                if spec is None:
                    raise UnknownArgument(SHORT_PREFIX + ch, str(subcommand))
                if spec.kind is ArgKind.FLAG:
                    args.append(Flag(spec.name))
                    continue
                if value_at + 1 >= len(tokens):
                    raise MissingValue(SHORT_PREFIX + ch)
                value_at += 1
                args.append(Option(spec.name, tokens[value_at]))
            i = value_at
        else:
            args.append(Value(token))
        i += 1
    return args


def get_option(args: Sequence[Arg], name: str) -> Optional[str]:
    for a in args:
        if isinstance(a, Option) and a.name == name:
            return a.value
    return None


def get_flag(args: Sequence[Arg], name: str) -> bool:
    return any(isinstance(a, Flag) and a.name == name for a in args)


def get_values(args: Sequence[Arg]) -> List[str]:
    return [a.value for a in args if isinstance(a, Value)]


def read_stdin_tokens(stream: IO[str]) -> Optional[List[str]]:
    """Return non-empty stripped lines of ``stream`` when it is piped, else None."""
    if stream is None or stream.isatty():
        return None
    return [line.strip() for line in stream if line.strip()]


@dataclass
class CommandLine:
    subcommand: Subcommand
    args: List[Arg]

    @classmethod
    def parse(
        cls, tokens: Sequence[str], extra: Optional[Sequence[str]] = None
    ) -> "CommandLine":
        """Resolve the subcommand from ``tokens[0]`` and parse the rest.

        ``extra`` tokens (piped stdin lines) are appended after the command line.
        """
        if not tokens:
            raise ParseError("no subcommand given, try \"marc help\"")
        subcommand = resolve_subcommand(tokens[0])
        rest = list(tokens[1:])
        if extra:
            rest.extend(extra)
        return cls(subcommand, parse_args(subcommand, rest))

    def option(self, name: str) -> Optional[str]:
        return get_option(self.args, name)

    def flag(self, name: str) -> bool:
        return get_flag(self.args, name)

    @property
    def values(self) -> List[str]:
        return get_values(self.args)
