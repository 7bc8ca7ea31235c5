"""Declared flags, parsing, and argv reconstruction.

Each augmented subcommand declares the flags it understands as ``FlagSpec``
descriptors. Parsing a raw argument vector yields a ``FlagSet`` that
remembers which flags the user set explicitly, plus positionals that are
forwarded verbatim. Reconstruction turns the explicitly set flags back
into an argument vector for git.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence, Union

from sgit.errors import FlagError

FlagValue = Union[bool, str]

_TRUE = {"1", "t", "true", "yes", "on"}
_FALSE = {"0", "f", "false", "no", "off"}


class FlagKind(str, Enum):
    """Whether a flag is a switch or takes a value."""

    BOOLEAN = "boolean"
    VALUED = "valued"


@dataclass(frozen=True)
class FlagSpec:
    """Declaration of one flag.

    Attributes:
        name: Long name without dashes.
        shorthand: Optional single-character short name.
        kind: Switch or valued flag.
        help: One-line description.
        augmentation_only: sgit's own flag, never forwarded to git.
        bypasses_ai: Setting this flag sends the command straight to git.
        default: Value reported for an unset valued flag.
        no_opt_value: Value of a valued flag given bare as ``--name``.
    """

    name: str
    shorthand: Optional[str] = None
    kind: FlagKind = FlagKind.BOOLEAN
    help: str = ""
    augmentation_only: bool = False
    bypasses_ai: bool = False
    default: str = ""
    no_opt_value: Optional[str] = None

    def __post_init__(self):
        if self.shorthand is not None and len(self.shorthand) != 1:
            raise ValueError(f"Shorthand for --{self.name} must be one character")

    @property
    def is_boolean(self) -> bool:
        return self.kind is FlagKind.BOOLEAN

    @property
    def display(self) -> str:
        long = f"--{self.name}"
        if not self.is_boolean:
            long += "=<value>" if self.no_opt_value is None else "[=<value>]"
        return f"-{self.shorthand}, {long}" if self.shorthand else long


@dataclass
class Flag:
    """A declared flag and the value it received in this invocation."""

    spec: FlagSpec
    value: FlagValue = False
    explicitly_set: bool = False

    @property
    def active(self) -> bool:
        """True when the flag would be forwarded (or would take effect)."""
        if not self.explicitly_set:
            return False
        if self.spec.is_boolean:
            return self.value is True
        return self.value != "" or self.value == self.spec.no_opt_value

    def to_argv(self) -> list[str]:
        if not self.active:
            return []
        spec = self.spec
        if spec.is_boolean or self.value == spec.no_opt_value:
            return [f"-{spec.shorthand}" if spec.shorthand else f"--{spec.name}"]
        if spec.shorthand:
            return [f"-{spec.shorthand}", str(self.value)]
        return [f"--{spec.name}={self.value}"]


class FlagSet:
    """Ordered collection of declared flags for one invocation."""

    def __init__(self, specs: Iterable[FlagSpec]):
        self._flags: dict[str, Flag] = {}
        self._short: dict[str, str] = {}
        for spec in specs:
            if spec.name in self._flags:
                raise ValueError(f"Duplicate flag --{spec.name}")
            if spec.shorthand:
                if spec.shorthand in self._short:
                    raise ValueError(f"Duplicate shorthand -{spec.shorthand}")
                self._short[spec.shorthand] = spec.name
            initial: FlagValue = False if spec.is_boolean else spec.default
            self._flags[spec.name] = Flag(spec, initial)

    def __iter__(self) -> Iterator[Flag]:
        return iter(self._flags.values())

    def __contains__(self, name: str) -> bool:
        return name in self._flags

    def __getitem__(self, name: str) -> Flag:
        return self._flags[name]

    def spec(self, name: str) -> Optional[FlagSpec]:
        flag = self._flags.get(name)
        return flag.spec if flag else None

    def by_shorthand(self, char: str) -> Optional[FlagSpec]:
        name = self._short.get(char)
        return self._flags[name].spec if name else None

    def set(self, name: str, value: FlagValue) -> None:
        flag = self._flags[name]
        flag.value = value
        flag.explicitly_set = True

    def is_active(self, name: str) -> bool:
        return name in self._flags and self._flags[name].active

    def value(self, name: str) -> FlagValue:
        return self._flags[name].value

    def explicit(self) -> list[Flag]:
        """Flags the user set, in declaration order."""
        return [flag for flag in self._flags.values() if flag.explicitly_set]

    def bypass_flags(self) -> list[Flag]:
        """Active flags that send the command straight to git."""
        return [flag for flag in self._flags.values() if flag.active and flag.spec.bypasses_ai]

    def to_argv(self, exclude: Iterable[str] = ()) -> list[str]:
        """Rebuild forwardable flags.

        Args:
            exclude: Names of native flags to leave out as well.

        Returns:
            Arguments in declaration order. Augmentation flags are never
            included.
        """
        excluded = set(exclude)
        argv: list[str] = []
        for flag in self._flags.values():
            if flag.spec.augmentation_only or flag.spec.name in excluded:
                continue
            argv.extend(flag.to_argv())
        return argv


@dataclass
class ParsedArgs:
    """Flags plus verbatim positionals from one argument vector."""

    flags: FlagSet
    positionals: list[str] = field(default_factory=list)

    def to_argv(self, exclude: Iterable[str] = ()) -> list[str]:
        """Forwardable flags followed by positionals."""
        return self.flags.to_argv(exclude) + list(self.positionals)


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise FlagError(f'invalid argument "{raw}" for "--{name}" flag: expected a boolean')


def _parse_long(flags: FlagSet, argv: Sequence[str], index: int) -> Optional[int]:
    """Apply a ``--name[=value]`` token. Returns the next index, or None if undeclared."""
    name, has_value, raw = argv[index][2:].partition("=")
    spec = flags.spec(name)
    if spec is None:
        return None

    if spec.is_boolean:
        flags.set(name, _parse_bool(name, raw) if has_value else True)
        return index + 1
    if has_value:
        flags.set(name, raw)
        return index + 1
    if spec.no_opt_value is not None:
        flags.set(name, spec.no_opt_value)
        return index + 1
    if index + 1 >= len(argv):
        raise FlagError(f"flag needs an argument: --{name}")
    flags.set(name, argv[index + 1])
    return index + 2


def _parse_short(flags: FlagSet, argv: Sequence[str], index: int) -> Optional[int]:
    """Apply a ``-abc`` / ``-Xvalue`` cluster. Returns the next index, or None if undeclared.

    The whole cluster is resolved before any flag is set, so a cluster with
    an unknown character leaves the FlagSet untouched.
    """
    token = argv[index]
    assignments: list[tuple[str, FlagValue]] = []
    next_index = index + 1

    position = 1
    while position < len(token):
        spec = flags.by_shorthand(token[position])
        if spec is None:
            return None
        if spec.is_boolean:
            assignments.append((spec.name, True))
            position += 1
            continue
        rest = token[position + 1:]
        if rest:
            assignments.append((spec.name, rest))
        elif next_index < len(argv):
            assignments.append((spec.name, argv[next_index]))
            next_index += 1
        else:
            raise FlagError(f"flag needs an argument: -{spec.shorthand}")
        break

    for name, value in assignments:
        flags.set(name, value)
    return next_index


def parse_flags(specs: Iterable[FlagSpec], argv: Sequence[str]) -> ParsedArgs:
    """Parse ``argv`` against declared flags.

    Tokens that are not declared flags (paths, refs, ``-20``, options git
    knows but sgit does not declare) are kept verbatim as positionals. A
    ``--`` ends flag parsing; it and everything after it are positionals.
    When a flag repeats, the last value wins.

    Raises:
        FlagError: If a valued flag has no value or a boolean gets a non-boolean.
    """
    parsed = ParsedArgs(FlagSet(specs))
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == "--":
            parsed.positionals.extend(argv[index:])
            break

        next_index: Optional[int] = None
        if token.startswith("--"):
            next_index = _parse_long(parsed.flags, argv, index)
        elif token.startswith("-") and len(token) > 1:
            next_index = _parse_short(parsed.flags, argv, index)

        if next_index is None:
            parsed.positionals.append(token)
            index += 1
        else:
            index = next_index
    return parsed


def describe(specs: Iterable[FlagSpec]) -> str:
    """Help text listing sgit's own flags and the git flags that are forwarded."""
    specs = list(specs)
    own = [spec for spec in specs if spec.augmentation_only]
    native = [spec for spec in specs if not spec.augmentation_only]

    sections = []
    if own:
        sections.append(
            "sgit flags: " + "; ".join(f"{spec.display} ({spec.help})" for spec in own)
        )
    if native:
        sections.append("git flags forwarded: " + ", ".join(spec.display for spec in native))
    return "\n\n".join(sections)
