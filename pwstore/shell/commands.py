"""
Command Registry
================

Maps command names to handlers tagged by how they touch the store:

    NO_STORE   handler(context, args) -> output
    READ_ONLY  handler(context, store, args) -> output
    MUTATING   handler(context, store, args) -> (output, replacement store or None)

Argument counts are checked against each command's declared bounds before
its handler runs, so handlers can index ``args`` freely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from pwstore.core.crypto.passgen import MAX_LENGTH, MIN_LENGTH, generate_password
from pwstore.core.file_ops.container import (
    ContainerIOError,
    IntegrityError,
    WrongPasswordOrCorruptError,
    load,
    save,
)
from pwstore.core.records.store import RecordStore
from pwstore.utils.validators import InvalidEntryError, ValidationError, validate_store_path

logger = logging.getLogger(__name__)

Output = Optional[str]
PasswordPrompt = Callable[[str], str]


class CommandKind(Enum):
    NO_STORE = "no_store"
    READ_ONLY = "read_only"
    MUTATING = "mutating"


@dataclass
class CommandContext:
    """What handlers may use besides the store."""

    registry: CommandRegistry
    default_path: Path
    prompt_password: PasswordPrompt
    running: bool = True


NoStoreHandler = Callable[[CommandContext, list[str]], Output]
ReadOnlyHandler = Callable[[CommandContext, RecordStore, list[str]], Output]
MutatingHandler = Callable[[CommandContext, RecordStore, list[str]], tuple[Output, Optional[RecordStore]]]
Handler = Union[NoStoreHandler, ReadOnlyHandler, MutatingHandler]


@dataclass(frozen=True)
class Command:
    """
    A registered command.

    ``greedy`` makes the last argument swallow the rest of the line, so
    ``add mail correct horse`` stores the value "correct horse".
    """

    name: str
    kind: CommandKind
    handler: Handler
    min_args: int = 0
    max_args: int = 0
    usage: str = ""
    summary: str = ""
    greedy: bool = False

    def split_args(self, rest: str) -> list[str]:
        if self.greedy and self.max_args > 0:
            return rest.split(maxsplit=self.max_args - 1)
        return rest.split()

    def check_arity(self, args: list[str]) -> Output:
        """Return a status message when args don't fit, else None."""
        if self.min_args <= len(args) <= self.max_args:
            return None
        return f"usage: {self.name} {self.usage}".rstrip()


@dataclass
class CommandRegistry:
    """Builder and lookup table for shell commands."""

    _commands: dict[str, Command] = field(default_factory=dict)
    _aliases: dict[str, str] = field(default_factory=dict)

    def register(self, command: Command, aliases: tuple[str, ...] = ()) -> CommandRegistry:
        if command.name in self._commands or command.name in self._aliases:
            raise ValueError(f"command already registered: {command.name}")
        self._commands[command.name] = command
        for alias in aliases:
            self._aliases[alias] = command.name
        return self

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(self._aliases.get(name, name))

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def aliases_for(self, name: str) -> list[str]:
        return sorted(alias for alias, target in self._aliases.items() if target == name)


# =============================================================================
# Handlers
# =============================================================================

def _help(context: CommandContext, args: list[str]) -> Output:
    lines = []
    for command in context.registry:
        names = " | ".join([command.name] + context.registry.aliases_for(command.name))
        lines.append(f"{names} {command.usage}".rstrip().ljust(28) + f" {command.summary}")
    return "\n".join(lines)


def _quit(context: CommandContext, args: list[str]) -> Output:
    context.running = False
    return None


def _generate(context: CommandContext, args: list[str]) -> Output:
    try:
        length = int(args[0])
    except ValueError:
        return f"{args[0]} is not a valid number"

    if not MIN_LENGTH <= length <= MAX_LENGTH:
        return f"length must be between {MIN_LENGTH} and {MAX_LENGTH}"
    return generate_password(length)


def _view(context: CommandContext, store: RecordStore, args: list[str]) -> Output:
    prefix = args[0] if args else None
    lines = [f"{identifier}\t{value}" for identifier, value in store.view(prefix)]
    return "\n".join(lines) if lines else None


def _target_path(context: CommandContext, args: list[str]) -> Path:
    return validate_store_path(args[0]) if args else context.default_path


def _save(context: CommandContext, store: RecordStore, args: list[str]) -> Output:
    try:
        path = _target_path(context, args)
    except ValidationError as e:
        return str(e)

    try:
        password = context.prompt_password("password: ")
        confirmation = context.prompt_password("confirm password: ")
    except (EOFError, KeyboardInterrupt):
        return "cancelled"

    if confirmation != password:
        return "passwords do not match"

    try:
        save(path, password, store)
    except ContainerIOError as e:
        return f"could not save {path}: {e.strerror}"
    return f"{path} saved successfully"


def _add(context: CommandContext, store: RecordStore, args: list[str]) -> tuple[Output, Optional[RecordStore]]:
    try:
        status = store.add(args[0], args[1])
    except InvalidEntryError as e:
        return str(e), None
    return status.message, None


def _remove(context: CommandContext, store: RecordStore, args: list[str]) -> tuple[Output, Optional[RecordStore]]:
    return store.remove(args[0]).message, None


def _load(context: CommandContext, store: RecordStore, args: list[str]) -> tuple[Output, Optional[RecordStore]]:
    try:
        path = _target_path(context, args)
    except ValidationError as e:
        return str(e), None

    try:
        password = context.prompt_password("password: ")
    except (EOFError, KeyboardInterrupt):
        return "cancelled", None

    try:
        loaded = load(path, password)
    except ContainerIOError as e:
        return f"could not load {path}: {e.strerror}", None
    except WrongPasswordOrCorruptError:
        return "wrong password or corrupted file", None
    except IntegrityError:
        return f"{path} decrypted but its contents are malformed; store left unchanged", None

    return f"{path} loaded successfully", loaded


def build_registry() -> CommandRegistry:
    """The default command set."""
    registry = CommandRegistry()
    registry.register(Command("help", CommandKind.NO_STORE, _help, summary="show this list"))
    registry.register(Command("view", CommandKind.READ_ONLY, _view, 0, 1, "[prefix]",
                              "list entries, optionally those starting with prefix"))
    registry.register(Command("add", CommandKind.MUTATING, _add, 2, 2, "<id> <value>",
                              "add an entry (never overwrites)", greedy=True))
    registry.register(Command("remove", CommandKind.MUTATING, _remove, 1, 1, "<id>",
                              "remove an entry"), aliases=("delete",))
    registry.register(Command("generate", CommandKind.NO_STORE, _generate, 1, 1, "<length>",
                              "print a random password"))
    registry.register(Command("save", CommandKind.READ_ONLY, _save, 0, 1, "[path]",
                              "encrypt the store to a file"))
    registry.register(Command("load", CommandKind.MUTATING, _load, 0, 1, "[path]",
                              "replace the store with a decrypted file"))
    registry.register(Command("quit", CommandKind.NO_STORE, _quit, summary="leave"), aliases=("exit",))
    return registry
