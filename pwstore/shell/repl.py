"""
Interactive Shell
=================

Line-oriented front end for the store: reads a command per line, routes it
through the command registry, prints the resulting status.

Usage:
    python -m pwstore [--file PATH] [--log-level LEVEL]
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence, TextIO

from pwstore.core.config import PwstoreConfig
from pwstore.core.logging import configure_root_logger
from pwstore.core.records.store import RecordStore
from pwstore.shell.commands import (
    CommandContext,
    CommandKind,
    CommandRegistry,
    Output,
    PasswordPrompt,
    build_registry,
)

logger = logging.getLogger(__name__)


class Shell:
    """
    Owns the live RecordStore and serialises every command against it.

    The store is only ever replaced by a successful ``load``.
    """

    def __init__(
        self,
        default_path: Path,
        prompt_password: Optional[PasswordPrompt] = None,
        registry: Optional[CommandRegistry] = None,
    ) -> None:
        self.store = RecordStore()
        self.context = CommandContext(
            registry=registry or build_registry(),
            default_path=default_path,
            prompt_password=prompt_password or getpass.getpass,
        )

    @property
    def running(self) -> bool:
        return self.context.running

    def execute(self, line: str) -> Output:
        """Run one command line and return the text to print, if any."""
        parts = line.strip().split(None, 1)
        if not parts:
            return "command expected"
        name, rest = parts[0], parts[1] if len(parts) > 1 else ""

        command = self.context.registry.get(name)
        if command is None:
            return f"unknown command {name}"

        args = command.split_args(rest)
        problem = command.check_arity(args)
        if problem:
            return problem

        logger.debug("Dispatching %s (%s)", command.name, command.kind.value)

        if command.kind is CommandKind.NO_STORE:
            return command.handler(self.context, args)
        if command.kind is CommandKind.READ_ONLY:
            return command.handler(self.context, self.store, args)

        output, replacement = command.handler(self.context, self.store, args)
        if replacement is not None:
            self.store = replacement
        return output

    def run(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        prompt: str = "> ",
    ) -> None:
        """Read-eval-print until quit or end of input."""
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        interactive = stdin.isatty()

        while self.running:
            if interactive:
                stdout.write(prompt)
                stdout.flush()

            line = stdin.readline()
            if not line:
                break

            output = self.execute(line)
            if output is not None:
                stdout.write(output + "\n")


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pwstore", description="Encrypted personal secrets store")
    parser.add_argument("--file", "-f", type=Path, help="default store file for save/load")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="override the configured log level")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    config = PwstoreConfig.load()

    if args.file is not None or args.log_level is not None:
        config = PwstoreConfig(
            paths=replace(config.paths, store_file=args.file or config.paths.store_file),
            logging=replace(config.logging, level=args.log_level or config.logging.level),
            app=config.app,
        )

    config.ensure_directories()
    configure_root_logger(
        log_dir=config.paths.log_dir,
        level=config.logging.level,
        enable_console=config.logging.enable_console,
        enable_file=config.logging.enable_file,
        max_file_size=config.logging.max_file_size_bytes,
        backup_count=config.logging.backup_count,
    )

    shell = Shell(config.paths.default_store_path)
    try:
        shell.run(prompt=config.app.prompt)
    except KeyboardInterrupt:
        sys.stdout.write("\n")
    return 0
