"""
Shell - command registry and REPL on top of the core store.
"""

from pwstore.shell.commands import Command, CommandKind, CommandRegistry, build_registry
from pwstore.shell.repl import Shell, main

__all__ = ["Command", "CommandKind", "CommandRegistry", "build_registry", "Shell", "main"]
