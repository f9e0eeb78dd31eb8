"""
Slash Command Module

Parses and dispatches /mstmeetings commands.
"""

from .parser import CommandDefinition, CommandInvocation, ParsedCommand, get_command_definition, parse_command, tokenize
from .dispatcher import CommandDispatcher, CommandResult

__all__ = [
    "CommandDefinition",
    "CommandDispatcher",
    "CommandInvocation",
    "CommandResult",
    "ParsedCommand",
    "get_command_definition",
    "parse_command",
    "tokenize",
]
