"""
Slash Command Parser

Tokenizes raw slash command lines and describes the registered command.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..core.exceptions import InvalidCommandError


logger = logging.getLogger(__name__)


@dataclass
class CommandDefinition:
    """
    Registration record of a slash command.

    Attributes:
        trigger: Trigger word, without the leading slash
        display_name: Name shown in the command list
        description: One-line description
        auto_complete: Whether the command shows up in autocomplete
        auto_complete_desc: Autocomplete description
        auto_complete_hint: Autocomplete argument hint
    """
    trigger: str
    display_name: str
    description: str
    auto_complete: bool = True
    auto_complete_desc: str = ""
    auto_complete_hint: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Mattermost REST representation."""
        return {
            "trigger": self.trigger,
            "display_name": self.display_name,
            "description": self.description,
            "auto_complete": self.auto_complete,
            "auto_complete_desc": self.auto_complete_desc,
            "auto_complete_hint": self.auto_complete_hint,
        }


@dataclass
class CommandInvocation:
    """
    One incoming slash command.

    Attributes:
        raw_text: Full command line, including the leading /trigger
        user_id: Mattermost user ID of the caller
        channel_id: Channel the command was typed in
        root_id: Thread root when invoked from a reply
        team_id: Team of the channel
    """
    raw_text: str
    user_id: str
    channel_id: str
    root_id: str = ""
    team_id: str = ""

    @classmethod
    def from_slash_request(
        cls,
        command: str,
        text: str,
        user_id: str,
        channel_id: str,
        root_id: str = "",
        team_id: str = ""
    ) -> "CommandInvocation":
        """
        Build an invocation from an outgoing slash command request.

        Mattermost sends the trigger ("/mstmeetings") and the remaining text
        as separate fields.
        """
        raw_text = f"{command} {text}".strip() if text else command.strip()
        return cls(
            raw_text=raw_text,
            user_id=user_id,
            channel_id=channel_id,
            root_id=root_id,
            team_id=team_id,
        )


@dataclass
class ParsedCommand:
    """
    Tokenized command line.

    Attributes:
        trigger: First token, e.g. "/mstmeetings"
        action: Second token, or "" when only the trigger was given
        args: Tokens after the action
    """
    trigger: str
    action: str = ""
    args: List[str] = field(default_factory=list)

    @property
    def has_action(self) -> bool:
        return bool(self.action)


def tokenize(raw_text: str) -> List[str]:
    """
    Split a command line on whitespace.

    Args:
        raw_text: Raw command line

    Returns:
        Non-empty tokens in order (empty list for blank input)
    """
    return (raw_text or "").split()


def parse_command(raw_text: str) -> ParsedCommand:
    """
    Tokenize a command line into trigger, action and arguments.

    Args:
        raw_text: Raw command line

    Returns:
        ParsedCommand

    Raises:
        InvalidCommandError: If the line holds no tokens
    """
    tokens = tokenize(raw_text)
    if not tokens:
        raise InvalidCommandError("empty command")

    action = tokens[1] if len(tokens) > 1 else ""
    logger.debug(f"Parsed command: trigger={tokens[0]} action={action or '-'} args={len(tokens[2:])}")
    return ParsedCommand(trigger=tokens[0], action=action, args=tokens[2:])


def get_command_definition(trigger: str = "mstmeetings") -> CommandDefinition:
    """Registration record of the MS Teams Meetings command."""
    return CommandDefinition(
        trigger=trigger,
        display_name="MS Teams Meetings",
        description="Integration with MS Teams Meetings.",
        auto_complete=True,
        auto_complete_desc="Available commands: start, disconnect",
        auto_complete_hint="[command]",
    )
