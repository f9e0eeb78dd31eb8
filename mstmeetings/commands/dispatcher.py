"""
Slash Command Dispatcher

Routes a /mstmeetings command line to its action handler and reports the
outcome as a CommandResult: the text to show the caller, plus the error to
log when something downstream failed.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .parser import CommandInvocation, parse_command
from ..core.config import PluginSettings
from ..core.exceptions import InvalidCommandError, PlatformAPIError, ProviderError, UserLookupError
from ..mattermost.api import POST_STATUS_DIALOG_WARN, MeetingPostProps, PluginAPI, Post


logger = logging.getLogger(__name__)

HELP_HEADER = "###### Mattermost MS Teams Meetings Plugin - Slash Command Help"
TOO_MANY_PARAMETERS_TEXT = "Too many parameters."
EMPTY_COMMAND_TEXT = "Command is empty. Please try again."
USER_NOT_FOUND_TEXT = "User not found."
DISCONNECTED_TEXT = "User disconnected from MS Teams Meetings."

EVENT_DISCONNECT = "disconnect"

# action -> description, in help order
ACTION_HELP = {
    "start": "Start an MS Teams meeting.",
    "disconnect": "Disconnect from Mattermost",
}


@dataclass
class CommandResult:
    """
    Outcome of one command.

    Attributes:
        text: Ephemeral reply for the caller ("" = nothing to show)
        error: Failure to log, if any
        post: Channel post created as a side effect
    """
    text: str = ""
    error: Optional[Exception] = None
    post: Optional[Post] = None

    @property
    def should_respond(self) -> bool:
        return bool(self.text)


Handler = Callable[[List[str], CommandInvocation], CommandResult]


class CommandDispatcher:
    """
    Dispatches slash commands to the start, disconnect and help handlers.

    Usage:
        dispatcher = CommandDispatcher(api, PluginSettings(bot_user_id="..."))
        result = dispatcher.execute(
            CommandInvocation(raw_text="/mstmeetings start", user_id="...", channel_id="...")
        )
        if result.error:
            logger.warning(...)
    """

    def __init__(self, api: PluginAPI, settings: PluginSettings):
        """
        Initialize dispatcher.

        Args:
            api: Mattermost and provider capabilities
            settings: Immutable plugin settings (trigger, bot identity, provider name)
        """
        self.api = api
        self.settings = settings
        self._handlers: Dict[str, Handler] = {
            "start": self.handle_start,
            "disconnect": self.handle_disconnect,
            "help": self.handle_help,
        }

    @property
    def command_trigger(self) -> str:
        return f"/{self.settings.trigger}"

    @property
    def help_text(self) -> str:
        lines = [HELP_HEADER]
        for action, description in ACTION_HELP.items():
            lines.append(f"* `{self.command_trigger} {action}` - {description}")
        return "\n".join(lines)

    def execute(self, invocation: CommandInvocation) -> CommandResult:
        """
        Parse and route one command line.

        Args:
            invocation: Incoming command

        Returns:
            CommandResult from the selected handler
        """
        try:
            parsed = parse_command(invocation.raw_text)
        except InvalidCommandError as e:
            return CommandResult(text=EMPTY_COMMAND_TEXT, error=e)

        if parsed.trigger != self.command_trigger:
            return CommandResult(
                text=f"Command '{parsed.trigger}' is not {self.command_trigger}. Please try again."
            )

        if not parsed.has_action:
            return self.handle_help(parsed.args, invocation)

        handler = self._handlers.get(parsed.action)
        if handler is None:
            return CommandResult(text=f"Unknown action `{parsed.action}`.\n{self.help_text}")

        logger.info(f"Handling {parsed.action} from user {invocation.user_id} in channel {invocation.channel_id}")
        return handler(parsed.args, invocation)

    def handle_help(self, args: List[str], invocation: CommandInvocation) -> CommandResult:
        return CommandResult(text=self.help_text)

    def handle_start(self, args: List[str], invocation: CommandInvocation) -> CommandResult:
        """
        Post a meeting card in the invoking channel.

        The card itself is the visible feedback, so success returns no text.
        In direct and group channels the card notes how many members the
        meeting is for.
        """
        if len(args) > 1:
            return CommandResult(text=TOO_MANY_PARAMETERS_TEXT)

        try:
            user = self.api.get_user(invocation.user_id)
        except PlatformAPIError as e:
            error = UserLookupError(f"cannot get user: {e}", status_code=e.status_code)
            error.__cause__ = e
            return CommandResult(text=USER_NOT_FOUND_TEXT, error=error)

        # Unlike the user lookup, a channel failure shows the caller nothing
        channel_id = invocation.channel_id
        try:
            channel = self.api.get_channel(channel_id)
        except PlatformAPIError as e:
            return CommandResult(error=e)

        message = ""
        if channel.is_group_or_direct():
            try:
                members = self.api.get_channel_members(channel_id, 0, self.settings.members_page_limit)
            except PlatformAPIError as e:
                return CommandResult(error=e)

            if members is not None:
                logger.debug(f"{len(members)} members in channel {channel_id}")
                message += f"\nYou are about to create a meeting in a channel with {len(members)} members"

        props = MeetingPostProps(
            status=POST_STATUS_DIALOG_WARN,
            is_personal=True,
            creator_name=user.username,
            provider_name=self.settings.provider_name,
            message=message,
        )
        post = Post(
            user_id=self.settings.bot_user_id,
            channel_id=channel_id,
            message=message,
            type=self.settings.post_type,
            props=props.to_props(self.settings.post_type),
        )

        try:
            created = self.api.create_post(post)
        except PlatformAPIError as e:
            return CommandResult(error=e)

        return CommandResult(post=created)

    def handle_disconnect(self, args: List[str], invocation: CommandInvocation) -> CommandResult:
        """Tear down the caller's MS Teams session; failures are reported as text only."""
        if len(args) > 1:
            return CommandResult(text=TOO_MANY_PARAMETERS_TEXT)

        try:
            self.api.disconnect(invocation.user_id)
        except ProviderError as e:
            logger.info(f"Disconnect failed for user {invocation.user_id}: {e}")
            return CommandResult(text=f"Failed to disconnect the user, err={e}")

        self.api.track_event(EVENT_DISCONNECT, invocation.user_id)
        return CommandResult(text=DISCONNECTED_TEXT)
