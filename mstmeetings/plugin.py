"""
MS Teams Meetings Plugin

Entry point for slash commands: runs the dispatcher, logs failures and
posts the reply back to the caller as an ephemeral message.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .commands.dispatcher import CommandDispatcher
from .commands.parser import CommandDefinition, CommandInvocation, get_command_definition
from .core.config import ConfigManager, PluginSettings
from .core.exceptions import ConfigurationError, PlatformAPIError, ProviderDisconnectError
from .mattermost.api import Channel, ChannelMember, CommandResponse, PluginAPI, Post, User
from .mattermost.client import MattermostClient
from .provider.msteams import MSTeamsProvider
from .telemetry import UsageTracker


logger = logging.getLogger(__name__)


class PluginServices:
    """
    PluginAPI backed by the Mattermost REST API, the MSAL session store and
    the usage tracker.
    """

    def __init__(self, mattermost: MattermostClient, provider: MSTeamsProvider, tracker: UsageTracker):
        self.mattermost = mattermost
        self.provider = provider
        self.tracker = tracker

    def get_user(self, user_id: str) -> User:
        return self.mattermost.get_user(user_id)

    def get_channel(self, channel_id: str) -> Channel:
        return self.mattermost.get_channel(channel_id)

    def get_channel_members(self, channel_id: str, offset: int, limit: int) -> List[ChannelMember]:
        return self.mattermost.get_channel_members(channel_id, offset, limit)

    def create_post(self, post: Post) -> Post:
        return self.mattermost.create_post(post)

    def send_ephemeral_post(self, user_id: str, post: Post) -> None:
        self.mattermost.send_ephemeral_post(user_id, post)

    def disconnect(self, user_id: str) -> None:
        """
        Disconnect a Mattermost user from MS Teams.

        Sessions are keyed by the Microsoft sign-in name, so the user's email
        is resolved first.

        Raises:
            ProviderDisconnectError: If the user cannot be resolved or disconnected
        """
        try:
            user = self.mattermost.get_user(user_id)
        except PlatformAPIError as e:
            raise ProviderDisconnectError(f"cannot get user: {e}") from e
        self.provider.disconnect(user.email)

    def track_event(self, event: str, user_id: str, properties: Optional[Dict[str, Any]] = None) -> None:
        self.tracker.track_event(event, user_id, properties)


class MSTeamsMeetingsPlugin:
    """
    Slash command host.

    Usage:
        plugin = create_plugin(get_config())
        plugin.execute_command(None, CommandInvocation("/mstmeetings start", user_id, channel_id))
    """

    def __init__(self, api: PluginAPI, settings: PluginSettings):
        """
        Initialize plugin.

        Args:
            api: Capabilities used by the handlers
            settings: Immutable plugin settings
        """
        self.api = api
        self.settings = settings
        self.dispatcher = CommandDispatcher(api, settings)

    def get_command(self) -> CommandDefinition:
        return get_command_definition(self.settings.trigger)

    def post_command_response(self, invocation: CommandInvocation, text: str) -> None:
        """Show text to the caller only."""
        post = Post(
            user_id=self.settings.bot_user_id,
            channel_id=invocation.channel_id,
            message=text,
            root_id=invocation.root_id,
        )
        try:
            self.api.send_ephemeral_post(invocation.user_id, post)
        except PlatformAPIError as e:
            logger.warning(f"Failed to send command response to user {invocation.user_id}: {e}")

    def execute_command(self, context: Any, invocation: CommandInvocation) -> CommandResponse:
        """
        Handle one slash command.

        Args:
            context: Request context supplied by the host (unused)
            invocation: Incoming command

        Returns:
            Empty CommandResponse; outcomes are delivered as posts and logs
        """
        try:
            result = self.dispatcher.execute(invocation)
        except Exception as e:
            logger.error(f"Unexpected error executing command: {e}", exc_info=True)
            return CommandResponse()

        if result.error is not None:
            logger.warning(f"failed to execute command: {result.error}")

        if result.should_respond:
            self.post_command_response(invocation, result.text)

        return CommandResponse()


def create_plugin(config: ConfigManager) -> MSTeamsMeetingsPlugin:
    """
    Wire the plugin from configuration.

    The bot user ID is looked up from the bot token when not configured.

    Args:
        config: ConfigManager instance

    Returns:
        MSTeamsMeetingsPlugin

    Raises:
        ConfigurationError: If required settings are missing
    """
    errors = config.validate()
    if errors:
        raise ConfigurationError("Invalid configuration: " + "; ".join(errors))

    mattermost = MattermostClient(config.mattermost)
    provider = MSTeamsProvider(config.graph_api)
    tracker = UsageTracker(enabled=config.app.telemetry_enabled)

    settings = config.plugin
    if not settings.bot_user_id:
        settings = replace(settings, bot_user_id=mattermost.get_me().id)
        logger.info(f"Resolved bot user ID: {settings.bot_user_id}")

    return MSTeamsMeetingsPlugin(PluginServices(mattermost, provider, tracker), settings)
